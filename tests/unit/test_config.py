"""
test_config.py - 설정 로드 테스트

우선순위: 환경 변수 > YAML > 기본값
"""

from pathlib import Path

import filemet
from filemet.config import DEFAULT_CONFIG_PATH, load_config, resolve_store_path, resolve_workspace_root
from filemet.domain.constants import ENV_STORE_PATH, ENV_WORKSPACE_ROOT


class TestLoadConfig:
    """YAML 로드."""

    def test_default_config(self, default_config: dict):
        assert default_config["server"]["port"] == 8000
        assert "store_path" in default_config

    def test_load_default_path(self):
        config = load_config()

        assert "workspace_root" in config

    def test_default_config_ships_inside_package(self):
        """설치본에서도 찾을 수 있도록 패키지 폴더 안에 위치."""
        package_dir = Path(filemet.__file__).parent

        assert DEFAULT_CONFIG_PATH.parent == package_dir
        assert DEFAULT_CONFIG_PATH.is_file()

    def test_missing_file_is_empty(self, tmp_path: Path):
        assert load_config(tmp_path / "none.yaml") == {}

    def test_custom_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("store_path: /data/store.json\n", encoding="utf-8")

        assert load_config(path) == {"store_path": "/data/store.json"}


class TestResolveStorePath:
    """저장소 경로 우선순위."""

    def test_env_wins(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv(ENV_STORE_PATH, str(tmp_path / "env.json"))

        assert resolve_store_path({"store_path": "/cfg.json"}) == tmp_path / "env.json"

    def test_config_value(self, monkeypatch):
        monkeypatch.delenv(ENV_STORE_PATH, raising=False)

        assert resolve_store_path({"store_path": "/cfg.json"}) == Path("/cfg.json")

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv(ENV_STORE_PATH, raising=False)

        path = resolve_store_path({"store_path": ""})

        assert path == Path.home() / ".filemet" / "custom_expressions.json"


class TestResolveWorkspaceRoot:
    """기준 폴더 우선순위."""

    def test_env_wins(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv(ENV_WORKSPACE_ROOT, str(tmp_path))

        assert resolve_workspace_root({"workspace_root": "/cfg"}) == tmp_path

    def test_default_cwd(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv(ENV_WORKSPACE_ROOT, raising=False)
        monkeypatch.chdir(tmp_path)

        assert resolve_workspace_root({}) == tmp_path
