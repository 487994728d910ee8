"""
Pytest fixtures for filemet tests.

- 설정/저장소 경로는 항상 tmp_path 로 격리 (사용자 홈 ~/.filemet 을 건드리지 않음)
"""

from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from filemet.domain.constants import ENV_STORE_PATH, ENV_WORKSPACE_ROOT

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml 로드."""
    with open(project_root / "filemet" / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """구조 생성 기준 폴더."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """커스텀 표현식 저장 파일 경로 (아직 없음)."""
    return tmp_path / "store" / "custom_expressions.json"


@pytest.fixture
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, workspace: Path, store_file: Path
) -> Generator[None, None, None]:
    """환경 변수로 저장소/기준 폴더를 tmp_path 아래로."""
    monkeypatch.setenv(ENV_STORE_PATH, str(store_file))
    monkeypatch.setenv(ENV_WORKSPACE_ROOT, str(workspace))
    yield
