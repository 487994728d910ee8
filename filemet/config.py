"""
설정 로드: default.yaml + 환경 변수.

우선순위: 환경 변수 > YAML > 기본값
- FILEMET_STORE_PATH: 커스텀 표현식 JSON 경로
- FILEMET_WORKSPACE_ROOT: API 로 구조를 만들 때의 기준 폴더
"""

import os
from pathlib import Path
from typing import Any

import yaml

from filemet.domain.constants import (
    CUSTOM_STORE_FILENAME,
    DEFAULT_CONFIG_FILENAME,
    ENV_STORE_PATH,
    ENV_WORKSPACE_ROOT,
)

# 패키지 데이터로 설치됨 (pip install 후에도 같은 위치)
DEFAULT_CONFIG_PATH = Path(__file__).parent / DEFAULT_CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """설정 파일 로드. 없으면 빈 dict."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}
        return data


def resolve_store_path(config: dict[str, Any]) -> Path:
    """커스텀 표현식 저장 파일 경로."""
    value = os.getenv(ENV_STORE_PATH) or config.get("store_path")
    if value:
        return Path(value).expanduser()
    return Path.home() / ".filemet" / CUSTOM_STORE_FILENAME


def resolve_workspace_root(config: dict[str, Any]) -> Path:
    """구조 생성 기준 폴더 (기본: 현재 작업 폴더)."""
    value = os.getenv(ENV_WORKSPACE_ROOT) or config.get("workspace_root")
    if value:
        return Path(value).expanduser()
    return Path.cwd()
