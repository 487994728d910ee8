"""
E2E 테스트용 FastAPI TestClient.

lifespan 에서 설정을 읽으므로 환경 변수를 먼저 설정한 뒤 클라이언트를 연다.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from filemet.app.main import app


@pytest.fixture
def client(isolated_env: None) -> Generator[TestClient, None, None]:
    """저장소/기준 폴더가 tmp_path 로 격리된 TestClient."""
    with TestClient(app) as client:
        yield client
