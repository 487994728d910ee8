"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uvicorn filemet.app.main:app --reload
- CLI: filemet serve
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from filemet.app.routes import custom, expressions, templates
from filemet.config import load_config, resolve_store_path, resolve_workspace_root
from filemet.templates.manager import CustomExpressionManager

logger = logging.getLogger(__name__)

# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 저장소/기준 폴더 결정
    """
    config = load_config()
    app.state.config = config
    app.state.workspace_root = resolve_workspace_root(config)
    app.state.expression_store = CustomExpressionManager(resolve_store_path(config))

    logger.info(
        f"filemet started (workspace={app.state.workspace_root}, "
        f"store={app.state.expression_store.store_path})"
    )

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="filemet",
    description="파일 구조 표현식 → 파일/폴더 생성",
    version="0.1.0",
    lifespan=lifespan,
)

# API 라우트
app.include_router(
    expressions.api_router, prefix="/api/expressions", tags=["Expressions API"]
)
app.include_router(
    templates.api_router, prefix="/api/templates", tags=["Templates API"]
)
app.include_router(custom.api_router, prefix="/api/custom", tags=["Custom Expressions API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    return {
        "message": "filemet",
        "endpoints": {
            "parse": "/api/expressions/parse",
            "create": "/api/expressions/create",
            "templates": "/api/templates",
            "custom": "/api/custom",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}
