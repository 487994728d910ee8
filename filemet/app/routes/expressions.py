"""
Expressions Routes: 표현식 파싱 / 구조 생성.

- POST /api/expressions/parse  → 경로 목록 미리보기
- POST /api/expressions/create → workspace_root/<target> 아래에 파일 생성
"""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Form, HTTPException, Request

from filemet.core.parser import parse_structure
from filemet.core.structure import create_structure, resolve_target_dir
from filemet.domain.errors import ErrorCodes, ExpressionSyntaxError, StructureError

api_router = APIRouter()


def syntax_error_detail(e: ExpressionSyntaxError) -> dict[str, str]:
    """구문 에러 응답 (세부 원인은 노출하지 않음)."""
    return {"code": ErrorCodes.INVALID_SYNTAX, "message": e.user_message}


def parse_or_400(expression: str) -> list[str]:
    try:
        return parse_structure(expression)
    except ExpressionSyntaxError as e:
        raise HTTPException(status_code=400, detail=syntax_error_detail(e)) from e


@api_router.post("/parse")
async def parse_expression(expression: str = Form(...)) -> dict[str, Any]:
    """표현식 → 경로 목록."""
    paths = parse_or_400(expression)
    return {"paths": paths, "count": len(paths)}


@api_router.post("/create")
async def create_from_expression(
    request: Request,
    expression: str = Form(...),
    target: str = Form(""),
) -> dict[str, Any]:
    """
    구조 생성.

    target 은 workspace_root 기준 상대 경로. 파일을 가리키면 그 상위 폴더.
    구문 에러면 아무것도 만들지 않는다.
    """
    workspace_root: Path = request.app.state.workspace_root
    paths = parse_or_400(expression)

    try:
        target_path = (workspace_root / target).resolve()
        root = workspace_root.resolve()
        if target_path != root and root not in target_path.parents:
            raise StructureError(
                ErrorCodes.PATH_OUTSIDE_TARGET,
                f"Target escapes workspace: '{target}'",
                target=target,
            )

        target_dir = resolve_target_dir(target_path)
        result = create_structure(target_dir, paths)

    except StructureError as e:
        status_code = 404 if e.code == ErrorCodes.TARGET_NOT_FOUND else 400
        if e.code == ErrorCodes.CREATE_FAILED:
            status_code = 500
        raise HTTPException(
            status_code=status_code,
            detail={"code": e.code, "message": e.message},
        ) from e

    return {
        "target": target_dir.relative_to(root).as_posix() if target_dir != root else "",
        **result.to_dict(),
    }
