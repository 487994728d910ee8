"""
Custom Expressions Routes: 사용자 표현식 CRUD + export/import.

- GET    /api/custom?category=...&q=...
- POST   /api/custom
- GET    /api/custom/export
- POST   /api/custom/import   (JSON 파일 업로드, mode=merge|replace)
- GET    /api/custom/categories
- GET    /api/custom/tags
- GET    /api/custom/{expression_id}
- PATCH  /api/custom/{expression_id}
- DELETE /api/custom/{expression_id}
"""

from typing import Any

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from filemet.domain.constants import IMPORT_MODE_MERGE
from filemet.domain.errors import ErrorCodes, ExpressionStoreError
from filemet.templates.manager import CustomExpressionManager

api_router = APIRouter()


def _store(request: Request) -> CustomExpressionManager:
    store: CustomExpressionManager = request.app.state.expression_store
    return store


def _split_tags(tags: str | None) -> list[str]:
    """"react, ui" → ["react", "ui"]"""
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def _store_error(e: ExpressionStoreError) -> HTTPException:
    status_code = 500 if e.code in (ErrorCodes.STORE_CORRUPT, ErrorCodes.STORE_LOCK_TIMEOUT) else 400
    return HTTPException(status_code=status_code, detail={"code": e.code, "message": e.message})


def _not_found(expression_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "code": ErrorCodes.EXPRESSION_NOT_FOUND,
            "message": f"Expression '{expression_id}' not found",
        },
    )


@api_router.get("")
async def list_expressions(
    request: Request,
    category: str | None = None,
    q: str | None = None,
) -> list[dict[str, Any]]:
    """목록 (category 필터, q 검색)."""
    store = _store(request)
    try:
        if q:
            expressions = store.search(q)
        else:
            expressions = store.list_expressions()
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    if category:
        expressions = [expr for expr in expressions if expr.category == category]
    return [expr.to_dict() for expr in expressions]


@api_router.post("", status_code=201)
async def create_expression(
    request: Request,
    name: str = Form(...),
    expression: str = Form(...),
    description: str = Form(""),
    category: str = Form(""),
    tags: str | None = Form(None),
) -> dict[str, Any]:
    try:
        saved = _store(request).save_expression(
            name=name,
            expression=expression,
            description=description,
            category=category,
            tags=_split_tags(tags),
        )
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    return saved.to_dict()


@api_router.get("/export")
async def export_expressions(request: Request) -> Response:
    """전체 표현식 JSON 다운로드."""
    try:
        body = _store(request).export_json()
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="custom_expressions.json"'},
    )


@api_router.post("/import")
async def import_expressions(
    request: Request,
    file: UploadFile = File(...),
    mode: str = Form(IMPORT_MODE_MERGE),
) -> dict[str, Any]:
    raw = await file.read()
    try:
        count = _store(request).import_json(raw.decode("utf-8"), mode=mode)
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "code": ErrorCodes.IMPORT_FAILED,
                "message": "Failed to import expressions: file is not UTF-8",
            },
        ) from e
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    return {"imported": count, "mode": mode}


@api_router.get("/categories")
async def list_categories(request: Request) -> list[str]:
    try:
        return _store(request).list_categories()
    except ExpressionStoreError as e:
        raise _store_error(e) from e


@api_router.get("/tags")
async def list_tags(request: Request) -> list[str]:
    try:
        return _store(request).list_tags()
    except ExpressionStoreError as e:
        raise _store_error(e) from e


@api_router.get("/{expression_id}")
async def get_expression(request: Request, expression_id: str) -> dict[str, Any]:
    try:
        expr = _store(request).get_expression(expression_id)
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    if expr is None:
        raise _not_found(expression_id)
    return expr.to_dict()


@api_router.patch("/{expression_id}")
async def update_expression(
    request: Request,
    expression_id: str,
    name: str | None = Form(None),
    expression: str | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    tags: str | None = Form(None),
) -> dict[str, Any]:
    """전달된 필드만 수정."""
    updates: dict[str, Any] = {
        key: value
        for key, value in {
            "name": name,
            "expression": expression,
            "description": description,
            "category": category,
        }.items()
        if value is not None
    }
    if tags is not None:
        updates["tags"] = _split_tags(tags)

    try:
        expr = _store(request).update_expression(expression_id, **updates)
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    if expr is None:
        raise _not_found(expression_id)
    return expr.to_dict()


@api_router.delete("/{expression_id}")
async def delete_expression(request: Request, expression_id: str) -> dict[str, Any]:
    try:
        deleted = _store(request).delete_expression(expression_id)
    except ExpressionStoreError as e:
        raise _store_error(e) from e

    if not deleted:
        raise _not_found(expression_id)
    return {"deleted": expression_id}
