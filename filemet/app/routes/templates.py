"""
Templates Routes: 프레임워크 템플릿 카탈로그 (읽기 전용).

- GET /api/templates?category=frontend
- GET /api/templates/categories
- GET /api/templates/{template_id}
- GET /api/templates/{template_id}/preview → 확장된 경로 목록
"""

from typing import Any

from fastapi import APIRouter, HTTPException

from filemet.app.routes.expressions import parse_or_400
from filemet.domain.errors import ErrorCodes
from filemet.domain.schemas import FrameworkTemplate, TemplateCategory
from filemet.templates.catalog import (
    get_categories,
    get_template_by_id,
    get_templates_by_category,
)

api_router = APIRouter()


def _get_or_404(template_id: str) -> FrameworkTemplate:
    template = get_template_by_id(template_id)
    if template is None:
        raise HTTPException(
            status_code=404,
            detail={
                "code": ErrorCodes.TEMPLATE_NOT_FOUND,
                "message": f"Template '{template_id}' not found",
            },
        )
    return template


@api_router.get("")
async def list_templates(category: str | None = None) -> list[dict[str, Any]]:
    """템플릿 목록 (category 필터)."""
    if category:
        try:
            TemplateCategory(category)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_CATEGORY", "message": f"Invalid category: {category}"},
            ) from None

    return [t.to_dict() for t in get_templates_by_category(category)]


@api_router.get("/categories")
async def list_categories() -> list[str]:
    return get_categories()


@api_router.get("/{template_id}")
async def get_template(template_id: str) -> dict[str, Any]:
    return _get_or_404(template_id).to_dict()


@api_router.get("/{template_id}/preview")
async def preview_template(template_id: str) -> dict[str, Any]:
    """템플릿 표현식 확장 결과."""
    template = _get_or_404(template_id)
    paths = parse_or_400(template.expression)
    return {"id": template.id, "paths": paths, "count": len(paths)}
