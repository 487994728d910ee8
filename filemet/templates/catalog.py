"""
프레임워크 템플릿 카탈로그: frameworks.yaml → FrameworkTemplate 목록.

카탈로그는 읽기 전용 데이터. 표현식은 사용자가 직접 입력한 것과 동일하게
parse_structure 로 확장된다.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from filemet.domain.schemas import FrameworkTemplate, TemplateCategory

CATALOG_PATH = Path(__file__).parent / "frameworks.yaml"


def load_framework_templates(catalog_path: Path | None = None) -> list[FrameworkTemplate]:
    """
    카탈로그 YAML 로드.

    Args:
        catalog_path: YAML 경로 (None이면 패키지 기본 카탈로그, 캐시됨)

    Returns:
        FrameworkTemplate 목록 (파일 순서)
    """
    if catalog_path is None:
        return list(_default_templates())
    return _read_catalog(catalog_path)


@lru_cache(maxsize=1)
def _default_templates() -> tuple[FrameworkTemplate, ...]:
    return tuple(_read_catalog(CATALOG_PATH))


def _read_catalog(catalog_path: Path) -> list[FrameworkTemplate]:
    with open(catalog_path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return [FrameworkTemplate.from_dict(entry) for entry in data.get("templates", [])]


def get_templates_by_category(category: str | TemplateCategory | None = None) -> list[FrameworkTemplate]:
    """카테고리별 템플릿 (None이면 전체)."""
    templates = load_framework_templates()
    if not category:
        return templates

    value = category.value if isinstance(category, TemplateCategory) else category
    return [t for t in templates if t.category.value == value]


def get_template_by_id(template_id: str) -> FrameworkTemplate | None:
    """id로 템플릿 조회. 없으면 None."""
    for template in load_framework_templates():
        if template.id == template_id:
            return template
    return None


def get_categories() -> list[str]:
    """카탈로그에 등장하는 카테고리 (첫 등장 순서)."""
    seen: list[str] = []
    for template in load_framework_templates():
        if template.category.value not in seen:
            seen.append(template.category.value)
    return seen
