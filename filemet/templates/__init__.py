"""
Templates layer: 표현식 출처 관리.

역할:
- 프레임워크 템플릿 카탈로그 (catalog.py, frameworks.yaml)
- 사용자 커스텀 표현식 CRUD (manager.py)

둘 다 파서 입장에서는 그냥 표현식 문자열 공급자다.
"""

from .catalog import (
    get_categories,
    get_template_by_id,
    get_templates_by_category,
    load_framework_templates,
)
from .manager import CustomExpressionManager

__all__ = [
    # catalog
    "load_framework_templates",
    "get_templates_by_category",
    "get_template_by_id",
    "get_categories",
    # manager
    "CustomExpressionManager",
]
