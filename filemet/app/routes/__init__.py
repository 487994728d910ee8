"""
FastAPI Routes (API 전용).

- expressions: 파싱 / 구조 생성
- templates: 프레임워크 카탈로그
- custom: 커스텀 표현식 CRUD
"""

from . import custom, expressions, templates

__all__ = ["custom", "expressions", "templates"]
