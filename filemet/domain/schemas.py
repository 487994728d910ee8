"""
Data schemas for filemet.

규칙:
- 파서 결과는 list[str] (순서 유지, 중복 허용)
- 저장소 JSON 키는 export 형식(camelCase) 그대로
- 시각은 timezone-aware datetime, 직렬화 시 ISO-8601
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

# =============================================================================
# Parser
# =============================================================================


@dataclass(frozen=True)
class Group:
    """
    파트 끝에 붙은 괄호 그룹.

    예: "api/{a.ts,b.ts}" → base_path="api/", content="a.ts,b.ts"
    """

    base_path: str
    open_bracket: str
    content: str
    close_bracket: str

    @property
    def is_parentheses(self) -> bool:
        return self.open_bracket == "("

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()


# =============================================================================
# Structure Writer
# =============================================================================


@dataclass
class StructureResult:
    """파일 구조 생성 결과 (target_dir 기준 상대 경로)."""

    created_files: list[str] = field(default_factory=list)
    created_folders: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def summary(self) -> str:
        """사용자용 요약 메시지."""
        parts = []
        if self.created_files:
            parts.append(f"Created {len(self.created_files)} files")
        if self.created_folders:
            if parts:
                parts.append(f"{len(self.created_folders)} folders")
            else:
                parts.append(f"Created {len(self.created_folders)} folders")

        if not parts:
            return "All files and folders already exist"
        return " and ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created_files": self.created_files,
            "created_folders": self.created_folders,
            "skipped": self.skipped,
            "message": self.summary(),
        }


# =============================================================================
# Framework Templates
# =============================================================================


class TemplateCategory(str, Enum):
    """프레임워크 템플릿 카테고리."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    MOBILE = "mobile"
    OTHER = "other"


@dataclass(frozen=True)
class FrameworkTemplate:
    """프레임워크별 기본 구조 (frameworks.yaml 한 항목)."""

    id: str
    name: str
    description: str
    expression: str
    category: TemplateCategory

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "expression": self.expression,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FrameworkTemplate":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            expression=data["expression"],
            category=TemplateCategory(data.get("category", "other")),
        )


# =============================================================================
# Custom Expressions
# =============================================================================


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class CustomExpression:
    """
    사용자가 저장한 표현식.

    JSON 형식 (export/import 공용):
        {id, name, description, expression, category, tags, createdAt, updatedAt}
    """

    id: str
    name: str
    expression: str
    description: str = ""
    category: str = "custom"
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "expression": self.expression,
            "category": self.category,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomExpression":
        return cls(
            id=data["id"],
            name=data["name"],
            expression=data["expression"],
            description=data.get("description", ""),
            category=data.get("category", "custom"),
            tags=list(data.get("tags", [])),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(data["updatedAt"]),
        )

    def matches(self, query: str) -> bool:
        """이름/설명/태그/표현식 부분 일치 (대소문자 무시)."""
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.description.lower()
            or any(needle in tag.lower() for tag in self.tags)
            or needle in self.expression.lower()
        )
