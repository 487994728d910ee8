"""
커스텀 표현식 관리자: CRUD + 검색 + JSON export/import.

저장 형식:
- 단일 JSON 파일, export 형식과 동일한 배열
  [{id, name, description, expression, category, tags, createdAt, updatedAt}]
- 쓰기: FileLock 직렬화 + 원자적 쓰기 (temp → rename)
- 읽기: 락 없음 (원자적 쓰기라 중간 상태를 보지 않음)
"""

import json
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from filemet.core.atomic import atomic_write_json
from filemet.core.ids import generate_expression_id
from filemet.domain.constants import (
    DEFAULT_CUSTOM_CATEGORY,
    IMPORT_MODE_MERGE,
    IMPORT_MODES,
)
from filemet.domain.errors import ErrorCodes, ExpressionStoreError
from filemet.domain.schemas import CustomExpression, parse_timestamp

logger = logging.getLogger(__name__)


def _clean_tags(tags: list[str] | None) -> list[str]:
    return [tag.strip() for tag in tags or [] if tag and tag.strip()]


def _require_text(field_name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ExpressionStoreError(
            ErrorCodes.INVALID_EXPRESSION,
            f"{field_name} cannot be empty",
            field=field_name,
        )
    return value.strip()


def _validate_import_item(index: int, item: Any) -> None:
    """
    import 항목 하나 검증.

    - name, expression: 비어 있지 않은 문자열
    - description, category: 있으면 문자열
    - tags: 있으면 문자열 리스트

    Raises:
        ValueError: 형식 위반 (import_json 에서 IMPORT_FAILED 로 변환)
    """
    if not isinstance(item, dict):
        raise ValueError(f"Invalid expression at index {index}: expected an object")

    for key in ("name", "expression"):
        value = item.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid expression at index {index}: '{key}' must be a non-empty string")

    for key in ("id", "description", "category", "createdAt"):
        value = item.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Invalid expression at index {index}: '{key}' must be a string")

    tags = item.get("tags")
    if tags is not None and (
        not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags)
    ):
        raise ValueError(f"Invalid expression at index {index}: 'tags' must be a list of strings")


class CustomExpressionManager:
    """
    커스텀 표현식 저장소.

    구조:
    <store_dir>/
    ├── custom_expressions.json
    └── custom_expressions.json.lock
    """

    # 락 timeout (초)
    LOCK_TIMEOUT = 10.0

    # id, created_at 은 변경 불가
    UPDATABLE_FIELDS = frozenset({"name", "description", "expression", "category", "tags"})

    def __init__(self, store_path: Path):
        """
        Args:
            store_path: JSON 저장 파일 경로
        """
        self.store_path = store_path
        self._lock_path = store_path.with_name(f"{store_path.name}.lock")

    @contextmanager
    def _store_lock(self) -> Generator[None, None, None]:
        """
        저장소 락 획득.

        Raises:
            ExpressionStoreError: STORE_LOCK_TIMEOUT
        """
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._lock_path, timeout=self.LOCK_TIMEOUT)

        try:
            lock.acquire()
        except Timeout:
            raise ExpressionStoreError(
                ErrorCodes.STORE_LOCK_TIMEOUT,
                f"Failed to acquire lock for '{self.store_path}'",
                timeout=self.LOCK_TIMEOUT,
            ) from None

        try:
            yield
        finally:
            lock.release()

    # =========================================================================
    # Read
    # =========================================================================

    def list_expressions(self) -> list[CustomExpression]:
        """
        저장된 전체 표현식 (저장 순서).

        Raises:
            ExpressionStoreError: STORE_CORRUPT
        """
        return self._load()

    def get_expression(self, expression_id: str) -> CustomExpression | None:
        """id로 조회. 없으면 None."""
        for expr in self._load():
            if expr.id == expression_id:
                return expr
        return None

    def list_by_category(self, category: str) -> list[CustomExpression]:
        return [expr for expr in self._load() if expr.category == category]

    def search(self, query: str) -> list[CustomExpression]:
        """이름, 설명, 태그, 표현식에서 부분 일치 검색 (대소문자 무시)."""
        return [expr for expr in self._load() if expr.matches(query)]

    def list_categories(self) -> list[str]:
        return sorted({expr.category for expr in self._load()})

    def list_tags(self) -> list[str]:
        return sorted({tag for expr in self._load() for tag in expr.tags})

    # =========================================================================
    # Create / Update / Delete
    # =========================================================================

    def save_expression(
        self,
        name: str,
        expression: str,
        description: str = "",
        category: str = DEFAULT_CUSTOM_CATEGORY,
        tags: list[str] | None = None,
    ) -> CustomExpression:
        """
        새 표현식 저장.

        Args:
            name: 표시 이름
            expression: 파일 구조 표현식
            description: 설명
            category: 분류 (빈 값이면 "custom")
            tags: 태그 목록

        Returns:
            저장된 CustomExpression

        Raises:
            ExpressionStoreError: INVALID_EXPRESSION
        """
        now = datetime.now(UTC)
        new_expr = CustomExpression(
            id=generate_expression_id(now),
            name=_require_text("name", name),
            expression=_require_text("expression", expression),
            description=description.strip(),
            category=category.strip() or DEFAULT_CUSTOM_CATEGORY,
            tags=_clean_tags(tags),
            created_at=now,
            updated_at=now,
        )

        with self._store_lock():
            expressions = self._load()
            expressions.append(new_expr)
            self._save(expressions)

        return new_expr

    def update_expression(self, expression_id: str, **updates: Any) -> CustomExpression | None:
        """
        표현식 수정.

        Args:
            expression_id: 대상 id
            **updates: name, description, expression, category, tags

        Returns:
            수정된 CustomExpression, 없으면 None

        Raises:
            ExpressionStoreError: INVALID_UPDATE_FIELD, INVALID_EXPRESSION
        """
        unknown = set(updates) - self.UPDATABLE_FIELDS
        if unknown:
            raise ExpressionStoreError(
                ErrorCodes.INVALID_UPDATE_FIELD,
                f"Cannot update fields: {sorted(unknown)}",
                fields=sorted(unknown),
            )

        if "name" in updates:
            updates["name"] = _require_text("name", updates["name"])
        if "expression" in updates:
            updates["expression"] = _require_text("expression", updates["expression"])
        if "tags" in updates:
            updates["tags"] = _clean_tags(updates["tags"])
        if "category" in updates:
            updates["category"] = (updates["category"] or "").strip() or DEFAULT_CUSTOM_CATEGORY

        with self._store_lock():
            expressions = self._load()
            for expr in expressions:
                if expr.id != expression_id:
                    continue

                for key, value in updates.items():
                    setattr(expr, key, value)
                expr.updated_at = datetime.now(UTC)

                self._save(expressions)
                return expr

        return None

    def delete_expression(self, expression_id: str) -> bool:
        """삭제. 없으면 False."""
        with self._store_lock():
            expressions = self._load()
            remaining = [expr for expr in expressions if expr.id != expression_id]

            if len(remaining) == len(expressions):
                return False

            self._save(remaining)
            return True

    # =========================================================================
    # Export / Import
    # =========================================================================

    def export_json(self) -> str:
        """전체 표현식 JSON 문자열 (indent=2)."""
        return json.dumps(
            [expr.to_dict() for expr in self._load()],
            indent=2,
            ensure_ascii=False,
        )

    def import_json(self, data: str, mode: str = IMPORT_MODE_MERGE) -> int:
        """
        JSON 배열 가져오기.

        - 각 항목은 name, expression 필수
        - id/createdAt 없으면 생성, updatedAt 은 항상 현재 시각
        - 기본값: category="custom", tags=[], description=""
        - 검증 실패 시 저장소는 변경되지 않음

        Args:
            data: export_json() 형식의 JSON 문자열
            mode: "merge" (기존 뒤에 추가) 또는 "replace" (전체 교체)

        Returns:
            가져온 항목 수

        Raises:
            ExpressionStoreError: IMPORT_FAILED
        """
        try:
            if mode not in IMPORT_MODES:
                raise ValueError(f"Unknown import mode: {mode}")

            raw = json.loads(data)
            if not isinstance(raw, list):
                raise ValueError("Invalid JSON format: expected an array of expressions")

            for index, item in enumerate(raw):
                _validate_import_item(index, item)

            now = datetime.now(UTC)
            imported = [self._from_import(item, now) for item in raw]

        except (ValueError, TypeError) as e:
            raise ExpressionStoreError(
                ErrorCodes.IMPORT_FAILED,
                f"Failed to import expressions: {e}",
                mode=mode,
            ) from e

        with self._store_lock():
            current = self._load() if mode == IMPORT_MODE_MERGE else []
            self._save(current + imported)

        logger.info(f"Imported {len(imported)} expressions into {self.store_path} ({mode})")
        return len(imported)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _from_import(self, item: dict[str, Any], now: datetime) -> CustomExpression:
        created_at = item.get("createdAt")
        return CustomExpression(
            id=item.get("id") or generate_expression_id(now),
            name=item["name"],
            expression=item["expression"],
            description=item.get("description") or "",
            category=item.get("category") or DEFAULT_CUSTOM_CATEGORY,
            tags=list(item.get("tags") or []),
            created_at=parse_timestamp(created_at) if created_at else now,
            updated_at=now,
        )

    def _load(self) -> list[CustomExpression]:
        if not self.store_path.exists():
            return []

        try:
            data = json.loads(self.store_path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("store root must be an array")
            return [CustomExpression.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            raise ExpressionStoreError(
                ErrorCodes.STORE_CORRUPT,
                f"Custom expression store is corrupt: {e}",
                path=str(self.store_path),
            ) from e

    def _save(self, expressions: list[CustomExpression]) -> None:
        atomic_write_json(self.store_path, [expr.to_dict() for expr in expressions])
