"""
test_expression_store.py - 커스텀 표현식 저장소 테스트

검증:
- CRUD, 검색, 카테고리/태그 목록
- export → import (merge / replace)
- 잘못된 import 는 저장소를 건드리지 않음
- 손상된 저장 파일, 락 timeout
"""

import json
import threading
from pathlib import Path

import pytest
from filelock import FileLock

from filemet.domain.errors import ErrorCodes, ExpressionStoreError
from filemet.templates.manager import CustomExpressionManager

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "store" / "custom_expressions.json"


@pytest.fixture
def manager(store_path: Path) -> CustomExpressionManager:
    return CustomExpressionManager(store_path)


@pytest.fixture
def populated(manager: CustomExpressionManager) -> CustomExpressionManager:
    manager.save_expression(
        name="React component",
        expression="{index.ts,Component.tsx,Component.test.tsx}",
        description="Component with test",
        category="react",
        tags=["react", "ui"],
    )
    manager.save_expression(
        name="Go service",
        expression="internal/{handler.go,service.go}",
        category="go",
        tags=["backend"],
    )
    return manager


# =============================================================================
# Create / Read
# =============================================================================


class TestSaveExpression:
    """표현식 저장."""

    def test_save_and_get(self, manager: CustomExpressionManager):
        saved = manager.save_expression(name="Docs", expression="docs/{a.md,b.md}")

        loaded = manager.get_expression(saved.id)

        assert loaded is not None
        assert loaded.name == "Docs"
        assert loaded.expression == "docs/{a.md,b.md}"
        assert loaded.category == "custom"
        assert loaded.tags == []
        assert loaded.created_at == saved.created_at

    def test_id_format(self, manager: CustomExpressionManager):
        saved = manager.save_expression(name="x", expression="a.ts")

        assert saved.id.startswith("custom_")

    def test_persisted_as_json_array(self, manager: CustomExpressionManager, store_path: Path):
        manager.save_expression(name="x", expression="a.ts", tags=[" t1 ", ""])

        data = json.loads(store_path.read_text(encoding="utf-8"))

        assert isinstance(data, list)
        assert data[0]["name"] == "x"
        assert data[0]["tags"] == ["t1"]
        assert "createdAt" in data[0]
        assert "updatedAt" in data[0]

    def test_empty_category_defaults(self, manager: CustomExpressionManager):
        saved = manager.save_expression(name="x", expression="a.ts", category="  ")

        assert saved.category == "custom"

    @pytest.mark.parametrize("name, expression", [("", "a.ts"), ("x", "  ")])
    def test_empty_fields_rejected(self, manager: CustomExpressionManager, name, expression):
        with pytest.raises(ExpressionStoreError) as exc_info:
            manager.save_expression(name=name, expression=expression)

        assert exc_info.value.code == ErrorCodes.INVALID_EXPRESSION
        assert manager.list_expressions() == []

    def test_save_order_preserved(self, populated: CustomExpressionManager):
        names = [e.name for e in populated.list_expressions()]

        assert names == ["React component", "Go service"]

    def test_missing_store_is_empty(self, manager: CustomExpressionManager):
        assert manager.list_expressions() == []
        assert manager.get_expression("nope") is None


class TestQueries:
    """검색, 카테고리, 태그."""

    def test_list_by_category(self, populated: CustomExpressionManager):
        result = populated.list_by_category("go")

        assert [e.name for e in result] == ["Go service"]

    @pytest.mark.parametrize("query", ["react", "REACT", "Component", "ui", "test.tsx"])
    def test_search_matches(self, populated: CustomExpressionManager, query):
        result = populated.search(query)

        assert [e.name for e in result] == ["React component"]

    def test_search_by_tag(self, populated: CustomExpressionManager):
        assert [e.name for e in populated.search("backend")] == ["Go service"]

    def test_search_no_match(self, populated: CustomExpressionManager):
        assert populated.search("python") == []

    def test_categories_and_tags(self, populated: CustomExpressionManager):
        assert populated.list_categories() == ["go", "react"]
        assert populated.list_tags() == ["backend", "react", "ui"]


# =============================================================================
# Update / Delete
# =============================================================================


class TestUpdateExpression:
    """표현식 수정."""

    def test_update_fields(self, populated: CustomExpressionManager):
        target = populated.list_expressions()[0]

        updated = populated.update_expression(target.id, name="Renamed", tags=["a", "b"])

        assert updated is not None
        assert updated.name == "Renamed"
        assert updated.tags == ["a", "b"]
        assert updated.updated_at >= target.updated_at
        assert updated.created_at == target.created_at
        assert populated.get_expression(target.id).name == "Renamed"

    def test_update_missing_returns_none(self, manager: CustomExpressionManager):
        assert manager.update_expression("nope", name="x") is None

    def test_update_unknown_field(self, populated: CustomExpressionManager):
        target = populated.list_expressions()[0]

        with pytest.raises(ExpressionStoreError) as exc_info:
            populated.update_expression(target.id, id="hijack")

        assert exc_info.value.code == ErrorCodes.INVALID_UPDATE_FIELD

    def test_update_empty_expression_rejected(self, populated: CustomExpressionManager):
        target = populated.list_expressions()[0]

        with pytest.raises(ExpressionStoreError) as exc_info:
            populated.update_expression(target.id, expression="")

        assert exc_info.value.code == ErrorCodes.INVALID_EXPRESSION
        assert populated.get_expression(target.id).expression == target.expression


class TestDeleteExpression:
    """표현식 삭제."""

    def test_delete(self, populated: CustomExpressionManager):
        target = populated.list_expressions()[0]

        assert populated.delete_expression(target.id) is True
        assert populated.get_expression(target.id) is None
        assert len(populated.list_expressions()) == 1

    def test_delete_missing(self, populated: CustomExpressionManager):
        assert populated.delete_expression("nope") is False
        assert len(populated.list_expressions()) == 2


# =============================================================================
# Export / Import
# =============================================================================


class TestExportImport:
    """JSON export/import."""

    def test_export_format(self, populated: CustomExpressionManager):
        exported = populated.export_json()
        data = json.loads(exported)

        assert exported.startswith("[\n  {")
        assert [item["name"] for item in data] == ["React component", "Go service"]
        assert set(data[0]) == {
            "id",
            "name",
            "description",
            "expression",
            "category",
            "tags",
            "createdAt",
            "updatedAt",
        }

    def test_export_empty(self, manager: CustomExpressionManager):
        assert manager.export_json() == "[]"

    def test_merge_appends(self, populated: CustomExpressionManager, tmp_path: Path):
        other = CustomExpressionManager(tmp_path / "other.json")
        other.save_expression(name="Imported", expression="x.ts")

        count = populated.import_json(other.export_json())

        assert count == 1
        assert [e.name for e in populated.list_expressions()] == [
            "React component",
            "Go service",
            "Imported",
        ]

    def test_replace(self, populated: CustomExpressionManager):
        count = populated.import_json(
            json.dumps([{"name": "Only", "expression": "only.ts"}]),
            mode="replace",
        )

        assert count == 1
        assert [e.name for e in populated.list_expressions()] == ["Only"]

    def test_import_fills_defaults(self, manager: CustomExpressionManager):
        manager.import_json(json.dumps([{"name": "Bare", "expression": "a.ts"}]))

        expr = manager.list_expressions()[0]

        assert expr.id.startswith("custom_")
        assert expr.category == "custom"
        assert expr.tags == []
        assert expr.description == ""

    def test_import_keeps_id_and_created_at(self, manager: CustomExpressionManager):
        manager.import_json(
            json.dumps(
                [
                    {
                        "id": "legacy-1",
                        "name": "Legacy",
                        "expression": "a.ts",
                        "createdAt": "2024-01-02T03:04:05.000Z",
                        "updatedAt": "2024-01-02T03:04:05.000Z",
                    }
                ]
            )
        )

        expr = manager.get_expression("legacy-1")

        assert expr is not None
        assert expr.created_at.year == 2024
        assert expr.updated_at.year > 2024

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            '{"name": "x", "expression": "a"}',
            '[{"name": "x"}]',
            '[{"expression": "a"}]',
            '["string item"]',
            '[{"name": 5, "expression": "a.ts"}]',
            '[{"name": "x", "expression": ["a.ts"]}]',
            '[{"name": "x", "expression": "a.ts", "tags": "react"}]',
            '[{"name": "x", "expression": "a.ts", "tags": ["ok", 3]}]',
            '[{"name": "x", "expression": "a.ts", "category": 1}]',
            '[{"name": "x", "expression": "a.ts", "description": {"a": 1}}]',
            '[{"name": "x", "expression": "a.ts", "createdAt": "yesterday"}]',
        ],
    )
    def test_invalid_import_leaves_store(self, populated: CustomExpressionManager, payload):
        before = populated.export_json()

        with pytest.raises(ExpressionStoreError) as exc_info:
            populated.import_json(payload, mode="replace")

        assert exc_info.value.code == ErrorCodes.IMPORT_FAILED
        assert exc_info.value.message.startswith("Failed to import expressions:")
        assert populated.export_json() == before

    def test_rejected_item_keeps_store_searchable(self, populated: CustomExpressionManager):
        """형식이 틀린 항목은 저장되지 않으므로 이후 검색도 정상."""
        with pytest.raises(ExpressionStoreError):
            populated.import_json('[{"name": 5, "expression": "a.ts", "tags": "react"}]')

        assert [e.name for e in populated.search("react")] == ["React component"]
        assert all(isinstance(tag, str) and len(tag) > 1 for tag in populated.list_tags())

    def test_unknown_mode(self, manager: CustomExpressionManager):
        with pytest.raises(ExpressionStoreError) as exc_info:
            manager.import_json("[]", mode="append")

        assert exc_info.value.code == ErrorCodes.IMPORT_FAILED


# =============================================================================
# Store Integrity
# =============================================================================


class TestStoreIntegrity:
    """손상 파일, 락."""

    def test_corrupt_store(self, manager: CustomExpressionManager, store_path: Path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{broken", encoding="utf-8")

        with pytest.raises(ExpressionStoreError) as exc_info:
            manager.list_expressions()

        assert exc_info.value.code == ErrorCodes.STORE_CORRUPT

    def test_lock_timeout(self, manager: CustomExpressionManager, store_path: Path, monkeypatch):
        store_path.parent.mkdir(parents=True)
        monkeypatch.setattr(CustomExpressionManager, "LOCK_TIMEOUT", 0.1)
        holder = FileLock(store_path.with_name(f"{store_path.name}.lock"))
        acquired = threading.Event()
        release = threading.Event()

        def hold():
            with holder:
                acquired.set()
                release.wait(5)

        thread = threading.Thread(target=hold)
        thread.start()
        acquired.wait(5)

        try:
            with pytest.raises(ExpressionStoreError) as exc_info:
                manager.save_expression(name="x", expression="a.ts")
        finally:
            release.set()
            thread.join()

        assert exc_info.value.code == ErrorCodes.STORE_LOCK_TIMEOUT

    def test_concurrent_saves(self, manager: CustomExpressionManager):
        """동시 저장 → 유실 없음."""

        def worker(n: int):
            for i in range(5):
                manager.save_expression(name=f"w{n}-{i}", expression="a.ts")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(manager.list_expressions()) == 20
