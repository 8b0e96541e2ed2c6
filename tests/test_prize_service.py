"""
Prize catalog and prize assignment.

Run with: pytest tests/test_prize_service.py -v
"""

import uuid

import pytest
from psycopg2.errors import ForeignKeyViolation

from scratchcard.errors import (
    NotFoundError,
    ReferencedByAssignmentError,
    ValidationError,
)
from scratchcard.services import prize_service
from scratchcard.services.prize_service import (
    assign_prize_to_code,
    bulk_assign_prize,
    create_prize_definition,
    delete_prize_definition,
    get_prize_by_code_id,
    remove_prize_from_code,
    update_prize_definition,
)


class TestCatalog:
    def test_create_trims_and_defaults(self, store):
        res = create_prize_definition({"prize_name": "  Gold  "})
        assert res["success"] is True
        row = store.definitions[res["id"]]
        assert row["prize_name"] == "Gold"
        assert row["description"] == ""
        assert row["requires_cnic"] is False

    def test_create_requires_name(self, store):
        with pytest.raises(ValidationError):
            create_prize_definition({"prize_name": "   ", "requires_cnic": True})
        assert store.definitions == {}

    def test_partial_update_leaves_other_fields(self, store):
        def_id = store.add_definition("Gold", requires_cnic=True, description="coin")
        res = update_prize_definition(def_id, {"description": "Gold coin"})
        row = res["prize_definition"]
        assert row["prize_name"] == "Gold"
        assert row["description"] == "Gold coin"
        assert row["requires_cnic"] is True

    def test_update_rejects_blank_name(self, store):
        def_id = store.add_definition("Gold")
        with pytest.raises(ValidationError):
            update_prize_definition(def_id, {"prize_name": ""})

    def test_update_unknown(self, store):
        with pytest.raises(NotFoundError):
            update_prize_definition(str(uuid.uuid4()), {"description": "x"})

    def test_delete_unused_definition(self, store):
        def_id = store.add_definition("Gold")
        assert delete_prize_definition(def_id) == {"success": True}
        assert store.definitions == {}

    def test_delete_assigned_definition_is_refused(self, store):
        def_id = store.add_definition("Gold")
        store.add_prize(store.add_code("WIN999"), def_id)

        with pytest.raises(ReferencedByAssignmentError) as exc:
            delete_prize_definition(def_id)
        assert exc.value.status_code == 409
        assert def_id in store.definitions

    def test_delete_races_with_assignment(self, store, monkeypatch):
        def_id = store.add_definition("Gold")

        def fk_violation(cur, definition_id):
            raise ForeignKeyViolation()

        monkeypatch.setattr(prize_service, "delete_prize_definition_row", fk_violation)
        with pytest.raises(ReferencedByAssignmentError):
            delete_prize_definition(def_id)

    def test_delete_unknown(self, store):
        with pytest.raises(NotFoundError):
            delete_prize_definition(str(uuid.uuid4()))


class TestAssignment:
    def test_first_assignment_inserts(self, store):
        code_id = store.add_code("WIN999")
        def_id = store.add_definition("Gold")

        res = assign_prize_to_code(code_id, def_id)

        assert res["success"] is True
        assert "updated" not in res
        assert store.get_prize_by_code(None, code_id)["prize_definition_id"] == def_id

    def test_reassignment_updates_in_place(self, store):
        code_id = store.add_code("WIN999")
        gold = store.add_definition("Gold")
        silver = store.add_definition("Silver")

        first = assign_prize_to_code(code_id, gold)
        second = assign_prize_to_code(code_id, silver)

        assert second == {"success": True, "id": first["id"], "updated": True}
        assert len(store.prizes) == 1
        assert store.prizes[first["id"]]["prize_definition_id"] == silver

    def test_unknown_reference(self, store, monkeypatch):
        def fk_violation(cur, **kw):
            raise ForeignKeyViolation()

        monkeypatch.setattr(prize_service, "upsert_prize", fk_violation)
        with pytest.raises(NotFoundError):
            assign_prize_to_code(str(uuid.uuid4()), str(uuid.uuid4()))

    def test_bulk_assign_counts(self, store):
        gold = store.add_definition("Gold")
        a = store.add_code("A")
        b = store.add_code("B")
        assign_prize_to_code(a, gold)

        res = bulk_assign_prize([a, b], gold)
        assert res == {"success": True, "assigned": 1, "updated": 1}

    def test_remove(self, store):
        code_id = store.add_code("WIN999")
        store.add_prize(code_id, store.add_definition())
        assert remove_prize_from_code(code_id) == {"success": True}
        assert remove_prize_from_code(code_id) == {
            "success": False,
            "error": "No prize found for this code",
        }

    def test_get_prize_by_code_id(self, store):
        code_id = store.add_code("WIN999")
        def_id = store.add_definition("Gold", requires_cnic=True)
        prize_id = store.add_prize(code_id, def_id)

        res = get_prize_by_code_id(code_id)
        assert res["prize_id"] == prize_id
        assert res["prize_definition"]["prize_name"] == "Gold"
        assert res["prize_definition"]["requires_cnic"] is True
        assert get_prize_by_code_id(store.add_code("PLAIN")) is None
