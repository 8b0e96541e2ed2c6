from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from psycopg2.errors import ForeignKeyViolation

from scratchcard.errors import NotFoundError, ReferencedByAssignmentError, ValidationError
from scratchcard.models.prize import (
    definition_in_use,
    delete_prize_by_code,
    get_prize_by_code,
    list_prizes,
    upsert_prize,
)
from scratchcard.models.prize_definition import (
    create_prize_definition as insert_prize_definition,
    delete_prize_definition as delete_prize_definition_row,
    get_prize_definition,
    list_prize_definitions,
    update_prize_definition as update_prize_definition_row,
)
from scratchcard.utils.db import get_db_connection

logger = logging.getLogger(__name__)


def _clean_definition_fields(data: dict, partial: bool = False) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if not partial or "prize_name" in data:
        name = (data.get("prize_name") or "").strip()
        if not name:
            raise ValidationError("prize_name required")
        fields["prize_name"] = name
    if not partial or "description" in data:
        fields["description"] = (data.get("description") or "").strip()
    if not partial or "requires_cnic" in data:
        fields["requires_cnic"] = bool(data.get("requires_cnic", False))
    return fields


# --- prize catalog ---


def create_prize_definition(data: dict) -> Dict[str, Any]:
    fields = _clean_definition_fields(data)
    with get_db_connection() as conn, conn.cursor() as cur:
        row = insert_prize_definition(cur, **fields)
        conn.commit()
    logger.info("prize definition created id=%s name=%r", row["id"], row["prize_name"])
    return {"success": True, "id": row["id"], "prize_definition": row}


def fetch_prize_definitions() -> List[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return list_prize_definitions(cur)


def update_prize_definition(definition_id: str, data: dict) -> Dict[str, Any]:
    fields = _clean_definition_fields(data, partial=True)
    with get_db_connection() as conn, conn.cursor() as cur:
        row = update_prize_definition_row(cur, definition_id, **fields)
        if row is None:
            raise NotFoundError("prize definition not found")
        conn.commit()
    return {"success": True, "prize_definition": row}


def delete_prize_definition(definition_id: str) -> Dict[str, Any]:
    with get_db_connection() as conn, conn.cursor() as cur:
        if definition_in_use(cur, definition_id):
            raise ReferencedByAssignmentError()
        try:
            deleted = delete_prize_definition_row(cur, definition_id)
        except ForeignKeyViolation:
            # assigned between the check and the delete (RESTRICT on prizes)
            raise ReferencedByAssignmentError()
        if not deleted:
            raise NotFoundError("prize definition not found")
        conn.commit()
    logger.info("prize definition deleted id=%s", definition_id)
    return {"success": True}


# --- prize assignment ---


def assign_prize_to_code(code_id: str, prize_definition_id: str) -> Dict[str, Any]:
    """
    Attach a prize definition to a code. A code carries at most one prize; a
    second call repoints the existing assignment (last write wins).
    """
    with get_db_connection() as conn, conn.cursor() as cur:
        try:
            prize_id, inserted = upsert_prize(
                cur, code_id=code_id, prize_definition_id=prize_definition_id
            )
        except ForeignKeyViolation:
            raise NotFoundError("code or prize definition not found")
        conn.commit()

    logger.info(
        "prize %s: code_id=%s prize_definition_id=%s",
        "assigned" if inserted else "reassigned",
        code_id,
        prize_definition_id,
    )
    if inserted:
        return {"success": True, "id": prize_id}
    return {"success": True, "id": prize_id, "updated": True}


def bulk_assign_prize(code_ids: List[str], prize_definition_id: str) -> Dict[str, Any]:
    assigned = 0
    updated = 0
    errors: List[str] = []
    for code_id in code_ids:
        try:
            res = assign_prize_to_code(code_id, prize_definition_id)
        except NotFoundError as e:
            errors.append(f"{code_id}: {e}")
            continue
        if res.get("updated"):
            updated += 1
        else:
            assigned += 1
    resp: Dict[str, Any] = {"success": True, "assigned": assigned, "updated": updated}
    if errors:
        resp["errors"] = errors
    return resp


def remove_prize_from_code(code_id: str) -> Dict[str, Any]:
    with get_db_connection() as conn, conn.cursor() as cur:
        removed = delete_prize_by_code(cur, code_id)
        conn.commit()
    if removed:
        logger.info("prize removed from code_id=%s", code_id)
        return {"success": True}
    return {"success": False, "error": "No prize found for this code"}


def get_prize_by_code_id(code_id: str) -> Optional[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        prize = get_prize_by_code(cur, code_id)
        if not prize:
            return None
        definition = get_prize_definition(cur, prize["prize_definition_id"])
    if not definition:
        return None
    return {
        "prize_id": prize["id"],
        "prize_definition": {
            "id": definition["id"],
            "prize_name": definition["prize_name"],
            "description": definition["description"],
            "requires_cnic": bool(definition["requires_cnic"]),
        },
    }


def fetch_prizes() -> List[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return list_prizes(cur)
