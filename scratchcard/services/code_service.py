from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import psycopg2
from psycopg2.errors import UniqueViolation

from scratchcard.errors import DuplicateCodeError, NotFoundError, ValidationError
from scratchcard.models.claimable_prize import (
    claimable_exists_for_code,
    delete_claimables_for_code,
)
from scratchcard.models.code import (
    delete_code,
    get_code,
    get_code_by_string,
    insert_code_if_absent,
    list_codes,
    set_code_invalid,
    update_code as update_code_row,
)
from scratchcard.models.prize import delete_prize_by_code, get_prize_by_code
from scratchcard.models.prize_definition import get_prize_definition
from scratchcard.models.verified_code import (
    delete_verifications_for_code,
    get_first_verification_for_code,
    insert_verified_code,
    list_verified_codes,
)
from scratchcard.utils.db import get_db_connection
from scratchcard.utils.metrics import CODES_IMPORTED, VERIFICATIONS

logger = logging.getLogger(__name__)

MSG_VALID = "The Code is Valid"
MSG_USED = "The Code is Already used."
MSG_INVALID = "Invalid Code"

IMPORT_BATCH_SIZE = 100


def _prize_info(definition: Dict[str, Any] | None) -> Dict[str, Any] | None:
    if not definition:
        return None
    return {
        "id": definition["id"],
        "prize_name": definition["prize_name"],
        "description": definition["description"],
        "requires_cnic": bool(definition["requires_cnic"]),
    }


def verify_code(code: str, name: str, phone: str) -> Dict[str, Any]:
    """
    Check a scratched code and record who submitted it.

    Every submission of an existing code adds a ledger row and leaves the code
    invalid; ``isValid`` in the result is the value *before* this call, so a
    reused code still gets a definite "already used" answer.
    """
    code = (code or "").strip()
    result: Dict[str, Any] = {
        "id": None,
        "success": False,
        "isValid": False,
        "hasPrize": False,
        "prize_info": None,
        "prizeClaimed": False,
        "message": MSG_INVALID,
    }

    with get_db_connection() as conn, conn.cursor() as cur:
        code_row = get_code_by_string(cur, code)
        if not code_row:
            VERIFICATIONS.labels(result="invalid").inc()
            logger.info("verify: unknown code %r", code)
            return result

        is_valid = bool(code_row["isValid"])
        result["success"] = True
        result["isValid"] = is_valid
        result["message"] = MSG_VALID if is_valid else MSG_USED

        prize = get_prize_by_code(cur, code_row["id"])
        if prize:
            result["hasPrize"] = True
            result["prize_info"] = _prize_info(
                get_prize_definition(cur, prize["prize_definition_id"])
            )
            result["prizeClaimed"] = claimable_exists_for_code(cur, code_row["id"])

        result["id"] = insert_verified_code(
            cur,
            code_id=code_row["id"],
            name=(name or "").strip(),
            phone=(phone or "").strip(),
        )
        set_code_invalid(cur, code_row["id"])
        conn.commit()

    VERIFICATIONS.labels(result="valid" if is_valid else "used").inc()
    logger.info(
        "verify: code_id=%s was_valid=%s has_prize=%s verified_code_id=%s",
        code_row["id"],
        is_valid,
        result["hasPrize"],
        result["id"],
    )
    return result


def get_code_status(code: str) -> Dict[str, Any]:
    with get_db_connection() as conn, conn.cursor() as cur:
        code_row = get_code_by_string(cur, (code or "").strip())
        if not code_row:
            return {
                "exists": False,
                "isValid": False,
                "verified": False,
                "codeId": None,
                "verifiedDetails": None,
            }
        verification = get_first_verification_for_code(cur, code_row["id"])

    return {
        "exists": True,
        "isValid": bool(code_row["isValid"]),
        "verified": verification is not None,
        "codeId": code_row["id"],
        "verifiedDetails": (
            {"name": verification["name"], "phone": verification["phone"]}
            if verification
            else None
        ),
    }


def import_codes(codes: List[Any], batch_size: int = IMPORT_BATCH_SIZE) -> Dict[str, Any]:
    """
    Insert new codes, skipping blanks and codes already on file.

    Each batch commits on its own; a failing item is reported in ``errors``
    and the import carries on.
    """
    imported = 0
    skipped = 0
    errors: List[str] = []
    codes = list(codes or [])

    for start in range(0, len(codes), batch_size):
        batch = codes[start : start + batch_size]
        with get_db_connection() as conn, conn.cursor() as cur:
            for raw in batch:
                if not isinstance(raw, str) or not raw.strip():
                    skipped += 1
                    continue
                trimmed = raw.strip()
                cur.execute("SAVEPOINT import_item")
                try:
                    new_id = insert_code_if_absent(cur, trimmed)
                except psycopg2.Error:
                    cur.execute("ROLLBACK TO SAVEPOINT import_item")
                    logger.exception("import: failed to insert %r", trimmed)
                    errors.append(f"Failed to import code: {trimmed}")
                    continue
                cur.execute("RELEASE SAVEPOINT import_item")
                if new_id is None:
                    skipped += 1
                else:
                    imported += 1
            conn.commit()

    CODES_IMPORTED.inc(imported)
    logger.info(
        "import: imported=%s skipped=%s errors=%s total=%s",
        imported,
        skipped,
        len(errors),
        len(codes),
    )
    resp: Dict[str, Any] = {
        "success": True,
        "imported": imported,
        "skipped": skipped,
        "total": len(codes),
    }
    if errors:
        resp["errors"] = errors
    return resp


def update_code(code_id: str, code: str, is_valid: Optional[bool] = None) -> Dict[str, Any]:
    trimmed = (code or "").strip()
    if not trimmed:
        raise ValidationError("code required")

    with get_db_connection() as conn, conn.cursor() as cur:
        existing = get_code_by_string(cur, trimmed)
        if existing and existing["id"] != code_id:
            raise DuplicateCodeError()
        try:
            row = update_code_row(cur, code_id, trimmed, is_valid)
        except UniqueViolation:
            # another admin took the string between the check and the update
            raise DuplicateCodeError()
        if row is None:
            raise NotFoundError("code not found")
        conn.commit()

    logger.info("update code_id=%s is_valid=%s", code_id, row["isValid"])
    return {"success": True, "code": row}


def delete_codes(code_ids: List[str]) -> Dict[str, Any]:
    """Delete codes together with their claims, prize links and verifications."""
    deleted = 0
    with get_db_connection() as conn, conn.cursor() as cur:
        for code_id in code_ids:
            delete_claimables_for_code(cur, code_id)
            delete_prize_by_code(cur, code_id)
            delete_verifications_for_code(cur, code_id)
            if delete_code(cur, code_id):
                deleted += 1
        conn.commit()
    logger.info("delete: requested=%s deleted=%s", len(code_ids), deleted)
    return {"success": True, "deleted": deleted}


def get_code_by_id(code_id: str) -> Optional[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return get_code(cur, code_id)


def fetch_codes(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return list_codes(cur, limit)


def get_verified_code_by_code_id(code_id: str) -> Optional[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        row = get_first_verification_for_code(cur, code_id)
    if not row:
        return None
    return {"name": row["name"], "phone": row["phone"], "codeId": row["code_id"]}


def fetch_verified_codes() -> List[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return list_verified_codes(cur)
