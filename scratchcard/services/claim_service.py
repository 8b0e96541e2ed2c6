"""
Claim workflow for verified, prize-bearing codes.

A verification moves into the claim queue (``unClaimed``) once, either right
after verification or after the CNIC photo is uploaded when the prize
requires it. An admin then hands the prize over and marks it ``claimed``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from scratchcard.errors import AlreadyClaimedError, NotFoundError
from scratchcard.models.claimable_prize import (
    get_claimable_by_verified_code,
    get_claimable_prize,
    insert_claimable_prize,
    list_claimable_prizes,
    mark_claimed as mark_claimed_row,
)
from scratchcard.models.code import get_code
from scratchcard.models.prize import get_prize_by_code
from scratchcard.models.prize_definition import get_prize_definition
from scratchcard.models.verified_code import get_verified_code
from scratchcard.realtime import notify_admins
from scratchcard.utils.db import get_db_connection
from scratchcard.utils.metrics import CLAIMS_ENTERED, PRIZES_MARKED_CLAIMED

logger = logging.getLogger(__name__)


class ClaimOutcome(str, Enum):
    """Result of entering a verification into the claim queue."""

    ENTERED = "entered"
    NOT_VERIFIED = "Not Verified"
    CODE_NOT_FOUND = "code not found"
    ALREADY_CLAIMED = "already Claimed"
    DOCUMENT_REQUIRED = "document required"


@dataclass(frozen=True)
class EnterClaimResult:
    outcome: ClaimOutcome
    claimable_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is ClaimOutcome.ENTERED

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"success": True, "id": self.claimable_id}
        return {"success": False, "error": self.outcome.value}


def _done(outcome: ClaimOutcome, claimable_id: Optional[str] = None) -> EnterClaimResult:
    CLAIMS_ENTERED.labels(outcome=outcome.name.lower()).inc()
    return EnterClaimResult(outcome, claimable_id)


def enter_claim(
    verified_code_id: str,
    storage_id: Optional[str] = None,
    cnic_image_url: Optional[str] = None,
) -> EnterClaimResult:
    """
    Put a verification's prize into the claim queue.

    ``storage_id``/``cnic_image_url`` are the stored CNIC photo; prizes that
    require a CNIC are refused with DOCUMENT_REQUIRED until one is supplied.
    """
    with get_db_connection() as conn, conn.cursor() as cur:
        verified = get_verified_code(cur, verified_code_id)
        if not verified:
            return _done(ClaimOutcome.NOT_VERIFIED)

        code_row = get_code(cur, verified["code_id"])
        if not code_row:
            return _done(ClaimOutcome.CODE_NOT_FOUND)

        if get_claimable_by_verified_code(cur, verified_code_id):
            return _done(ClaimOutcome.ALREADY_CLAIMED)

        prize = get_prize_by_code(cur, code_row["id"])
        if not prize:
            return _done(ClaimOutcome.CODE_NOT_FOUND)

        definition = get_prize_definition(cur, prize["prize_definition_id"])
        if definition and definition["requires_cnic"] and not cnic_image_url:
            return _done(ClaimOutcome.DOCUMENT_REQUIRED)

        claimable_id = insert_claimable_prize(
            cur,
            prize_id=prize["id"],
            code_id=code_row["id"],
            verified_code_id=verified_code_id,
            cnic_image_url=cnic_image_url,
            storage_key=storage_id,
        )
        if claimable_id is None:
            # a concurrent submission got there first
            return _done(ClaimOutcome.ALREADY_CLAIMED)
        conn.commit()

    logger.info(
        "claim entered: claimable_id=%s verified_code_id=%s with_document=%s",
        claimable_id,
        verified_code_id,
        bool(cnic_image_url),
    )
    notify_admins(
        "claimable_prize_entered",
        {"claimable_prize_id": claimable_id, "code": code_row["code"]},
    )
    return _done(ClaimOutcome.ENTERED, claimable_id)


def mark_prize_as_claimed(claimable_id: str) -> Dict[str, Any]:
    with get_db_connection() as conn, conn.cursor() as cur:
        row = mark_claimed_row(cur, claimable_id)
        if row is None:
            if not get_claimable_prize(cur, claimable_id):
                raise NotFoundError("Claimable Prize not found")
            raise AlreadyClaimedError()
        conn.commit()

    PRIZES_MARKED_CLAIMED.inc()
    logger.info("prize claimed: claimable_id=%s", claimable_id)
    claimed_at = row["claimed_at"]
    notify_admins(
        "prize_claimed",
        {
            "claimable_prize_id": claimable_id,
            "claimed_at": (
                claimed_at.isoformat() if hasattr(claimed_at, "isoformat") else claimed_at
            ),
        },
    )
    return {"success": True, "claimed_at": row["claimed_at"]}


def has_claimed(verified_code_id: str) -> bool:
    with get_db_connection() as conn, conn.cursor() as cur:
        return get_claimable_by_verified_code(cur, verified_code_id) is not None


def is_eligible_for_upload(verified_code_id: str) -> bool:
    # queried alongside has_claimed by the upload page, not derived from it
    with get_db_connection() as conn, conn.cursor() as cur:
        if not get_verified_code(cur, verified_code_id):
            return False
        return get_claimable_by_verified_code(cur, verified_code_id) is None


def fetch_claimable_prizes() -> List[Dict[str, Any]]:
    with get_db_connection() as conn, conn.cursor() as cur:
        return list_claimable_prizes(cur)
