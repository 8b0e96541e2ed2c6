from typing import Any, Dict

from scratchcard.errors import ValidationError
from scratchcard.services.claim_service import enter_claim
from scratchcard.services.code_service import verify_code
from scratchcard.services.upload_service import issue_upload_token


def submit_verification(data: dict) -> Dict[str, Any]:
    """
    Public entry point behind POST /api/verify.

    Runs the verification, queues the prize straight away when it needs no
    CNIC photo, and hands back an upload token for the photo step otherwise.
    """
    code = (data.get("code") or "").strip()
    name = (data.get("name") or "").strip()
    phone = (data.get("phone") or "").strip()
    if not code:
        raise ValidationError("Code is required")
    if not name:
        raise ValidationError("Name is required")
    if not phone:
        raise ValidationError("Phone number is required")

    res = verify_code(code, name, phone)
    if not res["id"]:
        return res

    prize_info = res["prize_info"] or {}
    if res["hasPrize"] and not prize_info.get("requires_cnic"):
        res["claim"] = enter_claim(res["id"]).to_dict()
    if not res["prizeClaimed"]:
        res["upload_token"] = issue_upload_token(res["id"])
    return res
