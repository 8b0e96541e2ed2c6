import csv
import io

from flask import Blueprint, Response, jsonify

from scratchcard.services.claim_service import (
    ClaimOutcome,
    EnterClaimResult,
    fetch_claimable_prizes,
    mark_prize_as_claimed,
)
from scratchcard.utils.authz import is_uuid, require_admin

claims_bp = Blueprint("claims", __name__)

CLAIM_HTTP_STATUS = {
    ClaimOutcome.ENTERED: 201,
    ClaimOutcome.NOT_VERIFIED: 403,
    ClaimOutcome.CODE_NOT_FOUND: 404,
    ClaimOutcome.ALREADY_CLAIMED: 409,
    ClaimOutcome.DOCUMENT_REQUIRED: 400,
}


def claim_result_response(result: EnterClaimResult):
    return jsonify(result.to_dict()), CLAIM_HTTP_STATUS[result.outcome]


@claims_bp.get("/api/admin/claimable-prizes")
@require_admin
def list_claimables():
    return jsonify(fetch_claimable_prizes()), 200


@claims_bp.post("/api/admin/claimable-prizes/<claimable_id>/claim")
@require_admin
def mark_claimed(claimable_id):
    if not is_uuid(claimable_id):
        return jsonify({"error": "invalid claimable_prize_id"}), 400
    return jsonify(mark_prize_as_claimed(claimable_id)), 200


@claims_bp.get("/api/admin/claimable-prizes/export.csv")
@require_admin
def export_claimables_csv():
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(
        [
            "claimable_prize_id",
            "code",
            "name",
            "phone",
            "prize_name",
            "status",
            "cnic_image_url",
            "claimed_at",
        ]
    )
    for row in fetch_claimable_prizes():
        user = row["user"] or {}
        prize = row["prize_definition"] or {}
        w.writerow(
            [
                row["claimable_prize_id"],
                row["code"],
                user.get("name"),
                user.get("phone"),
                prize.get("prize_name"),
                row["status"],
                row["cnic_image_url"],
                row["claimed_at"].isoformat() if row["claimed_at"] else "",
            ]
        )
    return Response(
        buf.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": 'attachment; filename="prize_winners.csv"'},
    )
