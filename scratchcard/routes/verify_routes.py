from flask import Blueprint, jsonify, request

from scratchcard.routes.claim_routes import claim_result_response
from scratchcard.services.claim_service import enter_claim
from scratchcard.services.code_service import get_code_status
from scratchcard.services.upload_service import resolve_token
from scratchcard.services.verification_service import submit_verification

verify_bp = Blueprint("verify", __name__)


# POST /api/verify  { code, name, phone }
@verify_bp.post("/api/verify")
def verify():
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(submit_verification(body)), 200


# GET /api/codes/status?code=...
@verify_bp.get("/api/codes/status")
def code_status():
    code = (request.args.get("code") or "").strip()
    if not code:
        return jsonify({"error": "code required"}), 400
    return jsonify(get_code_status(code)), 200


# POST /api/claims  { token }  (prizes that need no CNIC photo)
@verify_bp.post("/api/claims")
def enter_claim_route():
    body = request.get_json(force=True, silent=True) or {}
    token = body.get("token")
    if not token:
        return jsonify({"error": "token required"}), 400
    return claim_result_response(enter_claim(resolve_token(token)))
