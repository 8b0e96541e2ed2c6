from flask import Blueprint, jsonify, request

from scratchcard.services.prize_service import (
    assign_prize_to_code,
    bulk_assign_prize,
    create_prize_definition,
    delete_prize_definition,
    fetch_prize_definitions,
    fetch_prizes,
    get_prize_by_code_id,
    remove_prize_from_code,
    update_prize_definition,
)
from scratchcard.utils.authz import is_uuid, require_admin

prizes_bp = Blueprint("prizes", __name__)


# --- prize definitions ---


@prizes_bp.get("/api/admin/prize-definitions")
@require_admin
def list_definitions():
    return jsonify(fetch_prize_definitions()), 200


# POST /api/admin/prize-definitions  { prize_name, description, requires_cnic }
@prizes_bp.post("/api/admin/prize-definitions")
@require_admin
def create_definition():
    body = request.get_json(force=True, silent=True) or {}
    return jsonify(create_prize_definition(body)), 201


@prizes_bp.patch("/api/admin/prize-definitions/<definition_id>")
@require_admin
def patch_definition(definition_id):
    if not is_uuid(definition_id):
        return jsonify({"error": "invalid prize_definition_id"}), 400
    body = request.get_json(silent=True) or {}
    return jsonify(update_prize_definition(definition_id, body)), 200


@prizes_bp.delete("/api/admin/prize-definitions/<definition_id>")
@require_admin
def delete_definition(definition_id):
    if not is_uuid(definition_id):
        return jsonify({"error": "invalid prize_definition_id"}), 400
    return jsonify(delete_prize_definition(definition_id)), 200


# --- assignments ---


@prizes_bp.get("/api/admin/prizes")
@require_admin
def list_assignments():
    return jsonify(fetch_prizes()), 200


@prizes_bp.get("/api/admin/codes/<code_id>/prize")
@require_admin
def get_assignment(code_id):
    if not is_uuid(code_id):
        return jsonify({"error": "invalid code_id"}), 400
    prize = get_prize_by_code_id(code_id)
    if not prize:
        return jsonify({"error": "No prize found for this code"}), 404
    return jsonify(prize), 200


# PUT /api/admin/codes/<code_id>/prize  { prize_definition_id }
@prizes_bp.put("/api/admin/codes/<code_id>/prize")
@require_admin
def assign(code_id):
    body = request.get_json(silent=True) or {}
    definition_id = body.get("prize_definition_id")
    if not is_uuid(code_id) or not is_uuid(definition_id):
        return jsonify({"error": "code_id and prize_definition_id required"}), 400
    resp = assign_prize_to_code(code_id, definition_id)
    return jsonify(resp), (200 if resp.get("updated") else 201)


@prizes_bp.delete("/api/admin/codes/<code_id>/prize")
@require_admin
def unassign(code_id):
    if not is_uuid(code_id):
        return jsonify({"error": "invalid code_id"}), 400
    resp = remove_prize_from_code(code_id)
    return jsonify(resp), (200 if resp["success"] else 404)


# POST /api/admin/prizes/bulk-assign  { code_ids: [...], prize_definition_id }
@prizes_bp.post("/api/admin/prizes/bulk-assign")
@require_admin
def bulk_assign():
    body = request.get_json(silent=True) or {}
    code_ids = body.get("code_ids") or []
    definition_id = body.get("prize_definition_id")
    if not is_uuid(definition_id):
        return jsonify({"error": "prize_definition_id required"}), 400
    if not isinstance(code_ids, list) or not all(is_uuid(i) for i in code_ids):
        return jsonify({"error": "code_ids must be an array of code ids"}), 400
    return jsonify(bulk_assign_prize(code_ids, definition_id)), 200
