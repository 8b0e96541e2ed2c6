from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, create_access_token

from scratchcard.services.auth_service import (
    ADMIN_ROLE,
    get_admin_username,
    login_admin,
    update_admin_credentials,
)
from scratchcard.utils.authz import require_admin

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/login")
def login():
    data = request.get_json(force=True, silent=True) or {}
    resp = login_admin(data)
    return jsonify(resp), (200 if "access_token" in resp else 401)


@auth_bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    new_access = create_access_token(
        identity=get_jwt_identity(), additional_claims={"role": ADMIN_ROLE}
    )
    return jsonify({"access_token": new_access}), 200


@auth_bp.get("/me")
@require_admin
def me():
    return jsonify({"username": get_jwt_identity(), "role": ADMIN_ROLE}), 200


@auth_bp.get("/credentials")
@require_admin
def credentials():
    return jsonify({"username": get_admin_username()}), 200


# PUT /api/auth/credentials  { username, password }
@auth_bp.put("/credentials")
@require_admin
def change_credentials():
    data = request.get_json(force=True, silent=True) or {}
    return jsonify(update_admin_credentials(data)), 200
