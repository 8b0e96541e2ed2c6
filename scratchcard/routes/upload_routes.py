from flask import Blueprint, jsonify, request

from scratchcard.routes.claim_routes import claim_result_response
from scratchcard.services.upload_service import (
    complete_cnic_upload,
    presign_cnic_upload,
    store_cnic_image,
    upload_status,
)

upload_bp = Blueprint("upload", __name__)


# GET /api/upload/<token>  -> { hasClaimed, eligible }
@upload_bp.get("/api/upload/<token>")
def status(token):
    return jsonify(upload_status(token)), 200


# GET /api/upload/<token>/signed-url?filename=...&content_type=...
@upload_bp.get("/api/upload/<token>/signed-url")
def signed_url(token):
    filename = request.args.get("filename") or "cnic.jpg"
    content_type = request.args.get("content_type") or "image/jpeg"
    return jsonify(presign_cnic_upload(token, filename, content_type)), 200


# POST /api/upload/<token>/complete  { key, size_bytes? }
@upload_bp.post("/api/upload/<token>/complete")
def complete(token):
    body = request.get_json(force=True, silent=True) or {}
    size_bytes = body.get("size_bytes")
    if size_bytes is not None and (
        isinstance(size_bytes, bool) or not isinstance(size_bytes, int)
    ):
        return jsonify({"error": "size_bytes must be an integer"}), 400
    result = complete_cnic_upload(token, body.get("key") or "", size_bytes)
    return claim_result_response(result)


# POST /api/upload/<token>  multipart "file"
@upload_bp.post("/api/upload/<token>")
def upload(token):
    return claim_result_response(store_cnic_image(token, request.files.get("file")))
