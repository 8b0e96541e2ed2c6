import csv
import io

from flask import Blueprint, current_app, jsonify, request

from scratchcard.services.code_service import (
    delete_codes,
    fetch_codes,
    fetch_verified_codes,
    get_code_by_id,
    get_verified_code_by_code_id,
    update_code,
)
from scratchcard.tasks import enqueue_code_import, get_import_job
from scratchcard.utils.authz import is_uuid, require_admin

codes_bp = Blueprint("codes", __name__)


def _codes_from_upload(file) -> list:
    """
    Codes from an uploaded CSV/TXT: the ``code`` column when the first row is a
    header naming one, otherwise the first cell of every row.
    """
    text = file.read().decode("utf-8-sig", errors="replace")
    rows = [r for r in csv.reader(io.StringIO(text)) if r]
    if not rows:
        return []
    header = [c.strip().lower() for c in rows[0]]
    if "code" in header:
        idx = header.index("code")
        return [r[idx] if idx < len(r) else "" for r in rows[1:]]
    return [r[0] for r in rows]


# GET /api/admin/codes?limit=...
@codes_bp.get("/api/admin/codes")
@require_admin
def list_codes():
    limit = request.args.get("limit", type=int)
    return jsonify(fetch_codes(limit)), 200


@codes_bp.get("/api/admin/codes/<code_id>")
@require_admin
def get_code(code_id):
    if not is_uuid(code_id):
        return jsonify({"error": "invalid code_id"}), 400
    row = get_code_by_id(code_id)
    if not row:
        return jsonify({"error": "code not found"}), 404
    return jsonify(row), 200


# POST /api/admin/codes/import  { codes: [...] }  or multipart "file"
@codes_bp.post("/api/admin/codes/import")
@require_admin
def import_codes_route():
    if "file" in request.files:
        codes = _codes_from_upload(request.files["file"])
    else:
        body = request.get_json(force=True, silent=True) or {}
        codes = body.get("codes")
        if not isinstance(codes, list):
            return jsonify({"error": "codes must be an array"}), 400
    if not codes:
        return jsonify({"error": "no codes found"}), 400

    use_queue = (
        request.args.get("queue") == "1" or current_app.config["USE_IMPORT_QUEUE"]
    )
    resp = enqueue_code_import(
        codes,
        use_queue=use_queue,
        batch_size=current_app.config["IMPORT_BATCH_SIZE"],
    )
    return jsonify(resp), (202 if resp.get("queued") else 200)


@codes_bp.get("/api/admin/codes/import/<job_id>")
@require_admin
def import_job_status(job_id):
    job = get_import_job(job_id)
    if not job:
        return jsonify({"error": "job not found"}), 404
    return jsonify(job), 200


# PATCH /api/admin/codes/<id>  { code, isValid? }
@codes_bp.patch("/api/admin/codes/<code_id>")
@require_admin
def patch_code(code_id):
    if not is_uuid(code_id):
        return jsonify({"error": "invalid code_id"}), 400
    body = request.get_json(silent=True) or {}
    is_valid = body.get("isValid")
    if is_valid is not None and not isinstance(is_valid, bool):
        return jsonify({"error": "isValid must be a boolean"}), 400
    return jsonify(update_code(code_id, body.get("code"), is_valid)), 200


# POST /api/admin/codes/delete  { ids: [...] }
@codes_bp.post("/api/admin/codes/delete")
@require_admin
def delete_codes_route():
    body = request.get_json(silent=True) or {}
    ids = body.get("ids") or []
    if not isinstance(ids, list) or not all(is_uuid(i) for i in ids):
        return jsonify({"error": "ids must be an array of code ids"}), 400
    return jsonify(delete_codes(ids)), 200


@codes_bp.get("/api/admin/codes/<code_id>/verification")
@require_admin
def code_verification(code_id):
    if not is_uuid(code_id):
        return jsonify({"error": "invalid code_id"}), 400
    row = get_verified_code_by_code_id(code_id)
    if not row:
        return jsonify({"error": "not verified"}), 404
    return jsonify(row), 200


@codes_bp.get("/api/admin/verified-codes")
@require_admin
def list_verified():
    return jsonify(fetch_verified_codes()), 200
