from flask import Blueprint, jsonify

core = Blueprint("core", __name__)


@core.get("/")
def root():
    return jsonify({"service": "scratchcard-api", "ok": True})


@core.get("/api")
def api_index():
    return jsonify(
        {
            "endpoints": {
                "public": [
                    "/api/verify (POST)",
                    "/api/codes/status (GET)",
                    "/api/claims (POST)",
                    "/api/upload/<token> (GET, POST)",
                ],
                "auth": ["/api/auth/login (POST)", "/api/auth/refresh (POST)"],
                "admin": [
                    "/api/admin/codes ...",
                    "/api/admin/prize-definitions ...",
                    "/api/admin/prizes ...",
                    "/api/admin/claimable-prizes ...",
                ],
            }
        }
    )
