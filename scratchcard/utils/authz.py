from functools import wraps
from uuid import UUID

from flask import jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt


def require_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        role = get_jwt().get("role")
        if role != "admin":
            return (
                jsonify({"error": "forbidden", "required": "admin", "have": role}),
                403,
            )
        return fn(*args, **kwargs)

    return wrapper


def is_uuid(v) -> bool:
    try:
        UUID(str(v))
        return True
    except ValueError:
        return False
