import logging
from typing import Any, Dict

import bcrypt
from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token

from scratchcard.errors import ValidationError
from scratchcard.models.admin_credentials import (
    get_admin_credentials,
    save_admin_credentials,
)
from scratchcard.utils.db import get_db_connection

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _make_tokens(username: str) -> Dict[str, str]:
    claims = {"role": ADMIN_ROLE}
    return {
        "access_token": create_access_token(identity=username, additional_claims=claims),
        "refresh_token": create_refresh_token(
            identity=username, additional_claims=claims
        ),
    }


def _load_or_seed_credentials(cur) -> Dict[str, Any]:
    creds = get_admin_credentials(cur)
    if creds:
        return creds
    username = current_app.config["DEFAULT_ADMIN_USERNAME"]
    logger.warning("no admin credentials stored; seeding default admin %r", username)
    save_admin_credentials(
        cur, username, _hash_password(current_app.config["DEFAULT_ADMIN_PASSWORD"])
    )
    return get_admin_credentials(cur)


def login_admin(data: dict) -> dict:
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    with get_db_connection() as conn, conn.cursor() as cur:
        creds = _load_or_seed_credentials(cur)
        conn.commit()

    if username != creds["username"] or not _verify_password(
        password, creds["password_hash"]
    ):
        logger.info("admin login failed for %r", username)
        return {"error": "Invalid username or password"}

    return {"username": creds["username"], **_make_tokens(creds["username"])}


def get_admin_username() -> str | None:
    with get_db_connection() as conn, conn.cursor() as cur:
        creds = get_admin_credentials(cur)
    return creds["username"] if creds else None


def update_admin_credentials(data: dict) -> dict:
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username:
        raise ValidationError("username required")
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")

    with get_db_connection() as conn, conn.cursor() as cur:
        save_admin_credentials(cur, username, _hash_password(password))
        conn.commit()
    logger.info("admin credentials updated; username=%r", username)
    return {"success": True}
