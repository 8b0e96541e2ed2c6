import logging
import os

from flask import request
from flask_jwt_extended import decode_token
from flask_socketio import SocketIO, join_room, leave_room, emit

logger = logging.getLogger(__name__)

_raw = os.getenv("SOCKETIO_CORS_ORIGINS", "*").strip()
CORS_ORIGINS = "*" if _raw == "*" else [o.strip() for o in _raw.split(",") if o.strip()]

PRIZE_WINNERS_ROOM = "prize_winners"

socketio = SocketIO(
    cors_allowed_origins=CORS_ORIGINS,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE", "threading"),
)


def _is_admin_token(token) -> bool:
    if not token:
        return False
    try:
        claims = decode_token(token)
    except Exception:
        return False
    return claims.get("role") == "admin"


def notify_admins(event: str, payload: dict) -> None:
    """Push a claim-queue change to every admin watching the winners list."""
    try:
        socketio.emit(event, payload, to=PRIZE_WINNERS_ROOM)
    except Exception:
        logger.exception("socket emit failed event=%s", event)


def init_socketio(app):
    socketio.init_app(app)

    @socketio.on("connect")
    def handle_connect():
        logger.debug(
            "[socket] connect origin=%s ua=%s",
            request.headers.get("Origin"),
            request.headers.get("User-Agent"),
        )
        emit("connected", {"ok": True})

    @socketio.on("disconnect")
    def handle_disconnect():
        logger.debug("[socket] disconnect")

    @socketio.on("join_prize_winners")
    def on_join(data):
        if not _is_admin_token((data or {}).get("token")):
            emit("error", {"error": "forbidden"})
            return
        join_room(PRIZE_WINNERS_ROOM)
        emit("joined", {"room": PRIZE_WINNERS_ROOM})

    @socketio.on("leave_prize_winners")
    def on_leave(data):
        leave_room(PRIZE_WINNERS_ROOM)
        emit("left", {"room": PRIZE_WINNERS_ROOM})
