import logging

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import RequestEntityTooLarge

from scratchcard.config import Config
from scratchcard.errors import ScratchcardError
from scratchcard.routes import (
    auth_bp,
    core,
    admin_bp,
    verify_bp,
    upload_bp,
    codes_bp,
    prizes_bp,
    claims_bp,
)
from scratchcard.realtime import init_socketio
from scratchcard.utils.crypto import UploadTokenCipher, UploadTokenError

logger = logging.getLogger(__name__)


def _register_error_handlers(app):
    @app.errorhandler(ScratchcardError)
    def handle_business_error(e):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(UploadTokenError)
    def handle_bad_token(e):
        return jsonify({"error": "invalid upload token"}), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({"error": "request too large"}), 413


def create_app(test_config=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    JWTManager(app)
    # fails at startup rather than on the first upload link
    app.extensions["upload_token_cipher"] = UploadTokenCipher(
        app.config["UPLOAD_TOKEN_SECRET"]
    )

    @app.get("/__ping")
    def __ping():
        return {"ok": True}, 200

    app.register_blueprint(core)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(verify_bp)
    app.register_blueprint(upload_bp)
    app.register_blueprint(codes_bp)
    app.register_blueprint(prizes_bp)
    app.register_blueprint(claims_bp)
    app.register_blueprint(admin_bp)
    _register_error_handlers(app)

    for rule in app.url_map.iter_rules():
        logger.debug("route %-50s endpoint=%s", rule, rule.endpoint)

    init_socketio(app)
    return app
