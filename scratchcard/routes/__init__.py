from .auth_routes import auth_bp
from .core_routes import core
from .admin_routes import admin_bp
from .verify_routes import verify_bp
from .upload_routes import upload_bp
from .code_routes import codes_bp
from .prize_routes import prizes_bp
from .claim_routes import claims_bp

__all__ = [
    "auth_bp",
    "core",
    "admin_bp",
    "verify_bp",
    "upload_bp",
    "codes_bp",
    "prizes_bp",
    "claims_bp",
]
