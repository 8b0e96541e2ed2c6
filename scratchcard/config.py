import os
from datetime import timedelta

from dotenv import load_dotenv

from scratchcard.utils.media_validators import MAX_SIZE_IMAGE

load_dotenv()


class Config:
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "dev-secret")
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_HEADER_NAME = "Authorization"
    JWT_HEADER_TYPE = "Bearer"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=8)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=30)

    # key material for upload tokens; SECRET_KEY kept for older deployments
    UPLOAD_TOKEN_SECRET = os.getenv("UPLOAD_TOKEN_SECRET") or os.getenv(
        "SECRET_KEY", ""
    )

    DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    # request body cap; the photo itself is checked against MAX_SIZE_IMAGE,
    # the extra MB covers multipart framing and CSV imports
    MAX_CONTENT_LENGTH = int(
        os.getenv("MAX_CONTENT_LENGTH", MAX_SIZE_IMAGE + 1024 * 1024)
    )

    IMPORT_BATCH_SIZE = int(os.getenv("IMPORT_BATCH_SIZE", 100))
    USE_IMPORT_QUEUE = os.getenv("USE_IMPORT_QUEUE", "0") == "1"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", 5050))
