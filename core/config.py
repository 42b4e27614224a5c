"""Environment-driven settings for the Diyetim API.

Values are read once at import time. A `.env` file in the working directory
is loaded first so local development does not need exported variables.
"""

import logging
import os
from dotenv import load_dotenv
from typing import Optional

from core.exceptions import ConfigurationError

# core.logger imports this module, so use the stdlib logger here
logger = logging.getLogger("core.config")

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", "5000"))

# Auth
DEV_JWT_SECRET = "diyetim-development-secret-change-me"


def resolve_jwt_secret(app_env: str, secret: Optional[str]) -> str:
    """Return the signing secret, falling back to a fixed one only in development.

    Raises:
        ConfigurationError: If `secret` is unset outside development.
    """
    if secret:
        return secret
    if app_env != "development":
        raise ConfigurationError(f"JWT_SECRET must be set when APP_ENV is '{app_env}'",
                                 config_key="JWT_SECRET")
    logger.warning("JWT_SECRET is not set, using the development secret")
    return DEV_JWT_SECRET


JWT_SECRET = resolve_jwt_secret(APP_ENV, os.getenv("JWT_SECRET"))
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

# Uploads
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.path.dirname(__file__), "..", "uploads"))
UPLOAD_URL_PREFIX = "/uploads"
UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", str(10 * 1024 * 1024)))
UPLOAD_DEFAULT_FOLDER = os.getenv("UPLOAD_DEFAULT_FOLDER", "diyetim")

# Telegram
TELEGRAM_BOT_NAME = os.getenv("TELEGRAM_BOT_NAME", "DiyetimBot")

# Logging
LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
