import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./app.db")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 12)))

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

# several responses per user and quiz are accepted unless this is switched off
ALLOW_RETAKES = _as_bool(os.getenv("LMS_ALLOW_RETAKES"), default=True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

API_HOST = os.getenv("LMS_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("LMS_API_PORT", "8000"))

# prefix for lesson video references that are not absolute URLs
VIDEO_BASE_URL = os.getenv("LMS_VIDEO_BASE_URL", "")
