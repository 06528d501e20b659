# backend/campusconnect/config.py
import os

from dotenv import load_dotenv

load_dotenv()


def _split(value: str):
    return [item.strip() for item in value.split(",") if item.strip()]


APP_NAME = os.getenv("APP_NAME", "CampusConnect API")

# ---- database ----
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./campusconnect.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# ---- auth ----
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", str(60 * 24 * 7)))

# ---- http ----
CORS_ORIGINS = _split(os.getenv("CORS_ORIGINS", "*"))
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "50"))

# ---- email (smtp) ----
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", SMTP_USER or "no-reply@campusconnect.local")

# ---- object storage (s3 compatible) ----
S3_BUCKET = os.getenv("S3_BUCKET", "campusconnect-resources")
S3_REGION = os.getenv("S3_REGION", "us-east-1")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None
S3_PUBLIC_URL = os.getenv("S3_PUBLIC_URL") or None
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID") or None
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY") or None

# ---- logging ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()
