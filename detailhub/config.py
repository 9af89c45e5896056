import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./detailhub.db")

# "development" or "production"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Frontend base URL (dashboard + public booking pages)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# CORS - comma separated list of origins
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        f"{FRONTEND_URL},http://localhost:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Country assumed for 10-digit local numbers when normalizing to E.164
DEFAULT_PHONE_COUNTRY = os.getenv("DEFAULT_PHONE_COUNTRY", "US").upper()

# Database pool settings (ignored for SQLite)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "30"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
DB_LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
DB_SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

# Inbound SMS webhook (POST /webhooks/twilio/sms)
TWILIO_INBOUND_SMS_ENABLED = os.getenv("TWILIO_INBOUND_SMS_ENABLED", "true").lower() == "true"
