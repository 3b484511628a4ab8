import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nannyplacements.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Frontend base URL for links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
SITE_NAME = os.getenv("SITE_NAME", "Nanny Placements SA")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "Nanny Placements SA <noreply@nannyplacements.co.za>"
)
# Inbox that receives contact-form messages and new review alerts
ADMIN_NOTIFICATION_EMAIL = os.getenv(
    "ADMIN_NOTIFICATION_EMAIL", "admin@nannyplacementssouthafrica.co.za"
)

# S3-compatible object storage for verification documents
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_BUCKET_NAME = os.getenv("STORAGE_BUCKET_NAME", "nannyplacements")
STORAGE_REGION = os.getenv("STORAGE_REGION", "auto")

# Payments - amounts are in Rand
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "ZAR")
PAYMENT_WEBHOOK_SECRET = os.getenv("PAYMENT_WEBHOOK_SECRET")
NANNY_PLACEMENT_FEE = float(os.getenv("NANNY_PLACEMENT_FEE", "200"))
CLEANING_FEES = {
    "once_off": float(os.getenv("CLEANING_FEE_ONCE_OFF", "400")),
    "part_time": float(os.getenv("CLEANING_FEE_PART_TIME", "200")),
    "full_time": float(os.getenv("CLEANING_FEE_FULL_TIME", "200")),
}

# Comma-separated list of origins allowed by CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
).split(",")
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
