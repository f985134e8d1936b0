import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
DATABASE_URL = os.getenv("DATABASE_URL", "")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["*"])

SWEEP_ENABLED = _get_bool(os.getenv("SWEEP_ENABLED"), default=True)
SWEEP_INTERVAL_MINUTES = int(os.getenv("SWEEP_INTERVAL_MINUTES", "60"))
SWEEP_STARTUP_DELAY_SECONDS = int(os.getenv("SWEEP_STARTUP_DELAY_SECONDS", "5"))
EXPIRY_CUTOFF_MINUTES = int(os.getenv("EXPIRY_CUTOFF_MINUTES", "300"))
DEFAULT_SLOT_DURATION = int(os.getenv("DEFAULT_SLOT_DURATION", "60"))

SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")

TWILIO_SID = os.getenv("TWILIO_SID", "")
TWILIO_TOKEN = os.getenv("TWILIO_TOKEN", "")
TWILIO_PHONE = os.getenv("TWILIO_PHONE", "")
SMS_COUNTRY_PREFIX = os.getenv("SMS_COUNTRY_PREFIX", "+33")
BUSINESS_SMS_NUMBER = os.getenv("BUSINESS_SMS_NUMBER", "")

ADMIN_BASE_URL = os.getenv("ADMIN_BASE_URL", "http://localhost:3001/admin")

DEFAULT_BUSINESS_SETTINGS = {
    "businessName": os.getenv("BUSINESS_NAME", "Massonjo Chauffage Sanitaire"),
    "businessPhone": os.getenv("BUSINESS_PHONE", "07 50 97 26 01"),
    "businessEmail": os.getenv("BUSINESS_EMAIL", "massonjoetfils@gmail.com"),
    "businessAddress": os.getenv("BUSINESS_ADDRESS", "189 Rue des Moineaux, 74930 Reignier-Ésery"),
    "emailNotifications": True,
    "smsNotifications": True,
}

def validate_runtime_config() -> None:
    if SWEEP_INTERVAL_MINUTES < 1:
        raise RuntimeError("SWEEP_INTERVAL_MINUTES must be >= 1.")
    if APP_ENV.lower() != "production":
        return
    if TWILIO_SID and not (TWILIO_TOKEN and TWILIO_PHONE):
        raise RuntimeError("TWILIO_TOKEN and TWILIO_PHONE must be set when TWILIO_SID is set in production.")
    if SMTP_USER and not SMTP_PASS:
        raise RuntimeError("SMTP_PASS must be set when SMTP_USER is set in production.")
