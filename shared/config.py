# shared/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- DATABASE ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./schoolmate.db")
SQL_ECHO = _as_bool(os.getenv("SQL_ECHO", "false"))

# --- AUTH ---
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# --- APP ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# --- ENROLLMENT DEFAULTS ---
# Applied when an approved application leaves these blank; every use is logged.
DEFAULT_STUDENT_GENDER = os.getenv("DEFAULT_STUDENT_GENDER", "male")
DEFAULT_STUDENT_SECTION = os.getenv("DEFAULT_STUDENT_SECTION", "A")

# --- IDENTIFIERS ---
ACADEMIC_YEAR = os.getenv("ACADEMIC_YEAR") or None
ACADEMIC_YEAR_START_MONTH = int(os.getenv("ACADEMIC_YEAR_START_MONTH", "4"))
ROLL_NUMBER_MAX_ATTEMPTS = int(os.getenv("ROLL_NUMBER_MAX_ATTEMPTS", "5"))
APPLICATION_NUMBER_MAX_ATTEMPTS = int(os.getenv("APPLICATION_NUMBER_MAX_ATTEMPTS", "5"))

# --- BOOTSTRAP ---
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
