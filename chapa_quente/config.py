"""
Runtime configuration

Values come from the environment, optionally seeded from a .env file.
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./chapa_quente.db")
SQL_ECHO = _bool("SQL_ECHO")

DEFAULT_JWT_SECRET = "chapa-quente-secret-key"
JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrador")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@chapaquente.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
AUTO_SEED = _bool("AUTO_SEED", "1")

CORS_ORIGINS = [o.strip().rstrip("/") for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT = int(os.getenv("PORT", "8000"))
