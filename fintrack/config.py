import os
from dotenv import load_dotenv

load_dotenv()


def _csv(name: str, default: str = "") -> list[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Database ---
# Default to local SQLite, but prefer environment variable (for Postgres deployments)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/fintrack.db")

# The async engine needs an async driver in the URL
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
elif DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
elif DATABASE_URL.startswith("sqlite:///"):
    DATABASE_URL = DATABASE_URL.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

# --- Identity provider (tokens are issued externally, we only verify them) ---
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "change-this-secret-key")
AUTH_JWT_ALGORITHMS = _csv("AUTH_JWT_ALGORITHMS", "HS256")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE") or None
AUTH_JWT_ISSUER = os.getenv("AUTH_JWT_ISSUER") or None

# --- Chat assistant API keys (comma-separated, tried in order) ---
OPENAI_API_KEYS = _csv("OPENAI_API_KEYS")
GROQ_API_KEYS = _csv("GROQ_API_KEYS")
CHAT_SYSTEM_PROMPT = os.getenv(
    "CHAT_SYSTEM_PROMPT",
    "You are a helpful personal finance assistant. Explain budgeting, "
    "spending and saving concepts simply and concisely.",
)

# --- Scheduled transactions ---
# When true, listing scheduled transactions also rolls over the due ones
ROLLOVER_ON_LIST = _flag("ROLLOVER_ON_LIST", "true")

# --- Misc ---
TRANSACTION_LIST_DAYS = int(os.getenv("TRANSACTION_LIST_DAYS", "30"))
CORS_ORIGINS = _csv("CORS_ORIGINS", "*")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
