import os
import secrets

PORT = int(os.environ.get("PORT", 3000))
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

SESSION_SECRET = os.environ.get("SESSION_SECRET") or secrets.token_hex(32)
SESSION_COOKIE_NAME = "session"
ALGORITHM = "HS256"
SESSION_EXPIRE_HOURS = int(os.environ.get("SESSION_EXPIRE_HOURS", 24))
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 12))

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@quicklinks.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")

BASE_URL = os.environ.get("BASE_URL")
RAILWAY_PUBLIC_DOMAIN = os.environ.get("RAILWAY_PUBLIC_DOMAIN")

RESERVED_CODES = frozenset(
    code.strip()
    for code in os.environ.get("RESERVED_CODES", "login,signup,dashboard,admin,pricing,features").split(",")
    if code.strip()
)
SHORT_CODE_LENGTH = int(os.environ.get("SHORT_CODE_LENGTH", 6))
SHORT_CODE_MAX_ATTEMPTS = int(os.environ.get("SHORT_CODE_MAX_ATTEMPTS", 10))

FREE_PLAN_LINK_LIMIT = int(os.environ.get("FREE_PLAN_LINK_LIMIT", 3))
TRIAL_DAYS = int(os.environ.get("TRIAL_DAYS", 30))
PAID_PLANS = ("pro", "business")
PAID_PLAN_PRICE = int(os.environ.get("PAID_PLAN_PRICE", 9))


def get_base_url() -> str:
    if BASE_URL:
        return BASE_URL.rstrip("/")
    if RAILWAY_PUBLIC_DOMAIN:
        return f"https://{RAILWAY_PUBLIC_DOMAIN}"
    return f"http://localhost:{PORT}"
