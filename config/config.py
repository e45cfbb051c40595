import os


def _flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "payroll_db")

    # Dev helpers
    AUTO_INIT_DB = _flag("AUTO_INIT_DB")
    AUTO_SEED_DB = _flag("AUTO_SEED_DB")

    # Off: hourly rate read live from the employee on every computation.
    FREEZE_RATE_AT_CREATION = _flag("FREEZE_RATE_AT_CREATION")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    DB_CONFIG = {
        "host": DB_HOST,
        "port": DB_PORT,
        "user": DB_USER,
        "password": DB_PASSWORD,
        "database": DB_NAME,
    }
