from .config import Config, _flag

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.DB_CONFIG

DEBUG = True
LOG_LEVEL = "DEBUG"

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
# Optional: also seed demo employees on startup
AUTO_SEED_DB = Config.AUTO_SEED_DB

FREEZE_RATE_AT_CREATION = Config.FREEZE_RATE_AT_CREATION
