from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = Config.DB_CONFIG

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

FREEZE_RATE_AT_CREATION = False
