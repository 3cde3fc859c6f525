import os

from config.config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = Config.db_config()
DB_ISOLATION_LEVEL = Config.DB_ISOLATION_LEVEL

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
