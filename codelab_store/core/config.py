# /codelab_store/core/config.py

"""
Central configuration for the persistence service.

Values are read once from the environment (a local `.env` file is honoured
for development) and exposed as plain module constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# The SQLAlchemy URL of the backing store. PostgreSQL in production; the
# default is a local SQLite file for development.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./codelab.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Echo every emitted SQL statement. Useful when debugging transactions.
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# bcrypt cost factor for stored credentials. Fixed, not configurable.
PASSWORD_HASH_ROUNDS = 10
