"""
Configuration settings for the Sunday School Records API
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Environment configuration
DATABASE_URL = os.getenv("DATABASE_URL")
PORT = int(os.getenv("PORT", 5000))

# Connection pool sizing
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Apply schema.sql on startup (CREATE TABLE IF NOT EXISTS only)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

# Validate required environment variables
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required")

logger.info(f"Database pool: min={DB_POOL_MIN_SIZE}, max={DB_POOL_MAX_SIZE}, auto_init={AUTO_INIT_DB}")
