"""
Entry point for the Sunday School Management API
"""

import sys
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Allow running from a checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from sunday_school.app import app
from sunday_school.config.settings import PORT

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Sunday School Management API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
