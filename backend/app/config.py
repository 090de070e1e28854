"""
Environment-driven settings.

Values come from the process environment, with a local .env file loaded
first (override=True so .env wins over stale shell exports during dev).
"""

import os

from dotenv import load_dotenv

load_dotenv(override=True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Host defaults used when a request does not specify them
DEFAULT_PIZZA_SIZE_DIAMETER = int(os.getenv("DEFAULT_PIZZA_SIZE_DIAMETER", "18"))
DEFAULT_PIZZA_STYLE = os.getenv("DEFAULT_PIZZA_STYLE", "new-york")
BEVERAGES_PER_GUEST = float(os.getenv("BEVERAGES_PER_GUEST", "1.0"))
