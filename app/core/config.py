"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

# Local calendar used for "today", qualifying days and the weekly tracker.
# Timestamps are always stored in UTC; only day bucketing uses this zone.
HABITS_TIMEZONE = os.getenv("HABITS_TIMEZONE", "UTC")

# Community join codes: fixed length, uppercase letters and digits.
# The communities.code column holds at most COMMUNITY_CODE_MAX_LENGTH chars.
COMMUNITY_CODE_MAX_LENGTH = 16
COMMUNITY_CODE_LENGTH = int(os.getenv("COMMUNITY_CODE_LENGTH", "6"))
if not 1 <= COMMUNITY_CODE_LENGTH <= COMMUNITY_CODE_MAX_LENGTH:
    raise RuntimeError(
        f"COMMUNITY_CODE_LENGTH must be between 1 and {COMMUNITY_CODE_MAX_LENGTH}, "
        f"got {COMMUNITY_CODE_LENGTH}"
    )

# How many fresh codes to try before giving up with a conflict.
COMMUNITY_CODE_MAX_ATTEMPTS = int(os.getenv("COMMUNITY_CODE_MAX_ATTEMPTS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1"
