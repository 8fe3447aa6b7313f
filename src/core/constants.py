"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255
MAX_ROOM_LENGTH = 50  # Room labels are display-only, 1..50 characters

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# API routing
API_V1_PREFIX = "/api/v1"

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # Scheduling UI dev server (Vite)
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Display format for shift bounds in user-facing messages
TIME_OF_DAY_DISPLAY_FORMAT = "%H:%M"
