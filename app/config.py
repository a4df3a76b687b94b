import os

from dotenv import load_dotenv

# Load .env file with explicit UTF-8 encoding
load_dotenv(encoding="utf-8")

DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite://"

# "today" for the rewards view is computed in this zone when no as-of date is given
APP_TIMEZONE = os.getenv("APP_TIMEZONE") or "America/Belem"

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()

CORS_ORIGINS = [
    o.strip()
    for o in (
        os.getenv("CORS_ORIGINS")
        or "http://localhost:3000,https://localhost:3000,http://127.0.0.1:3000,https://127.0.0.1:3000"
    ).split(",")
    if o.strip()
]
