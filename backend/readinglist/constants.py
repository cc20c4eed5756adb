from os import getenv

DATABASE_URL = getenv("DATABASE_URL", "sqlite:///data/readinglist.sqlite")
DEBUG = bool(getenv("DEBUG", False))

ROOT_PATH = getenv("ROOT_PATH", "/")
HOST = getenv("HOST", "0.0.0.0")
PORT = int(getenv("PORT", "8000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in getenv("CORS_ORIGINS", "http://localhost:8501").split(",")
    if origin.strip()
]

# some sites refuse anything that does not look like a browser
USER_AGENT = getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
)
FETCH_TIMEOUT = float(getenv("FETCH_TIMEOUT", "300"))

API_BASE_URL = getenv("API_BASE_URL", "http://localhost:8000").rstrip("/")
