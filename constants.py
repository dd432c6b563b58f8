import os

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)
REDIS_DB = int(os.getenv("REDIS_DB", 0))

# Lobbies are evicted after this many idle seconds; every write refreshes it
LOBBY_TTL_SECONDS = int(os.getenv("LOBBY_TTL_SECONDS", 3600))
LOBBY_NAME_MAX_LENGTH = int(os.getenv("LOBBY_NAME_MAX_LENGTH", 64))
REDIS_TRANSACTION_RETRIES = int(os.getenv("REDIS_TRANSACTION_RETRIES", 5))

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
RELOAD = os.getenv("RELOAD", "0") == "1"
