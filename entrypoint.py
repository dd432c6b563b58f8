import uvicorn

from app import app
from constants import HOST, LOG_LEVEL, PORT, RELOAD
from logging_config import get_logger

logger = get_logger(__name__)


def main():
    logger.info(f"Starting lobby gateway on {HOST}:{PORT} (log_level={LOG_LEVEL}, reload={RELOAD})")
    # Logging is already configured by app.py; log_config=None keeps uvicorn from replacing it
    uvicorn.run("app:app" if RELOAD else app, host=HOST, port=PORT, reload=RELOAD, log_level=LOG_LEVEL.lower(), log_config=None)


if __name__ == "__main__":
    main()
