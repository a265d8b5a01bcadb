import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "300"))
    START_DELAY_SEC = float(os.environ.get("START_DELAY_SEC", "3"))
    TICK_INTERVAL_SEC = float(os.environ.get("TICK_INTERVAL_SEC", "1"))
    EMPTY_ROOM_TTL_SEC = int(os.environ.get("EMPTY_ROOM_TTL_SEC", "10"))

    # Room defaults
    DEFAULT_MAX_TEAM_SIZE = int(os.environ.get("DEFAULT_MAX_TEAM_SIZE", "5"))
    DEFAULT_TOTAL_CARDS = int(os.environ.get("DEFAULT_TOTAL_CARDS", "40"))
    MAX_TOTAL_CARDS = int(os.environ.get("MAX_TOTAL_CARDS", "100"))
