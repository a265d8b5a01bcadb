from __future__ import annotations

import logging
import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.models import Settings
from .game.registry import RoomRegistry
from .game.service import GameService
from .game.settings import clamp_team_size, round_total_cards
from .realtime.handlers import register_socketio_handlers
from .realtime.sessions import SessionStore
from .realtime.transport import SocketIONotifier, SocketIOScheduler
from .routes.deps import EXTENSION_KEY
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.words import bp as words_bp


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _pick_async_mode(configured: str) -> str:
    if configured:
        return configured
    # eventlet is only installed on POSIX below 3.13.
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def build_game_service(app: Flask, socketio: SocketIO) -> GameService:
    cfg = app.config
    max_total = int(cfg.get("MAX_TOTAL_CARDS", 100))
    defaults = Settings(
        max_team_size=clamp_team_size(int(cfg.get("DEFAULT_MAX_TEAM_SIZE", 5))),
        total_cards=round_total_cards(int(cfg.get("DEFAULT_TOTAL_CARDS", 40)), max_total),
    )
    return GameService(
        RoomRegistry(),
        SocketIONotifier(socketio),
        SocketIOScheduler(socketio),
        round_duration=int(cfg.get("ROUND_DURATION_SEC", 300)),
        start_delay=float(cfg.get("START_DELAY_SEC", 3)),
        tick_interval=float(cfg.get("TICK_INTERVAL_SEC", 1)),
        empty_room_ttl=float(cfg.get("EMPTY_ROOM_TTL_SEC", 10)),
        default_settings=defaults,
        max_total_cards=max_total,
    )


def _serve_client(app: Flask, build_dir: Path) -> None:
    """Serve a built single-page client; unknown paths fall back to index.html."""

    @app.get("/")
    def client_index():
        return send_from_directory(build_dir, "index.html")

    @app.get("/<path:path>")
    def client_asset(path: str):
        if (build_dir / path).is_file():
            return send_from_directory(build_dir, path)
        return send_from_directory(build_dir, "index.html")


def create_app(config_class: type = Config) -> tuple[Flask, SocketIO]:
    build_dir = Path(__file__).resolve().parents[2] / "client" / "build"
    has_client = build_dir.is_dir()

    app = Flask(
        __name__,
        static_folder=str(build_dir) if has_client else None,
        static_url_path="/" if has_client else None,
    )
    app.config.from_object(config_class)
    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": origins}})
    socketio = SocketIO(
        app,
        cors_allowed_origins=origins,
        async_mode=_pick_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    service = build_game_service(app, socketio)
    app.extensions[EXTENSION_KEY] = service

    for bp in (health_bp, rooms_bp, words_bp):
        app.register_blueprint(bp, url_prefix="/api")
    register_socketio_handlers(socketio, service, SessionStore())

    if has_client:
        _serve_client(app, build_dir)

    app.logger.info("wordclash ready async_mode=%s client=%s", socketio.async_mode, has_client)
    return app, socketio
