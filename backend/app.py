import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def _wants_eventlet(configured: str) -> bool:
    # eventlet is not installed on Windows or Python 3.13+, see pyproject.toml.
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return False
    return configured in ("", "eventlet")


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    if _wants_eventlet(os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()):
        import eventlet

        # Must run before Flask or the game service import threading.
        eventlet.monkey_patch()

    try:
        from wordclash.server import create_app
    except ImportError:  # pragma: no cover
        from backend.wordclash.server import create_app

    app, socketio = create_app()

    socketio.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3001")),
        debug=_env_flag("FLASK_DEBUG"),
        use_reloader=_env_flag("FLASK_USE_RELOADER"),
        allow_unsafe_werkzeug=_env_flag("ALLOW_UNSAFE_WERKZEUG", "1"),
    )


if __name__ == "__main__":
    main()
