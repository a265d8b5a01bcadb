from dotenv import load_dotenv

load_dotenv()

try:
    from wordclash.server import create_app
except ImportError:  # pragma: no cover
    from backend.wordclash.server import create_app

app, socketio = create_app()
