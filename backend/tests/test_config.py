import importlib

from conftest import TestConfig
from wordclash import config
from wordclash.server import create_app


def test_fractional_start_delay_from_env(monkeypatch):
    monkeypatch.setenv("START_DELAY_SEC", "1.5")
    try:
        assert importlib.reload(config).Config.START_DELAY_SEC == 1.5
    finally:
        monkeypatch.delenv("START_DELAY_SEC")
        importlib.reload(config)


def test_start_delay_reaches_the_service():
    class HalfSecondStart(TestConfig):
        START_DELAY_SEC = 0.5

    app, _ = create_app(HalfSecondStart)
    assert app.extensions["wordclash"].start_delay == 0.5
