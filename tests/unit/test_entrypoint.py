"""
Unit tests for the server entry point.
"""

from fastapi import FastAPI

from vmake_ai_bot import __main__ as entrypoint
from vmake_ai_bot.config.settings import Settings


def run_main(monkeypatch, **overrides):
    settings = Settings(_env_file=None, api_port=4000, **overrides)
    calls = []
    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    entrypoint.main()
    assert len(calls) == 1
    return calls[0]


def test_development_reloads_from_factory_path(monkeypatch):
    app, kwargs = run_main(monkeypatch, environment="development", api_reload=True)

    assert app == "vmake_ai_bot.core.app:create_app"
    assert kwargs["factory"] is True
    assert kwargs["reload"] is True
    assert kwargs["port"] == 4000


def test_production_serves_built_app(monkeypatch):
    app, kwargs = run_main(monkeypatch, environment="production", api_reload=True)

    assert isinstance(app, FastAPI)
    assert kwargs["reload"] is False
    assert kwargs["log_level"] == "info"
