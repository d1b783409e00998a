"""Tests for the application entry point."""

from adscout import main


def test_run_serves_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main.run()

    ((app, kwargs),) = calls
    assert app is main.app
    assert kwargs["host"] == main.settings.host
    assert kwargs["port"] == main.settings.port
