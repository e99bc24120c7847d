import pytest

from backend.app.api import config


@pytest.mark.parametrize("raw,expected", [(None, 10), ("25", 25), ("abc", 10), ("0", 10), ("101", 10)])
def test_actions_per_page(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("ACTIONS_PER_PAGE", raising=False)
    else:
        monkeypatch.setenv("ACTIONS_PER_PAGE", raw)
    assert config.actions_per_page() == expected


def test_header_placeholders_default_and_override(monkeypatch):
    monkeypatch.delenv("ACTIONS_BUSINESS_ID", raising=False)
    monkeypatch.delenv("ACTIONS_USER_ID", raising=False)
    assert config.header_business_id() == "1153"
    assert config.header_user_id() == "163"

    monkeypatch.setenv("ACTIONS_BUSINESS_ID", "9")
    assert config.header_business_id() == "9"


def test_log_level_is_upper_cased(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert config.log_level() == "DEBUG"


def test_server_host_and_port(monkeypatch):
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    assert config.server_host() == "127.0.0.1"
    assert config.server_port() == 8000

    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9100")
    assert config.server_host() == "0.0.0.0"
    assert config.server_port() == 9100

    monkeypatch.setenv("PORT", "http")
    assert config.server_port() == 8000


def test_run_serves_the_app_with_uvicorn(monkeypatch):
    from backend.app import main

    monkeypatch.delenv("HOST", raising=False)
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("PORT", "9100")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    main.run()

    assert calls == [(main.app, {"host": "127.0.0.1", "port": 9100, "log_level": "warning"})]
