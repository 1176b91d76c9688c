import pytest

from carbonsense.config import LogLevel, Settings


def test_defaults(monkeypatch):
    for key in ("PORT", "LOG_LEVEL", "REQUEST_TIMEOUT", "ML_PREDICT_URL"):
        monkeypatch.delenv(key, raising=False)
    s = Settings()
    assert s.server.port == 8000
    assert s.log_level is LogLevel.INFO
    assert s.services.request_timeout == 30
    assert s.services.ml_predict_url.endswith("/predict")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ORS_API_KEY", "abc")
    s = Settings()
    assert s.server.port == 9001
    assert s.log_level is LogLevel.DEBUG
    assert s.to_dict()["ors_configured"] is True


def test_invalid_port(monkeypatch):
    monkeypatch.setenv("PORT", "70000")
    with pytest.raises(ValueError, match="PORT"):
        Settings()


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        Settings()


def test_logging_config_console_only(monkeypatch):
    monkeypatch.setenv("LOG_TO_FILE", "false")
    config = Settings().get_logging_config()
    assert list(config["handlers"]) == ["console"]
    assert config["loggers"]["carbonsense"]["handlers"] == ["console"]
