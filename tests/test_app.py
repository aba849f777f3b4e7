"""Application factory."""
from portal import app as app_module


def test_factory_without_settings_configures_logging(monkeypatch, tmp_path):
    monkeypatch.setenv("SECRET_KEY", "factory-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("GAMES_DIR", str(tmp_path / "games"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    levels = []
    monkeypatch.setattr(app_module, "setup_logging", lambda level: levels.append(level))

    app = app_module.create_app()

    assert levels == ["DEBUG"]
    assert app.state.settings.secret_key == "factory-secret"


def test_factory_with_settings_leaves_logging_alone(monkeypatch, settings, media):
    calls = []
    monkeypatch.setattr(app_module, "setup_logging", lambda **kw: calls.append(kw))

    app_module.create_app(settings, media_host=media)

    assert calls == []
