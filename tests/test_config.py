from api.config import API_URL_ENV, CONFIG_PATH, DEFAULT_TIMEOUTS, load_settings


def test_bundled_config_loads(monkeypatch):
    monkeypatch.delenv(API_URL_ENV, raising=False)
    settings = load_settings(CONFIG_PATH)

    assert settings.api_url == "http://localhost:8000"
    assert settings.timeout("analyze") == 30.0
    assert settings.timeout("stored_shap") == 5.0
    assert settings.max_sample_explanations == 4


def test_missing_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(API_URL_ENV, raising=False)
    settings = load_settings(tmp_path / "nope.yaml")

    assert settings.api_url == "http://localhost:8000"
    assert settings.timeouts == DEFAULT_TIMEOUTS


def test_yaml_values_and_env_override(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("api_url: http://from-file:9000/\ntimeouts:\n  analyze: 45\n")

    monkeypatch.delenv(API_URL_ENV, raising=False)
    settings = load_settings(cfg)
    assert settings.api_url == "http://from-file:9000"
    assert settings.timeout("analyze") == 45.0
    assert settings.timeout("contact") == 10.0

    monkeypatch.setenv(API_URL_ENV, "https://epochguard.example/")
    assert load_settings(cfg).api_url == "https://epochguard.example"


def test_unknown_call_gets_short_timeout():
    assert load_settings(CONFIG_PATH).timeout("whatever") == DEFAULT_TIMEOUTS["metrics"]
