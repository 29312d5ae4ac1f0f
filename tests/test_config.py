from lens_pipeline.config import DEFAULT_TIMEOUT_SEC, load_config


def test_load_config_reads_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-env  ")
    monkeypatch.setenv("LENS_UPSTREAM_BASE_URL", "http://localhost:9000/")
    monkeypatch.setenv("LENS_UPSTREAM_TIMEOUT_SEC", "12.5")
    monkeypatch.setenv("LENS_MODEL", "gpt-5")
    monkeypatch.setenv("LENS_VALIDATE_RESULT", "yes")
    cfg = load_config()
    assert cfg.api_key == "sk-env"
    assert cfg.upstream_url == "http://localhost:9000/v1/responses"
    assert cfg.timeout_sec == 12.5
    assert cfg.model_override == "gpt-5"
    assert cfg.validate_result is True


def test_load_config_defaults(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "LENS_UPSTREAM_BASE_URL",
        "LENS_UPSTREAM_PATH",
        "LENS_UPSTREAM_TIMEOUT_SEC",
        "LENS_MODEL",
        "LENS_VALIDATE_RESULT",
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = load_config()
    assert cfg.api_key == ""
    assert cfg.upstream_url == "https://api.openai.com/v1/responses"
    assert cfg.timeout_sec == DEFAULT_TIMEOUT_SEC
    assert cfg.model_override is None
    assert cfg.validate_result is False


def test_bad_timeout_uses_default(monkeypatch):
    monkeypatch.setenv("LENS_UPSTREAM_TIMEOUT_SEC", "soon")
    assert load_config().timeout_sec == DEFAULT_TIMEOUT_SEC
    monkeypatch.setenv("LENS_UPSTREAM_TIMEOUT_SEC", "-1")
    assert load_config().timeout_sec == DEFAULT_TIMEOUT_SEC
