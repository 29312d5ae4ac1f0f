import json
import logging

from fastapi.testclient import TestClient

from lens_api.http_logging import _redact
from lens_api.main import create_app


def test_redact_hides_secrets_and_user_text():
    out = _redact({"input": "my secret idea", "Authorization": "Bearer x", "nested": [{"api_key": "k", "n": 1}]})
    assert out == {"input": "<14 chars>", "Authorization": "***", "nested": [{"api_key": "***", "n": 1}]}


def test_middleware_logs_one_redacted_line(monkeypatch, caplog, config, stub):
    monkeypatch.setenv("LENS_HTTP_LOG", "1")
    monkeypatch.setenv("LENS_HTTP_LOG_HEADERS", "1")
    client = TestClient(create_app(config=config, client=stub))

    with caplog.at_level(logging.INFO, logger="lens_api.http"):
        resp = client.post(
            "/v1/api/lens/levels",
            json={"input": "board games"},
            headers={"Authorization": "Bearer caller-token", "X-Request-Id": "req-1"},
        )
    assert resp.status_code == 200

    lines = [r.getMessage() for r in caplog.records if r.name == "lens_api.http"]
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["id"] == "req-1"
    assert record["method"] == "POST"
    assert record["path"] == "/v1/api/lens/levels"
    assert record["status"] == 200
    assert record["request"]["body"] == {"input": "<11 chars>"}
    assert record["request"]["headers"]["authorization"] == "***"


def test_middleware_is_off_by_default(monkeypatch, caplog, config, stub):
    monkeypatch.delenv("LENS_HTTP_LOG", raising=False)
    client = TestClient(create_app(config=config, client=stub))
    with caplog.at_level(logging.INFO, logger="lens_api.http"):
        client.get("/health")
    assert not [r for r in caplog.records if r.name == "lens_api.http"]
