from __future__ import annotations

import copy
import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from lens_api.main import create_app
from lens_pipeline.config import LensConfig
from lens_pipeline.upstream import UpstreamResponse


LEVELS_RESULT = json.dumps(
    {
        key: {"paragraph": f"{key} sees board games this way.", "bullets": [f"{key} game {i}" for i in range(1, 6)]}
        for key in ("Magenta", "Red", "Amber", "Orange", "Green", "Teal")
    }
)


def nested_reply(text: str) -> Dict[str, Any]:
    return {
        "id": "resp_123",
        "object": "response",
        "error": None,
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            },
        ],
    }


class StubUpstream:
    """Deterministic stand-in for the completion service; records every payload."""

    def __init__(self, status: int = 200, body: Any = None) -> None:
        self.status = status
        self.body = body if body is not None else {"output_text": "{}"}
        self.calls: List[Dict[str, Any]] = []

    async def create_response(self, payload: Dict[str, Any]) -> UpstreamResponse:
        self.calls.append(copy.deepcopy(payload))
        return UpstreamResponse(status=self.status, body=copy.deepcopy(self.body))


@pytest.fixture
def config() -> LensConfig:
    return LensConfig(api_key="sk-test")


@pytest.fixture
def stub() -> StubUpstream:
    return StubUpstream(body=nested_reply(LEVELS_RESULT))


@pytest.fixture
def client(config: LensConfig, stub: StubUpstream) -> TestClient:
    return TestClient(create_app(config=config, client=stub))
