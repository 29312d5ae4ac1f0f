"""
Upstream reply normalization.

The completion service answers in one of two shapes depending on its version:

  flat:    {"output_text": "..."}
  nested:  {"output": [{"type": "message", "content": [{"type": "output_text", "text": "..."}]}]}

Either may instead report a failure (HTTP status >= 400 or a truthy `error`).
`classify_reply` decides which shape we have; `extract_payload` returns the
model's text verbatim or raises.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from lens_pipeline.errors import MissingPayload, UpstreamError


@dataclass(frozen=True)
class ErrorReply:
    status: int
    error: Any


@dataclass(frozen=True)
class FlatReply:
    text: str


@dataclass(frozen=True)
class NestedReply:
    output: List[Any]


@dataclass(frozen=True)
class EmptyReply:
    pass


UpstreamReply = Union[ErrorReply, FlatReply, NestedReply, EmptyReply]


def classify_reply(status: int, body: Any) -> UpstreamReply:
    if status >= 400:
        return ErrorReply(status=status, error=body)
    if not isinstance(body, dict):
        return EmptyReply()
    # The hosted API sends `"error": null` on success.
    if body.get("error"):
        return ErrorReply(status=status, error=body.get("error"))
    text = body.get("output_text")
    if isinstance(text, str) and text:
        return FlatReply(text=text)
    output = body.get("output")
    if isinstance(output, list):
        return NestedReply(output=output)
    return EmptyReply()


def _first_output_text(output: List[Any]) -> Optional[str]:
    for entry in output:
        if not isinstance(entry, dict) or entry.get("type") != "message":
            continue
        content = entry.get("content")
        if not isinstance(content, list):
            continue
        for node in content:
            if isinstance(node, dict) and node.get("type") == "output_text" and isinstance(node.get("text"), str):
                return node["text"]
    return None


def _error_detail(reply: ErrorReply) -> Any:
    if reply.status >= 400:
        raw = reply.error if isinstance(reply.error, str) else _compact(reply.error)
        return f"OpenAI API error ({reply.status}): {raw}"
    return reply.error


def _compact(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def extract_payload(status: int, body: Any) -> str:
    """
    Return the model's output text, exactly as produced.

    The text is expected to be lens JSON but is not parsed or checked here.
    """
    reply = classify_reply(status, body)
    if isinstance(reply, ErrorReply):
        raise UpstreamError(_error_detail(reply), upstream_status=reply.status, raw=reply.error)
    if isinstance(reply, FlatReply):
        return reply.text
    if isinstance(reply, NestedReply):
        text = _first_output_text(reply.output)
        if text:
            return text
    raise MissingPayload()


__all__ = [
    "EmptyReply",
    "ErrorReply",
    "FlatReply",
    "NestedReply",
    "UpstreamReply",
    "classify_reply",
    "extract_payload",
]
