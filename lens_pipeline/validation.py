"""
Inbound request checks. Everything here runs before any upstream call.
"""

from __future__ import annotations

import json
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from lens_pipeline.errors import InvalidInput, MethodNotAllowed

WRITE_METHOD = "POST"


class LensRequest(BaseModel):
    """Inbound body: `{ "input": "<string>" }`."""

    model_config = ConfigDict(extra="ignore")

    # Kept verbatim; stripping is only used to test for emptiness.
    input: str

    @field_validator("input", mode="before")
    @classmethod
    def _require_text(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("input must be a string")
        if not v.strip():
            raise ValueError("input must not be blank")
        return v


def ensure_post(method: str) -> None:
    if str(method or "").strip().upper() != WRITE_METHOD:
        raise MethodNotAllowed()


def _decode_body(body: Union[bytes, str, None]) -> Any:
    if body is None:
        return {}
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInput() from exc
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as exc:
        raise InvalidInput() from exc


def parse_lens_request(body: Union[bytes, str, None]) -> LensRequest:
    """
    Parse a raw JSON body into a `LensRequest`.

    An empty body counts as `{}`. Any parse failure or a missing, non-string or
    whitespace-only `input` raises `InvalidInput`.
    """
    payload = _decode_body(body)
    if not isinstance(payload, dict):
        raise InvalidInput()
    try:
        return LensRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput() from exc


__all__ = ["LensRequest", "WRITE_METHOD", "ensure_post", "parse_lens_request"]
