"""
Failure taxonomy for the lens pipeline.

Every failure is terminal for its request. Each kind maps to exactly one HTTP
status; `lens_api` turns these into responses in one place.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LensError(Exception):
    kind: str = "unexpected_failure"
    status_code: int = 500
    default_detail: str = "Unexpected server error"

    def __init__(self, detail: Any = None) -> None:
        self.detail = self.default_detail if detail is None else detail
        super().__init__(self.detail if isinstance(self.detail, str) else repr(self.detail))

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.detail}


class MethodNotAllowed(LensError):
    kind = "method_not_allowed"
    status_code = 405
    default_detail = "Method Not Allowed"


class InvalidInput(LensError):
    kind = "invalid_input"
    status_code = 400
    default_detail = "Missing input"


class MissingCredential(LensError):
    kind = "missing_credential"
    status_code = 500
    default_detail = "Server missing OpenAI API key"


class UpstreamUnreachable(LensError):
    kind = "upstream_unreachable"
    status_code = 502
    default_detail = "OpenAI API unreachable"


class UpstreamError(LensError):
    kind = "upstream_error"
    status_code = 502
    default_detail = "OpenAI API error"

    def __init__(self, detail: Any = None, *, upstream_status: Optional[int] = None, raw: Any = None) -> None:
        super().__init__(detail)
        self.upstream_status = upstream_status
        self.raw = raw


class MissingPayload(LensError):
    kind = "missing_payload"
    status_code = 502
    default_detail = "Missing output_text in OpenAI response"


class UnexpectedFailure(LensError):
    pass


__all__ = [
    "InvalidInput",
    "LensError",
    "MethodNotAllowed",
    "MissingCredential",
    "MissingPayload",
    "UnexpectedFailure",
    "UpstreamError",
    "UpstreamUnreachable",
]
