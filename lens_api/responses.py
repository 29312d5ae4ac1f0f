"""
The single place where pipeline outcomes become HTTP responses.
"""

from __future__ import annotations

from typing import Dict

from fastapi.responses import JSONResponse, PlainTextResponse, Response

from lens_pipeline.errors import LensError, MethodNotAllowed

REQUEST_ID_HEADER = "X-Request-Id"


def _headers(request_id: str) -> Dict[str, str]:
    return {REQUEST_ID_HEADER: request_id} if request_id else {}


def lens_success_response(text: str, *, request_id: str = "") -> Response:
    # Body is the model output exactly as extracted; it is not re-encoded.
    return Response(content=text, status_code=200, media_type="application/json", headers=_headers(request_id))


def lens_error_response(exc: LensError, *, request_id: str = "") -> Response:
    if isinstance(exc, MethodNotAllowed):
        headers = {**_headers(request_id), "Allow": "POST"}
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=headers)
    return JSONResponse(exc.to_body(), status_code=exc.status_code, headers=_headers(request_id))


def unknown_lens_response(name: str, *, request_id: str = "") -> Response:
    return JSONResponse({"error": f"Unknown lens: {name}"}, status_code=404, headers=_headers(request_id))


__all__ = ["REQUEST_ID_HEADER", "lens_error_response", "lens_success_response", "unknown_lens_response"]
