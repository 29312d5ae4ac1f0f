from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from lens_api.responses import (
    REQUEST_ID_HEADER,
    lens_error_response,
    lens_success_response,
    unknown_lens_response,
)
from lens_pipeline.errors import LensError
from lens_pipeline.lens_specs import get_lens_spec
from lens_pipeline.orchestrator import LensTrace, PipelineStage, new_request_id

router = APIRouter(prefix="/v1/api/lens", tags=["lens"])
# Path the static frontend posts to.
compat_router = APIRouter(prefix="/.netlify/functions", tags=["lens"])

_OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

logger = logging.getLogger("lens_api.lens")


async def _handle(lens: str, request: Request) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
    spec = get_lens_spec(request.app.state.lens_specs, lens)
    if spec is None:
        return unknown_lens_response(lens, request_id=request_id)

    trace = LensTrace(request_id=request_id)
    body = await request.body() if request.method == "POST" else b""
    try:
        text = await request.app.state.pipeline.run(spec, request.method, body, trace=trace)
    except LensError as exc:
        resp = lens_error_response(exc, request_id=request_id)
    else:
        resp = lens_success_response(text, request_id=request_id)
    trace.advance(PipelineStage.RESPONDED)
    record = trace.as_log_record()
    record["status"] = resp.status_code
    logger.debug(json.dumps(record, separators=(",", ":")))
    return resp


@compat_router.post("/{lens}")
@router.post(
    "/{lens}",
    description=(
        "Reframe `input` through one lens (quadrants, levels, states). "
        "Returns the model's JSON verbatim: a mapping of lens keys to {paragraph, bullets}."
    ),
)
async def run_lens(lens: str, request: Request) -> Response:
    return await _handle(lens, request)


@compat_router.api_route("/{lens}", methods=_OTHER_METHODS, include_in_schema=False)
@router.api_route("/{lens}", methods=_OTHER_METHODS, include_in_schema=False)
async def reject_lens_method(lens: str, request: Request) -> Response:
    return await _handle(lens, request)
