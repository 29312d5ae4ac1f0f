"""
Lens query pipeline (Validate -> Dispatch -> Normalize).

One pipeline serves every lens; the `LensSpec` passed to `run` is the only thing
that differs between them. Requests share no mutable state.
"""

from __future__ import annotations

import enum
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Union

from lens_pipeline.config import LensConfig
from lens_pipeline.errors import LensError, MissingCredential, UnexpectedFailure
from lens_pipeline.lens_specs import LensSpec
from lens_pipeline.normalizer import extract_payload
from lens_pipeline.result_contract import check_lens_result
from lens_pipeline.upstream import CompletionClient, UpstreamResponse, build_outbound_request
from lens_pipeline.validation import ensure_post, parse_lens_request

logger = logging.getLogger("lens.pipeline")

# The verbatim model output returned to the caller (expected, not verified, to be lens JSON).
LensResult = str


class PipelineStage(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    AWAITING_UPSTREAM = "awaiting_upstream"
    NORMALIZED = "normalized"
    FAILED = "failed"
    RESPONDED = "responded"


class UpstreamClient(Protocol):
    async def create_response(self, payload: Dict[str, Any]) -> UpstreamResponse: ...


def new_request_id(prefix: str = "lens") -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


@dataclass
class LensTrace:
    """Per-request record of pipeline stages; discarded after the response."""

    lens: str = ""
    request_id: str = field(default_factory=new_request_id)
    stages: List[PipelineStage] = field(default_factory=list)
    failure_kind: Optional[str] = None
    input_chars: int = 0
    started_at: float = field(default_factory=time.perf_counter)

    def advance(self, stage: PipelineStage) -> None:
        self.stages.append(stage)

    def fail(self, exc: LensError) -> None:
        self.failure_kind = exc.kind
        self.advance(PipelineStage.FAILED)

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)

    def as_log_record(self) -> Dict[str, Any]:
        return {
            "id": self.request_id,
            "lens": self.lens,
            "stages": [s.value for s in self.stages],
            "outcome": self.failure_kind or "ok",
            "input_chars": self.input_chars,
            "dur_ms": self.elapsed_ms,
        }


class LensPipeline:
    def __init__(self, config: LensConfig, client: Optional[UpstreamClient] = None) -> None:
        self.config = config
        self.client: UpstreamClient = client if client is not None else CompletionClient(config)

    async def run(
        self,
        spec: LensSpec,
        method: str,
        body: Union[bytes, str, None],
        *,
        trace: Optional[LensTrace] = None,
    ) -> LensResult:
        """
        Run one lens request end to end.

        Returns the extracted model text, or raises a `LensError` subclass. The
        method is checked before the body is looked at, and the body and
        credential are checked before any upstream call.
        """
        trace = trace if trace is not None else LensTrace()
        trace.lens = spec.name
        trace.advance(PipelineStage.RECEIVED)
        try:
            result = await self._run(spec, method, body, trace)
        except LensError as exc:
            trace.fail(exc)
            self._log(trace, exc)
            raise
        except Exception as exc:
            wrapped = UnexpectedFailure(str(exc) or type(exc).__name__)
            trace.fail(wrapped)
            logger.exception("lens pipeline crashed id=%s lens=%s", trace.request_id, spec.name)
            raise wrapped from exc
        self._log(trace, None)
        return result

    async def _run(
        self,
        spec: LensSpec,
        method: str,
        body: Union[bytes, str, None],
        trace: LensTrace,
    ) -> LensResult:
        ensure_post(method)
        request = parse_lens_request(body)
        trace.input_chars = len(request.input)
        if not self.config.api_key:
            raise MissingCredential()
        trace.advance(PipelineStage.VALIDATED)

        payload = build_outbound_request(spec, request)
        trace.advance(PipelineStage.DISPATCHED)
        trace.advance(PipelineStage.AWAITING_UPSTREAM)
        reply = await self.client.create_response(payload)

        text = extract_payload(reply.status, reply.body)
        trace.advance(PipelineStage.NORMALIZED)

        if self.config.validate_result:
            problems = check_lens_result(spec, text)
            if problems:
                logger.warning(
                    "lens result does not match schema id=%s lens=%s problems=%s",
                    trace.request_id,
                    spec.name,
                    problems[:5],
                )
        return text

    def _log(self, trace: LensTrace, exc: Optional[LensError]) -> None:
        record = trace.as_log_record()
        if exc is None:
            logger.info(json.dumps(record, separators=(",", ":")))
            return
        record["status"] = exc.status_code
        upstream_status = getattr(exc, "upstream_status", None)
        if upstream_status is not None:
            record["upstream_status"] = upstream_status
        level = logging.WARNING if exc.status_code >= 500 else logging.INFO
        logger.log(level, json.dumps(record, separators=(",", ":"), default=str))


__all__ = ["LensPipeline", "LensResult", "LensTrace", "PipelineStage", "UpstreamClient", "new_request_id"]
