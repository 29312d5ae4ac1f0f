"""
Outbound call to the hosted completion service (Responses API).

One POST per lens request, no retries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import anyio
import httpx

from lens_pipeline.config import LensConfig
from lens_pipeline.errors import UpstreamUnreachable
from lens_pipeline.lens_specs import LensSpec
from lens_pipeline.validation import LensRequest

logger = logging.getLogger("lens.upstream")


@dataclass(frozen=True)
class UpstreamResponse:
    status: int
    body: Any


def build_outbound_request(spec: LensSpec, request: LensRequest) -> Dict[str, Any]:
    """
    Instructions and user input travel as separate fields; the input is never
    merged into the instruction text.
    """
    payload: Dict[str, Any] = {
        "model": spec.model,
        "instructions": spec.instructions,
        "input": request.input,
    }
    if spec.temperature is not None:
        payload["temperature"] = spec.temperature
    if spec.max_output_tokens is not None:
        payload["max_output_tokens"] = spec.max_output_tokens
    return payload


def _decode_reply(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if resp.status_code >= 400:
            # Kept raw for the error detail.
            return resp.text
        raise UpstreamUnreachable(f"Malformed response from OpenAI API (status {resp.status_code})") from exc


class CompletionClient:
    def __init__(
        self,
        config: LensConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def create_response(self, payload: Dict[str, Any]) -> UpstreamResponse:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        timeout = float(self.config.timeout_sec)
        try:
            with anyio.fail_after(timeout):
                async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                    resp = await client.post(self.config.upstream_url, json=payload, headers=headers)
        except TimeoutError as exc:
            logger.warning("upstream deadline exceeded url=%s timeout_sec=%s", self.config.upstream_url, timeout)
            raise UpstreamUnreachable(f"OpenAI API timed out after {timeout:g}s") from exc
        except httpx.RequestError as exc:
            logger.warning("upstream transport error url=%s err=%r", self.config.upstream_url, exc)
            raise UpstreamUnreachable(f"OpenAI API unreachable: {type(exc).__name__}") from exc

        return UpstreamResponse(status=resp.status_code, body=_decode_reply(resp))


__all__ = ["CompletionClient", "UpstreamResponse", "build_outbound_request"]
