from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_UPSTREAM_BASE_URL = "https://api.openai.com"
DEFAULT_UPSTREAM_PATH = "/v1/responses"
DEFAULT_TIMEOUT_SEC = 30.0


def _env_str(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _env_bool(name: str, default: bool = False) -> bool:
    v = _env_str(name).lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class LensConfig:
    """
    Process-wide settings, read once at startup and injected into the pipeline.

    An empty `api_key` is allowed here; the pipeline reports it per request.
    """

    api_key: str = ""
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    upstream_path: str = DEFAULT_UPSTREAM_PATH
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    model_override: Optional[str] = None
    validate_result: bool = False

    @property
    def upstream_url(self) -> str:
        return self.upstream_base_url.rstrip("/") + "/" + self.upstream_path.lstrip("/")


def load_config() -> LensConfig:
    """
    Build config from the environment:

    - `OPENAI_API_KEY` upstream credential
    - `LENS_UPSTREAM_BASE_URL` / `LENS_UPSTREAM_PATH` completion endpoint
    - `LENS_UPSTREAM_TIMEOUT_SEC=30` overall deadline for one upstream call
    - `LENS_MODEL` replaces the model of every lens
    - `LENS_VALIDATE_RESULT=1` logs a warning when model output misses the lens schema
    """
    return LensConfig(
        api_key=_env_str("OPENAI_API_KEY"),
        upstream_base_url=_env_str("LENS_UPSTREAM_BASE_URL") or DEFAULT_UPSTREAM_BASE_URL,
        upstream_path=_env_str("LENS_UPSTREAM_PATH") or DEFAULT_UPSTREAM_PATH,
        timeout_sec=_env_float("LENS_UPSTREAM_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
        model_override=_env_str("LENS_MODEL") or None,
        validate_result=_env_bool("LENS_VALIDATE_RESULT", default=False),
    )


__all__ = ["LensConfig", "load_config"]
