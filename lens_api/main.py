from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from lens_api.http_logging import install_http_logging
from lens_api.responses import REQUEST_ID_HEADER
from lens_api.routes import health, lens
from lens_pipeline.config import LensConfig, load_config
from lens_pipeline.lens_specs import build_lens_specs
from lens_pipeline.orchestrator import LensPipeline, UpstreamClient, new_request_id

logger = logging.getLogger("lens_api")


def _repo_root() -> Path:
    # `lens_api/main.py` lives at `<repo>/lens_api/main.py`
    return Path(__file__).resolve().parents[1]


def _configure_logging() -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=level if isinstance(getattr(logging, level, None), int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(config: Optional[LensConfig] = None, client: Optional[UpstreamClient] = None) -> FastAPI:
    """
    Build the service.

    `config` defaults to the process environment; `client` replaces the real
    upstream client (tests pass a stub).
    """
    # Load `.env` + `.env.local` when present (local dev convenience).
    load_dotenv(_repo_root() / ".env", override=False)
    load_dotenv(_repo_root() / ".env.local", override=False)
    _configure_logging()

    cfg = config if config is not None else load_config()
    if not cfg.api_key:
        logger.warning("OPENAI_API_KEY is not set; every lens request will fail with 500")

    app = FastAPI(title="integral-lens-service", version="0.1.0")
    app.state.config = cfg
    app.state.lens_specs = build_lens_specs(model_override=cfg.model_override)
    app.state.pipeline = LensPipeline(cfg, client=client)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id("err")
        logger.error("500 internal_error requestId=%s path=%s err=%r", request_id, request.url.path, exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Unhandled server error."},
            headers={REQUEST_ID_HEADER: request_id},
        )

    app.include_router(health.router)
    app.include_router(lens.router)
    app.include_router(lens.compat_router)
    install_http_logging(app)
    return app


app = create_app()
