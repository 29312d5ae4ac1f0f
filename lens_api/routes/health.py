from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {"ok": True, "service": "integral-lens-service", "ts": int(time.time() * 1000)}


@router.get("/v1/api/lenses")
async def lenses(request: Request) -> Dict[str, Any]:
    """
    Lens names with the ordered keys each lens is asked to return.
    """
    specs = request.app.state.lens_specs
    return {
        "ok": True,
        "lenses": [
            {"name": s.name, "model": s.model, "expectedKeys": list(s.expected_keys)}
            for s in specs.values()
        ],
    }
