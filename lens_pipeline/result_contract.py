"""
Opt-in conformance check of model output against the lens shape.

The pipeline returns model output verbatim and never rejects it on these
grounds; this only produces diagnostics for logging (`LENS_VALIDATE_RESULT`).
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Dict, List

import jsonschema

from lens_pipeline.lens_specs import LensSpec

_PANEL_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["paragraph", "bullets"],
    "properties": {
        "paragraph": {"type": "string"},
        "bullets": {"type": "array", "items": {"type": "string"}},
    },
}


def lens_result_schema(spec: LensSpec) -> Dict[str, Any]:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": list(spec.expected_keys),
        "properties": {k: _PANEL_SCHEMA for k in spec.expected_keys},
    }


@lru_cache(maxsize=16)
def _validator(spec: LensSpec) -> jsonschema.Validator:
    return jsonschema.Draft202012Validator(lens_result_schema(spec))


def check_lens_result(spec: LensSpec, text: str) -> List[str]:
    """
    Return problems found in `text`, empty when it matches the lens shape.
    """
    try:
        data = json.loads(text)
    except ValueError as exc:
        return [f"not valid JSON: {exc}"]
    problems: List[str] = []
    for err in sorted(_validator(spec).iter_errors(data), key=lambda e: list(e.path)):
        path = "/".join(str(p) for p in err.path) or "<root>"
        problems.append(f"{path}: {err.message}")
    return problems


__all__ = ["check_lens_result", "lens_result_schema"]
