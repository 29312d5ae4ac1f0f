from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from lens_pipeline.prompt_library import (
    LEVEL_KEYS,
    QUADRANT_KEYS,
    STATE_KEYS,
    build_levels_instructions,
    build_quadrants_instructions,
    build_states_instructions,
)

DEFAULT_MODEL = "gpt-4.1-nano"
DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class LensSpec:
    """
    One lens: static instructions plus the model knobs sent upstream.

    `expected_keys` is the ordered key set the model is asked to return. The
    pipeline passes the result through without enforcing it.
    """

    name: str
    instructions: str
    model: str = DEFAULT_MODEL
    temperature: Optional[float] = DEFAULT_TEMPERATURE
    max_output_tokens: Optional[int] = None
    expected_keys: Tuple[str, ...] = ()


def _builtin_specs() -> Tuple[LensSpec, ...]:
    return (
        LensSpec(
            name="quadrants",
            instructions=build_quadrants_instructions(QUADRANT_KEYS),
            max_output_tokens=2000,
            expected_keys=QUADRANT_KEYS,
        ),
        LensSpec(
            name="levels",
            instructions=build_levels_instructions(LEVEL_KEYS),
            max_output_tokens=2500,
            expected_keys=LEVEL_KEYS,
        ),
        LensSpec(
            name="states",
            instructions=build_states_instructions(STATE_KEYS),
            max_output_tokens=2000,
            expected_keys=STATE_KEYS,
        ),
    )


def build_lens_specs(*, model_override: Optional[str] = None) -> Mapping[str, LensSpec]:
    """
    Build the read-only lens table keyed by route name.

    `model_override` (from `LENS_MODEL`) is applied here, once, at startup.
    """
    table: Dict[str, LensSpec] = {}
    for spec in _builtin_specs():
        if model_override:
            spec = replace(spec, model=model_override)
        table[spec.name] = spec
    return MappingProxyType(table)


def get_lens_spec(specs: Mapping[str, LensSpec], name: str) -> Optional[LensSpec]:
    key = str(name or "").strip().lower()
    if not key:
        return None
    return specs.get(key)


__all__ = ["DEFAULT_MODEL", "LensSpec", "build_lens_specs", "get_lens_spec"]
