"""
Instruction library for the integral lenses.

Static text only. The user's input is sent to the model as its own field and is
never interpolated here.
"""

from __future__ import annotations

import json
from typing import Iterable, List, Sequence


def _lines(*parts: str) -> str:
    out: List[str] = []
    for p in parts:
        t = str(p or "").strip()
        if t:
            out.append(t)
    return "\n\n".join(out).strip()


def _section(*, title: str, body: str) -> str:
    return _lines(title.strip(), str(body or "").strip())


def _paragraphs(items: Iterable[str]) -> str:
    return " ".join(str(i).strip() for i in items if str(i or "").strip())


def json_shape(keys: Sequence[str], *, bullets: int) -> str:
    """
    Render the exact return shape shown to the model, one key per line:

        {
          "UL": {"paragraph": "", "bullets": ["", "", ""]},
          ...
        }
    """
    empty = json.dumps({"paragraph": "", "bullets": [""] * bullets}, separators=(", ", ": "))
    rows = [f"  {json.dumps(k)}: {empty}" for k in keys]
    return "{\n" + ",\n".join(rows) + "\n}"


def _framing(*, count: int, noun: str, names: Sequence[str], plural: str) -> str:
    return _paragraphs(
        [
            f"Take the following input, and approach it from each of the {count} {plural} of Ken Wilber's integral theory ({', '.join(names)}).",
            f'Give no preamble like "in this {noun}..." or "from this perspective...".',
            f"Instead, just approach it as if that {noun} is the only important lens, and explain it from that perspective.",
        ]
    )


QUADRANT_KEYS = ("UL", "UR", "LL", "LR")
LEVEL_KEYS = ("Magenta", "Red", "Amber", "Orange", "Green", "Teal")
STATE_KEYS = ("Gross", "Subtle", "Causal", "Nondual")


def build_quadrants_instructions(keys: Sequence[str] = QUADRANT_KEYS, *, bullets: int = 3) -> str:
    return _lines(
        _paragraphs(
            [
                _framing(count=len(keys), noun="quadrant", names=keys, plural="quadrants"),
                'Use language inherent to that quadrant (e.g. use "I" in the UL, "we" in the LL, objective language in UR, systems language in LR, etc.).',
            ]
        ),
        f"From each perspective, you will write a short paragraph of around 200 words, followed by {bullets} bullet points "
        "of around 10 words each to give examples of how the input might show up in that quadrant.",
        _section(
            title="Your response will be parsed by code, so it's vital that your ONLY output should ALWAYS be a JSON in this exact format:",
            body=json_shape(keys, bullets=bullets),
        ),
    )


def build_levels_instructions(keys: Sequence[str] = LEVEL_KEYS, *, bullets: int = 5) -> str:
    return _lines(
        _paragraphs(
            [
                _framing(count=len(keys), noun="level", names=keys, plural="levels"),
                "Use language inherent to that level of development.",
            ]
        ),
        _paragraphs(
            [
                "Write as if you were a person whose center of gravity is in that level, NOT as a detached observer who is aware of the level's core characteristics and able to easily name them.",
                "Embody that persona to approach the input with their worldview and values.",
                "Remember that the characteristics of these levels are different depending on whether we're talking about individuals or businesses or whole societies;",
                "someone whose center of gravity is in Red today (like a gang member) will not necessarily act like or speak like someone from a whole Red society from 6000 years ago (jungle warlords),",
                "so take the input into consideration and be nuanced.",
            ]
        ),
        _paragraphs(
            [
                "From each level, write a short paragraph of around 100 words.",
                f'Then write {bullets} bullet points that are EXAMPLES of the "input" at that stage of development (10 words max per example).',
                'For instance, if the input is "board games", a good bullet for Orange would be "chess", for Red "hungry hungry hippos" and for Green "pandemic".',
                "The bullets are meant to show concrete and identifiable instances of how the input shows up for each level, or what kinds of the input each level most gravitates toward.",
            ]
        ),
        _section(title="Return a JSON in this exact format:", body=json_shape(keys, bullets=bullets)),
    )


def build_states_instructions(keys: Sequence[str] = STATE_KEYS, *, bullets: int = 3) -> str:
    return _lines(
        _paragraphs(
            [
                _framing(count=len(keys), noun="state", names=keys, plural="states of consciousness"),
                "Explain it as someone who is currently experiencing that state of consciousness.",
                "Use language inherent to that state.",
            ]
        ),
        f"From each state, write a short paragraph of around 100 words, followed by {bullets} bullet points that are concise "
        '"doorways" to experiencing the input through this state of awareness (10 words max per example).',
        _section(title="Return a JSON in this exact format:", body=json_shape(keys, bullets=bullets)),
    )


__all__ = [
    "LEVEL_KEYS",
    "QUADRANT_KEYS",
    "STATE_KEYS",
    "build_levels_instructions",
    "build_quadrants_instructions",
    "build_states_instructions",
    "json_shape",
]
