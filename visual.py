# visual.py
"""
Derives the decorative visual aid for a word problem.

Upstream problem data is not trusted: counts may be missing, null, strings or
garbage. Anything that is not a finite number counts as 0. Negative values are
passed through untouched and simply produce no tokens.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List

from schemas.problems import Problem
from schemas.visual import VisualPlan, VisualToken

GLYPHS: Dict[str, str] = {
    "apples": "\U0001F34E",
    "cookies": "\U0001F36A",
    "cars": "\U0001F697",
    "gifts": "\U0001F381",
}
UNKNOWN_GLYPH = "❓"

ADDITION = "addition"
SUBTRACTION = "subtraction"


def coerce_count(raw: Any) -> float:
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return 0
        try:
            value = float(s)
        except ValueError:
            return 0
    else:
        return 0
    if not math.isfinite(value):
        return 0
    return int(value) if value.is_integer() else value


def glyph_for(visual_type: Any) -> str:
    if not isinstance(visual_type, str):
        return UNKNOWN_GLYPH
    return GLYPHS.get(visual_type, UNKNOWN_GLYPH)


def _length(count: float) -> int:
    # fractional counts truncate, negatives render nothing
    return max(0, int(count))


def derive_visual(problem: Problem) -> VisualPlan:
    initial = coerce_count(problem.initial_count)
    add = coerce_count(problem.add_count)
    remove = coerce_count(problem.remove_count)
    operation = problem.operation or ""
    glyph = glyph_for(problem.visual_type)

    subtracting = operation == SUBTRACTION
    base: List[VisualToken] = [
        VisualToken(index=i, glyph=glyph, to_remove=subtracting and i < remove)
        for i in range(_length(initial))
    ]

    adding = operation == ADDITION and add > 0
    added: List[VisualToken] = (
        [VisualToken(index=i, glyph=glyph) for i in range(_length(add))] if adding else []
    )

    return VisualPlan(
        glyph=glyph,
        operation=operation,
        initial_count=initial,
        add_count=add,
        remove_count=remove,
        base_tokens=base,
        added_tokens=added,
        addition_caption=adding,
        removal_caption=subtracting and remove > 0,
    )
