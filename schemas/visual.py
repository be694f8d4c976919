# schemas/visual.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class VisualToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    glyph: str
    to_remove: bool = False


class VisualPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    glyph: str
    operation: str
    # coerced counts; negatives are kept as-is
    initial_count: float
    add_count: float
    remove_count: float
    base_tokens: List[VisualToken]
    added_tokens: List[VisualToken]
    addition_caption: bool
    removal_caption: bool

    @property
    def addition_text(self) -> str:
        return f"+ {_fmt(self.add_count)} more" if self.addition_caption else ""

    @property
    def removal_text(self) -> str:
        # Intentionally blank until product settles the wording
        return ""


def _fmt(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)
