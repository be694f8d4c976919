# schemas/screens.py
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

from schemas.problems import UserProgressStats
from schemas.visual import VisualPlan

# ---------- Catalog screen ----------


class ProblemCard(BaseModel):
    id: str
    title: str
    story: str
    difficulty: str
    tone: str


class CatalogScreen(BaseModel):
    screen: Literal["catalog"] = "catalog"
    notice: Optional[str] = None
    stats: Optional[UserProgressStats] = None
    accuracy_text: Optional[str] = None
    loading: bool = False
    # true only when the load finished with nothing to show
    empty: bool = False
    can_retry: bool = False
    problems: List[ProblemCard] = []


# ---------- Problem screen ----------


class AnswerForm(BaseModel):
    answer: str
    disabled: bool
    can_submit: bool


class ResultPanel(BaseModel):
    is_correct: bool
    message: str
    reasoning: str
    encouragement: str
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    steps: List[str]
    can_request_explanation: bool
    loading: bool


class ExplanationPanel(BaseModel):
    hints: List[str]
    related_concepts: List[str]


class ProblemScreen(BaseModel):
    screen: Literal["problem"] = "problem"
    notice: Optional[str] = None
    problem: ProblemCard
    visual: VisualPlan
    answer_form: Optional[AnswerForm] = None
    result: Optional[ResultPanel] = None
    explanation: Optional[ExplanationPanel] = None
