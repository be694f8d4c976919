# render.py
"""
Projects a Session onto one of two screens (catalog or problem); the Jinja
templates turn a screen into HTML. Nothing here touches the network or mutates
the session. Forms on the page post to the routers, which dispatch session
triggers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from fastapi.templating import Jinja2Templates

from schemas.problems import Problem
from schemas.screens import (
    AnswerForm,
    CatalogScreen,
    ExplanationPanel,
    ProblemCard,
    ProblemScreen,
    ResultPanel,
)
from session import Phase, Session, View
from visual import derive_visual

Screen = Union[CatalogScreen, ProblemScreen]

_TONES = {"easy", "medium", "hard"}


def difficulty_tone(difficulty: Optional[str]) -> str:
    return difficulty if difficulty in _TONES else "neutral"


def _display(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _card(problem: Problem) -> ProblemCard:
    return ProblemCard(
        id=problem.id,
        title=problem.title,
        story=problem.story,
        difficulty=problem.difficulty,
        tone=difficulty_tone(problem.difficulty),
    )


def render(session: Session) -> Screen:
    if session.view is View.CATALOG or session.selected is None:
        loading = session.busy and not session.problems
        empty = not session.busy and not session.problems
        return CatalogScreen(
            notice=session.notice,
            stats=session.stats,
            accuracy_text=_display(session.stats.accuracy) if session.stats else None,
            loading=loading,
            empty=empty,
            can_retry=empty,
            problems=[_card(p) for p in session.problems],
        )

    screen = ProblemScreen(
        notice=session.notice,
        problem=_card(session.selected),
        visual=derive_visual(session.selected),
    )
    result = session.result
    if result is None:
        screen.answer_form = AnswerForm(
            answer=session.answer,
            disabled=session.busy,
            can_submit=bool(session.answer.strip()) and not session.busy,
        )
        return screen

    screen.result = ResultPanel(
        is_correct=result.is_correct,
        message=result.explanation.message,
        reasoning=result.explanation.reasoning,
        encouragement=result.explanation.encouragement,
        user_answer=None if result.is_correct else _display(result.user_answer),
        correct_answer=None if result.is_correct else _display(result.correct_answer),
        steps=list(result.steps),
        can_request_explanation=(
            session.phase is Phase.GRADED
            and not session.busy
            and session.detailed_explanation is None
        ),
        loading=session.busy,
    )
    if session.phase is Phase.EXPLANATION_SHOWN:
        detail = session.detailed_explanation
        screen.explanation = ExplanationPanel(
            hints=list(detail.hints),
            related_concepts=list(detail.related_concepts),
        )
    return screen


# ---------- HTML ----------

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def template_for(screen: Screen) -> str:
    return "catalog.html" if isinstance(screen, CatalogScreen) else "problem.html"
