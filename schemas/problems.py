# schemas/problems.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_if_none(v: Any) -> Any:
    return "" if v is None else v


def _empty_if_none(v: Any) -> Any:
    return [] if v is None else v


# ---------- Catalog ----------


class Problem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, frozen=True)

    # The service is Mongo-backed and sends "_id"; accept plain "id" too
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str = ""
    story: str = ""
    difficulty: str = ""
    visual_type: Optional[str] = Field(default=None, alias="visualType")
    operation: Optional[str] = None
    # Counts stay raw here; visual.py owns the coercion policy
    initial_count: Any = Field(default=None, alias="initialCount")
    add_count: Any = Field(default=None, alias="addCount")
    remove_count: Any = Field(default=None, alias="removeCount")

    blank_display_text = field_validator("title", "story", "difficulty", mode="before")(
        _blank_if_none
    )


# ---------- Progress ----------


class UserProgressStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_score: int = Field(default=0, alias="totalScore")
    accuracy: float = 0
    total_correct: int = Field(default=0, alias="totalCorrect")


# ---------- Submission ----------


class SubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    problem_id: str = Field(alias="problemId")
    user_answer: str = Field(alias="userAnswer")
    user_id: str = Field(alias="userId")
    time_taken: int = Field(alias="timeTaken")


class Explanation(BaseModel):
    message: str = ""
    reasoning: str = ""
    encouragement: str = ""

    blank_text = field_validator("message", "reasoning", "encouragement", mode="before")(
        _blank_if_none
    )


class SubmissionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_correct: bool = Field(alias="isCorrect")
    # echoed by the grader; may come back as text or number
    user_answer: Optional[int | float | str] = Field(default=None, alias="userAnswer")
    correct_answer: Optional[int | float | str] = Field(default=None, alias="correctAnswer")
    explanation: Explanation = Field(default_factory=Explanation)
    steps: List[str] = Field(default_factory=list)

    # the attempt is already recorded server-side; a null here must not fail the submit
    @field_validator("explanation", mode="before")
    @classmethod
    def explanation_or_default(cls, v: Any) -> Any:
        return {} if v is None else v

    empty_steps = field_validator("steps", mode="before")(_empty_if_none)


# ---------- Explain ----------


class DetailedExplanation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hints: List[str] = Field(default_factory=list)
    related_concepts: List[str] = Field(default_factory=list, alias="relatedConcepts")

    empty_lists = field_validator("hints", "related_concepts", mode="before")(_empty_if_none)
