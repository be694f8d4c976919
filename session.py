# session.py
"""
Client-side quiz session: what the learner is looking at and what they have done.

All backend traffic goes through a gateway; every call is guarded by one busy
flag so a submission and an explanation fetch can never overlap. Gateway
failures turn into a notice and leave the state as it was.
"""

from __future__ import annotations

import logging
import math
import time
from enum import Enum
from typing import Callable, List, Optional, Protocol

from gateway import GatewayError
from schemas.problems import DetailedExplanation, Problem, SubmissionResult, UserProgressStats

logger = logging.getLogger(__name__)

LOAD_FAILED_MSG = "Failed to load problems. Make sure the backend server is running!"
SUBMIT_FAILED_MSG = "Failed to submit answer. Check if the server is running!"
EXPLAIN_FAILED_MSG = "Failed to load the detailed explanation. Please try again."
PROGRESS_FAILED_MSG = "Could not refresh your progress."


class Gateway(Protocol):
    async def list_problems(self) -> List[Problem]: ...

    async def get_progress(self, user_id: str) -> Optional[UserProgressStats]: ...

    async def submit_answer(
        self, problem_id: str, user_answer: str, user_id: str, time_taken: int
    ) -> SubmissionResult: ...

    async def get_explanation(self, problem_id: str) -> DetailedExplanation: ...


class View(str, Enum):
    CATALOG = "catalog"
    PROBLEM = "problem"


class Phase(str, Enum):
    CATALOG = "catalog"
    ANSWERING = "answering"
    GRADED = "graded"
    EXPLANATION_SHOWN = "explanation_shown"


def new_user_id(clock: Callable[[], float] = time.time) -> str:
    return f"user_{int(clock() * 1000)}"


class Session:
    def __init__(self, gateway: Gateway, clock: Callable[[], float] = time.time):
        self.gateway = gateway
        self.clock = clock
        self.user_id = new_user_id(clock)

        self.view = View.CATALOG
        self.problems: List[Problem] = []
        self.stats: Optional[UserProgressStats] = None
        self.selected: Optional[Problem] = None
        self.answer = ""
        self.result: Optional[SubmissionResult] = None
        self.detailed_explanation: Optional[DetailedExplanation] = None
        self.show_explanation = False
        self.started_at: Optional[float] = None
        self.busy = False
        self.notice: Optional[str] = None
        # bumped on every selection/exit; responses from an older epoch are dropped
        self._epoch = 0

    @property
    def phase(self) -> Phase:
        if self.view is View.CATALOG or self.selected is None:
            return Phase.CATALOG
        if self.result is None:
            return Phase.ANSWERING
        if self.show_explanation and self.detailed_explanation is not None:
            return Phase.EXPLANATION_SHOWN
        return Phase.GRADED

    def find_problem(self, problem_id: str) -> Optional[Problem]:
        return next((p for p in self.problems if p.id == problem_id), None)

    def dismiss_notice(self) -> None:
        self.notice = None

    def _clear_problem_state(self) -> None:
        self.answer = ""
        self.result = None
        self.detailed_explanation = None
        self.show_explanation = False

    # ---------- Catalog ----------

    async def load(self) -> None:
        await self._fetch_problems()
        await self.refresh_progress()

    async def retry_load(self) -> bool:
        if self.phase is not Phase.CATALOG or self.problems or self.busy:
            return False
        await self._fetch_problems()
        return True

    async def _fetch_problems(self) -> None:
        if self.busy:
            return
        self.busy = True
        try:
            self.problems = await self.gateway.list_problems()
            logger.info("Loaded %d problems", len(self.problems))
        except GatewayError as e:
            self.notice = e.detail or LOAD_FAILED_MSG
        finally:
            self.busy = False

    async def refresh_progress(self) -> None:
        # read-only, not gated by the busy flag
        try:
            stats = await self.gateway.get_progress(self.user_id)
        except GatewayError as e:
            self.notice = e.detail or PROGRESS_FAILED_MSG
            return
        if stats is not None:
            self.stats = stats

    def select(self, problem_id: str) -> bool:
        problem = self.find_problem(problem_id)
        if problem is None:
            self.notice = "That problem is no longer available."
            return False
        self._epoch += 1
        self.selected = problem
        self.view = View.PROBLEM
        self._clear_problem_state()
        self.notice = None
        self.started_at = self.clock()
        return True

    # ---------- Problem ----------

    def set_answer(self, text: str) -> bool:
        if self.phase is not Phase.ANSWERING or self.busy:
            return False
        self.answer = text
        return True

    def elapsed_seconds(self) -> int:
        if self.started_at is None:
            return 0
        return math.floor(self.clock() - self.started_at)

    async def submit(self, answer_text: Optional[str] = None) -> bool:
        if self.phase is not Phase.ANSWERING or self.busy:
            return False
        text = self.answer if answer_text is None else answer_text
        if not text.strip():
            return False
        self.answer = text

        problem = self.selected
        epoch = self._epoch
        time_taken = self.elapsed_seconds()
        self.busy = True
        try:
            try:
                result = await self.gateway.submit_answer(
                    problem.id, self.answer, self.user_id, time_taken
                )
            except GatewayError as e:
                self.notice = e.detail or SUBMIT_FAILED_MSG
                return False

            if epoch != self._epoch:
                logger.debug("Dropping stale submission result for %s", problem.id)
                return False
            self.result = result
            self.notice = None
            await self.refresh_progress()
            return True
        finally:
            self.busy = False

    async def request_explanation(self) -> bool:
        if self.phase is not Phase.GRADED or self.busy:
            return False
        if self.detailed_explanation is not None:
            return False

        problem = self.selected
        epoch = self._epoch
        self.busy = True
        try:
            explanation = await self.gateway.get_explanation(problem.id)
        except GatewayError as e:
            self.notice = e.detail or EXPLAIN_FAILED_MSG
            return False
        finally:
            self.busy = False

        if epoch != self._epoch:
            logger.debug("Dropping stale explanation for %s", problem.id)
            return False
        self.detailed_explanation = explanation
        self.show_explanation = True
        return True

    async def return_to_catalog(self) -> bool:
        if self.view is not View.PROBLEM:
            return False
        self._epoch += 1
        self.view = View.CATALOG
        self.selected = None
        self.started_at = None
        self._clear_problem_state()
        await self.refresh_progress()
        return True
