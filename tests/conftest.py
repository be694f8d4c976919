from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from gateway import BackendGateway, GatewayError
from schemas.problems import (
    DetailedExplanation,
    Problem,
    SubmissionResult,
    UserProgressStats,
)

BACKEND_URL = "http://backend.test/api"

PROBLEMS: List[Dict[str, Any]] = [
    {
        "_id": "p1",
        "title": "Apple Snack",
        "story": "Mia has 5 apples. She eats 2. How many are left?",
        "difficulty": "easy",
        "visualType": "apples",
        "operation": "subtraction",
        "initialCount": 5,
        "removeCount": 2,
    },
    {
        "_id": "p2",
        "title": "Cookie Jar",
        "story": "There are 3 cookies in the jar. Dad adds 4 more.",
        "difficulty": "medium",
        "visualType": "cookies",
        "operation": "addition",
        "initialCount": "3",
        "addCount": 4,
    },
]


def _expected(raw: Dict[str, Any]) -> int:
    initial = int(raw.get("initialCount") or 0)
    if raw.get("operation") == "addition":
        return initial + int(raw.get("addCount") or 0)
    return initial - int(raw.get("removeCount") or 0)


def make_backend(problems: Optional[List[Dict[str, Any]]] = None) -> FastAPI:
    """In-memory stand-in for the remote word problem service."""
    problems = PROBLEMS if problems is None else problems
    backend = FastAPI()
    backend.state.calls = []
    backend.state.scores = {}

    def find(pid: str) -> Optional[Dict[str, Any]]:
        return next((p for p in problems if p.get("_id") == pid), None)

    @backend.get("/api/problems")
    def list_problems():
        backend.state.calls.append(("GET", "/problems"))
        return {"data": problems}

    @backend.get("/api/progress/{user_id}")
    def progress(user_id: str):
        backend.state.calls.append(("GET", f"/progress/{user_id}"))
        attempts, correct = backend.state.scores.get(user_id, (0, 0))
        accuracy = round(correct * 100 / attempts) if attempts else 0
        return {
            "data": {
                "stats": {"totalScore": correct * 10, "accuracy": accuracy, "totalCorrect": correct}
            }
        }

    @backend.post("/api/submit")
    def submit(body: Dict[str, Any]):
        backend.state.calls.append(("POST", "/submit", body))
        problem = find(body.get("problemId"))
        if problem is None:
            return JSONResponse(status_code=404, content={"error": "Problem not found"})
        expected = _expected(problem)
        is_correct = str(body.get("userAnswer")).strip() == str(expected)
        attempts, correct = backend.state.scores.get(body["userId"], (0, 0))
        backend.state.scores[body["userId"]] = (attempts + 1, correct + int(is_correct))
        return {
            "data": {
                "isCorrect": is_correct,
                "userAnswer": body.get("userAnswer"),
                "correctAnswer": expected,
                "explanation": {
                    "message": "Great job!" if is_correct else "Not quite!",
                    "reasoning": f"The answer is {expected}.",
                    "encouragement": "Keep going!",
                },
                "steps": ["Read the story", "Find the numbers", f"Answer: {expected}"],
            }
        }

    @backend.get("/api/explain/{problem_id}")
    def explain(problem_id: str):
        backend.state.calls.append(("GET", f"/explain/{problem_id}"))
        if find(problem_id) is None:
            return JSONResponse(status_code=404, content={"error": "Problem not found"})
        return {
            "data": {
                "hints": ["Count the items", "Cross out the eaten ones"],
                "relatedConcepts": ["subtraction", "counting"],
            }
        }

    return backend


@pytest.fixture
def backend() -> FastAPI:
    return make_backend()


@pytest.fixture
def gateway(backend: FastAPI) -> BackendGateway:
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=backend))
    return BackendGateway(base_url=BACKEND_URL, client=client)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.5):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class FakeGateway:
    """
    Scripted gateway. ``fail[name]`` makes a call raise; ``gates[name]`` (an
    asyncio.Event) holds a call in flight until it is set.
    """

    base_url = "fake://backend"

    def __init__(self, problems: Optional[List[Dict[str, Any]]] = None):
        raw = PROBLEMS if problems is None else problems
        self.problems = [Problem.model_validate(p) for p in raw]
        self.calls: List[tuple] = []
        self.fail: Dict[str, GatewayError] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.stats = UserProgressStats(totalScore=10, accuracy=100, totalCorrect=1)
        self.result = SubmissionResult.model_validate(
            {
                "isCorrect": True,
                "userAnswer": 3,
                "correctAnswer": 3,
                "explanation": {
                    "message": "Great job!",
                    "reasoning": "5 - 2 = 3",
                    "encouragement": "Keep going!",
                },
                "steps": ["Start with 5", "Take away 2", "3 are left"],
            }
        )
        self.explanation = DetailedExplanation(
            hints=["Count what is left"], related_concepts=["subtraction"]
        )

    async def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        err = self.fail.get(name)
        if err is not None:
            raise err

    async def aclose(self) -> None:
        self.closed = True

    def count(self, name: str) -> int:
        return sum(1 for c in self.calls if c[0] == name)

    async def list_problems(self):
        await self._call("list_problems")
        return list(self.problems)

    async def get_progress(self, user_id):
        await self._call("get_progress", user_id)
        return self.stats

    async def submit_answer(self, problem_id, user_answer, user_id, time_taken):
        await self._call("submit_answer", problem_id, user_answer, user_id, time_taken)
        return self.result

    async def get_explanation(self, problem_id):
        await self._call("get_explanation", problem_id)
        return self.explanation


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
