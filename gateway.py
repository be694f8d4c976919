# gateway.py
"""
Thin async client for the remote word problem service.

Every response is enveloped as {"data": ...}; failures may carry {"error": "..."}.
All failures surface as GatewayError so callers have a single thing to catch.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

import config
from schemas.problems import (
    DetailedExplanation,
    Problem,
    SubmissionResult,
    SubmitRequest,
    UserProgressStats,
)

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A failed backend call. ``detail`` is the server's own message, if it sent one."""

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(detail or "backend unavailable")
        self.detail = detail
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, str) and err.strip():
            return err
    return None


class BackendGateway:
    def __init__(
        self,
        base_url: str = config.API_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = config.HTTP_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s: %s", method, path, type(e).__name__, e)
            raise GatewayError() from e

        if response.is_error:
            detail = _error_detail(response)
            logger.warning("%s %s -> %s %s", method, path, response.status_code, detail or "")
            raise GatewayError(detail, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise GatewayError(status_code=response.status_code) from e

        if not isinstance(body, dict) or "data" not in body:
            logger.warning("%s %s returned no data envelope", method, path)
            raise GatewayError(status_code=response.status_code)
        return body["data"]

    async def list_problems(self) -> List[Problem]:
        data = await self._request("GET", "/problems")
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("GET /problems: expected a list, got %s", type(data).__name__)
            raise GatewayError()

        problems: List[Problem] = []
        for idx, raw in enumerate(data):
            try:
                problems.append(Problem.model_validate(raw))
            except ValidationError as e:
                # Skip the bad record instead of losing the whole catalog
                logger.warning("GET /problems: skipping item %d: %s", idx, e)
                continue
        return problems

    async def get_progress(self, user_id: str) -> Optional[UserProgressStats]:
        data = await self._request("GET", f"/progress/{user_id}")
        stats = data.get("stats") if isinstance(data, dict) else None
        if stats is None:
            return None
        try:
            return UserProgressStats.model_validate(stats)
        except ValidationError as e:
            logger.warning("GET /progress: malformed stats: %s", e)
            raise GatewayError() from e

    async def submit_answer(
        self, problem_id: str, user_answer: str, user_id: str, time_taken: int
    ) -> SubmissionResult:
        payload = SubmitRequest(
            problem_id=problem_id,
            user_answer=user_answer,
            user_id=user_id,
            time_taken=time_taken,
        ).model_dump(by_alias=True)
        data = await self._request("POST", "/submit", json=payload)
        try:
            return SubmissionResult.model_validate(data)
        except ValidationError as e:
            logger.warning("POST /submit: malformed result: %s", e)
            raise GatewayError() from e

    async def get_explanation(self, problem_id: str) -> DetailedExplanation:
        data = await self._request("GET", f"/explain/{problem_id}")
        try:
            return DetailedExplanation.model_validate(data)
        except ValidationError as e:
            logger.warning("GET /explain: malformed explanation: %s", e)
            raise GatewayError() from e
