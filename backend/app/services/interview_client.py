"""HTTP interview backend — the client side of the two interview endpoints.

Used by `InterviewSession` to reach the API the same way the browser wizard
does. Every failure (transport error, non-2xx, success=false, unreadable
body) becomes an `InterviewRequestError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

import httpx
from pydantic import ValidationError

from ..errors import InterviewRequestError
from ..schemas.blueprint_schema import BusinessBlueprint
from ..schemas.question_schema import HistoryItem, Question

logger = logging.getLogger(__name__)

NEXT_QUESTION_PATH = "/api/next-question"
GENERATE_BLUEPRINT_PATH = "/api/generate-blueprint"


def _history_payload(history: Sequence[HistoryItem]) -> list[Dict[str, Any]]:
    return [item.model_dump(by_alias=True) for item in history]


class HttpInterviewBackend:
    """Calls the interview API through an injected `httpx.AsyncClient`.

    The client carries the base URL (and, in tests, the transport).
    No timeout is added here beyond what the client was built with.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.post(path, json=body)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", path, exc)
            raise InterviewRequestError(f"Could not reach the server: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success or not data.get("success"):
            error = data.get("error") or f"HTTP {response.status_code}"
            logger.error("Request to %s failed: %s", path, error)
            raise InterviewRequestError(str(error))
        return data

    async def next_question(
        self,
        step: int,
        history: Sequence[HistoryItem],
        user_input: str,
    ) -> Question:
        data = await self._post(
            NEXT_QUESTION_PATH,
            {"step": step, "history": _history_payload(history), "userInput": user_input},
        )
        if data.get("done"):
            raise InterviewRequestError(f"Server reported the interview as done at step {step}")
        try:
            return Question.model_validate(data.get("question"))
        except ValidationError as exc:
            raise InterviewRequestError("Server returned an unreadable question") from exc

    async def generate_blueprint(
        self,
        user_input: str,
        history: Sequence[HistoryItem],
    ) -> BusinessBlueprint:
        data = await self._post(
            GENERATE_BLUEPRINT_PATH,
            {"userInput": user_input, "history": _history_payload(history)},
        )
        try:
            return BusinessBlueprint.model_validate(data.get("blueprint"))
        except ValidationError as exc:
            raise InterviewRequestError("Server returned an unreadable blueprint") from exc
