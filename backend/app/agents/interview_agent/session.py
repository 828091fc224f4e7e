"""Interview session — the six-step A/B wizard as an explicit state machine.

    NOT_STARTED ──start──▶ AWAITING_QUESTION(1)
    AWAITING_QUESTION(n) ──question──▶ PRESENTING_QUESTION(n)
    PRESENTING_QUESTION(n) ──commit, n < 6──▶ AWAITING_QUESTION(n+1)
    PRESENTING_QUESTION(6) ──commit──▶ FINALIZING ──blueprint──▶ COMPLETE
    AWAITING_QUESTION / FINALIZING ──fault──▶ FAILED ──commit/retry──▶ (same request)
    any phase except FINALIZING ──restart──▶ NOT_STARTED

One session drives one user's interview. Requests are awaited one at a time;
a reply that arrives after a restart is dropped.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from ...constants import COMPLETE_STEP, MAX_STEPS
from ...errors import GatewayError, InterviewRequestError, InterviewStateError, SchemaError
from ...schemas.blueprint_schema import BusinessBlueprint
from ...schemas.question_schema import HistoryItem, Question
from ...services.blueprint_store import BlueprintStore

logger = logging.getLogger(__name__)

_REQUEST_FAULTS = (GatewayError, SchemaError, InterviewRequestError)


class InterviewPhase(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_QUESTION = "awaiting_question"
    PRESENTING_QUESTION = "presenting_question"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    FAILED = "failed"


class InterviewBackend(Protocol):
    """Where questions and the blueprint come from (HTTP API, or a fake in tests)."""

    async def next_question(
        self, step: int, history: Sequence[HistoryItem], user_input: str
    ) -> Question: ...

    async def generate_blueprint(
        self, user_input: str, history: Sequence[HistoryItem]
    ) -> BusinessBlueprint: ...


class InterviewSession:
    """Client-side interview state: step counter, answer history, current question."""

    def __init__(
        self,
        backend: InterviewBackend,
        store: Optional[BlueprintStore] = None,
        user_input: str = "",
    ) -> None:
        self.backend = backend
        self.store = store if store is not None else BlueprintStore()
        self._user_input = user_input
        # bumped on start/restart so in-flight replies from an older run are ignored
        self._epoch = 0
        self._reset()

    def _reset(self) -> None:
        self._phase = InterviewPhase.NOT_STARTED
        self._current_step = 1
        self._history: List[HistoryItem] = []
        self._question: Optional[Question] = None
        self._selected_key: Optional[str] = None
        self._blueprint: Optional[BusinessBlueprint] = None
        self._failure_reason: Optional[str] = None
        self._pending: Optional[str] = None

    # ── Read-only view ──────────────────────────────────────────────────

    @property
    def phase(self) -> InterviewPhase:
        return self._phase

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def history(self) -> Tuple[HistoryItem, ...]:
        return tuple(self._history)

    @property
    def user_input(self) -> str:
        return self._user_input

    @property
    def question(self) -> Optional[Question]:
        return self._question

    @property
    def selected_key(self) -> Optional[str]:
        return self._selected_key

    @property
    def blueprint(self) -> Optional[BusinessBlueprint]:
        return self._blueprint

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def can_commit(self) -> bool:
        """The "continue" action is enabled only once an option is selected."""
        if self._phase is InterviewPhase.FAILED:
            return True
        return self._phase is InterviewPhase.PRESENTING_QUESTION and self._selected_key is not None

    @property
    def can_close(self) -> bool:
        return self._phase is not InterviewPhase.FINALIZING

    @property
    def progress_percent(self) -> float:
        return min(self._current_step, MAX_STEPS) / MAX_STEPS * 100

    # ── Intents ─────────────────────────────────────────────────────────

    def set_user_input(self, text: str) -> None:
        if self._phase is not InterviewPhase.NOT_STARTED:
            raise InterviewStateError("The description cannot change once the interview has started")
        self._user_input = text

    async def start(self) -> None:
        """Begin the interview and request question 1."""
        if self._phase is not InterviewPhase.NOT_STARTED:
            raise InterviewStateError(f"Cannot start from {self._phase.value}; restart first")
        self._epoch += 1
        self._history = []
        await self._request_question(1)

    def select_option(self, key: str) -> None:
        if self._phase is not InterviewPhase.PRESENTING_QUESTION or self._question is None:
            raise InterviewStateError("No question is being presented")
        if self._question.option(key) is None:
            raise InterviewStateError(f"Unknown option key: {key!r}")
        self._selected_key = key

    async def commit(self) -> None:
        """Record the selected option and move on.

        From FAILED this re-issues the request that failed instead.
        """
        if self._phase is InterviewPhase.FAILED:
            await self.retry()
            return
        if self._phase is not InterviewPhase.PRESENTING_QUESTION or self._question is None:
            raise InterviewStateError(f"Nothing to commit in {self._phase.value}")
        if self._selected_key is None:
            raise InterviewStateError("Select an option before continuing")

        option = self._question.option(self._selected_key)
        self._history.append(
            HistoryItem(
                step=self._current_step,
                question=self._question.question,
                choice=option.key,
                option_label=option.label,
            )
        )

        if self._current_step >= MAX_STEPS:
            await self._finalize()
        else:
            await self._request_question(self._current_step + 1)

    async def retry(self) -> None:
        if self._phase is not InterviewPhase.FAILED:
            raise InterviewStateError("Only a failed request can be retried")
        if self._pending == "blueprint":
            await self._finalize()
        else:
            await self._request_question(self._current_step)

    def restart(self) -> None:
        """Drop everything except the user's description. Not allowed while finalizing."""
        if self._phase is InterviewPhase.FINALIZING:
            raise InterviewStateError("Cannot restart while the blueprint is being generated")
        self._epoch += 1
        self._reset()

    def cancel(self) -> None:
        """Close the wizard — same effect as restart."""
        self.restart()

    # ── Transitions ─────────────────────────────────────────────────────

    def _fail(self, exc: Exception) -> None:
        logger.error("Interview request failed at step %d: %s", self._current_step, exc)
        self._failure_reason = str(exc) or exc.__class__.__name__
        self._phase = InterviewPhase.FAILED

    async def _request_question(self, step: int) -> None:
        self._phase = InterviewPhase.AWAITING_QUESTION
        self._current_step = step
        self._question = None
        self._selected_key = None
        self._failure_reason = None
        self._pending = "question"
        epoch = self._epoch

        try:
            question = await self.backend.next_question(step, tuple(self._history), self._user_input)
        except _REQUEST_FAULTS as exc:
            if epoch == self._epoch:
                self._fail(exc)
            return
        except Exception as exc:
            if epoch == self._epoch:
                self._fail(exc)
            raise

        if epoch != self._epoch:
            logger.info("Discarding question for step %d — session was restarted", step)
            return

        self._current_step = self._resync_step(step, question.step)
        self._question = question
        self._pending = None
        self._phase = InterviewPhase.PRESENTING_QUESTION

    def _resync_step(self, requested: int, returned: int) -> int:
        """Trust the step the model returned when it keeps history strictly increasing."""
        if returned == requested:
            return requested
        last_step = self._history[-1].step if self._history else 0
        if last_step < returned <= MAX_STEPS:
            logger.warning("Re-synchronizing step %d → %d from model reply", requested, returned)
            return returned
        logger.warning("Ignoring out-of-order step %d from model (expected %d)", returned, requested)
        return requested

    async def _finalize(self) -> None:
        self._phase = InterviewPhase.FINALIZING
        self._current_step = COMPLETE_STEP
        self._question = None
        self._selected_key = None
        self._failure_reason = None
        self._pending = "blueprint"

        try:
            blueprint = await self.backend.generate_blueprint(self._user_input, tuple(self._history))
            self.store.save(blueprint)
        except _REQUEST_FAULTS as exc:
            self._fail(exc)
            return
        except Exception as exc:
            # leave FINALIZING so restart() stays possible
            self._fail(exc)
            raise

        self._blueprint = blueprint
        self._pending = None
        self._phase = InterviewPhase.COMPLETE
