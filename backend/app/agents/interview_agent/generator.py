"""Interview generator — question and blueprint generation via the Model Gateway.

Flow (per call):
  1. Build the prompt (pure)
  2. gateway.complete(prompt, schema_hint=<system prompt>)
  3. extract_json → normalize_question / normalize_blueprint

The gateway is always passed in explicitly; nothing here reads credentials.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ...constants import dimension_for_step
from ...schemas.blueprint_schema import BusinessBlueprint
from ...schemas.question_schema import HistoryItem, Question
from .normalizer import extract_json, normalize_blueprint, normalize_question, summarize_question
from .prompts import (
    BLUEPRINT_SYSTEM_PROMPT,
    QUESTION_SYSTEM_PROMPT,
    build_blueprint_prompt,
    build_question_prompt,
)


class TextCompleter(Protocol):
    """Anything with the ModelGateway.complete signature."""

    async def complete(self, prompt: str, schema_hint: Optional[str] = None) -> str: ...


async def generate_question(
    gateway: TextCompleter,
    *,
    step: int,
    user_input: str,
    history: Sequence[HistoryItem],
) -> Question:
    """Generate the A/B question for ``step``.

    Raises
    ------
    ValueError
        If a direct caller passes a ``step`` outside 1..MAX_STEPS.
    GatewayError
        If the model backend fails.
    SchemaError
        If the model did not return exactly two options.
    """
    dimension = dimension_for_step(step)
    print(f"🧭 [QUESTION] Generating step {step} — dimension={dimension.id} (history={len(history)})")

    prompt = build_question_prompt(step, dimension.label, user_input, history)
    raw = await gateway.complete(prompt, schema_hint=QUESTION_SYSTEM_PROMPT)

    question = normalize_question(extract_json(raw), fallback_step=step)
    if question.step != step:
        print(f"⚠️  [QUESTION] Model returned step {question.step} for requested step {step}")

    print(f"✅ [QUESTION] {summarize_question(question)}")
    return question


async def generate_blueprint(
    gateway: TextCompleter,
    *,
    user_input: str,
    history: Sequence[HistoryItem],
) -> BusinessBlueprint:
    """Synthesize the business blueprint from the full interview.

    Only GatewayError can escape — malformed content is normalized to defaults.
    """
    print(f"🛠️ [BLUEPRINT] Generating blueprint from {len(history)} answers")

    prompt = build_blueprint_prompt(user_input, history)
    raw = await gateway.complete(prompt, schema_hint=BLUEPRINT_SYSTEM_PROMPT)

    blueprint = normalize_blueprint(extract_json(raw))
    print(f"✅ [BLUEPRINT] Blueprint generated — title={blueprint.title[:60]!r}")
    return blueprint
