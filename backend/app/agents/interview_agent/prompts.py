"""Prompt templates for the interview question engine and blueprint synthesis.

System + User prompt separation. The system prompt is passed to the gateway
as the schema hint, which also switches on JSON response mode.
Both builders are pure: same inputs → same string.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ...constants import BLUEPRINT_LIST_FIELDS, BLUEPRINT_TEXT_FIELDS, MAX_STEPS
from ...schemas.question_schema import HistoryItem

QUESTION_SYSTEM_PROMPT = f"""You are the Question Engine for NicheRoot, an AI that matches people to the right business.
You ask exactly {MAX_STEPS} A/B trade-off questions, one at a time.

GOAL:
- Each question is tailored to the user's background, capital, constraints and previous choices.
- The questions progressively zoom in on a specific business direction.

CONTENT GUIDELINES:
- Clear, conversational language (not corporate, not cringe).
- Each option summary is 1-2 short sentences.
- Pros/cons: 2-4 bullet points each, focused on lifestyle, risk, time, and money.
- example: 1 concrete scenario that matches the user's field and capital.
- whyThisFits: 1-2 sentences on why this path could fit THIS user.

OUTPUT FORMAT:
You MUST respond with a single JSON object. No markdown, no explanation, no prose."""

BLUEPRINT_SYSTEM_PROMPT = """You are NicheRoot's blueprint writer. You turn a person's situation and their trade-off choices into a focused, executable business blueprint.

RULES:
- Be concrete and specific to THIS person's time, money, skills and choices.
- Every list item is a short, self-contained string.
- Never invent constraints the user did not state.

OUTPUT FORMAT:
You MUST respond with a single JSON object. No markdown, no explanation, no prose."""


_RULE = "─" * 32


def format_history(history: Sequence[HistoryItem]) -> List[Dict[str, Any]]:
    """Serialize answered steps as plain ``{step, question, choice, optionLabel}`` dicts."""
    return [
        {
            "step": item.step,
            "question": item.question,
            "choice": item.choice,
            "optionLabel": item.option_label,
        }
        for item in history
    ]


def _question_schema(step: int) -> str:
    option = {
        "key": "A",
        "label": "short label",
        "summary": "1-2 sentences",
        "details": {
            "pros": ["pro1", "pro2"],
            "cons": ["con1", "con2"],
            "example": "one short real example",
            "whyThisFits": "personalized explanation for THIS user",
        },
    }
    option_b = dict(option, key="B")
    schema = {
        "step": step,
        "question": "Your personalized question...",
        "options": [option, option_b],
    }
    return json.dumps(schema, indent=2, ensure_ascii=False)


def _blueprint_schema() -> str:
    schema: Dict[str, Any] = {name: "..." for name in BLUEPRINT_TEXT_FIELDS}
    schema.update({name: ["...", "..."] for name in BLUEPRINT_LIST_FIELDS})
    return json.dumps(schema, indent=2, ensure_ascii=False)


def build_question_prompt(
    step: int,
    dimension_label: str,
    user_input: str,
    history: Sequence[HistoryItem],
) -> str:
    """Build the user prompt for question ``step`` about one dimension only."""
    previous = json.dumps(format_history(history), indent=2, ensure_ascii=False)

    return f"""You are NicheRoot, an elite business decision engine.
Your job: generate ONE unique, personalized A/B question (step {step} of {MAX_STEPS}) about THIS dimension:

"{dimension_label}"

{_RULE}
USER STORY (USE HEAVILY)
{_RULE}
{user_input}

{_RULE}
PREVIOUS ANSWERS
{_RULE}
{previous}

{_RULE}
STRICT RULES
{_RULE}
1. The question MUST be about the current dimension ONLY.
2. It MUST feel personal and specific to the user's life.
3. It MUST NOT repeat the structure of any previous question.
4. The two options MUST represent STRONG OPPOSITE trade-offs, never near-duplicates.
5. There are EXACTLY two options, keyed "A" and "B".
6. Return ONLY this JSON:

{_question_schema(step)}"""


def build_blueprint_prompt(user_input: str, history: Sequence[HistoryItem]) -> str:
    """Build the user prompt for the final blueprint synthesis."""
    choices = json.dumps(format_history(history), indent=2, ensure_ascii=False)

    return f"""Generate a structured business blueprint for this person.

{_RULE}
USER INPUT
{_RULE}
{user_input}

{_RULE}
CHOICES HISTORY
{_RULE}
{choices}

{_RULE}
REQUIRED OUTPUT
{_RULE}
Return ONLY valid JSON with exactly these keys and nothing else.
Text fields are strings; list fields are arrays of strings.

{_blueprint_schema()}"""
