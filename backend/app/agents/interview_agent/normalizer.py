"""Response Normalizer — turns arbitrary model text into well-formed records.

  - extract_json        : never raises; unreadable text becomes {}
  - normalize_question  : raises SchemaError ONLY when there are not exactly
                          two options; everything else is defaulted
  - normalize_blueprint : never raises

Content-shape faults are logged at warning level and absorbed.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from ...constants import (
    BLUEPRINT_FIELD_ALIASES,
    BLUEPRINT_LIST_FIELDS,
    BLUEPRINT_TEXT_FIELDS,
    MAX_STEPS,
    OPTION_KEYS,
)
from ...errors import SchemaError
from ...schemas.blueprint_schema import BusinessBlueprint
from ...schemas.question_schema import Option, OptionDetails, Question

logger = logging.getLogger(__name__)

_TRAILING_COMMA = re.compile(r",\s*([}\]])")

# Option fields the model has been seen to emit under other names.
# canonical name → fallbacks, looked up in the same dict
_OPTION_FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "summary": ("description",),
}
_DETAILS_FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "whyThisFits": ("why_this_fits", "whyItFits"),
}


# ---------------------------------------------------------------------------
# JSON extraction
# ---------------------------------------------------------------------------
def extract_json(raw_text: Any) -> Dict[str, Any]:
    """Parse the JSON object embedded in ``raw_text``.

    Takes the span from the first '{' to the last '}', which also skips
    markdown fences and surrounding prose. Trailing commas are removed.
    Returns {} when there is no object or it does not parse.
    """
    if not isinstance(raw_text, str):
        return {}

    text = raw_text.strip().lstrip("\ufeff")
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        logger.warning("No JSON object found in model output (%d chars)", len(text))
        return {}

    candidate = _TRAILING_COMMA.sub(r"\1", text[start : end + 1])
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse JSON from model output: %s — raw: %r", exc, text[:300])
        return {}

    if not isinstance(parsed, dict):
        return {}
    return parsed


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------
def _lookup(obj: Mapping[str, Any], name: str, aliases: Mapping[str, tuple[str, ...]]) -> Any:
    if name in obj:
        return obj[name]
    for alias in aliases.get(name, ()):
        if alias in obj:
            return obj[alias]
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_step(value: Any) -> Optional[int]:
    """Return the step as an int in 1..MAX_STEPS, or None if it is unusable."""
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        # isdigit alone admits superscripts and other scripts int() refuses
        if not (text.isascii() and text.isdigit()):
            return None
        value = int(text)
    if isinstance(value, int) and 1 <= value <= MAX_STEPS:
        return value
    return None


# ---------------------------------------------------------------------------
# Question
# ---------------------------------------------------------------------------
def _normalize_option(raw: Any, key: str) -> Option:
    obj = _as_dict(raw)
    details = _as_dict(obj.get("details"))

    summary = _text(_lookup(obj, "summary", _OPTION_FIELD_ALIASES))
    if not summary:
        # the model often nests the short description under details
        summary = _text(details.get("description"))

    return Option(
        key=key,
        label=_text(obj.get("label")),
        summary=summary,
        details=OptionDetails(
            pros=_string_list(details.get("pros")),
            cons=_string_list(details.get("cons")),
            example=_text(details.get("example")),
            why_this_fits=_text(_lookup(details, "whyThisFits", _DETAILS_FIELD_ALIASES)),
        ),
    )


def normalize_question(obj: Any, fallback_step: int) -> Question:
    """Coerce a parsed model reply into a renderable `Question`.

    Keys are force-assigned "A" then "B" by position, whatever the model used.

    Raises
    ------
    SchemaError
        If ``options`` is not a list of exactly two entries.
    """
    data = _as_dict(obj)
    options = data.get("options")

    if not isinstance(options, list) or len(options) != len(OPTION_KEYS):
        count = len(options) if isinstance(options, list) else 0
        raise SchemaError(f"Question must have exactly two options A and B (got {count}).")

    raw_step = data.get("step")
    step = _coerce_step(raw_step)
    if step is None:
        logger.warning("Question step missing or invalid (%r) — using %d", raw_step, fallback_step)
        step = fallback_step

    return Question(
        step=step,
        question=_text(data.get("question")),
        options=[_normalize_option(raw, key) for raw, key in zip(options, OPTION_KEYS)],
    )


# ---------------------------------------------------------------------------
# Blueprint
# ---------------------------------------------------------------------------
def normalize_blueprint(obj: Any) -> BusinessBlueprint:
    """Build a `BusinessBlueprint` where every field is present and well-typed.

    Canonical keys win; historical aliases are consulted only when the
    canonical key is absent.
    """
    data = _as_dict(obj)
    clean: Dict[str, Any] = {}
    defaulted: List[str] = []

    for name in BLUEPRINT_TEXT_FIELDS:
        value = _lookup(data, name, BLUEPRINT_FIELD_ALIASES)
        if not isinstance(value, str):
            defaulted.append(name)
        clean[name] = _text(value)

    for name in BLUEPRINT_LIST_FIELDS:
        value = _lookup(data, name, BLUEPRINT_FIELD_ALIASES)
        if not isinstance(value, list):
            defaulted.append(name)
        clean[name] = _string_list(value)

    if defaulted:
        logger.warning("Blueprint fields defaulted: %s", ", ".join(defaulted))

    return BusinessBlueprint.model_validate(clean)


def summarize_question(question: Optional[Question]) -> str:
    """Short one-line description for progress logs."""
    if question is None:
        return "<none>"
    labels = " / ".join(opt.label or "?" for opt in question.options)
    return f"step={question.step} options=[{labels}]"
