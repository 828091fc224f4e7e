"""Centralized constants shared by the interview pipeline and routes.

This module is the SINGLE SOURCE OF TRUTH for the trade-off dimension
catalog and the blueprint field set. Reused by:
  - Prompt builders
  - Response normalizer
  - Interview session (client-side state machine)
"""

from __future__ import annotations

from typing import NamedTuple


class Dimension(NamedTuple):
    id: str
    label: str


# ── Trade-off dimensions ────────────────────────────────────────────────
# Ordered. Step N of the interview asks about DIMENSIONS[N - 1].
# LOCKED — the interview length is derived from this list.

DIMENSIONS: tuple[Dimension, ...] = (
    Dimension("lifestyle_pace", "Business pace and lifestyle alignment"),
    Dimension("skills_vs_capital", "Skill-driven vs capital-driven approach"),
    Dimension("involvement_level", "Active involvement vs strategic oversight"),
    Dimension("digital_vs_physical", "Digital-first vs physical/local business"),
    Dimension("risk_profile", "Innovative vs proven business model"),
    Dimension("solo_vs_social", "Solo work vs client-facing work"),
)

MAX_STEPS: int = len(DIMENSIONS)

# current_step takes this value once the last question has been answered
COMPLETE_STEP: int = MAX_STEPS + 1

OPTION_KEYS: tuple[str, str] = ("A", "B")


def dimension_for_step(step: int) -> Dimension:
    """Return the dimension steering question ``step`` (1-based)."""
    if not 1 <= step <= MAX_STEPS:
        raise ValueError(f"step must be between 1 and {MAX_STEPS}, got {step}")
    return DIMENSIONS[step - 1]


# ── Blueprint field set (wire names) ────────────────────────────────────

BLUEPRINT_TEXT_FIELDS: tuple[str, ...] = (
    "title",
    "subtitle",
    "situationSummary",
    "recommendedDirection",
    "businessModelSummary",
)

BLUEPRINT_LIST_FIELDS: tuple[str, ...] = (
    "exampleOffers",
    "monetization",
    "howToFindCustomers",
    "stepByStepGuide",
    "dayOneActions",
    "first30Days",
    "keyRisks",
    "howToDeRisk",
    "growthLevers",
)

# Older field names the model (and earlier page versions) produced.
# Consulted only when the canonical key is absent.
BLUEPRINT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "situationSummary": ("howWeSeeYourSituation",),
    "businessModelSummary": ("businessSummary",),
    "exampleOffers": ("exampleOfferIdeas",),
    "howToFindCustomers": ("customerAcquisition",),
    "stepByStepGuide": ("executionSteps",),
    "dayOneActions": ("firstDayActions",),
    "first30Days": ("firstMonthPlan",),
    "keyRisks": ("risks",),
    "howToDeRisk": ("riskMitigation",),
    "growthLevers": ("scalingIdeas",),
}

# ── Client hand-off ─────────────────────────────────────────────────────
# Key of the local storage entry the results view reads.
BLUEPRINT_STORAGE_KEY: str = "nicheroot_blueprint"
