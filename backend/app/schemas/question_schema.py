"""Pydantic schemas for interview questions and answer history.

Wire format is camelCase (``whyThisFits``, ``optionLabel``, ``userInput``),
matching what the browser client sends and reads.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import MAX_STEPS

OptionKey = Literal["A", "B"]


class OptionDetails(BaseModel):
    """Expanded trade-off card content for one option."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    example: str = ""
    why_this_fits: str = Field("", alias="whyThisFits")


class Option(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: OptionKey
    label: str = ""
    summary: str = ""
    details: OptionDetails = Field(default_factory=OptionDetails)


class Question(BaseModel):
    """A single A/B trade-off question — always exactly two options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    step: int = Field(..., ge=1, le=MAX_STEPS)
    question: str = ""
    options: List[Option] = Field(..., min_length=2, max_length=2)

    def option(self, key: str) -> Optional[Option]:
        """Return the option carrying ``key``, or None."""
        for opt in self.options:
            if opt.key == key:
                return opt
        return None


class HistoryItem(BaseModel):
    """One committed answer. Frozen — history is append-only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    step: int = Field(..., ge=1, le=MAX_STEPS)
    question: str
    choice: OptionKey
    option_label: str = Field(..., alias="optionLabel")


# ── Endpoint envelopes ──────────────────────────────────────────────────

class NextQuestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    step: int = Field(..., ge=1, description="1-based step being requested")
    history: List[HistoryItem] = Field(default_factory=list)
    user_input: str = Field("", alias="userInput")


class NextQuestionResponse(BaseModel):
    success: bool = True
    done: bool = False
    question: Optional[Question] = None
