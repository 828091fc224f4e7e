"""Locked Pydantic schema for the business blueprint.

Every text field is a string and every list field a list of strings.
Do NOT add or remove fields without updating constants.BLUEPRINT_*_FIELDS.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .question_schema import HistoryItem


class BusinessBlueprint(BaseModel):
    """Terminal artifact of the interview."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    subtitle: str = ""

    situation_summary: str = Field("", alias="situationSummary")
    recommended_direction: str = Field("", alias="recommendedDirection")
    business_model_summary: str = Field("", alias="businessModelSummary")

    example_offers: List[str] = Field(default_factory=list, alias="exampleOffers")
    monetization: List[str] = Field(default_factory=list)
    how_to_find_customers: List[str] = Field(default_factory=list, alias="howToFindCustomers")
    step_by_step_guide: List[str] = Field(default_factory=list, alias="stepByStepGuide")
    day_one_actions: List[str] = Field(default_factory=list, alias="dayOneActions")
    first_30_days: List[str] = Field(default_factory=list, alias="first30Days")
    key_risks: List[str] = Field(default_factory=list, alias="keyRisks")
    how_to_de_risk: List[str] = Field(default_factory=list, alias="howToDeRisk")
    growth_levers: List[str] = Field(default_factory=list, alias="growthLevers")


class GenerateBlueprintRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_input: str = Field("", alias="userInput")
    history: List[HistoryItem] = Field(default_factory=list)


class GenerateBlueprintResponse(BaseModel):
    success: bool = True
    blueprint: BusinessBlueprint


class ErrorResponse(BaseModel):
    """Failure envelope shared by both interview endpoints."""

    success: bool = False
    error: str
