"""Response normalizer tests — JSON extraction, question schema, blueprint totality."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging

import pytest

from app.agents.interview_agent.normalizer import (
    extract_json,
    normalize_blueprint,
    normalize_question,
)
from app.constants import BLUEPRINT_LIST_FIELDS, BLUEPRINT_TEXT_FIELDS
from app.errors import SchemaError


def _option(key="A", label="Freelance", **overrides):
    option = {
        "key": key,
        "label": label,
        "summary": "Sell your skills by the hour.",
        "details": {
            "pros": ["Fast start", "Low cost"],
            "cons": ["Time-bound income"],
            "example": "A designer taking Fiverr gigs",
            "whyThisFits": "You have 5 hours a week.",
        },
    }
    option.update(overrides)
    return option


# ===================================================================== #
#  extract_json                                                          #
# ===================================================================== #

class TestExtractJson:
    def test_plain_object(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_object(self):
        raw = '```json\n{"title": "Plan"}\n```'
        assert extract_json(raw) == {"title": "Plan"}

    def test_object_wrapped_in_prose(self):
        raw = 'Sure! Here is your JSON:\n{"step": 2, "question": "Q?"}\nHope this helps.'
        assert extract_json(raw) == {"step": 2, "question": "Q?"}

    def test_trailing_commas_removed(self):
        assert extract_json('{"a": [1, 2,], "b": 3,}') == {"a": [1, 2], "b": 3}

    def test_no_braces_returns_empty(self):
        assert extract_json("I cannot help with that.") == {}

    def test_invalid_json_returns_empty(self):
        assert extract_json("{this is: not json}") == {}

    def test_empty_and_non_string_return_empty(self):
        assert extract_json("") == {}
        assert extract_json(None) == {}
        assert extract_json(42) == {}

    def test_first_to_last_brace_span(self):
        raw = 'prefix {"outer": {"inner": true}} suffix'
        assert extract_json(raw) == {"outer": {"inner": True}}


# ===================================================================== #
#  normalize_question                                                    #
# ===================================================================== #

class TestNormalizeQuestion:
    @pytest.mark.parametrize("options", [
        [],
        [_option("A")],
        [_option("A"), _option("B"), _option("C")],
    ])
    def test_wrong_option_count_raises(self, options):
        with pytest.raises(SchemaError):
            normalize_question({"step": 1, "question": "Q?", "options": options}, fallback_step=1)

    @pytest.mark.parametrize("obj", [
        {},
        {"options": "A or B"},
        {"options": None},
        "not a dict",
    ])
    def test_missing_or_mistyped_options_raise(self, obj):
        with pytest.raises(SchemaError):
            normalize_question(obj, fallback_step=1)

    def test_keys_forced_positionally(self):
        obj = {"step": 1, "question": "Q?", "options": [_option("B", "First"), _option("x", "Second")]}
        question = normalize_question(obj, fallback_step=1)
        assert [opt.key for opt in question.options] == ["A", "B"]
        assert [opt.label for opt in question.options] == ["First", "Second"]

    @pytest.mark.parametrize("step", [None, "abc", 0, 9, True, 2.5, "²", "٣", "-1"])
    def test_invalid_step_uses_fallback(self, step):
        obj = {"question": "Q?", "options": [_option("A"), _option("B")]}
        if step is not None:
            obj["step"] = step
        assert normalize_question(obj, fallback_step=4).step == 4

    def test_numeric_string_step_accepted(self):
        obj = {"step": "3", "options": [_option("A"), _option("B")]}
        assert normalize_question(obj, fallback_step=1).step == 3

    def test_numeric_string_step_does_not_warn(self, caplog):
        obj = {"step": "3", "options": [_option("A"), _option("B")]}
        with caplog.at_level(logging.WARNING):
            normalize_question(obj, fallback_step=1)
        assert "step missing or invalid" not in caplog.text

    def test_fallback_step_warns(self, caplog):
        obj = {"step": "²", "options": [_option("A"), _option("B")]}
        with caplog.at_level(logging.WARNING):
            assert normalize_question(obj, fallback_step=2).step == 2
        assert "step missing or invalid" in caplog.text

    def test_returned_step_kept(self):
        obj = {"step": 5, "options": [_option("A"), _option("B")]}
        assert normalize_question(obj, fallback_step=4).step == 5

    def test_option_fields_defaulted(self):
        obj = {"step": 1, "options": ["garbage", {"label": 7, "details": "nope"}]}
        question = normalize_question(obj, fallback_step=1)
        assert question.question == ""
        for opt in question.options:
            assert opt.label == ""
            assert opt.summary == ""
            assert opt.details.pros == []
            assert opt.details.cons == []
            assert opt.details.example == ""
            assert opt.details.why_this_fits == ""

    def test_snake_case_and_nested_description_aliases(self):
        legacy = {
            "key": "A",
            "label": "Local shop",
            "details": {
                "description": "Open a small physical store.",
                "pros": ["Walk-in trade", 3, None],
                "cons": [],
                "why_this_fits": "You like meeting people.",
            },
        }
        question = normalize_question({"step": 4, "options": [legacy, _option("B")]}, fallback_step=4)
        first = question.options[0]
        assert first.summary == "Open a small physical store."
        assert first.details.why_this_fits == "You like meeting people."
        assert first.details.pros == ["Walk-in trade"]

    def test_wire_shape_is_camel_case(self):
        question = normalize_question({"step": 1, "options": [_option("A"), _option("B")]}, fallback_step=1)
        dumped = question.model_dump(by_alias=True)
        assert "whyThisFits" in dumped["options"][0]["details"]


# ===================================================================== #
#  normalize_blueprint                                                   #
# ===================================================================== #

def _assert_total(blueprint):
    dumped = blueprint.model_dump(by_alias=True)
    for name in BLUEPRINT_TEXT_FIELDS:
        assert isinstance(dumped[name], str), name
    for name in BLUEPRINT_LIST_FIELDS:
        assert isinstance(dumped[name], list), name
        assert all(isinstance(item, str) for item in dumped[name]), name
    return dumped


class TestNormalizeBlueprint:
    def test_wrong_types_defaulted(self):
        dumped = _assert_total(normalize_blueprint({"title": 42, "monetization": "x"}))
        assert dumped["title"] == ""
        assert dumped["monetization"] == []
        assert dumped["subtitle"] == ""
        assert dumped["growthLevers"] == []

    @pytest.mark.parametrize("obj", [
        None,
        {},
        [],
        "text",
        {"title": None, "keyRisks": {"a": 1}},
        {"exampleOffers": [1, 2.0, None, {"x": 1}, ["nested"]]},
    ])
    def test_never_raises(self, obj):
        _assert_total(normalize_blueprint(obj))

    def test_valid_fields_kept(self):
        obj = {
            "title": "Weekend Design Studio",
            "subtitle": "Small, steady, online",
            "situationSummary": "5 hours a week, $200 budget.",
            "monetization": ["Retainers", "Templates"],
            "first30Days": ["Define offer", "Land 2 clients"],
        }
        blueprint = normalize_blueprint(obj)
        assert blueprint.title == "Weekend Design Studio"
        assert blueprint.situation_summary == "5 hours a week, $200 budget."
        assert blueprint.monetization == ["Retainers", "Templates"]
        assert blueprint.first_30_days == ["Define offer", "Land 2 clients"]

    def test_non_string_list_items_filtered(self):
        blueprint = normalize_blueprint({"keyRisks": ["Burnout", 3, None, "Churn"]})
        assert blueprint.key_risks == ["Burnout", "Churn"]

    def test_legacy_aliases_mapped(self):
        obj = {
            "howWeSeeYourSituation": "Busy parent.",
            "businessSummary": "Productized service.",
            "risks": ["Low demand"],
            "riskMitigation": ["Pre-sell"],
            "scalingIdeas": ["Hire a VA"],
            "firstMonthPlan": ["Week 1: research"],
        }
        blueprint = normalize_blueprint(obj)
        assert blueprint.situation_summary == "Busy parent."
        assert blueprint.business_model_summary == "Productized service."
        assert blueprint.key_risks == ["Low demand"]
        assert blueprint.how_to_de_risk == ["Pre-sell"]
        assert blueprint.growth_levers == ["Hire a VA"]
        assert blueprint.first_30_days == ["Week 1: research"]

    def test_canonical_key_wins_over_alias(self):
        blueprint = normalize_blueprint({"keyRisks": ["Canonical"], "risks": ["Legacy"]})
        assert blueprint.key_risks == ["Canonical"]

    def test_unknown_keys_dropped(self):
        dumped = normalize_blueprint({"title": "T", "extra": "ignored"}).model_dump(by_alias=True)
        assert "extra" not in dumped
        assert set(dumped) == set(BLUEPRINT_TEXT_FIELDS) | set(BLUEPRINT_LIST_FIELDS)
