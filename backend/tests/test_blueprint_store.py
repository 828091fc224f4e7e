"""Blueprint hand-off store tests — round-trip, overwrite, unreadable entries."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest

from app.constants import BLUEPRINT_STORAGE_KEY
from app.errors import ClientParseError
from app.schemas.blueprint_schema import BusinessBlueprint
from app.services.blueprint_store import (
    NO_BLUEPRINT_MESSAGE,
    UNREADABLE_BLUEPRINT_MESSAGE,
    BlueprintStore,
)


def _blueprint(**overrides):
    fields = dict(
        title="Weekend Design Studio",
        subtitle="Small, steady, online",
        situation_summary="5 hours a week and $200.",
        recommended_direction="Productized design service",
        business_model_summary="Fixed-price logo packages",
        example_offers=["Logo in 48h", "Brand starter kit"],
        monetization=["One-off packages", "Monthly retainer"],
        how_to_find_customers=["Local Facebook groups"],
        step_by_step_guide=["Pick a niche", "Build a portfolio page"],
        day_one_actions=["List three past projects"],
        first_30_days=["Land 2 paid clients"],
        key_risks=["Underpricing"],
        how_to_de_risk=["Pre-sell before building"],
        growth_levers=["Referrals", "Templates"],
    )
    fields.update(overrides)
    return BusinessBlueprint(**fields)


class TestRoundTrip:
    @pytest.mark.parametrize("blueprint", [
        _blueprint(),
        BusinessBlueprint(),
        _blueprint(title="Ünïcødé — café ☕", key_risks=[]),
    ])
    def test_save_then_load_is_equal(self, blueprint):
        store = BlueprintStore()
        store.save(blueprint)
        assert store.load() == blueprint

    def test_stored_under_fixed_key_with_wire_names(self):
        storage = {}
        BlueprintStore(storage).save(_blueprint())
        assert list(storage) == [BLUEPRINT_STORAGE_KEY]
        raw = json.loads(storage[BLUEPRINT_STORAGE_KEY])
        assert raw["first30Days"] == ["Land 2 paid clients"]
        assert raw["howToDeRisk"] == ["Pre-sell before building"]

    def test_save_overwrites(self):
        store = BlueprintStore()
        store.save(_blueprint(title="First"))
        store.save(_blueprint(title="Second"))
        assert store.load().title == "Second"

    def test_shared_storage_between_writer_and_reader(self):
        storage = {}
        BlueprintStore(storage).save(_blueprint())
        assert BlueprintStore(storage).load() == _blueprint()


class TestUnreadable:
    def test_absent_entry(self):
        store = BlueprintStore()
        assert store.load() is None
        result = store.load_result()
        assert result.found is False
        assert result.error == NO_BLUEPRINT_MESSAGE
        with pytest.raises(ClientParseError):
            store.read()

    @pytest.mark.parametrize("raw", [
        "",
        "{not json",
        "null",
        "[]",
        '{"title": 5}',
        '{"keyRisks": "just one"}',
    ])
    def test_corrupted_entry(self, raw):
        store = BlueprintStore({BLUEPRINT_STORAGE_KEY: raw})
        result = store.load_result()
        assert result.blueprint is None
        assert result.error == UNREADABLE_BLUEPRINT_MESSAGE

    def test_clear(self):
        store = BlueprintStore()
        store.save(_blueprint())
        store.clear()
        store.clear()
        assert store.load() is None
