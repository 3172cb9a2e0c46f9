from __future__ import annotations

import dataclasses

import pytest

from policylens.data_collection import (
    DEFAULT_PURPOSE,
    DEFAULT_TYPE,
    map_to_data_collection_items,
    to_data_collection_item,
)
from policylens.risk_assessment import calculate_risk_score


def test_missing_fields_get_defaults():
    item = to_data_collection_item({})
    assert item.type == DEFAULT_TYPE == "Unknown"
    assert item.purpose == DEFAULT_PURPOSE == "Not specified"
    assert item.category == "preferences"
    assert item.retention_period is None
    assert item.shared_with_third_parties is False
    assert item.security_measures == ()
    assert dict(item.extra) == {}


def test_snake_and_camel_case_keys():
    snake = to_data_collection_item({
        "data_type": "Email Address",
        "purpose": "Newsletters",
        "retention_period": "2 years",
        "shared_with_third_parties": True,
        "security_measures": ["Encryption"],
    })
    camel = to_data_collection_item({
        "type": "Email Address",
        "purpose": "Newsletters",
        "retentionPeriod": "2 years",
        "sharedWithThirdParties": True,
        "securityMeasures": ["Encryption"],
    })
    assert snake == camel
    assert snake.category == "email"
    assert snake.security_measures == ("Encryption",)


def test_empty_strings_count_as_missing():
    item = to_data_collection_item({"type": "", "purpose": ""})
    assert item.type == "Unknown"
    assert item.purpose == "Not specified"
    assert item.category == "preferences"


def test_input_category_is_ignored():
    item = to_data_collection_item({"type": "Passport number", "category": "preferences"})
    assert item.category == "governmentId"


@pytest.mark.parametrize("value,expected", [("true", True), ("Yes", True), ("false", False), ("no", False), (1, True), (0, False)])
def test_shared_flag_coercion(value, expected):
    assert to_data_collection_item({"shared_with_third_parties": value}).shared_with_third_parties is expected


def test_single_measure_string_is_wrapped():
    item = to_data_collection_item({"security_measures": "Encryption at rest"})
    assert item.security_measures == ("Encryption at rest",)


def test_extra_fields_are_kept_but_not_scored():
    base = {"type": "Email", "purpose": "Login"}
    with_extras = dict(base, risk="critical", explanation="LLM note", risk_score=99)

    item = to_data_collection_item(with_extras)
    assert dict(item.extra) == {"risk": "critical", "explanation": "LLM note", "risk_score": 99}

    plain = calculate_risk_score(map_to_data_collection_items({"data_collection": [base]}))
    extra = calculate_risk_score(map_to_data_collection_items({"data_collection": [with_extras]}))
    assert plain == extra


def test_items_are_immutable():
    item = to_data_collection_item({"type": "Email"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.purpose = "changed"
    with pytest.raises(TypeError):
        item.extra["new"] = 1


@pytest.mark.parametrize("payload", [None, "text", 42, {}, {"data_collection": None}, {"data_collection": "oops"}])
def test_unusable_payloads_map_to_no_items(payload):
    assert map_to_data_collection_items(payload) == []


def test_non_mapping_entries_are_skipped_and_order_kept():
    items = map_to_data_collection_items({"data_collection": [{"type": "Phone"}, "junk", None, {"type": "Email"}]})
    assert [i.type for i in items] == ["Phone", "Email"]
