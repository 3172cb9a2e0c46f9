from __future__ import annotations

import pytest

from policylens.data_collection import map_to_data_collection_items
from policylens.recommendations import (
    CRITICAL_BANNER,
    HIGH_RISK_BANNER,
    SENSITIVITY_ADVISORY,
    SHARING_ADVISORY,
    STORAGE_ADVISORY,
    USER_CONTROLS_ADVISORY,
)
from policylens.risk_assessment import (
    RiskAssessmentResult,
    aggregate_score,
    calculate_risk_score,
    item_risk_score,
    round_half_up,
)
from policylens.risk_factors import RiskFactors
from tests.helpers import make_item


def test_empty_list_gives_zero_result():
    result = calculate_risk_score([])
    assert result == RiskAssessmentResult()
    assert result.to_dict() == {
        "score": 0,
        "level": "low",
        "factors": {
            "data_sensitivity": 0.0,
            "collection_context": 0.0,
            "storage_security": 0.0,
            "data_sharing": 0.0,
            "user_controls": 0.0,
        },
        "recommendations": [],
    }


def test_single_financial_statement(financial_payload):
    items = map_to_data_collection_items(financial_payload)
    assert items[0].category == "financial"

    result = calculate_risk_score(items)

    assert result.factors.data_sensitivity == pytest.approx(100)
    assert result.factors.collection_context == 65
    assert result.factors.storage_security == 50
    assert result.factors.data_sharing == 40
    assert result.factors.user_controls == 40
    assert result.score == 71
    assert result.level == "high"
    assert result.recommendations == [
        HIGH_RISK_BANNER,
        SENSITIVITY_ADVISORY,
        "⚠️ Sensitive data collection detected: Financial Account Number. "
        "Ensure you understand why this data is being collected.",
    ]


def test_worst_case_statement_is_critical():
    items = [make_item(
        type="Bank details",
        category="financial",
        purpose="Improve all data",
        retention_period="Kept forever",
        shared_with_third_parties=True,
    )]
    result = calculate_risk_score(items)

    assert result.score == 93
    assert result.level == "critical"
    assert result.recommendations[:5] == [
        CRITICAL_BANNER,
        SENSITIVITY_ADVISORY,
        STORAGE_ADVISORY,
        SHARING_ADVISORY,
        USER_CONTROLS_ADVISORY,
    ]
    assert "Bank details" in result.recommendations[5]
    assert len(result.recommendations) == 6


def test_same_input_gives_identical_result(financial_payload):
    first = calculate_risk_score(map_to_data_collection_items(financial_payload))
    second = calculate_risk_score(map_to_data_collection_items(financial_payload))
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(70.5) == 71
    assert round_half_up(70.49) == 70
    assert round(2.5) == 2


def test_aggregate_score_is_capped():
    factors = RiskFactors(100, 100, 100, 100, 100)
    assert aggregate_score(factors) == 100


@pytest.mark.parametrize("category,expected", [("financial", 100), ("email", 80), ("appUsage", 60), ("crashReports", 30)])
def test_item_risk_score_is_weight_times_hundred(category, expected):
    assert item_risk_score(make_item(category=category)) == expected


def test_score_stays_in_range_for_mixed_lists():
    lists = [
        [make_item()],
        [make_item(category="crashReports", purpose="With your consent", security_measures=[
            "Encryption", "Access portal", "Delete account", "Opt-out", "Aggregate statistics",
        ])],
        [make_item(category="health", shared_with_third_parties=True) for _ in range(5)],
    ]
    for items in lists:
        result = calculate_risk_score(items)
        assert 0 <= result.score <= 100
        assert result.level in ("low", "medium", "high", "critical")
