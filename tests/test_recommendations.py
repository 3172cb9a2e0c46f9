from __future__ import annotations

from policylens.recommendations import (
    CRITICAL_BANNER,
    HIGH_RISK_BANNER,
    INTERNATIONAL_TRANSFER_ADVISORY,
    SENSITIVITY_ADVISORY,
    SHARING_ADVISORY,
    STORAGE_ADVISORY,
    USER_CONTROLS_ADVISORY,
    generate_recommendations,
    sensitive_item_types,
)
from policylens.risk_factors import RiskFactors
from tests.helpers import make_item

QUIET = RiskFactors(data_sensitivity=50, collection_context=50, storage_security=50, data_sharing=50, user_controls=70)


def test_banners_are_mutually_exclusive():
    assert generate_recommendations(75, QUIET, []) == [CRITICAL_BANNER]
    assert generate_recommendations(74, QUIET, []) == [HIGH_RISK_BANNER]
    assert generate_recommendations(50, QUIET, []) == [HIGH_RISK_BANNER]
    assert generate_recommendations(49, QUIET, []) == []


def test_factor_thresholds_are_strict():
    at_threshold = RiskFactors(70, 50, 70, 70, 40)
    assert generate_recommendations(0, at_threshold, []) == []

    past_threshold = RiskFactors(70.1, 50, 71, 71, 39)
    assert generate_recommendations(0, past_threshold, []) == [
        SENSITIVITY_ADVISORY,
        STORAGE_ADVISORY,
        SHARING_ADVISORY,
        USER_CONTROLS_ADVISORY,
    ]


def test_sensitive_types_listed_once_in_first_seen_order():
    items = [
        make_item(type="Credit card", category="financial"),
        make_item(type="Email", category="email"),
        make_item(type="Medical records", category="health"),
        make_item(type="Credit card", category="financial"),
        make_item(type="Precise location", category="preciseLocation"),
    ]
    assert sensitive_item_types(items) == ["Credit card", "Medical records"]
    recs = generate_recommendations(0, QUIET, items)
    assert recs == [
        "⚠️ Sensitive data collection detected: Credit card, Medical records. "
        "Ensure you understand why this data is being collected."
    ]


def test_transfer_advisory_does_not_depend_on_sharing_factor():
    items = [make_item(security_measures=["Cross-border transfer clauses"])]
    factors = RiskFactors(0, 0, 0, 0, 70)
    assert generate_recommendations(0, factors, items) == [INTERNATIONAL_TRANSFER_ADVISORY]


def test_full_chain_keeps_rule_order():
    items = [make_item(type="Passport", category="governmentId", security_measures=["International hosting"])]
    factors = RiskFactors(100, 100, 100, 100, 0)
    recs = generate_recommendations(90, factors, items)
    assert len(recs) == 7
    assert recs[0] == CRITICAL_BANNER
    assert recs[1:5] == [SENSITIVITY_ADVISORY, STORAGE_ADVISORY, SHARING_ADVISORY, USER_CONTROLS_ADVISORY]
    assert "Passport" in recs[5]
    assert recs[6] == INTERNATIONAL_TRANSFER_ADVISORY
