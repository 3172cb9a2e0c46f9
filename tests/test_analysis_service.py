from __future__ import annotations

import pytest

from policylens.analysis_service import (
    DISPLAY_COLUMNS,
    analyze_payload,
    enhance_analysis_with_risk_assessment,
    mock_analyze_policy,
    records_to_dataframe,
    summarize_risk_levels,
)
from policylens.errors import ExtractionFailedError, MalformedPayloadError
from policylens.recommendations import HIGH_RISK_BANNER, SHARING_ADVISORY


def test_financial_statement_analysis(financial_payload):
    analysis = enhance_analysis_with_risk_assessment(financial_payload)

    assert analysis["risk_score"] == 71
    assert analysis["risk_level"] == {
        "level": "high",
        "display_bucket": "high",
        "color": "orange.400",
        "label": "High Risk",
        "description": "Significant privacy concerns. Exercise caution and review the policy carefully.",
    }
    assert analysis["data_collection"] == [{
        "type": "Financial Account Number",
        "purpose": "Process payments",
        "category": "financial",
        "risk": "critical",
        "risk_score": 100,
    }]
    assert analysis["risk_factors"]["collection_context"] == 65
    assert analysis["raw_analysis"] is financial_payload
    assert len(analysis["recommendations"]) == 3


def test_sample_analysis_exposes_level_and_band_disagreement():
    analysis = mock_analyze_policy("ignored")

    assert analysis["risk_score"] == 68
    assert analysis["risk_level"]["level"] == "high"
    assert analysis["risk_level"]["display_bucket"] == "medium"
    assert analysis["risk_level"]["label"] == "Medium Risk"
    assert [r["category"] for r in analysis["data_collection"]] == ["preferences", "email", "preferences"]
    assert [r["risk"] for r in analysis["data_collection"]] == ["medium", "high", "medium"]
    assert analysis["risk_factors"]["data_sharing"] == 80
    assert analysis["risk_factors"]["user_controls"] == 40
    assert analysis["recommendations"] == [HIGH_RISK_BANNER, SHARING_ADVISORY]
    assert analysis["summary"]


def test_empty_payload_gives_zero_analysis():
    analysis = enhance_analysis_with_risk_assessment({"data_collection": []})
    assert analysis["risk_score"] == 0
    assert analysis["risk_level"]["level"] == "low"
    assert analysis["risk_level"]["display_bucket"] == "low"
    assert analysis["data_collection"] == []
    assert analysis["recommendations"] == []


def test_analyze_payload_attaches_validation_notes():
    analysis = analyze_payload('{"data_collection": [{"type": "Email"}]}')
    assert analysis["risk_score"] > 0
    assert any("no purpose" in w for w in analysis["validation"]["warnings"])
    assert analysis["validation"]["source_format"] == "json"


def test_analyze_payload_raises_on_unusable_input():
    with pytest.raises(ExtractionFailedError) as excinfo:
        analyze_payload('{"nope": true}')
    assert excinfo.value.details == ["Payload has no 'data_collection' list"]
    assert str(excinfo.value).startswith("Extraction failed")


def test_records_to_dataframe_and_summary():
    records = mock_analyze_policy()["data_collection"]
    df = records_to_dataframe(records)
    assert list(df.columns) == DISPLAY_COLUMNS
    assert len(df) == 3
    assert summarize_risk_levels(records) == {"critical": 0, "high": 1, "medium": 2, "low": 0}


def test_records_to_dataframe_empty():
    df = records_to_dataframe([])
    assert list(df.columns) == DISPLAY_COLUMNS
    assert df.empty


def test_analyze_payload_flags_malformed_json():
    with pytest.raises(MalformedPayloadError) as excinfo:
        analyze_payload('{"data_collection": [', "payload.json")
    assert isinstance(excinfo.value, ExtractionFailedError)
    assert excinfo.value.message == "Malformed JSON"
    assert excinfo.value.details[0].startswith("Invalid JSON")
