"""
Analysis service for PolicyLens.

Glue between the extraction output and the presentation layer: maps the
raw payload to data collection items, runs the risk assessment and
bundles the result with display metadata and one display-ready record
per item.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

import pandas as pd

from policylens.data_collection import DataCollectionItem, map_to_data_collection_items
from policylens.errors import ExtractionFailedError, MalformedPayloadError
from policylens.payload_validator import validate_extraction_payload
from policylens.risk_assessment import calculate_risk_score, item_risk_score
from policylens.risk_levels import display_band_for_score, item_risk_tag
from policylens.risk_weights import weight_for

logger = logging.getLogger(__name__)

DISPLAY_COLUMNS = ["type", "purpose", "category", "risk", "risk_score"]

SAMPLE_EXTRACTION: Dict[str, Any] = {
    "data_collection": [
        {
            "type": "Location Data",
            "purpose": "Provide location-based services",
            "category": "preciseLocation",
            "sharedWithThirdParties": True,
            "securityMeasures": ["Encryption in transit"],
        },
        {
            "type": "Email Address",
            "purpose": "Account creation and communication",
            "category": "email",
            "sharedWithThirdParties": False,
            "securityMeasures": ["Hashed storage", "Access controls"],
        },
        {
            "type": "Usage Data",
            "purpose": "Improve our services",
            "category": "appUsage",
            "sharedWithThirdParties": True,
            "securityMeasures": ["Anonymization", "Aggregation"],
        },
    ],
}


def to_display_record(item: DataCollectionItem) -> Dict[str, Any]:
    """Display-ready record for one item; risk reflects its category alone."""
    return {
        "type": item.type,
        "purpose": item.purpose,
        "category": item.category,
        "risk": item_risk_tag(weight_for(item.category)),
        "risk_score": item_risk_score(item),
    }


def enhance_analysis_with_risk_assessment(raw_analysis: Any) -> Dict[str, Any]:
    """Run the risk assessment over a raw extraction payload.

    Args:
        raw_analysis: Extraction output with a ``data_collection`` list.

    Returns:
        A dictionary with the score, both the primary ``level`` and the
        ``display_bucket`` used for colour/label (these can differ), the
        per-item display records, the factors, the recommendations and
        the raw input echoed back as ``raw_analysis``.
    """
    items = map_to_data_collection_items(raw_analysis)
    assessment = calculate_risk_score(items)
    band = display_band_for_score(assessment.score)
    if band.key != assessment.level:
        logger.debug(
            "Score %d is level %s but sits in display band %s",
            assessment.score, assessment.level, band.key,
        )

    return {
        "risk_score": assessment.score,
        "risk_level": {
            "level": assessment.level,
            "display_bucket": band.key,
            "color": band.color,
            "label": band.label,
            "description": band.description,
        },
        "data_collection": [to_display_record(item) for item in items],
        "risk_factors": assessment.factors.to_dict(),
        "recommendations": list(assessment.recommendations),
        "raw_analysis": raw_analysis,
    }


def analyze_payload(content: Any, filename: str = "") -> Dict[str, Any]:
    """Validate an extraction payload and assess it.

    Raises:
        MalformedPayloadError: if JSON content does not parse.
        ExtractionFailedError: if the payload cannot be used.
    """
    payload, validation = validate_extraction_payload(content, filename)
    if validation.malformed:
        raise MalformedPayloadError(validation.errors, message="Malformed JSON")
    if payload is None or not validation.is_valid:
        raise ExtractionFailedError(validation.errors)
    analysis = enhance_analysis_with_risk_assessment(payload)
    analysis["validation"] = {
        "warnings": list(validation.warnings),
        "info": list(validation.info),
        "source_format": validation.source_format,
    }
    logger.info(
        "Assessed %d statements: score=%d level=%s",
        len(analysis["data_collection"]), analysis["risk_score"], analysis["risk_level"]["level"],
    )
    return analysis


def records_to_dataframe(records: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Return display records as a DataFrame with a stable column order."""
    return pd.DataFrame(list(records), columns=DISPLAY_COLUMNS)


def mock_analyze_policy(text: str = "") -> Dict[str, Any]:
    """Deterministic sample analysis used for demos; ``text`` is ignored."""
    analysis = enhance_analysis_with_risk_assessment(SAMPLE_EXTRACTION)
    analysis["summary"] = "Sample analysis of three typical data collection statements."
    return analysis


def summarize_risk_levels(records: Sequence[Dict[str, Any]]) -> Dict[str, int]:
    """Count display records per risk tag."""
    summary: Dict[str, int] = {"critical": 0, "high": 0, "medium": 0, "low": 0}
    for r in records:
        risk = r.get("risk", "medium")
        summary[risk] = summary.get(risk, 0) + 1
    return summary
