"""
Risk level thresholds and display bands.

Two tables live here and they deliberately do not share boundaries:

* ``LEVEL_THRESHOLDS`` decides the authoritative ``level`` of an
  assessment (critical >= 75, high >= 50, medium >= 25, else low).
* ``RISK_BANDS`` carries the colour, label and description shown for a
  score, and also tags each individual item by its category weight.
  Its ranges are low 0-39, medium 40-69, high 70-89, critical 90-100.

A score of 30 is therefore level "medium" but sits in the "low" band.
Both values are reported side by side (``level`` and ``display_bucket``)
rather than reconciled.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

LOW = "low"
MEDIUM = "medium"
HIGH = "high"
CRITICAL = "critical"

RISK_LEVELS = (LOW, MEDIUM, HIGH, CRITICAL)

LEVEL_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (75, CRITICAL),
    (50, HIGH),
    (25, MEDIUM),
)


@dataclass(frozen=True)
class RiskBand:
    key: str
    min: int
    max: int
    color: str
    hex_color: str
    label: str
    description: str

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> Dict[str, object]:
        return {
            "level": self.key,
            "min": self.min,
            "max": self.max,
            "color": self.color,
            "label": self.label,
            "description": self.description,
        }


RISK_BANDS: Tuple[RiskBand, ...] = (
    RiskBand(
        LOW, 0, 39, "green.400", "#48BB78", "Low Risk",
        "Minimal privacy concerns. Standard data collection with good security practices.",
    ),
    RiskBand(
        MEDIUM, 40, 69, "yellow.400", "#ECC94B", "Medium Risk",
        "Moderate privacy concerns. Review data collection practices and sharing policies.",
    ),
    RiskBand(
        HIGH, 70, 89, "orange.400", "#ED8936", "High Risk",
        "Significant privacy concerns. Exercise caution and review the policy carefully.",
    ),
    RiskBand(
        CRITICAL, 90, 100, "red.500", "#E53E3E", "Critical Risk",
        "Severe privacy concerns. Consider avoiding this service or consulting a privacy professional.",
    ),
)

BANDS_BY_KEY: Dict[str, RiskBand] = {band.key: band for band in RISK_BANDS}


def classify_risk_level(score: int) -> str:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return LOW


def find_risk_band(value: float) -> Optional[RiskBand]:
    """Return the first band whose inclusive range contains ``value``."""
    for band in RISK_BANDS:
        if band.contains(value):
            return band
    return None


def display_band_for_score(score: int) -> RiskBand:
    """Display metadata for an overall score, ``low`` when no band matches."""
    return find_risk_band(score) or BANDS_BY_KEY[LOW]


def item_risk_tag(weight: float) -> str:
    """Per-item risk tag from the category weight alone.

    ``weight * 100`` is looked up in ``RISK_BANDS``; values between bands
    fall back to ``medium``.
    """
    band = find_risk_band(weight * 100)
    return band.key if band is not None else MEDIUM
