"""
Overall privacy risk score for a list of data collection items.

Combines the five risk factors with fixed weights into a 0-100 score,
rounded half-up, then attaches the primary risk level and the ordered
recommendations.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from policylens.data_collection import DataCollectionItem
from policylens.recommendations import generate_recommendations
from policylens.risk_factors import RiskFactors, calculate_risk_factors
from policylens.risk_levels import LOW, classify_risk_level
from policylens.risk_weights import weight_for

logger = logging.getLogger(__name__)

# Contribution of each factor to the overall score
FACTOR_WEIGHTS: Dict[str, float] = {
    "data_sensitivity": 0.4,
    "collection_context": 0.2,
    "storage_security": 0.2,
    "data_sharing": 0.15,
    "user_controls": 0.05,
}
MAX_SCORE = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class RiskAssessmentResult:
    score: int = 0
    level: str = LOW
    factors: RiskFactors = field(default_factory=RiskFactors)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "factors": self.factors.to_dict(),
            "recommendations": list(self.recommendations),
        }


def aggregate_score(factors: RiskFactors) -> int:
    weighted = (
        (factors.data_sensitivity * FACTOR_WEIGHTS["data_sensitivity"])
        + (factors.collection_context * FACTOR_WEIGHTS["collection_context"])
        + (factors.storage_security * FACTOR_WEIGHTS["storage_security"])
        + (factors.data_sharing * FACTOR_WEIGHTS["data_sharing"])
        + (factors.user_controls * FACTOR_WEIGHTS["user_controls"])
    )
    return min(MAX_SCORE, round_half_up(weighted))


def calculate_risk_score(items: Sequence[DataCollectionItem]) -> RiskAssessmentResult:
    """Score a list of data collection items.

    Args:
        items: Items in document order, as produced by
            ``map_to_data_collection_items``.

    Returns:
        A ``RiskAssessmentResult``.  An empty list gives score 0, level
        low, all factors 0 and no recommendations.
    """
    if not items:
        return RiskAssessmentResult()

    factors = calculate_risk_factors(items)
    score = aggregate_score(factors)
    level = classify_risk_level(score)
    recommendations = generate_recommendations(score, factors, items)
    logger.debug("Scored %d items: score=%d level=%s", len(items), score, level)
    return RiskAssessmentResult(
        score=score,
        level=level,
        factors=factors,
        recommendations=recommendations,
    )


def item_risk_score(item: DataCollectionItem) -> int:
    return round_half_up(weight_for(item.category) * 100)
