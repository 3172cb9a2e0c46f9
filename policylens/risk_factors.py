"""
Risk factor calculators.

Five independent heuristics, each scoring the full list of data
collection items on a 0-100 scale (higher means riskier, except for
``user_controls`` where higher means more controls are offered).  Every
flag is evaluated across the whole set: a single statement can raise or
lower the factor for the entire document.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Sequence

from policylens.data_collection import DataCollectionItem
from policylens.risk_weights import weight_for

logger = logging.getLogger(__name__)

VAGUE_PURPOSE_KEYWORDS = ("improve", "enhance", "personalize")
CONSENT_KEYWORDS = ("consent", "agreement")
BROAD_COLLECTION_KEYWORD = "all data"

ENCRYPTION_KEYWORDS = ("encrypt",)
ACCESS_CONTROL_KEYWORDS = ("access", "authentication")
INDEFINITE_RETENTION_KEYWORDS = ("indefinite", "forever", "retained")

TRANSFER_KEYWORDS = ("international", "transfer")
AGGREGATION_KEYWORDS = ("aggregate", "anonymize", "pseudonymize")

ACCESS_RIGHT_KEYWORDS = ("access", "download")
DELETION_RIGHT_KEYWORDS = ("delete", "erasure")
OPT_OUT_KEYWORDS = ("opt", "preference")


@dataclass(frozen=True)
class RiskFactors:
    data_sensitivity: float = 0.0
    collection_context: float = 0.0
    storage_security: float = 0.0
    data_sharing: float = 0.0
    user_controls: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def any_measure_mentions(items: Sequence[DataCollectionItem], keywords: Sequence[str]) -> bool:
    return any(item.measures_mention(*keywords) for item in items)


def calculate_data_sensitivity(items: Sequence[DataCollectionItem]) -> float:
    """Mean of ``weight * 100`` over all items (duplicates count)."""
    total_score = 0.0
    max_possible_score = 0.0
    for item in items:
        total_score += weight_for(item.category) * 100
        max_possible_score += 100
    return (total_score / max_possible_score) * 100 if max_possible_score > 0 else 0.0


def calculate_collection_context(items: Sequence[DataCollectionItem]) -> float:
    """Purpose limitation, consent and data minimisation signals."""
    purposes = {item.purpose for item in items}
    has_vague_purposes = any(
        any(k in p.lower() for k in VAGUE_PURPOSE_KEYWORDS) for p in purposes
    )
    has_explicit_consent = any(item.purpose_mentions(*CONSENT_KEYWORDS) for item in items)
    has_minimisation = all(
        item.purpose and not item.purpose_mentions(BROAD_COLLECTION_KEYWORD) for item in items
    )

    score = 50
    if has_vague_purposes:
        score += 20
    if not has_explicit_consent:
        score += 15
    if not has_minimisation:
        score += 15
    return min(100, score)


def calculate_storage_security(items: Sequence[DataCollectionItem]) -> float:
    """Encryption, access control and retention signals."""
    has_encryption = any_measure_mentions(items, ENCRYPTION_KEYWORDS)
    has_access_controls = any_measure_mentions(items, ACCESS_CONTROL_KEYWORDS)
    has_indefinite_retention = any(
        item.retention_mentions(*INDEFINITE_RETENTION_KEYWORDS) for item in items
    )

    score = 50
    if not has_encryption:
        score += 30
    if not has_access_controls:
        score += 20
    if has_indefinite_retention:
        score += 20
    return min(100, score)


def calculate_data_sharing(items: Sequence[DataCollectionItem]) -> float:
    """Third party sharing, international transfers and anonymisation."""
    shares_with_third_parties = any(item.shared_with_third_parties for item in items)
    has_international_transfers = any_measure_mentions(items, TRANSFER_KEYWORDS)
    has_aggregation = any_measure_mentions(items, AGGREGATION_KEYWORDS)

    # Sharing starts elevated
    score = 30
    if shares_with_third_parties:
        score += 40
    if has_international_transfers:
        score += 20
    if not has_aggregation:
        score += 10
    return min(100, score)


def calculate_user_controls(items: Sequence[DataCollectionItem]) -> float:
    """Access, deletion and opt-out rights offered to the user."""
    has_access_rights = any_measure_mentions(items, ACCESS_RIGHT_KEYWORDS)
    has_deletion_rights = any_measure_mentions(items, DELETION_RIGHT_KEYWORDS)
    has_opt_out = any_measure_mentions(items, OPT_OUT_KEYWORDS)

    score = 70
    if not has_access_rights:
        score -= 20
    if not has_deletion_rights:
        score -= 20
    if not has_opt_out:
        score -= 10
    return max(0, score)


def calculate_risk_factors(items: Sequence[DataCollectionItem]) -> RiskFactors:
    """Run all five calculators over ``items``."""
    if not items:
        return RiskFactors()
    factors = RiskFactors(
        data_sensitivity=calculate_data_sensitivity(items),
        collection_context=calculate_collection_context(items),
        storage_security=calculate_storage_security(items),
        data_sharing=calculate_data_sharing(items),
        user_controls=calculate_user_controls(items),
    )
    logger.debug("Risk factors for %d items: %s", len(items), factors)
    return factors
