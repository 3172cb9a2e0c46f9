"""
Recommendation rule chain.

Rules run in a fixed priority order and each one appends at most one
advisory.  Rules are independent of each other (apart from the critical /
high banner pair) and the output is never deduplicated or reordered.
"""
from __future__ import annotations

from typing import List, Sequence

from policylens.data_collection import DataCollectionItem
from policylens.risk_factors import TRANSFER_KEYWORDS, RiskFactors, any_measure_mentions
from policylens.risk_weights import HIGH_RISK_CATEGORIES

CRITICAL_SCORE = 75
HIGH_SCORE = 50
SENSITIVITY_THRESHOLD = 70
STORAGE_THRESHOLD = 70
SHARING_THRESHOLD = 70
USER_CONTROLS_THRESHOLD = 40

CRITICAL_BANNER = (
    "⚠️ Critical: This privacy policy indicates significant privacy risks. "
    "Consider consulting with a privacy professional."
)
HIGH_RISK_BANNER = (
    "🔍 High Risk: This privacy policy has concerning elements. Review carefully before proceeding."
)
SENSITIVITY_ADVISORY = (
    "🔒 High sensitivity data detected: Consider if all collected data is necessary "
    "for the service's functionality."
)
STORAGE_ADVISORY = (
    "⚠️ Security concerns: The policy indicates potential security vulnerabilities "
    "in data storage and handling."
)
SHARING_ADVISORY = (
    "🌐 Extensive data sharing: Your data may be shared with multiple third parties. "
    "Review the 'Third-Party Sharing' section carefully."
)
USER_CONTROLS_ADVISORY = (
    "🛡️ Limited user controls: The policy provides limited options for controlling your data. "
    "Consider requesting additional controls from the service provider."
)
SENSITIVE_DATA_ADVISORY = (
    "⚠️ Sensitive data collection detected: {types}. "
    "Ensure you understand why this data is being collected."
)
INTERNATIONAL_TRANSFER_ADVISORY = (
    "🌍 International data transfers detected: Your data may be transferred to and processed "
    "in countries with different data protection laws."
)


def sensitive_item_types(items: Sequence[DataCollectionItem]) -> List[str]:
    """Distinct types of items in the high risk categories, first-seen order."""
    seen: List[str] = []
    for item in items:
        if item.category in HIGH_RISK_CATEGORIES and item.type not in seen:
            seen.append(item.type)
    return seen


def generate_recommendations(
    score: int,
    factors: RiskFactors,
    items: Sequence[DataCollectionItem],
) -> List[str]:
    """Return the advisories that apply, in rule order."""
    recs: List[str] = []

    if score >= CRITICAL_SCORE:
        recs.append(CRITICAL_BANNER)
    elif score >= HIGH_SCORE:
        recs.append(HIGH_RISK_BANNER)

    if factors.data_sensitivity > SENSITIVITY_THRESHOLD:
        recs.append(SENSITIVITY_ADVISORY)
    if factors.storage_security > STORAGE_THRESHOLD:
        recs.append(STORAGE_ADVISORY)
    if factors.data_sharing > SHARING_THRESHOLD:
        recs.append(SHARING_ADVISORY)
    if factors.user_controls < USER_CONTROLS_THRESHOLD:
        recs.append(USER_CONTROLS_ADVISORY)

    types = sensitive_item_types(items)
    if types:
        recs.append(SENSITIVE_DATA_ADVISORY.format(types=", ".join(types)))

    # Checked again here rather than read back from the sharing factor
    if any_measure_mentions(items, TRANSFER_KEYWORDS):
        recs.append(INTERNATIONAL_TRANSFER_ADVISORY)

    return recs
