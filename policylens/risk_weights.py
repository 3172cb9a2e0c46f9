"""
Data category taxonomy and sensitivity weights.

Each category a data collection statement can be classified into carries
a weight between 0 and 1.  The weights fall into four tiers: sensitive
data (1.0), personal identifiers (0.8), behavioural data (0.6) and
diagnostic/technical data (0.3).  The tables are read-only and shared by
every assessment.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping

# Sensitive data
FINANCIAL = "financial"
HEALTH = "health"
BIOMETRIC = "biometric"
GOVERNMENT_ID = "governmentId"
PRECISE_LOCATION = "preciseLocation"
RACIAL_ETHNIC = "racialEthnic"
POLITICAL_OPINIONS = "politicalOpinions"
RELIGIOUS_BELIEFS = "religiousBeliefs"
SEXUAL_ORIENTATION = "sexualOrientation"
TRADE_UNION_MEMBERSHIP = "tradeUnionMembership"
GENETIC_DATA = "geneticData"

# Personal identifiers
FULL_NAME = "fullName"
EMAIL = "email"
PHONE = "phone"
ADDRESS = "address"
IP_ADDRESS = "ipAddress"
DEVICE_ID = "deviceId"
ACCOUNT_CREDENTIALS = "accountCredentials"

# Behavioural data
BROWSING_HISTORY = "browsingHistory"
SEARCH_HISTORY = "searchHistory"
PURCHASE_HISTORY = "purchaseHistory"
APP_USAGE = "appUsage"
INTERACTION_DATA = "interactionData"
PREFERENCES = "preferences"

# Diagnostic / technical data
CRASH_REPORTS = "crashReports"
PERFORMANCE_DATA = "performanceData"
DIAGNOSTIC_LOGS = "diagnosticLogs"
SYSTEM_ACTIVITY = "systemActivity"
ERROR_REPORTS = "errorReports"

SENSITIVE_TIER = (
    FINANCIAL, HEALTH, BIOMETRIC, GOVERNMENT_ID, PRECISE_LOCATION, RACIAL_ETHNIC,
    POLITICAL_OPINIONS, RELIGIOUS_BELIEFS, SEXUAL_ORIENTATION, TRADE_UNION_MEMBERSHIP,
    GENETIC_DATA,
)
IDENTIFIER_TIER = (FULL_NAME, EMAIL, PHONE, ADDRESS, IP_ADDRESS, DEVICE_ID, ACCOUNT_CREDENTIALS)
BEHAVIORAL_TIER = (
    BROWSING_HISTORY, SEARCH_HISTORY, PURCHASE_HISTORY, APP_USAGE, INTERACTION_DATA, PREFERENCES,
)
DIAGNOSTIC_TIER = (CRASH_REPORTS, PERFORMANCE_DATA, DIAGNOSTIC_LOGS, SYSTEM_ACTIVITY, ERROR_REPORTS)

TIER_WEIGHTS: Mapping[float, tuple] = MappingProxyType({
    1.0: SENSITIVE_TIER,
    0.8: IDENTIFIER_TIER,
    0.6: BEHAVIORAL_TIER,
    0.3: DIAGNOSTIC_TIER,
})


def _build_weight_table() -> Mapping[str, float]:
    table: Dict[str, float] = {}
    for weight, categories in TIER_WEIGHTS.items():
        for category in categories:
            table[category] = weight
    return MappingProxyType(table)


RISK_WEIGHTS: Mapping[str, float] = _build_weight_table()

# Categories called out by name in the sensitive-data recommendation
HIGH_RISK_CATEGORIES: FrozenSet[str] = frozenset({FINANCIAL, HEALTH, BIOMETRIC, GOVERNMENT_ID})

FALLBACK_CATEGORY = PREFERENCES
# Weight used if a category somehow falls outside the table
UNKNOWN_CATEGORY_WEIGHT = 0.5


def weight_for(category: str) -> float:
    """Return the sensitivity weight for ``category``."""
    return RISK_WEIGHTS.get(category, UNKNOWN_CATEGORY_WEIGHT)
