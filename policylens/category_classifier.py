"""
Data type classification for PolicyLens.

Maps the free-text label of a data collection statement (for example
"Email Address" or "Precise GPS location") onto one category of the
taxonomy in ``risk_weights``.  Rules are evaluated top to bottom, most
sensitive tier first, and the first matching rule wins.  Labels that no
rule recognises fall into the mid-sensitivity ``preferences`` category.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from policylens import risk_weights as rw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """A single pattern -> category rule of the cascade.

    When ``sub_rules`` is set the pattern only acts as a trigger and the
    category is decided by the first matching sub rule.  If none of the
    sub rules match, evaluation continues with the next top-level rule.
    """
    name: str
    pattern: Pattern[str]
    category: Optional[str] = None
    sub_rules: Tuple["ClassificationRule", ...] = ()

    def match(self, label: str) -> Optional[str]:
        if not self.pattern.search(label):
            return None
        if not self.sub_rules:
            return self.category
        for sub_rule in self.sub_rules:
            category = sub_rule.match(label)
            if category is not None:
                return category
        return None


def _rule(name: str, pattern: str, category: Optional[str] = None, *sub_rules: ClassificationRule) -> ClassificationRule:
    return ClassificationRule(name, re.compile(pattern, re.IGNORECASE), category, tuple(sub_rules))


# Special categories share one trigger set; sub order is fixed
SPECIAL_CATEGORY_RULES: Tuple[ClassificationRule, ...] = (
    _rule("racial_ethnic", r"(race|ethnic)", rw.RACIAL_ETHNIC),
    _rule("political", r"(political|election)", rw.POLITICAL_OPINIONS),
    _rule("religious", r"(religion|belief|caste)", rw.RELIGIOUS_BELIEFS),
    _rule("trade_union", r"(union|labor)", rw.TRADE_UNION_MEMBERSHIP),
    _rule("sexual_orientation", r"(sexual|orientation|lgbtq)", rw.SEXUAL_ORIENTATION),
)

CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    # Sensitive data
    _rule("financial", r"(financial|bank|credit|payment|transaction)", rw.FINANCIAL),
    _rule("health", r"(health|medical|prescription|diagnos)", rw.HEALTH),
    _rule("biometric", r"(biometric|fingerprint|face|voice|retina)", rw.BIOMETRIC),
    _rule("government_id", r"(ssn|social security|passport|drivers? ?license|government[\"\s-]?id)", rw.GOVERNMENT_ID),
    _rule("precise_location", r"(precise|exact|gps|geolocation)", rw.PRECISE_LOCATION),
    _rule(
        "special_category",
        r"(race|ethnic|religion|belief|political|union|sexual|orientation)",
        None,
        *SPECIAL_CATEGORY_RULES,
    ),
    _rule("genetic", r"(genetic|dna|rna)", rw.GENETIC_DATA),
    # Personal identifiers
    _rule("full_name", r"(name|fullname|first[\s-]?name|last[\s-]?name)", rw.FULL_NAME),
    _rule("email", r"(email|e-?mail|e ?mail)", rw.EMAIL),
    _rule("phone", r"(phone|mobile|cell|telephone)", rw.PHONE),
    _rule("address", r"(address|street|city|state|zip|postal|country)", rw.ADDRESS),
    _rule("ip_address", r"(ip\s*address|ipv4|ipv6|internet protocol)", rw.IP_ADDRESS),
    _rule("device_id", r"(device[\s-]?id|advertising[\s-]?id|idfa|gaid)", rw.DEVICE_ID),
    _rule("account_credentials", r"(username|login|password|credential|auth)", rw.ACCOUNT_CREDENTIALS),
    # Behavioural data
    _rule("browsing_history", r"(brows(?:ing)?[\s-]?history|visited|urls?|websites?)", rw.BROWSING_HISTORY),
    _rule("search_history", r"(search[\s-]?history|queries|searches)", rw.SEARCH_HISTORY),
    _rule("purchase_history", r"(purchase[\s-]?history|transactions?|orders?)", rw.PURCHASE_HISTORY),
    _rule("app_usage", r"(app[\s-]?usage|screen[\s-]?time|time[\s-]?spent)", rw.APP_USAGE),
    _rule("interaction", r"(interaction|click|tap|scroll|hover|engagement)", rw.INTERACTION_DATA),
    _rule("preferences", r"(preference|setting|option|choice)", rw.PREFERENCES),
    # Diagnostic / technical data
    _rule("crash_reports", r"(crash|error|exception|bug|failure)", rw.CRASH_REPORTS),
    _rule("performance", r"(performance|speed|latency|load[\s-]?time)", rw.PERFORMANCE_DATA),
    _rule("diagnostic_logs", r"(log|record|audit|diagnostic|debug)", rw.DIAGNOSTIC_LOGS),
    _rule("system_activity", r"(system|device|hardware|os|version|model)", rw.SYSTEM_ACTIVITY),
)


def classify_data_type(label: Optional[str]) -> str:
    """Return the taxonomy category for a data type label.

    Never raises.  ``None``, empty and unrecognised labels all map to the
    fallback category.
    """
    text = (label or "").lower()
    for rule in CLASSIFICATION_RULES:
        category = rule.match(text)
        if category is not None:
            logger.debug("Classified %r as %s (rule %s)", label, category, rule.name)
            return category
    logger.debug("No rule matched %r, using fallback %s", label, rw.FALLBACK_CATEGORY)
    return rw.FALLBACK_CATEGORY


def matching_rule(label: Optional[str]) -> Optional[str]:
    """Name of the top-level rule that decides ``label``, or None for the fallback."""
    text = (label or "").lower()
    for rule in CLASSIFICATION_RULES:
        if rule.match(text) is not None:
            return rule.name
    return None
