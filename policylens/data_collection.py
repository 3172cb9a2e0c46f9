"""
Data collection statements.

A ``DataCollectionItem`` is one statement extracted from a privacy policy
("we collect your email address to create your account").  Extraction
output is loosely typed: any field may be missing and keys come in either
snake_case or camelCase.  ``map_to_data_collection_items`` is the single
place where defaults are applied, so the scoring code can rely on every
field being present.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from policylens.category_classifier import classify_data_type

DEFAULT_TYPE = "Unknown"
DEFAULT_PURPOSE = "Not specified"

# Input keys consumed by ingestion; everything else is passed through in ``extra``
RECOGNISED_FIELDS = frozenset({
    "type", "data_type",
    "purpose",
    "category",
    "retention_period", "retentionPeriod",
    "shared_with_third_parties", "sharedWithThirdParties",
    "security_measures", "securityMeasures",
})

_TRUE_STRINGS = {"true", "yes", "y", "1"}


@dataclass(frozen=True)
class DataCollectionItem:
    """One detected data handling statement."""
    type: str
    purpose: str
    category: str
    retention_period: Optional[str] = None
    shared_with_third_parties: bool = False
    security_measures: Tuple[str, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def purpose_mentions(self, *keywords: str) -> bool:
        purpose = self.purpose.lower()
        return any(k in purpose for k in keywords)

    def measures_mention(self, *keywords: str) -> bool:
        return any(k in m.lower() for m in self.security_measures for k in keywords)

    def retention_mentions(self, *keywords: str) -> bool:
        if not self.retention_period:
            return False
        retention = self.retention_period.lower()
        return any(k in retention for k in keywords)


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first truthy value among ``keys``, mirroring ``a or b`` lookups."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_measures(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(m) for m in value if m is not None)
    return (str(value),)


def to_data_collection_item(record: Mapping[str, Any]) -> DataCollectionItem:
    """Build a ``DataCollectionItem`` from one raw extraction record."""
    raw_type = _first_present(record, "type", "data_type")
    retention = _first_present(record, "retention_period", "retentionPeriod")
    extra = {k: v for k, v in record.items() if k not in RECOGNISED_FIELDS}
    return DataCollectionItem(
        type=str(raw_type) if raw_type else DEFAULT_TYPE,
        purpose=str(record.get("purpose") or DEFAULT_PURPOSE),
        # Classified from the raw label, not the "Unknown" placeholder
        category=classify_data_type(str(raw_type) if raw_type else ""),
        retention_period=str(retention) if retention else None,
        shared_with_third_parties=_coerce_bool(
            _first_present(record, "shared_with_third_parties", "sharedWithThirdParties")
        ),
        security_measures=_coerce_measures(
            _first_present(record, "security_measures", "securityMeasures")
        ),
        extra=MappingProxyType(extra),
    )


def map_to_data_collection_items(raw_data: Any) -> List[DataCollectionItem]:
    """Map a raw extraction payload to data collection items.

    Args:
        raw_data: Payload with a ``data_collection`` list of records.

    Returns:
        The items in input order.  Payloads that are not mappings, or
        have no ``data_collection`` list, give an empty list.  Entries
        that are not mappings are skipped.
    """
    if not isinstance(raw_data, Mapping):
        return []
    records = raw_data.get("data_collection")
    if not records or isinstance(records, (str, bytes)) or not isinstance(records, Iterable):
        return []
    return [to_data_collection_item(r) for r in records if isinstance(r, Mapping)]

