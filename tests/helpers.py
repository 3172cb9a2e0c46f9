from __future__ import annotations

from policylens.data_collection import DataCollectionItem


def make_item(**overrides) -> DataCollectionItem:
    fields = {
        "type": "Email Address",
        "purpose": "Account creation",
        "category": "email",
    }
    fields.update(overrides)
    if "security_measures" in fields:
        fields["security_measures"] = tuple(fields["security_measures"])
    return DataCollectionItem(**fields)
