from __future__ import annotations

import pytest


@pytest.fixture
def financial_record() -> dict:
    return {
        "type": "Financial Account Number",
        "purpose": "Process payments",
        "sharedWithThirdParties": False,
        "securityMeasures": ["Encryption in transit", "Access controls"],
    }


@pytest.fixture
def financial_payload(financial_record) -> dict:
    return {"data_collection": [financial_record]}
