"""
Extraction payload validation module for PolicyLens.

Checks the output of the statement extraction step before it reaches the
risk assessment engine.  Payloads arrive either as JSON
(``{"data_collection": [...]}``) or as a CSV file with one statement per
row.  Problems are collected into a ``PayloadValidationResult`` with
errors, warnings and informational notes instead of being raised.
"""
from __future__ import annotations

import io
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from policylens.category_classifier import matching_rule
from policylens.data_collection import RECOGNISED_FIELDS
from policylens.risk_weights import FALLBACK_CATEGORY

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 10
MAX_STATEMENTS = 500
FALLBACK_ENCODINGS = ("cp1252", "latin-1")

# CSV header aliases -> payload keys
CSV_COLUMN_ALIASES: Dict[str, str] = {
    "type": "type",
    "data_type": "type",
    "data type": "type",
    "purpose": "purpose",
    "retention_period": "retention_period",
    "retention period": "retention_period",
    "retention": "retention_period",
    "shared_with_third_parties": "shared_with_third_parties",
    "shared with third parties": "shared_with_third_parties",
    "shared": "shared_with_third_parties",
    "security_measures": "security_measures",
    "security measures": "security_measures",
}
MEASURE_SEPARATORS = (";", "|")


class PayloadValidationResult:
    """Container for payload validation results."""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: List[str] = []
        self.item_count = 0
        self.file_size_mb = 0.0
        self.encoding = "utf-8"
        self.source_format = "json"
        self.malformed = False

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False


def _read_content(content: Any) -> Any:
    if hasattr(content, "read"):
        data = content.read()
        if hasattr(content, "seek"):
            content.seek(0)
        return data
    return content


def _decode(raw: bytes, result: PayloadValidationResult) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    # cp1252 leaves five bytes undefined; latin-1 maps every byte
    for encoding in FALLBACK_ENCODINGS:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        break
    result.encoding = encoding
    result.warnings.append(f"File encoding detected as {encoding} (not UTF-8)")
    return text


def _looks_like_csv(text: str, filename: str) -> bool:
    name = filename.lower()
    if name.endswith(".csv"):
        return True
    if name.endswith(".json"):
        return False
    return not text.lstrip().startswith(("{", "["))


def _split_measures(value: str) -> List[str]:
    parts = [value]
    for separator in MEASURE_SEPARATORS:
        parts = [p for part in parts for p in part.split(separator)]
    return [p.strip() for p in parts if p.strip()]


def _parse_csv(text: str, result: PayloadValidationResult) -> Optional[Dict[str, Any]]:
    result.source_format = "csv"
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, skipinitialspace=True).fillna("")
    except pd.errors.EmptyDataError:
        result.add_error("CSV file is empty or contains no data")
        return None
    except pd.errors.ParserError as e:
        result.add_error(f"CSV parsing error: {str(e)}")
        return None

    df.columns = [CSV_COLUMN_ALIASES.get(str(c).strip().lower(), str(c).strip()) for c in df.columns]
    if "type" not in df.columns:
        result.add_error("CSV file has no 'type' column")
        return None
    if len(df) == 0:
        result.add_error("CSV file contains no data rows")
        return None

    duplicate_cols = df.columns[df.columns.duplicated()].tolist()
    if duplicate_cols:
        result.warnings.append(f"Duplicate column names found: {duplicate_cols}")
        df = df.loc[:, ~df.columns.duplicated()]

    records = []
    for row in df.to_dict(orient="records"):
        record = {k: v for k, v in row.items() if v != ""}
        if "security_measures" in record:
            record["security_measures"] = _split_measures(record["security_measures"])
        records.append(record)
    result.info.append(f"Loaded {len(records)} statements from CSV")
    return {"data_collection": records}


def _parse_json(text: str, result: PayloadValidationResult) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        result.add_error(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")
        result.malformed = True
        return None


def _check_structure(parsed: Any, result: PayloadValidationResult) -> Optional[Dict[str, Any]]:
    if isinstance(parsed, list):
        result.warnings.append("Payload is a bare list; treating it as the 'data_collection' list")
        parsed = {"data_collection": parsed}
    if not isinstance(parsed, Mapping):
        result.add_error("Payload must be an object with a 'data_collection' list")
        return None
    if "data_collection" not in parsed:
        result.add_error("Payload has no 'data_collection' list")
        return None
    if not isinstance(parsed["data_collection"], list):
        result.add_error("'data_collection' must be a list of statements")
        return None
    return dict(parsed)


def _validate_statements(payload: Mapping[str, Any], result: PayloadValidationResult) -> None:
    """Check individual statements and add warnings/info to result."""
    records = payload["data_collection"]
    statements = [r for r in records if isinstance(r, Mapping)]
    result.item_count = len(statements)

    skipped = len(records) - len(statements)
    if skipped:
        result.warnings.append(f"{skipped} entries are not objects and will be ignored")

    if not statements:
        result.warnings.append("No data collection statements found; the assessment will score 0")
        return

    if result.item_count > MAX_STATEMENTS:
        result.warnings.append(f"Large payload ({result.item_count:,} statements) - results may be hard to review")

    missing_type = sum(1 for r in statements if not (r.get("type") or r.get("data_type")))
    if missing_type:
        result.warnings.append(f"{missing_type} statements have no type and will be labelled 'Unknown'")

    missing_purpose = sum(1 for r in statements if not r.get("purpose"))
    if missing_purpose:
        result.warnings.append(f"{missing_purpose} statements have no purpose and will use 'Not specified'")

    extra_fields = sorted({str(k) for r in statements for k in r if k not in RECOGNISED_FIELDS})
    if extra_fields:
        result.info.append(f"Extra fields passed through unscored: {', '.join(extra_fields)}")

    unmatched = [
        str(r.get("type") or r.get("data_type") or "")
        for r in statements
        if matching_rule(str(r.get("type") or r.get("data_type") or "")) is None
    ]
    if unmatched:
        result.info.append(
            f"{len(unmatched)} statements matched no category rule and were classified as "
            f"'{FALLBACK_CATEGORY}'"
        )


def validate_extraction_payload(content: Any, filename: str = "") -> Tuple[Optional[Dict[str, Any]], PayloadValidationResult]:
    """
    Validate an extraction payload.

    Args:
        content: Parsed mapping/list, JSON or CSV text, bytes or a file-like object
        filename: Original filename for context

    Returns:
        Tuple of (payload dict if valid, ValidationResult)
    """
    result = PayloadValidationResult()

    if isinstance(content, (Mapping, list)):
        payload = _check_structure(content, result)
    else:
        raw = _read_content(content)
        if raw is None:
            result.add_error("No payload provided")
            return None, result

        if isinstance(raw, bytes):
            result.file_size_mb = len(raw) / (1024 * 1024)
        else:
            result.file_size_mb = len(str(raw).encode("utf-8")) / (1024 * 1024)
        if result.file_size_mb > MAX_FILE_SIZE_MB:
            result.add_error(f"Payload size ({result.file_size_mb:.1f}MB) exceeds maximum allowed size of {MAX_FILE_SIZE_MB}MB")
            return None, result

        if filename and not filename.lower().endswith((".json", ".csv")):
            result.warnings.append(f"File extension '{filename.split('.')[-1]}' is not .json or .csv")

        text = _decode(raw, result) if isinstance(raw, bytes) else str(raw)
        if not text.strip():
            result.add_error("Payload is empty")
            return None, result

        if _looks_like_csv(text, filename):
            payload = _parse_csv(text, result)
        else:
            parsed = _parse_json(text, result)
            payload = _check_structure(parsed, result) if result.is_valid else None

    if payload is None:
        logger.warning("Rejected extraction payload: %s", "; ".join(result.errors))
        return None, result

    _validate_statements(payload, result)
    return payload, result


def format_validation_messages(result: PayloadValidationResult) -> str:
    """Format validation messages for display."""
    messages = []

    if result.errors:
        messages.append("❌ **Errors:**")
        for error in result.errors:
            messages.append(f"  • {error}")

    if result.warnings:
        messages.append("⚠️ **Warnings:**")
        for warning in result.warnings:
            messages.append(f"  • {warning}")

    if result.info:
        messages.append("ℹ️ **Information:**")
        for info in result.info:
            messages.append(f"  • {info}")

    return "\n".join(messages)
