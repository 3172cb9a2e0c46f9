"""Custom exceptions used across PolicyLens."""

from __future__ import annotations

from typing import List, Optional


class PolicyLensError(Exception):
    """Base exception for PolicyLens errors."""


class ExtractionFailedError(PolicyLensError):
    """Raised when an extraction payload cannot be turned into statements."""

    def __init__(self, details: Optional[List[str]] = None, message: str = "Extraction failed") -> None:
        self.details = list(details or [])
        self.message = message
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: {'; '.join(self.details)}"


class MalformedPayloadError(ExtractionFailedError):
    """Raised when the payload body is not parseable JSON at all."""
