"""
Exception hierarchy for the Tenant Screening Engine.

Evaluators never raise for well-typed input. These exceptions cover the
hard preconditions checked before evaluation begins: applicant payload
validation, configuration invariants and jurisdiction lookup.
"""

from typing import Any, Dict, List, Optional


class ScreeningError(Exception):
    """Base exception for all screening engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ApplicationValidationError(ScreeningError):
    """Raised when an applicant payload is malformed or out of range."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"Invalid tenant application: {'; '.join(self.errors)}",
            details={"errors": self.errors},
        )


class ConfigValidationError(ScreeningError):
    """Raised when a screening configuration violates its invariants."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"Invalid screening configuration: {'; '.join(self.errors)}",
            details={"errors": self.errors},
        )


class UnknownJurisdictionError(ScreeningError):
    """Raised when a jurisdiction key does not resolve to a policy."""

    def __init__(self, jurisdiction_id: Any, known: Optional[List[str]] = None):
        self.jurisdiction_id = jurisdiction_id
        self.known = list(known or [])
        super().__init__(
            f"Unknown jurisdiction: {jurisdiction_id!r}",
            details={"jurisdiction_id": jurisdiction_id, "known": self.known},
        )
