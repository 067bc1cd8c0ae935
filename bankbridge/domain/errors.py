"""Domain-level error types raised at the partner adapter boundary.

Transport-specific exceptions (``bankbridge.adapters.api_errors``) never cross
the facade. The error classifier turns them into one of the kinds below and
annotates them with the failed operation and its identifying arguments.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class PartnerError(RuntimeError):
    """Base class for classified partner integration failures."""

    kind = "partner_error"

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        status: Optional[int] = None,
        code: Optional[str] = None,
        cause_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context: Dict[str, Any] = dict(context or {})
        self.status = status
        self.code = code
        self.cause_message = cause_message

    def annotate(
        self, *, operation: str, context: Optional[Mapping[str, Any]] = None
    ) -> "PartnerError":
        """Attach operation name and identifying arguments, keeping earlier ones."""
        if self.operation is None:
            self.operation = operation
        for key, value in (context or {}).items():
            self.context.setdefault(key, value)
        return self

    def __str__(self) -> str:
        if not self.operation:
            return self.message
        return f"{self.operation}: {self.message}"


class EmptyResult(PartnerError):
    """Zero records where exactly one was expected."""

    kind = "empty_result"


class AmbiguousResult(PartnerError):
    """More than one record where exactly one was expected."""

    kind = "ambiguous_result"

    def __init__(self, message: str, *, count: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.count = count


class TransportFailure(PartnerError):
    """Network failure, timeout, or 5xx answer from the partner."""

    kind = "transport_failure"


class RejectedRequest(PartnerError):
    """4xx answer: the partner refused a malformed or business-invalid request."""

    kind = "rejected_request"

    def __init__(self, message: str, *, hint: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.hint = hint


class IneligibleBeneficiary(PartnerError):
    """Local precondition failure: the beneficiary cannot receive credit transfers."""

    kind = "ineligible_beneficiary"


class IncompleteRequest(PartnerError, ValueError):
    """A partner id or other value needed to build the request is missing locally."""

    kind = "incomplete_request"


class MalformedResponse(PartnerError):
    """A partner record is missing a required field or carries an unparseable value."""

    kind = "malformed_response"


class MalformedRecord(ValueError):
    """Raised by normalizers when a required field is absent or invalid.

    Normalizers stay free of domain error handling; the facade classifies this
    into ``MalformedResponse``.
    """

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


__all__ = [
    "AmbiguousResult",
    "EmptyResult",
    "IncompleteRequest",
    "IneligibleBeneficiary",
    "MalformedRecord",
    "MalformedResponse",
    "PartnerError",
    "RejectedRequest",
    "TransportFailure",
]
