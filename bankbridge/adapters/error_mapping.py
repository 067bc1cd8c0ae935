"""Translate adapter and normalizer failures into classified ``PartnerError`` kinds."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from bankbridge.domain.errors import (
    MalformedRecord,
    MalformedResponse,
    PartnerError,
    RejectedRequest,
    TransportFailure,
)

from .api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    extract_error_hint,
)


def classify_error(
    exc: BaseException,
    *,
    operation: str,
    context: Optional[Mapping[str, Any]] = None,
) -> Optional[PartnerError]:
    """Map a failure raised while serving ``operation`` to a domain error.

    Args:
        exc: The exception raised by the transport, the status check, the
            single-result extractor, or a normalizer.
        operation: Facade operation name, recorded on the returned error.
        context: Identifying arguments of the call. Callers must not put PINs
            or full card numbers in it.

    Returns:
        PartnerError: The classified error, annotated with operation/context.
        None: When ``exc`` is not a partner failure (programming errors are
        left to propagate unchanged).
    """
    ctx = dict(context or {})
    if isinstance(exc, PartnerError):
        return exc.annotate(operation=operation, context=ctx)
    if isinstance(exc, ApiTimeoutError):
        return TransportFailure(
            "Partner did not answer in time.",
            operation=operation,
            context=ctx,
            cause_message=str(exc),
        )
    if isinstance(exc, ApiClientError):
        hint = exc.hint or extract_error_hint(exc.payload)
        return RejectedRequest(
            _compose_message(f"Partner rejected the request (HTTP {exc.status})", hint),
            operation=operation,
            context=ctx,
            status=exc.status,
            code=exc.code,
            hint=hint,
            cause_message=str(exc),
        )
    if isinstance(exc, ApiServerError):
        return TransportFailure(
            f"Partner server error (HTTP {exc.status}).",
            operation=operation,
            context=ctx,
            status=exc.status,
            cause_message=str(exc),
        )
    if isinstance(exc, ApiError):
        return TransportFailure(
            "Unexpected partner response.",
            operation=operation,
            context=ctx,
            status=exc.status,
            cause_message=str(exc),
        )
    if isinstance(exc, MalformedRecord):
        if exc.field:
            ctx.setdefault("field", exc.field)
        return MalformedResponse(
            "Partner record could not be read.",
            operation=operation,
            context=ctx,
            cause_message=str(exc),
        )
    return None


def _compose_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if not hint_text:
        return f"{base}."
    return f"{base}: {hint_text}"


__all__ = ["classify_error"]
