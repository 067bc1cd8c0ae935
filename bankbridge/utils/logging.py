"""Process-wide logging setup for the partner adapter.

The level comes from ``BANKBRIDGE_LOG_LEVEL`` (a level name or number) or,
when that is unset, from the ``BANKBRIDGE_DEBUG`` switch. Every record that
reaches the installed handler has card numbers and bearer tokens masked.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LEVEL_VAR = "BANKBRIDGE_LOG_LEVEL"
DEBUG_VAR = "BANKBRIDGE_DEBUG"
# Echo full URLs and request bodies at DEBUG.
_QUIET_LOGGERS = ("urllib3",)
_DEBUG_ON = {"1", "true", "yes", "on"}

# 13 to 19 ASCII digits standing alone: the length range of a card PAN.
_PAN_RE = re.compile(r"(?<![0-9])([0-9]{9,15})([0-9]{4})(?![0-9])")
_BEARER_RE = re.compile(r"(Bearer\s+)[^\s'\",]+", re.IGNORECASE)


def mask_secrets(text: str) -> str:
    """Hide bearer tokens and card-number-like digit runs (last four digits stay)."""
    text = _BEARER_RE.sub(r"\1***", text)
    return _PAN_RE.sub(lambda m: "*" * len(m.group(1)) + m.group(2), text)


class RedactingFilter(logging.Filter):
    """Handler filter that rewrites the rendered message through ``mask_secrets``."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def parse_level(value: Optional[str]) -> Optional[int]:
    """Level for ``"warning"`` or ``"30"``; ``None`` when the text names no level."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else None


def resolve_level(
    environ: Optional[Mapping[str, str]] = None, default: int = logging.INFO
) -> int:
    env = os.environ if environ is None else environ
    explicit = parse_level(env.get(LEVEL_VAR))
    if explicit is not None:
        return explicit
    if (env.get(DEBUG_VAR) or "").strip().lower() in _DEBUG_ON:
        return logging.DEBUG
    return default


def _has_redacting_handler(logger: logging.Logger) -> bool:
    return any(
        isinstance(flt, RedactingFilter) for handler in logger.handlers for flt in handler.filters
    )


def configure_logging(
    environ: Optional[Mapping[str, str]] = None, default_level: int = logging.INFO
) -> int:
    """Configure the root logger and return the effective level.

    The masking stream handler is installed on the first call only; later
    calls re-apply the level. ``urllib3`` never goes below WARNING.
    """
    env = os.environ if environ is None else environ
    level = resolve_level(env, default_level)

    root = logging.getLogger()
    if not _has_redacting_handler(root):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
        handler.addFilter(RedactingFilter())
        root.addHandler(handler)
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    raw = env.get(LEVEL_VAR)
    if raw and raw.strip() and parse_level(raw) is None:
        logging.getLogger(__name__).warning(
            "Ignoring unreadable %s=%r, using %s", LEVEL_VAR, raw, logging.getLevelName(level)
        )
    return level
