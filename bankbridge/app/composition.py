"""Builds a ready-to-use partner adapter from the process environment.

Calling workflows start here instead of assembling the pieces themselves, so
logging is configured before the first partner call is made.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from bankbridge.adapters.bank_rest import BankRestAdapter
from bankbridge.adapters.partner_config import PartnerConfig
from bankbridge.domain.ports import EventSink
from bankbridge.utils.logging import configure_logging


def build_bank_adapter(
    environ: Optional[Mapping[str, str]] = None, *, events: Optional[EventSink] = None
) -> BankRestAdapter:
    """Configure logging, read ``BANKBRIDGE_PARTNER_*`` and return the adapter.

    Raises:
        ValueError: If the partner configuration is missing or invalid.
    """
    env = os.environ if environ is None else environ
    configure_logging(env)
    log = logging.getLogger(__name__)
    try:
        config = PartnerConfig.from_env(env)
    except ValueError as exc:
        log.error("Partner adapter not started: %s", exc)
        raise
    log.info(
        "Partner adapter ready: %s (timeout %ss, GET retries %s)",
        config.base_url,
        config.request_timeout_s,
        config.get_retries,
    )
    return BankRestAdapter.from_config(config, events=events)
