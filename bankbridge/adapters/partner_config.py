"""Immutable partner configuration handed to the adapter at construction.

Environment variables are read once, by ``PartnerConfig.from_env`` at
composition time; no adapter method looks at the process environment.

Variables:
    BANKBRIDGE_PARTNER_BASE_URL      (required) partner API root URL
    BANKBRIDGE_PARTNER_TOKEN         (required) bearer token
    BANKBRIDGE_PARTNER_TARIFF_ID     (required) tariff applied to new wallets
    BANKBRIDGE_PARTNER_PERMS_GROUP   (required) card permission group code
    BANKBRIDGE_PARTNER_CARD_PRINT    (required) card print (design) code
    BANKBRIDGE_PARTNER_WALLET_EVENT  wallet event name, default ``bankbridge-wallet``
    BANKBRIDGE_PARTNER_TIMEOUT_S     request timeout in seconds, default 30
    BANKBRIDGE_PARTNER_GET_RETRIES   retries for idempotent GETs, default 0
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_ENV_PREFIX = "BANKBRIDGE_PARTNER_"
_REQUIRED = ("BASE_URL", "TOKEN", "TARIFF_ID", "PERMS_GROUP", "CARD_PRINT")


@dataclass(frozen=True)
class PartnerConfig:
    """Connection settings and product identifiers for the partner API.

    Attributes:
        base_url: Partner API root, e.g. ``https://sandbox.example-bank.io/v1/``.
        token: Bearer token sent in the ``Authorization`` header.
        tariff_id: Tariff identifier applied when creating wallets.
        perms_group: Permission group code applied when issuing cards.
        card_print: Card print (design) code applied when issuing cards.
        wallet_event_name: Label attached to wallets created by this system.
        request_timeout_s: Timeout for every partner call.
        get_retries: Extra attempts for idempotent GETs on connect/timeout errors.
    """

    base_url: str
    token: str
    tariff_id: str
    perms_group: str
    card_print: str
    wallet_event_name: str = "bankbridge-wallet"
    request_timeout_s: float = 30.0
    get_retries: int = 0

    def __post_init__(self) -> None:
        if not str(self.base_url or "").strip():
            raise ValueError("PartnerConfig.base_url must not be blank.")
        if not str(self.token or "").strip():
            raise ValueError("PartnerConfig.token must not be blank.")
        if self.request_timeout_s <= 0:
            raise ValueError("PartnerConfig.request_timeout_s must be positive.")
        if self.get_retries < 0:
            raise ValueError("PartnerConfig.get_retries cannot be negative.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PartnerConfig":
        """Build the configuration from ``BANKBRIDGE_PARTNER_*`` variables.

        Raises:
            ValueError: If a required variable is missing or a number is invalid.
        """
        env = os.environ if environ is None else environ

        def _get(name: str) -> Optional[str]:
            value = env.get(_ENV_PREFIX + name)
            if value is None:
                return None
            value = value.strip()
            return value or None

        missing = [_ENV_PREFIX + name for name in _REQUIRED if _get(name) is None]
        if missing:
            raise ValueError(f"Missing partner configuration: {', '.join(missing)}")

        timeout_raw = _get("TIMEOUT_S")
        retries_raw = _get("GET_RETRIES")
        try:
            timeout = float(timeout_raw) if timeout_raw else 30.0
            retries = int(retries_raw) if retries_raw else 0
        except ValueError as exc:
            raise ValueError(f"Invalid numeric partner configuration: {exc}") from exc

        return cls(
            base_url=_get("BASE_URL"),
            token=_get("TOKEN"),
            tariff_id=_get("TARIFF_ID"),
            perms_group=_get("PERMS_GROUP"),
            card_print=_get("CARD_PRINT"),
            wallet_event_name=_get("WALLET_EVENT") or "bankbridge-wallet",
            request_timeout_s=timeout,
            get_retries=retries,
        )

    def __repr__(self) -> str:
        return (
            f"PartnerConfig(base_url={self.base_url!r}, token='***', "
            f"tariff_id={self.tariff_id!r}, perms_group={self.perms_group!r}, "
            f"card_print={self.card_print!r})"
        )


__all__ = ["PartnerConfig"]
