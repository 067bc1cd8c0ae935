"""Domain notifications emitted by the adapter after partner-side KYC changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserPhoneUpdated:
    """The partner accepted a new phone number for a wallet user."""

    wallet_user_id: int
    partner_user_id: Optional[int]
    phone: Optional[str]


__all__ = ["UserPhoneUpdated"]
