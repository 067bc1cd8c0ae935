"""SEPA reachability rule for beneficiary IBANs.

Credit transfers can only be sent to accounts held in the SEPA scheme area.
The country is read from the first two characters of the IBAN.
"""

from __future__ import annotations

import re
from typing import Optional

SEPA_COUNTRY_CODES = frozenset(
    {
        # EU member states
        "AT", "BE", "BG", "CY", "CZ", "DE", "DK", "EE", "ES", "FI", "FR", "GR",
        "HR", "HU", "IE", "IT", "LT", "LU", "LV", "MT", "NL", "PL", "PT", "RO",
        "SE", "SI", "SK",
        # EEA
        "IS", "LI", "NO",
        # Other scheme participants
        "AD", "AL", "CH", "GB", "GI", "MC", "MD", "ME", "MK", "RS", "SM", "VA",
        # French overseas territories with their own IBAN prefix
        "BL", "GF", "GP", "MF", "MQ", "PM", "RE", "YT",
    }
)

_IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{10,30}$")


def normalize_iban(iban: Optional[str]) -> str:
    """Return the IBAN without spaces and upper-cased."""
    return re.sub(r"\s+", "", str(iban or "")).upper()


def iban_country(iban: Optional[str]) -> Optional[str]:
    text = normalize_iban(iban)
    if not _IBAN_PATTERN.match(text):
        return None
    return text[:2]


def in_sepa_zone(iban: Optional[str]) -> bool:
    """True when the IBAN is well-formed and its country belongs to SEPA."""
    country = iban_country(iban)
    return country is not None and country in SEPA_COUNTRY_CODES


__all__ = ["SEPA_COUNTRY_CODES", "iban_country", "in_sepa_zone", "normalize_iban"]
