from __future__ import annotations

import pytest

from bankbridge.domain.sepa import iban_country, in_sepa_zone, normalize_iban


@pytest.mark.parametrize(
    "iban",
    [
        "FR7630006000011234567890189",
        "fr76 3000 6000 0112 3456 7890 189",
        "CH9300762011623852957",
        "GB29NWBK60161331926819",
        "MC5811222000010123456789030",
    ],
)
def test_sepa_ibans_are_eligible(iban: str) -> None:
    assert in_sepa_zone(iban)


@pytest.mark.parametrize(
    "iban",
    ["BR1800360305000010009795493C1", "US12345678901234", "", None, "FR76"],
)
def test_other_ibans_are_not_eligible(iban) -> None:
    assert not in_sepa_zone(iban)


def test_iban_country_reads_prefix_of_normalized_iban() -> None:
    assert normalize_iban(" de89 3704 0044 0532 0130 00 ") == "DE89370400440532013000"
    assert iban_country("de89 3704 0044 0532 0130 00") == "DE"
    assert iban_country("not an iban") is None
