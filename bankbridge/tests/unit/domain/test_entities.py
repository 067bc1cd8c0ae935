from __future__ import annotations

import pytest

from bankbridge.domain.entities import Cmc7, WalletCard
from bankbridge.tests.unit.helpers import make_wallet_card, make_wallet_company, make_wallet_user


def test_cmc7_parse_splits_fixed_width_zones() -> None:
    cmc7 = Cmc7.parse("1234567 012345678901 987654321098")

    assert cmc7.a == "1234567"
    assert cmc7.b == "012345678901"
    assert cmc7.c == "987654321098"
    assert str(cmc7) == "1234567012345678901987654321098"


@pytest.mark.parametrize("packed", ["", "123", "1" * 32])
def test_cmc7_parse_rejects_wrong_length(packed: str) -> None:
    with pytest.raises(ValueError):
        Cmc7.parse(packed)


def test_cmc7_rejects_wrong_zone_width() -> None:
    with pytest.raises(ValueError):
        Cmc7(a="123", b="012345678901", c="987654321098")


def test_wallet_card_defaults_to_maximum_limits_and_hides_pin() -> None:
    card = make_wallet_card()

    assert card.limit_atm_week == WalletCard.MAX_LIMIT_ATM_WEEK
    assert card.limit_payment_week == WalletCard.MAX_LIMIT_PAYMENT_WEEK
    assert "new_pin" not in repr(card)


def test_wallet_company_first_user() -> None:
    wallet_company = make_wallet_company()
    assert wallet_company.first_user() is None

    first = make_wallet_user(wallet_company)
    make_wallet_user(wallet_company, id=21)

    assert wallet_company.first_user() is first
