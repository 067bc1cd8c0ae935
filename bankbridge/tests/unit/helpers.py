"""Shared builders and transport doubles for the unit tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from bankbridge.adapters.partner_config import PartnerConfig
from bankbridge.domain.entities import (
    Address,
    Company,
    PersonProfile,
    Stakeholder,
    WalletCard,
    WalletCompany,
    WalletUser,
)
from bankbridge.domain.enums import Civility, LegalForm
from bankbridge.domain.time_utils import PARTNER_TIMEZONE

FIXED_NOW = datetime(2024, 3, 1, 10, 15, 42, tzinfo=PARTNER_TIMEZONE)
FIXED_MINUTE = "2024-03-01 10:15"

_INVALID_JSON = object()


class ResponseStub:
    def __init__(
        self, payload: Any = None, status_code: int = 200, text: Optional[str] = None
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    @classmethod
    def invalid_json(cls, text: str, status_code: int = 200) -> "ResponseStub":
        return cls(_INVALID_JSON, status_code=status_code, text=text)

    def json(self) -> Any:
        if self._payload is _INVALID_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class TransportStub:
    """Records every request and answers with the configured responses in order."""

    def __init__(self, responses: Sequence[Any] = ()) -> None:
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, path, *, json_body=None, params=None):
        self.calls.append(
            {"method": method, "path": path, "json_body": json_body, "params": params}
        )
        if not self._responses:
            raise AssertionError(f"No stub response configured for {method} {path}")
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class EventSinkStub:
    def __init__(self) -> None:
        self.events: List[object] = []

    def publish(self, event: object) -> None:
        self.events.append(event)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_config(**overrides: Any) -> PartnerConfig:
    values = dict(
        base_url="https://partner.test/v1/",
        token="secret-token",
        tariff_id="77",
        perms_group="TRZ-CU-011",
        card_print="8529",
    )
    values.update(overrides)
    return PartnerConfig(**values)


def make_company(**overrides: Any) -> Company:
    company = Company(
        name="Acme Conseil",
        legal_form=LegalForm.SAS,
        ape_code="6202A",
        siret="12345678900011",
        registration_date=date(2019, 5, 14),
        street="12 rue des Lilas",
        postal_code="75011",
        city="Paris",
        country_code="FR",
        email="contact@acme.test",
        phone="+33102030405",
        annual_turnover="40-99",
        employees_range="1-9",
        last_net_income_range="5-9",
    )
    return replace(company, **overrides)


def make_profile(**overrides: Any) -> PersonProfile:
    profile = PersonProfile(
        civility=Civility.MRS,
        first_name="Jeanne",
        last_name="Martin",
        birth_date=date(1985, 7, 2),
        mailing_street="3 avenue Foch",
        mailing_postal_code="69006",
        mailing_city="Lyon",
        mailing_country_code="FR",
        nationality="FR",
        birth_place="Lyon",
        birth_country="FR",
        mobile_phone="+33611223344",
        income_range="19-23",
        personal_assets_range="0-2",
    )
    return replace(profile, **overrides)


def make_wallet_company(company: Optional[Company] = None, **overrides: Any) -> WalletCompany:
    values = dict(
        id=10,
        company=company or make_company(),
        partner_email="acme@wallets.test",
        partner_user_id=5001,
        partner_wallet_id=9001,
    )
    values.update(overrides)
    return WalletCompany(**values)


def make_wallet_user(
    wallet_company: Optional[WalletCompany] = None,
    *,
    profile: Optional[PersonProfile] = None,
    stakeholder: Optional[Stakeholder] = None,
    **overrides: Any,
) -> WalletUser:
    wallet_company = wallet_company or make_wallet_company()
    values = dict(
        id=20,
        wallet_company=wallet_company,
        profile=profile or make_profile(),
        stakeholder=stakeholder
        or Stakeholder(is_director=True, is_beneficiary=True, effective_beneficiary_percentage=60),
        partner_email="jeanne@wallets.test",
        partner_user_id=5002,
    )
    values.update(overrides)
    wallet_user = WalletUser(**values)
    wallet_company.wallet_users.append(wallet_user)
    return wallet_user


def make_address(**overrides: Any) -> Address:
    address = Address(
        first_name="Jeanne",
        last_name="Martin",
        street="3 avenue Foch",
        city="Lyon",
        postal_code="69006",
        country_code="FR",
    )
    return replace(address, **overrides)


def make_wallet_card(wallet_user: Optional[WalletUser] = None, **overrides: Any) -> WalletCard:
    values = dict(
        id=30,
        wallet_user=wallet_user or make_wallet_user(),
        delivery_address=make_address(),
        partner_card_id=7001,
        new_pin="1234",
    )
    values.update(overrides)
    return WalletCard(**values)


def raw_user(**overrides: Any) -> Dict[str, Any]:
    raw = {
        "userId": "5002",
        "userTypeId": "1",
        "userStatus": "VALIDATED",
        "email": "jeanne@wallets.test",
        "title": "MME",
        "firstname": "Jeanne",
        "lastname": "Martin",
        "birthday": "1985-07-02",
        "address1": "3 avenue Foch",
        "postcode": "69006",
        "city": "Lyon",
        "country": "FR",
        "nationality": "FR",
        "placeOfBirth": "Lyon",
        "birthCountry": "FR",
        "phone": "+33611223344",
        "parentUserId": "5001",
        "parentType": "leader",
        "employeeType": "1",
        "controllingPersonType": "1",
        "specifiedUSPerson": "0",
        "effectiveBeneficiary": "60.00",
        "kycLevel": "2",
        "kycReview": "0",
        "createdDate": "2024-02-28 09:12:01",
    }
    raw.update(overrides)
    return raw


def raw_card(**overrides: Any) -> Dict[str, Any]:
    raw = {
        "cardId": "7001",
        "userId": "5002",
        "walletId": "9001",
        "publicToken": "104563789",
        "statusCode": "UNLOCK",
        "isLive": "0",
        "embossedName": "JEANNE MARTIN",
        "maskedPan": "519872******4839",
        "expiryDate": "2027-03-31",
        "optionAtm": "1",
        "optionForeign": "1",
        "optionNfc": "0",
        "optionOnline": "1",
        "pinTryExceeds": "0",
        "limitAtmWeek": "2000",
        "limitPaymentWeek": "10000",
        "cardDesign": "13379",
    }
    raw.update(overrides)
    return raw


def raw_payout(**overrides: Any) -> Dict[str, Any]:
    raw = {
        "payoutId": "88001",
        "userId": "5001",
        "walletId": "9001",
        "beneficiaryId": "4401",
        "payoutTypeId": "1",
        "payoutStatus": "PENDING",
        "amount": "100.00",
        "label": "rent",
        "createdDate": "2024-03-01 10:15:43",
        "payoutDate": "2024-03-01",
    }
    raw.update(overrides)
    return raw


def raw_beneficiary(**overrides: Any) -> Dict[str, Any]:
    raw = {
        "id": "4401",
        "userId": "5001",
        "name": "Landlord SCI",
        "iban": "FR7630006000011234567890189",
        "bic": "AGRIFRPP",
        "address": "",
        "usableForSct": True,
        "sepaCreditorIdentifier": "",
        "sddCoreBlacklist": [],
        "sddCoreKnownUniqueMandateReference": [],
        "sddB2bWhitelist": [],
    }
    raw.update(overrides)
    return raw


def raw_wallet(**overrides: Any) -> Dict[str, Any]:
    raw = {
        "walletId": "9001",
        "userId": "5001",
        "walletTypeId": "10",
        "walletStatus": "VALIDATED",
        "currency": "EUR",
        "iban": "FR7616798000010000900100146",
        "bic": "TRZOFR21XXX",
        "eventName": "bankbridge-wallet",
        "tariffId": "77",
        "createdDate": "2024-02-28 09:30:00",
    }
    raw.update(overrides)
    return raw
