"""Pure request builders: internal domain state in, partner request out.

Each builder returns a ``PartnerRequest`` and performs no I/O. Optional fields
are only sent when they hold a value, dates travel as ``YYYY-MM-DD`` and money
as two-decimal strings. Creation endpoints carry an ``accessTag`` computed by
``generate_access_tag`` so the partner can drop a retried duplicate.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional

from bankbridge.domain.entities import (
    Address,
    Cmc7,
    Invoice,
    WalletCard,
    WalletCheck,
    WalletCompany,
    WalletUser,
)
from bankbridge.domain.enums import (
    CardStatus,
    ControllingPersonType,
    DrawerType,
    EmployeeType,
    ParentType,
    PayinMethod,
    UserType,
)
from bankbridge.domain.errors import IncompleteRequest
from bankbridge.domain.records import PartnerBeneficiary
from bankbridge.domain.time_utils import format_partner_date

from .access_tag import generate_access_tag, minute_stamp
from .partner_codes import (
    CARD_LOCK_STATUS,
    CIVILITY,
    CONTROLLING_PERSON_TYPE,
    CURRENCY_EUR,
    DRAWER_TYPE,
    EMPLOYEE_TYPE,
    ENTITY_TYPE_ACTIVE_NON_FINANCIAL_OTHER,
    LEGAL_FORM,
    PARENT_TYPE,
    PAYIN_METHOD,
    SPECIFIED_US_PERSON_NO,
    TRANSFER_TYPE_CLIENT_FEES,
    USER_TYPE,
    WALLET_TYPE_PAYMENT_ACCOUNT,
    parse_partner_flag,
)
from .partner_config import PartnerConfig

CLIENT_FEES_LABEL = "Frais bancaires"
WALLET_ORIGIN_OPERATOR = "OPERATOR"

# Individual companies report fixed minimal ranges.
INDIVIDUAL_ANNUAL_TURNOVER = "0-39"
INDIVIDUAL_NET_INCOME_RANGE = "0-4"

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class PartnerRequest:
    """One outbound partner call, ready for ``PartnerTransport.request``."""

    method: str
    path: str
    json_body: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


def format_amount(value: Any) -> str:
    """Render a money amount as a two-decimal string (``100`` -> ``"100.00"``)."""
    return str(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def select_fields(payload: Mapping[str, Any], fields: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Keep only the requested keys of ``payload``; no selection keeps everything."""
    if not fields:
        return dict(payload)
    wanted = set(fields)
    return {key: value for key, value in payload.items() if key in wanted}


def _diff_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _same_value(desired: Any, current: Any) -> bool:
    if isinstance(desired, bool):
        return parse_partner_flag(current) is desired
    if isinstance(desired, (int, float, Decimal)):
        if isinstance(current, bool):
            current = int(current)
        try:
            return Decimal(str(desired)) == Decimal(str(current).strip())
        except (InvalidOperation, ValueError):
            return False
    return _diff_text(desired) == _diff_text(current)


def diff_fields(desired: Mapping[str, Any], current: Mapping[str, Any]) -> Dict[str, Any]:
    """Entries of ``desired`` that differ from ``current`` (or that it lacks).

    Values are compared on their text, numbers on their value, so ``60``,
    ``"60"`` and ``"60.00"`` agree. Booleans accept the partner's spellings
    (``0``, ``"0"``, ``false``). A missing partner value equals ``None``.
    """
    return {
        key: value
        for key, value in desired.items()
        if not _same_value(value, current.get(key))
    }


def _compact(body: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}


def _require(value: Any, label: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise IncompleteRequest(f"{label} is required to build this partner request.")
    return value


def _civility_code(civility) -> Optional[str]:
    return CIVILITY.to_partner(civility) if civility is not None else None


# ---- Users and companies ----
def _personal_fields(wallet_user: WalletUser) -> Dict[str, Any]:
    profile = wallet_user.profile
    stakeholder = wallet_user.stakeholder
    is_director = stakeholder.is_director
    return {
        "email": wallet_user.partner_email,
        "title": _civility_code(profile.civility),
        "firstname": profile.first_name,
        "lastname": profile.last_name,
        "birthday": format_partner_date(profile.birth_date),
        "address1": profile.mailing_street,
        "postcode": profile.mailing_postal_code,
        "city": profile.mailing_city,
        "country": profile.mailing_country_code,
        "nationality": profile.nationality,
        "placeOfBirth": profile.birth_place,
        "birthCountry": profile.birth_country,
        "phone": profile.mobile_phone,
        "parentUserId": wallet_user.wallet_company.partner_user_id,
        "parentType": PARENT_TYPE.to_partner(
            ParentType.LEADER if is_director else ParentType.SHAREHOLDER
        ),
        "employeeType": EMPLOYEE_TYPE.to_partner(
            EmployeeType.LEADER if is_director else EmployeeType.NONE
        ),
        "controllingPersonType": CONTROLLING_PERSON_TYPE.to_partner(
            ControllingPersonType.SHAREHOLDER
            if stakeholder.is_beneficiary
            else ControllingPersonType.DIRECTOR
        ),
    }


def _kyb_flags(wallet_company: WalletCompany) -> Dict[str, Any]:
    return {
        "entityType": ENTITY_TYPE_ACTIVE_NON_FINANCIAL_OTHER,
        "activityOutsideEu": wallet_company.activity_outside_eu,
        "economicSanctions": wallet_company.economic_sanctions,
        "residentCountriesSanctions": wallet_company.resident_countries_sanctions,
        "involvedSanctions": wallet_company.involved_sanctions,
    }


def format_user_body(
    wallet_user: WalletUser, fields: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Partner representation of a wallet user, optionally reduced to ``fields``.

    Users of an individual company are the company itself on the partner side,
    so they get the merged individual-company body.
    """
    wallet_company = wallet_user.wallet_company
    if wallet_company.company.is_individual_company:
        body = format_individual_company_body(wallet_company)
    else:
        body = {"userTypeId": USER_TYPE.to_partner(UserType.PHYSICAL)}
        body.update(_personal_fields(wallet_user))
        body["specifiedUSPerson"] = SPECIFIED_US_PERSON_NO
        body["effectiveBeneficiary"] = wallet_user.stakeholder.effective_beneficiary_percentage
        body = _compact(body)
    return select_fields(body, fields)


def format_company_body(wallet_company: WalletCompany) -> Dict[str, Any]:
    company = wallet_company.company
    if company.is_individual_company:
        return format_individual_company_body(wallet_company)
    body = {
        "userTypeId": USER_TYPE.to_partner(UserType.CORPORATE),
        "email": wallet_company.partner_email,
        "legalName": company.name,
        "legalForm": LEGAL_FORM.to_partner(company.legal_form),
        "legalSector": company.ape_code,
        "legalRegistrationNumber": company.siret,
        "legalRegistrationDate": format_partner_date(company.registration_date),
        "legalAnnualTurnOver": company.annual_turnover,
        "legalNumberOfEmployeeRange": company.employees_range,
        "legalNetIncomeRange": company.last_net_income_range,
        "address1": company.street,
        "postcode": company.postal_code,
        "city": company.city,
        "country": company.country_code,
        "phone": company.phone,
        "specifiedUSPerson": SPECIFIED_US_PERSON_NO,
    }
    body.update(_kyb_flags(wallet_company))
    return _compact(body)


def format_individual_company_body(wallet_company: WalletCompany) -> Dict[str, Any]:
    """Company-level fields merged with the personal fields of its only user.

    The personal fields win on shared keys (``email`` in particular).
    """
    company = wallet_company.company
    company_part = {
        "email": company.email,
        "userTypeId": USER_TYPE.to_partner(UserType.PHYSICAL),
        "specifiedUSPerson": SPECIFIED_US_PERSON_NO,
        "legalName": company.name,
        "legalForm": LEGAL_FORM.to_partner(company.legal_form),
        "legalSector": company.ape_code,
        "legalRegistrationNumber": company.siret,
        "legalRegistrationDate": format_partner_date(company.registration_date),
        "legalAnnualTurnOver": INDIVIDUAL_ANNUAL_TURNOVER,
        "legalNumberOfEmployeeRange": company.employees_range,
        "legalNetIncomeRange": INDIVIDUAL_NET_INCOME_RANGE,
    }
    company_part.update(_kyb_flags(wallet_company))

    personal_part: Dict[str, Any] = {}
    wallet_user = wallet_company.first_user()
    if wallet_user is not None:
        personal_part = _personal_fields(wallet_user)
        personal_part["incomeRange"] = wallet_user.profile.income_range
        personal_part["personalAssets"] = wallet_user.profile.personal_assets_range

    return _compact({**_compact(company_part), **_compact(personal_part)})


def build_create_user(wallet_user: WalletUser) -> PartnerRequest:
    body = {"accessTag": generate_access_tag("createUser", wallet_user.partner_email)}
    body.update(format_user_body(wallet_user))
    return PartnerRequest("POST", "users", json_body=body)


def build_get_user(partner_user_id: Any) -> PartnerRequest:
    return PartnerRequest("GET", f"users/{_require(partner_user_id, 'partner user id')}")


def build_update_user(partner_user_id: Any, diff: Mapping[str, Any]) -> PartnerRequest:
    return PartnerRequest(
        "PUT", f"users/{_require(partner_user_id, 'partner user id')}", json_body=dict(diff)
    )


def build_kyc_review(partner_user_id: Any) -> PartnerRequest:
    return PartnerRequest("PUT", f"users/{_require(partner_user_id, 'partner user id')}/Kycreview/")


def build_create_company(wallet_company: WalletCompany) -> PartnerRequest:
    body = {"accessTag": generate_access_tag("createCompany", wallet_company.partner_email)}
    body.update(format_company_body(wallet_company))
    return PartnerRequest("POST", "users", json_body=body)


def build_update_company(wallet_company: WalletCompany) -> PartnerRequest:
    user_id = _require(wallet_company.partner_user_id, "company partner user id")
    return PartnerRequest("PUT", f"users/{user_id}", json_body=format_company_body(wallet_company))


# ---- Wallets ----
def build_create_wallet(
    wallet_company: WalletCompany, tariff_id: str, event_name: str
) -> PartnerRequest:
    user_id = _require(wallet_company.partner_user_id, "company partner user id")
    body = {
        "accessTag": generate_access_tag("createWallet", user_id),
        "walletTypeId": WALLET_TYPE_PAYMENT_ACCOUNT,
        "tariffId": tariff_id,
        "userId": user_id,
        "currency": CURRENCY_EUR,
        "eventName": event_name,
    }
    return PartnerRequest("POST", "wallets", json_body=body)


def build_get_wallet(wallet_id: Any) -> PartnerRequest:
    return PartnerRequest(
        "GET",
        f"wallets/{_require(wallet_id, 'wallet id')}",
        params={"origin": WALLET_ORIGIN_OPERATOR},
    )


def build_close_wallet(wallet_id: Any) -> PartnerRequest:
    return PartnerRequest(
        "DELETE",
        f"wallets/{_require(wallet_id, 'wallet id')}",
        json_body={"origin": WALLET_ORIGIN_OPERATOR},
    )


def build_get_balances(wallet_id: Any) -> PartnerRequest:
    return PartnerRequest("GET", "balances", params={"walletId": _require(wallet_id, "wallet id")})


# ---- Cards ----
def _delivery_fields(address: Address) -> Dict[str, Any]:
    body = {
        "deliveryLastname": address.last_name,
        "deliveryFirstname": address.first_name,
        "deliveryAddress1": address.street,
        "deliveryCity": address.city,
        "deliveryPostcode": address.postal_code,
        "deliveryCountry": address.country_code,
    }
    optionals = {
        "deliveryTitle": _civility_code(address.title),
        "deliveryAddress2": address.additional_information_1,
        "deliveryAddress3": address.additional_information_2,
    }
    body.update(_compact(optionals))
    return body


def build_create_virtual_card(
    wallet_card: WalletCard, config: PartnerConfig, now: datetime
) -> PartnerRequest:
    wallet_user = wallet_card.wallet_user
    user_id = _require(wallet_user.partner_user_id, "card holder partner user id")
    wallet_id = _require(wallet_user.wallet_company.partner_wallet_id, "partner wallet id")
    body: Dict[str, Any] = {
        "accessTag": generate_access_tag(
            "createVirtualCard",
            minute_stamp(now),
            user_id,
            wallet_id,
            wallet_user.partner_email,
        ),
        "userId": user_id,
        "walletId": wallet_id,
        "permsGroup": config.perms_group,
        "cardPrint": config.card_print,
    }
    if wallet_card.new_pin is not None:
        body["pin"] = wallet_card.new_pin
    body.update(_delivery_fields(wallet_card.delivery_address))
    body["limitAtmWeek"] = WalletCard.MAX_LIMIT_ATM_WEEK
    body["limitPaymentDay"] = 0
    body["limitPaymentWeek"] = WalletCard.MAX_LIMIT_PAYMENT_WEEK
    return PartnerRequest("POST", "cards/CreateVirtual", json_body=body)


def build_convert_to_physical(card_id: Any, address: Address) -> PartnerRequest:
    card_id = _require(card_id, "card id")
    body = {"accessTag": generate_access_tag("convertToPhysicalCard", card_id)}
    body.update(_delivery_fields(address))
    return PartnerRequest("PUT", f"cards/{card_id}/ConvertVirtual/", json_body=body)


def build_activate_card(card_id: Any) -> PartnerRequest:
    return PartnerRequest("PUT", f"cards/{_require(card_id, 'card id')}/Activate/")


def build_set_card_status(card_id: Any, status: CardStatus) -> PartnerRequest:
    return PartnerRequest(
        "PUT",
        f"cards/{_require(card_id, 'card id')}/LockUnlock/",
        json_body={"lockStatus": CARD_LOCK_STATUS.to_partner(status)},
    )


def build_set_card_pin(card_id: Any, new_pin: str, confirm_pin: str) -> PartnerRequest:
    return PartnerRequest(
        "PUT",
        f"cards/{_require(card_id, 'card id')}/setPIN/",
        json_body={"newPIN": new_pin, "confirmPIN": confirm_pin},
    )


def build_unblock_card_pin(card_id: Any) -> PartnerRequest:
    return PartnerRequest("PUT", f"cards/{_require(card_id, 'card id')}/UnblockPIN/")


def build_update_card_limits(wallet_card: WalletCard) -> PartnerRequest:
    card_id = _require(wallet_card.partner_card_id, "partner card id")
    return PartnerRequest(
        "PUT",
        f"cards/{card_id}/Limits/",
        json_body={
            "limitAtmWeek": wallet_card.limit_atm_week,
            "limitPaymentWeek": wallet_card.limit_payment_week,
        },
    )


def build_update_card_options(wallet_card: WalletCard) -> PartnerRequest:
    card_id = _require(wallet_card.partner_card_id, "partner card id")
    return PartnerRequest(
        "PUT",
        f"cards/{card_id}/Options/",
        json_body={
            "foreign": wallet_card.foreign,
            "online": wallet_card.online,
            "atm": wallet_card.atm,
            "nfc": wallet_card.nfc,
        },
    )


def build_register_3ds(wallet_card: WalletCard) -> PartnerRequest:
    card_id = _require(wallet_card.partner_card_id, "partner card id")
    body = {
        "accessTag": generate_access_tag(
            "register3DSecure", wallet_card.wallet_user.partner_user_id, card_id
        ),
        "cardId": card_id,
    }
    return PartnerRequest("POST", "cards/Register3DS", json_body=body)


def build_get_card(card_id: Any) -> PartnerRequest:
    return PartnerRequest("GET", f"cards/{_require(card_id, 'card id')}")


# ---- Payouts ----
def build_create_payout(
    wallet_id: Any,
    beneficiary_id: Any,
    amount: Decimal,
    label: Optional[str],
    payout_schedule_id: Optional[int],
    currency: str,
    document_url: Optional[str],
    now: datetime,
) -> PartnerRequest:
    """Outbound credit transfer.

    The tag covers every distinguishing argument plus the current minute, so a
    retry of the same payout within that minute is recognized by the partner.
    """
    wallet_id = _require(wallet_id, "wallet id")
    beneficiary_id = _require(beneficiary_id, "beneficiary id")
    body = {
        "accessTag": generate_access_tag(
            "createPayout",
            wallet_id,
            beneficiary_id,
            payout_schedule_id,
            format_amount(amount),
            label,
            minute_stamp(now),
        ),
        "walletId": str(wallet_id),
        "beneficiaryId": str(beneficiary_id),
        "amount": format_amount(amount),
        "label": label,
        "currency": currency,
        "supportingFileLink": document_url,
    }
    return PartnerRequest("POST", "payouts", json_body=_compact(body))


def build_cancel_payout(payout_id: Any) -> PartnerRequest:
    return PartnerRequest("DELETE", f"payouts/{_require(payout_id, 'payout id')}")


# ---- Beneficiaries ----
def build_create_beneficiary(
    partner_user_id: Any, name: str, iban: str, bic: str
) -> PartnerRequest:
    user_id = _require(partner_user_id, "partner user id")
    body = {
        "accessTag": generate_access_tag("createBeneficiary", user_id, iban),
        "userId": user_id,
        "name": name,
        "iban": iban,
        "bic": bic,
        "usableForSct": True,
    }
    return PartnerRequest("POST", "beneficiaries", json_body=body)


def build_get_beneficiary(beneficiary_id: Any) -> PartnerRequest:
    return PartnerRequest("GET", f"beneficiaries/{_require(beneficiary_id, 'beneficiary id')}")


def build_create_b2b_debtor(
    partner_company_id: Any,
    name: str,
    sepa_creditor_identifier: str,
    mandate_reference: str,
    address: str,
    is_recurrent: bool = False,
) -> PartnerRequest:
    """Register a creditor allowed to collect SEPA B2B direct debits on the company."""
    company_id = _require(partner_company_id, "partner company id")
    body = {
        "accessTag": generate_access_tag(
            "createB2bDebtor", company_id, sepa_creditor_identifier, mandate_reference
        ),
        "userId": company_id,
        "name": name,
        "address": address,
        "sepaCreditorIdentifier": sepa_creditor_identifier,
        "sddB2bWhitelist": [
            {"uniqueMandateReference": mandate_reference, "isRecurrent": is_recurrent}
        ],
        "usableForSct": False,
    }
    return PartnerRequest("POST", "beneficiaries", json_body=body)


def build_update_b2b_debtor(beneficiary: PartnerBeneficiary) -> PartnerRequest:
    body = {
        "name": beneficiary.name,
        "address": beneficiary.address,
        "sepaCreditorIdentifier": beneficiary.sepa_creditor_identifier,
        "sddB2bWhitelist": [
            {
                "uniqueMandateReference": entry.unique_mandate_reference,
                "isRecurrent": entry.is_recurrent,
            }
            for entry in beneficiary.sdd_b2b_whitelist
        ],
        "sddCoreBlacklist": list(beneficiary.sdd_core_blacklist),
    }
    return PartnerRequest(
        "PUT",
        f"beneficiaries/{_require(beneficiary.beneficiary_id, 'beneficiary id')}",
        json_body=_compact(body),
    )


def build_blacklist_beneficiary_sdd(beneficiary_id: Any) -> PartnerRequest:
    return PartnerRequest(
        "PUT",
        f"beneficiaries/{_require(beneficiary_id, 'beneficiary id')}",
        json_body={"sddCoreBlacklist": ["*"], "sddB2bWhitelist": []},
    )


# ---- Payins and documents ----
def build_create_check(check: WalletCheck) -> PartnerRequest:
    """Cheque deposit with its CMC7 line split into the partner's 7/12/12 zones."""
    wallet_id = _require(check.partner_wallet_id, "partner wallet id")
    cmc7 = Cmc7.parse(check.cmc7)
    if check.drawer_type is DrawerType.PERSON:
        drawer = {"firstName": check.drawer_first_name or "", "lastName": check.drawer_last_name}
    else:
        drawer = {"firstName": "", "lastName": check.drawer}
    drawer["isNaturalPerson"] = DRAWER_TYPE.to_partner(check.drawer_type)
    body = {
        "accessTag": generate_access_tag("createCheck", wallet_id, cmc7.packed),
        "walletId": wallet_id,
        "paymentMethodId": PAYIN_METHOD.to_partner(PayinMethod.CHEQUE),
        "amount": format_amount(check.amount),
        "currency": CURRENCY_EUR,
        "additionalData": {
            "cheque": {
                "cmc7": {"a": cmc7.a, "b": cmc7.b, "c": cmc7.c},
                "RLMCKey": check.rlmc_key,
                "drawerData": drawer,
            }
        },
    }
    return PartnerRequest("POST", "payins", json_body=body)


def build_create_document(
    partner_user_id: Any, document_type_id: int, name: str, content_base64: str
) -> PartnerRequest:
    body = {
        "userId": _require(partner_user_id, "partner user id"),
        "documentTypeId": document_type_id,
        "name": name,
        "fileContentBase64": content_base64,
    }
    return PartnerRequest("POST", "documents", json_body=body)


# ---- Transfers ----
def build_find_transfers(query: Mapping[str, Any]) -> PartnerRequest:
    return PartnerRequest("GET", "transfers", params=_compact(query))


def build_debit_client_invoice(
    client_wallet_id: Any, fee_wallet_id: Any, invoice: Invoice, now: datetime
) -> PartnerRequest:
    """Wallet-to-wallet transfer collecting the fees of ``invoice``."""
    transfer_tag = f"invoice_{invoice.id}"
    body = {
        "accessTag": generate_access_tag(transfer_tag, minute_stamp(now)),
        "walletId": str(_require(client_wallet_id, "client wallet id")),
        "beneficiaryWalletId": str(_require(fee_wallet_id, "fee wallet id")),
        "amount": format_amount(invoice.total_including_taxes),
        "label": CLIENT_FEES_LABEL,
        "currency": CURRENCY_EUR,
        "transferTypeId": TRANSFER_TYPE_CLIENT_FEES,
        "transferTag": transfer_tag,
    }
    return PartnerRequest("POST", "transfers", json_body=body)


__all__ = [
    "CLIENT_FEES_LABEL",
    "PartnerRequest",
    "build_activate_card",
    "build_blacklist_beneficiary_sdd",
    "build_cancel_payout",
    "build_close_wallet",
    "build_convert_to_physical",
    "build_create_b2b_debtor",
    "build_create_beneficiary",
    "build_create_check",
    "build_create_company",
    "build_create_document",
    "build_create_payout",
    "build_create_user",
    "build_create_virtual_card",
    "build_create_wallet",
    "build_debit_client_invoice",
    "build_find_transfers",
    "build_get_balances",
    "build_get_beneficiary",
    "build_get_card",
    "build_get_user",
    "build_get_wallet",
    "build_kyc_review",
    "build_register_3ds",
    "build_set_card_pin",
    "build_set_card_status",
    "build_unblock_card_pin",
    "build_update_b2b_debtor",
    "build_update_card_limits",
    "build_update_card_options",
    "build_update_company",
    "build_update_user",
    "diff_fields",
    "format_amount",
    "format_company_body",
    "format_individual_company_body",
    "format_user_body",
    "select_fields",
]
