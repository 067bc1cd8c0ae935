from __future__ import annotations

"""Convert raw partner JSON records into the typed records of ``domain.records``.

The partner is loosely typed: ids and amounts arrive as strings or numbers,
booleans as ``"1"``/``0``/``true``, dates with ``0000-00-00`` placeholders. The
helpers below coerce those leniently for optional fields and raise
``MalformedRecord`` when a required field is absent or unreadable. Unknown
status codes never raise; the code tables map them to ``UNKNOWN`` and log.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from bankbridge.domain.entities import Cmc7
from bankbridge.domain.enums import (
    BeneficiaryType,
    CardDesign,
    DepositStatus,
    PayinMethod,
    RejectReason,
    TransferStatus,
)
from bankbridge.domain.errors import MalformedRecord
from bankbridge.domain.records import (
    ChequePayin,
    MandateWhitelistEntry,
    PartnerBalance,
    PartnerBeneficiary,
    PartnerCard,
    PartnerCardTransaction,
    PartnerDocument,
    PartnerPayin,
    PartnerPayinRefund,
    PartnerPayout,
    PartnerPayoutRefund,
    PartnerTransfer,
    PartnerUser,
    PartnerWallet,
    SepaDirectDebitReject,
)
from bankbridge.domain.time_utils import parse_partner_date, parse_partner_datetime

from .partner_codes import (
    CARD_ACTIVATION,
    CARD_DESIGN,
    CARD_STATUS,
    CARD_TRANSACTION_STATUS,
    CIVILITY,
    CONTROLLING_PERSON_TYPE,
    DEPOSIT_STATUS,
    DOCUMENT_STATUS,
    DRAWER_TYPE,
    EMPLOYEE_TYPE,
    PARENT_TYPE,
    PAYIN_METHOD,
    PAYIN_REFUND_STATUS,
    REJECT_REASON,
    TRANSFER_STATUS,
    USER_TYPE,
    WALLET_STATUS,
    CodeTable,
    parse_partner_flag,
)

CREDITOR_NAME_MARKER = " - Creditor Name SEPA"
CHEQUE_WORDING = "Encaissement chèque"

# ---- Coercion helpers ----
def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key)
    if _is_blank(value):
        raise MalformedRecord(f"Partner record is missing required field '{key}'.", field=key)
    return value


def _text(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if _is_blank(value):
        return None
    return str(value).strip()


def _req_text(raw: Mapping[str, Any], key: str) -> str:
    return str(_required(raw, key)).strip()


def _to_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        try:
            numeric = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise MalformedRecord(f"Field '{key}' is not an integer: {value!r}", field=key) from exc
        if numeric != numeric.to_integral_value():
            raise MalformedRecord(f"Field '{key}' is not an integer: {value!r}", field=key)
        return int(numeric)


def _req_int(raw: Mapping[str, Any], key: str) -> int:
    return _to_int(_required(raw, key), key)


def _int(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if _is_blank(value):
        return None
    return _to_int(value, key)


def _to_decimal(value: Any, key: str) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise MalformedRecord(f"Field '{key}' is not a number: {value!r}", field=key) from exc


def _req_decimal(raw: Mapping[str, Any], key: str) -> Decimal:
    return _to_decimal(_required(raw, key), key)


def _decimal(raw: Mapping[str, Any], key: str) -> Optional[Decimal]:
    value = raw.get(key)
    if _is_blank(value):
        return None
    return _to_decimal(value, key)


def _bool(raw: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    flag = parse_partner_flag(value)
    if flag is not None:
        return flag
    raise MalformedRecord(f"Field '{key}' is not a boolean: {value!r}", field=key)


def _datetime(raw: Mapping[str, Any], key: str):
    try:
        return parse_partner_datetime(raw.get(key))
    except ValueError as exc:
        raise MalformedRecord(str(exc), field=key) from exc


def _req_datetime(raw: Mapping[str, Any], key: str):
    value = _datetime(raw, key)
    if value is None:
        raise MalformedRecord(f"Partner record is missing required field '{key}'.", field=key)
    return value


def _date(raw: Mapping[str, Any], key: str):
    try:
        return parse_partner_date(raw.get(key))
    except ValueError as exc:
        raise MalformedRecord(str(exc), field=key) from exc


def _code(table: CodeTable, raw: Mapping[str, Any], key: str):
    """Required coded field; unknown codes use the table fallback when it has one."""
    try:
        return table.to_internal(raw.get(key))
    except ValueError as exc:
        raise MalformedRecord(str(exc), field=key) from exc


def _optional_code(table: CodeTable, raw: Mapping[str, Any], key: str):
    value = raw.get(key)
    if _is_blank(value):
        return None
    if table.fallback is not None:
        return table.to_internal(value)
    return table.lookup(value)


def _texts(raw: Mapping[str, Any], key: str) -> Tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, (list, tuple)):
        raise MalformedRecord(f"Field '{key}' is not a list: {value!r}", field=key)
    return tuple(str(item) for item in value if not _is_blank(item))


# ---- Named text rules ----
def strip_creditor_name_marker(text: Optional[str]) -> Optional[str]:
    """Drop the ``" - Creditor Name SEPA"`` suffix the partner appends to transfer messages.

    Everything from the first occurrence of the marker onwards is removed; text
    without the marker is returned unchanged.
    """
    if text is None:
        return None
    index = text.find(CREDITOR_NAME_MARKER)
    if index == -1:
        return text
    return text[:index]


# ---- Users and wallets ----
def normalize_user(raw: Mapping[str, Any]) -> PartnerUser:
    parent_user_id = _int(raw, "parentUserId")
    return PartnerUser(
        user_id=_req_int(raw, "userId"),
        user_type=_code(USER_TYPE, raw, "userTypeId"),
        email=_text(raw, "email"),
        title=_optional_code(CIVILITY, raw, "title"),
        first_name=_text(raw, "firstname"),
        last_name=_text(raw, "lastname"),
        birthday=_date(raw, "birthday"),
        address1=_text(raw, "address1"),
        postcode=_text(raw, "postcode"),
        city=_text(raw, "city"),
        country=_text(raw, "country"),
        nationality=_text(raw, "nationality"),
        place_of_birth=_text(raw, "placeOfBirth"),
        birth_country=_text(raw, "birthCountry"),
        phone=_text(raw, "phone"),
        income_range=_text(raw, "incomeRange"),
        personal_assets=_text(raw, "personalAssets"),
        # The partner reports "no parent" as 0.
        parent_user_id=parent_user_id or None,
        parent_type=_optional_code(PARENT_TYPE, raw, "parentType"),
        employee_type=_optional_code(EMPLOYEE_TYPE, raw, "employeeType"),
        controlling_person_type=_optional_code(
            CONTROLLING_PERSON_TYPE, raw, "controllingPersonType"
        ),
        effective_beneficiary=_decimal(raw, "effectiveBeneficiary"),
        specified_us_person=(
            _bool(raw, "specifiedUSPerson") if raw.get("specifiedUSPerson") is not None else None
        ),
        legal_name=_text(raw, "legalName"),
        legal_registration_number=_text(raw, "legalRegistrationNumber"),
        legal_registration_date=_date(raw, "legalRegistrationDate"),
        legal_sector=_text(raw, "legalSector"),
        kyc_level=_int(raw, "kycLevel"),
        kyc_review=_int(raw, "kycReview"),
        user_status=_text(raw, "userStatus"),
        created_date=_datetime(raw, "createdDate"),
    )


def normalize_wallet(raw: Mapping[str, Any]) -> PartnerWallet:
    return PartnerWallet(
        wallet_id=_req_int(raw, "walletId"),
        user_id=_req_int(raw, "userId"),
        status=_code(WALLET_STATUS, raw, "walletStatus"),
        currency=_req_text(raw, "currency"),
        wallet_type_id=_int(raw, "walletTypeId"),
        iban=_text(raw, "iban"),
        bic=_text(raw, "bic"),
        event_name=_text(raw, "eventName"),
        tariff_id=_int(raw, "tariffId"),
        created_date=_datetime(raw, "createdDate"),
    )


def normalize_balance(raw: Mapping[str, Any]) -> PartnerBalance:
    return PartnerBalance(
        wallet_id=_req_int(raw, "walletId"),
        current_balance=_req_decimal(raw, "currentBalance"),
        authorized_balance=_req_decimal(raw, "authorizedBalance"),
        currency=_req_text(raw, "currency"),
        calculation_date=_datetime(raw, "calculationDate"),
    )


# ---- Cards ----
def normalize_card(raw: Mapping[str, Any]) -> PartnerCard:
    """Card record; the partner only ever returns the masked PAN."""
    return PartnerCard(
        card_id=_req_int(raw, "cardId"),
        user_id=_req_int(raw, "userId"),
        wallet_id=_req_int(raw, "walletId"),
        status=_code(CARD_STATUS, raw, "statusCode"),
        activation=_code(CARD_ACTIVATION, raw, "isLive"),
        public_token=_text(raw, "publicToken"),
        embossed_name=_text(raw, "embossedName"),
        masked_pan=_text(raw, "maskedPan"),
        expiry_date=_date(raw, "expiryDate"),
        option_atm=_bool(raw, "optionAtm"),
        option_foreign=_bool(raw, "optionForeign"),
        option_nfc=_bool(raw, "optionNfc"),
        option_online=_bool(raw, "optionOnline"),
        pin_try_exceeded=_bool(raw, "pinTryExceeds"),
        limit_atm_week=_int(raw, "limitAtmWeek"),
        limit_payment_week=_int(raw, "limitPaymentWeek"),
        design=_optional_code(CARD_DESIGN, raw, "cardDesign") or CardDesign.UNKNOWN,
    )


def normalize_card_transaction(raw: Mapping[str, Any]) -> PartnerCardTransaction:
    return PartnerCardTransaction(
        card_transaction_id=_req_int(raw, "cardtransactionId"),
        wallet_id=_req_int(raw, "walletId"),
        card_id=_int(raw, "cardId"),
        status=_code(CARD_TRANSACTION_STATUS, raw, "paymentStatus"),
        amount=_req_decimal(raw, "paymentAmount"),
        authorization_issuer_time=_datetime(raw, "authorizationIssuerTime"),
        mcc_code=_text(raw, "mccCode"),
        merchant_name=_text(raw, "merchantName"),
        merchant_country=_text(raw, "merchantCountry"),
        payment_country=_text(raw, "paymentCountry"),
        payment_id=_text(raw, "paymentId"),
        is_3ds=_bool(raw, "is3DS"),
        total_payment_week=_decimal(raw, "totalLimitPaymentWeek"),
        total_atm_week=_decimal(raw, "totalLimitAtmWeek"),
        authorization_response_code=_text(raw, "authorizationResponseCode"),
        authorization_note=_text(raw, "authorizationNote"),
    )


# ---- Beneficiaries ----
def _whitelist(raw: Mapping[str, Any]) -> Tuple[MandateWhitelistEntry, ...]:
    items = raw.get("sddB2bWhitelist")
    if items is None:
        return ()
    if not isinstance(items, list):
        raise MalformedRecord("Field 'sddB2bWhitelist' is not a list.", field="sddB2bWhitelist")
    entries = []
    for item in items:
        if not isinstance(item, Mapping):
            raise MalformedRecord(
                "Entry of 'sddB2bWhitelist' is not an object.", field="sddB2bWhitelist"
            )
        entries.append(
            MandateWhitelistEntry(
                unique_mandate_reference=_req_text(item, "uniqueMandateReference"),
                is_recurrent=_bool(item, "isRecurrent"),
            )
        )
    return tuple(entries)


def normalize_beneficiary(raw: Mapping[str, Any]) -> PartnerBeneficiary:
    """Creditors are usable for credit transfers; everything else is a debtor."""
    usable_for_sct = _bool(raw, "usableForSct")
    return PartnerBeneficiary(
        beneficiary_id=_req_int(raw, "id"),
        user_id=_req_int(raw, "userId"),
        name=_req_text(raw, "name"),
        type=BeneficiaryType.CREDITOR if usable_for_sct else BeneficiaryType.DEBTOR,
        iban=_text(raw, "iban"),
        bic=_text(raw, "bic"),
        address=_text(raw, "address"),
        usable_for_sct=usable_for_sct,
        sepa_creditor_identifier=_text(raw, "sepaCreditorIdentifier"),
        sdd_core_blacklist=_texts(raw, "sddCoreBlacklist"),
        sdd_core_known_unique_mandate_reference=_texts(raw, "sddCoreKnownUniqueMandateReference"),
        sdd_b2b_whitelist=_whitelist(raw),
    )


# ---- Payouts ----
def normalize_payout(raw: Mapping[str, Any]) -> PartnerPayout:
    return PartnerPayout(
        payout_id=_req_int(raw, "payoutId"),
        user_id=_req_int(raw, "userId"),
        wallet_id=_req_int(raw, "walletId"),
        beneficiary_id=_req_int(raw, "beneficiaryId"),
        amount=_req_decimal(raw, "amount"),
        status=_code(TRANSFER_STATUS, raw, "payoutStatus"),
        created_date=_req_datetime(raw, "createdDate"),
        payout_type_id=_int(raw, "payoutTypeId"),
        modified_date=_datetime(raw, "modifiedDate"),
        payout_date=_date(raw, "payoutDate"),
        label=_text(raw, "label"),
    )


def normalize_payout_refund(raw: Mapping[str, Any]) -> PartnerPayoutRefund:
    return PartnerPayoutRefund(
        refund_id=_req_int(raw, "id"),
        payout_id=_req_int(raw, "payoutId"),
        status=_code(TRANSFER_STATUS, raw, "informationStatus"),
        amount=_req_decimal(raw, "requestAmount"),
        created_date=_req_datetime(raw, "createdDate"),
        modified_date=_datetime(raw, "modifiedDate"),
    )


# ---- Payins ----
def _cheque_data(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    """Decode ``additionalData``: a JSON document embedded as a string."""
    blob = raw.get("additionalData")
    if _is_blank(blob):
        return {}
    if isinstance(blob, str):
        try:
            blob = json.loads(blob)
        except ValueError as exc:
            raise MalformedRecord(
                "Field 'additionalData' is not valid JSON.", field="additionalData"
            ) from exc
    if not isinstance(blob, Mapping):
        raise MalformedRecord("Field 'additionalData' is not an object.", field="additionalData")
    cheque = blob.get("cheque") or {}
    if not isinstance(cheque, Mapping):
        raise MalformedRecord("Field 'additionalData.cheque' is not an object.", field="cheque")
    return cheque


def _cmc7(cheque: Mapping[str, Any]) -> Optional[Cmc7]:
    value = cheque.get("cmc7")
    if _is_blank(value):
        return None
    try:
        if isinstance(value, Mapping):
            return Cmc7(
                a=str(value.get("a") or ""),
                b=str(value.get("b") or ""),
                c=str(value.get("c") or ""),
            )
        return Cmc7.parse(str(value))
    except ValueError as exc:
        raise MalformedRecord(str(exc), field="cmc7") from exc


def _normalize_cheque_payin(raw: Mapping[str, Any], base: Dict[str, Any]) -> ChequePayin:
    cheque = _cheque_data(raw)
    drawer = cheque.get("drawerData") or {}
    if not isinstance(drawer, Mapping):
        raise MalformedRecord("Field 'drawerData' is not an object.", field="drawerData")
    code_status = _text(raw, "codeStatus")
    deposit_status = _optional_code(DEPOSIT_STATUS, raw, "codeStatus") or DepositStatus.UNKNOWN
    return ChequePayin(
        **base,
        cmc7=_cmc7(cheque),
        rlmc_key=_text(cheque, "RLMCKey"),
        drawer_first_name=_text(drawer, "firstName"),
        drawer_last_name=_text(drawer, "lastName"),
        drawer_type=_optional_code(DRAWER_TYPE, drawer, "isNaturalPerson"),
        code_status=code_status,
        deposit_status=deposit_status,
        wording=CHEQUE_WORDING,
    )


def normalize_payin(raw: Mapping[str, Any]) -> PartnerPayin:
    """Payin record, branching on ``paymentMethodId``.

    Cheques carry their CMC7 line and drawer inside ``additionalData`` and
    report progress through ``codeStatus``. Other methods are plain transfers
    whose message may carry the partner's creditor-name marker.
    """
    method = _code(PAYIN_METHOD, raw, "paymentMethodId")
    base: Dict[str, Any] = {
        "payin_id": _req_text(raw, "payinId"),
        "wallet_id": _req_int(raw, "walletId"),
        "amount": _req_decimal(raw, "amount"),
        "created_date": _req_datetime(raw, "createdDate"),
        "payment_method": method,
        "status": _optional_code(TRANSFER_STATUS, raw, "payinStatus") or TransferStatus.UNKNOWN,
        "iban_fullname": _text(raw, "ibanFullname"),
        "debtor_iban": _text(raw, "DbtrIBAN"),
    }
    if method is PayinMethod.CHEQUE:
        base["message_to_user"] = _text(raw, "messageToUser")
        base["iban_fullname"] = base["iban_fullname"] or ""
        return _normalize_cheque_payin(raw, base)
    base["message_to_user"] = strip_creditor_name_marker(_text(raw, "messageToUser"))
    return PartnerPayin(**base)


def normalize_payin_refund(raw: Mapping[str, Any]) -> PartnerPayinRefund:
    return PartnerPayinRefund(
        refund_id=_req_int(raw, "payinrefundId"),
        wallet_id=_req_int(raw, "walletId"),
        payin_id=_req_int(raw, "payinId"),
        status=_code(PAYIN_REFUND_STATUS, raw, "payinrefundStatus"),
        amount=_req_decimal(raw, "amount"),
        created_date=_req_datetime(raw, "createdDate"),
        modified_date=_datetime(raw, "modifiedDate"),
        reason=_text(raw, "reasonTms"),
    )


# ---- Documents and transfers ----
def normalize_document(raw: Mapping[str, Any]) -> PartnerDocument:
    return PartnerDocument(
        document_id=_req_int(raw, "documentId"),
        file_name=_req_text(raw, "fileName"),
        status=_code(DOCUMENT_STATUS, raw, "documentStatus"),
    )


def normalize_transfer(raw: Mapping[str, Any]) -> PartnerTransfer:
    return PartnerTransfer(
        transfer_id=_req_int(raw, "transferId"),
        wallet_id=_req_int(raw, "walletId"),
        beneficiary_wallet_id=_req_int(raw, "beneficiaryWalletId"),
        amount=_req_decimal(raw, "amount"),
        currency=_req_text(raw, "currency"),
        status=_code(TRANSFER_STATUS, raw, "transferStatus"),
        label=_text(raw, "label"),
        transfer_type_id=_int(raw, "transferTypeId"),
        transfer_tag=_text(raw, "transferTag"),
        created_date=_datetime(raw, "createdDate"),
    )


def normalize_sepa_sddr(raw: Mapping[str, Any]) -> SepaDirectDebitReject:
    """SEPA direct-debit reject; older notices only fill ``reason_code``."""
    reason_code = _text(raw, "reject_reason_code") or _text(raw, "reason_code")
    reject_reason = (
        REJECT_REASON.to_internal(reason_code) if reason_code else RejectReason.UNKNOWN
    )
    return SepaDirectDebitReject(
        wallet_id=_req_int(raw, "wallet_id"),
        transaction_id=_req_text(raw, "transaction_id"),
        reject_reason=reject_reason,
        beneficiary_id=_int(raw, "beneficiary_id"),
        interbank_settlement_amount=_decimal(raw, "interbank_settlement_amount"),
        requested_collection_date=_date(raw, "requested_collection_date"),
        creditor_name=_text(raw, "creditor_name"),
        creditor_address=_text(raw, "creditor_address"),
        debitor_name=_text(raw, "debitor_name"),
        debitor_address=_text(raw, "debitor_address"),
        sepa_creditor_identifier=_text(raw, "sepa_creditor_identifier"),
        unstructured_field=_text(raw, "unstructured_field"),
        mandate_reference=_text(raw, "mandate_id"),
        raw_reason_code=reason_code,
    )


# Push notification resources: name -> (collection key, normalizer).
PUSH_RESOURCES: Dict[str, Tuple[str, Callable[[Mapping[str, Any]], Any]]] = {
    "user": ("users", normalize_user),
    "wallet": ("wallets", normalize_wallet),
    "balance": ("balances", normalize_balance),
    "card": ("cards", normalize_card),
    "cardtransaction": ("cardtransactions", normalize_card_transaction),
    "beneficiary": ("beneficiaries", normalize_beneficiary),
    "payout": ("payouts", normalize_payout),
    "payoutRefund": ("payoutRefunds", normalize_payout_refund),
    "payin": ("payins", normalize_payin),
    "payinrefund": ("payinrefunds", normalize_payin_refund),
    "document": ("documents", normalize_document),
    "transfer": ("transfers", normalize_transfer),
    "sepaSddr": ("sepaSddrs", normalize_sepa_sddr),
}


__all__ = [
    "CHEQUE_WORDING",
    "CREDITOR_NAME_MARKER",
    "PUSH_RESOURCES",
    "normalize_balance",
    "normalize_beneficiary",
    "normalize_card",
    "normalize_card_transaction",
    "normalize_document",
    "normalize_payin",
    "normalize_payin_refund",
    "normalize_payout",
    "normalize_payout_refund",
    "normalize_sepa_sddr",
    "normalize_transfer",
    "normalize_user",
    "normalize_wallet",
    "strip_creditor_name_marker",
]
