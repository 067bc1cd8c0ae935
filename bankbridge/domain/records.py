from __future__ import annotations

"""Strongly typed partner records produced by the response normalizers.

Every facade method returns one of these (or a list of them); raw partner JSON
never crosses the adapter boundary.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from .entities import Cmc7
from .enums import (
    BeneficiaryType,
    CardActivationStatus,
    CardDesign,
    CardStatus,
    CardTransactionStatus,
    Civility,
    ControllingPersonType,
    DepositStatus,
    DocumentStatus,
    DrawerType,
    EmployeeType,
    ParentType,
    PayinMethod,
    PayinRefundStatus,
    RejectReason,
    TransferStatus,
    UserType,
    WalletStatus,
)


@dataclass(frozen=True)
class PartnerUser:
    """Natural or legal person registered with the partner (KYC/KYB subject)."""

    user_id: int
    user_type: UserType
    email: Optional[str] = None
    title: Optional[Civility] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birthday: Optional[date] = None
    address1: Optional[str] = None
    postcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    nationality: Optional[str] = None
    place_of_birth: Optional[str] = None
    birth_country: Optional[str] = None
    phone: Optional[str] = None
    income_range: Optional[str] = None
    personal_assets: Optional[str] = None
    parent_user_id: Optional[int] = None
    parent_type: Optional[ParentType] = None
    employee_type: Optional[EmployeeType] = None
    controlling_person_type: Optional[ControllingPersonType] = None
    effective_beneficiary: Optional[Decimal] = None
    specified_us_person: Optional[bool] = None
    legal_name: Optional[str] = None
    legal_registration_number: Optional[str] = None
    legal_registration_date: Optional[date] = None
    legal_sector: Optional[str] = None
    kyc_level: Optional[int] = None
    kyc_review: Optional[int] = None
    user_status: Optional[str] = None
    created_date: Optional[datetime] = None


@dataclass(frozen=True)
class PartnerWallet:
    wallet_id: int
    user_id: int
    status: WalletStatus
    currency: str
    wallet_type_id: Optional[int] = None
    iban: Optional[str] = None
    bic: Optional[str] = None
    event_name: Optional[str] = None
    tariff_id: Optional[int] = None
    created_date: Optional[datetime] = None


@dataclass(frozen=True)
class PartnerBalance:
    wallet_id: int
    current_balance: Decimal
    authorized_balance: Decimal
    currency: str
    calculation_date: Optional[datetime] = None


@dataclass(frozen=True)
class PartnerCard:
    """Payment card as known by the partner. Only the masked PAN is ever held."""

    card_id: int
    user_id: int
    wallet_id: int
    status: CardStatus
    activation: CardActivationStatus
    public_token: Optional[str] = None
    embossed_name: Optional[str] = None
    masked_pan: Optional[str] = None
    expiry_date: Optional[date] = None
    option_atm: bool = False
    option_foreign: bool = False
    option_nfc: bool = False
    option_online: bool = False
    pin_try_exceeded: bool = False
    limit_atm_week: Optional[int] = None
    limit_payment_week: Optional[int] = None
    design: CardDesign = CardDesign.UNKNOWN


@dataclass(frozen=True)
class PartnerCardTransaction:
    card_transaction_id: int
    wallet_id: int
    card_id: Optional[int]
    status: CardTransactionStatus
    amount: Decimal
    authorization_issuer_time: Optional[datetime] = None
    mcc_code: Optional[str] = None
    merchant_name: Optional[str] = None
    merchant_country: Optional[str] = None
    payment_country: Optional[str] = None
    payment_id: Optional[str] = None
    is_3ds: bool = False
    total_payment_week: Optional[Decimal] = None
    total_atm_week: Optional[Decimal] = None
    authorization_response_code: Optional[str] = None
    authorization_note: Optional[str] = None


@dataclass(frozen=True)
class MandateWhitelistEntry:
    """A SEPA B2B direct-debit mandate the beneficiary is allowed to collect."""

    unique_mandate_reference: str
    is_recurrent: bool = False


@dataclass(frozen=True)
class PartnerBeneficiary:
    """Creditor (credit-transfer target) or debtor (direct-debit collector)."""

    beneficiary_id: int
    user_id: int
    name: str
    type: BeneficiaryType
    iban: Optional[str] = None
    bic: Optional[str] = None
    address: Optional[str] = None
    usable_for_sct: bool = False
    sepa_creditor_identifier: Optional[str] = None
    sdd_core_blacklist: Tuple[str, ...] = ()
    sdd_core_known_unique_mandate_reference: Tuple[str, ...] = ()
    sdd_b2b_whitelist: Tuple[MandateWhitelistEntry, ...] = ()

    @property
    def is_debtor(self) -> bool:
        return self.type is BeneficiaryType.DEBTOR


@dataclass(frozen=True)
class PartnerPayout:
    """Outbound credit transfer."""

    payout_id: int
    user_id: int
    wallet_id: int
    beneficiary_id: int
    amount: Decimal
    status: TransferStatus
    created_date: datetime
    payout_type_id: Optional[int] = None
    modified_date: Optional[datetime] = None
    payout_date: Optional[date] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class PartnerPayoutRefund:
    refund_id: int
    payout_id: int
    status: TransferStatus
    amount: Decimal
    created_date: datetime
    modified_date: Optional[datetime] = None


@dataclass(frozen=True)
class PartnerPayin:
    """Inbound payment; the shape depends on ``payment_method``."""

    payin_id: str
    wallet_id: int
    amount: Decimal
    created_date: datetime
    payment_method: PayinMethod
    status: TransferStatus
    message_to_user: Optional[str] = None
    iban_fullname: Optional[str] = None
    debtor_iban: Optional[str] = None


@dataclass(frozen=True)
class ChequePayin(PartnerPayin):
    """Cheque deposit, parsed from the nested ``additionalData.cheque`` blob."""

    cmc7: Optional[Cmc7] = None
    rlmc_key: Optional[str] = None
    drawer_first_name: Optional[str] = None
    drawer_last_name: Optional[str] = None
    drawer_type: Optional[DrawerType] = None
    code_status: Optional[str] = None
    deposit_status: DepositStatus = DepositStatus.UNKNOWN
    wording: str = ""


@dataclass(frozen=True)
class PartnerPayinRefund:
    refund_id: int
    wallet_id: int
    payin_id: int
    status: PayinRefundStatus
    amount: Decimal
    created_date: datetime
    modified_date: Optional[datetime] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class PartnerDocument:
    """KYC supporting document."""

    document_id: int
    file_name: str
    status: DocumentStatus


@dataclass(frozen=True)
class PartnerTransfer:
    """Wallet-to-wallet transfer inside the partner."""

    transfer_id: int
    wallet_id: int
    beneficiary_wallet_id: int
    amount: Decimal
    currency: str
    status: TransferStatus
    label: Optional[str] = None
    transfer_type_id: Optional[int] = None
    transfer_tag: Optional[str] = None
    created_date: Optional[datetime] = None


@dataclass(frozen=True)
class SepaDirectDebitReject:
    """Rejection notice for a SEPA direct-debit collection."""

    wallet_id: int
    transaction_id: str
    reject_reason: RejectReason
    beneficiary_id: Optional[int] = None
    interbank_settlement_amount: Optional[Decimal] = None
    requested_collection_date: Optional[date] = None
    creditor_name: Optional[str] = None
    creditor_address: Optional[str] = None
    debitor_name: Optional[str] = None
    debitor_address: Optional[str] = None
    sepa_creditor_identifier: Optional[str] = None
    unstructured_field: Optional[str] = None
    mandate_reference: Optional[str] = None
    raw_reason_code: Optional[str] = field(default=None, compare=False)


__all__ = [
    "ChequePayin",
    "MandateWhitelistEntry",
    "PartnerBalance",
    "PartnerBeneficiary",
    "PartnerCard",
    "PartnerCardTransaction",
    "PartnerDocument",
    "PartnerPayin",
    "PartnerPayinRefund",
    "PartnerPayout",
    "PartnerPayoutRefund",
    "PartnerTransfer",
    "PartnerUser",
    "PartnerWallet",
    "SepaDirectDebitReject",
]
