"""Domain package exports for inputs, partner records and errors."""

from .entities import (
    Address,
    Cmc7,
    Company,
    Invoice,
    PersonProfile,
    Stakeholder,
    WalletCard,
    WalletCheck,
    WalletCompany,
    WalletUser,
)
from .errors import (
    AmbiguousResult,
    EmptyResult,
    IncompleteRequest,
    IneligibleBeneficiary,
    MalformedRecord,
    MalformedResponse,
    PartnerError,
    RejectedRequest,
    TransportFailure,
)
from .events import UserPhoneUpdated
from .records import (
    ChequePayin,
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

__all__ = [
    "Address",
    "AmbiguousResult",
    "ChequePayin",
    "Cmc7",
    "Company",
    "EmptyResult",
    "IncompleteRequest",
    "IneligibleBeneficiary",
    "Invoice",
    "MalformedRecord",
    "MalformedResponse",
    "PartnerBalance",
    "PartnerBeneficiary",
    "PartnerCard",
    "PartnerCardTransaction",
    "PartnerDocument",
    "PartnerError",
    "PartnerPayin",
    "PartnerPayinRefund",
    "PartnerPayout",
    "PartnerPayoutRefund",
    "PartnerTransfer",
    "PartnerUser",
    "PartnerWallet",
    "PersonProfile",
    "RejectedRequest",
    "SepaDirectDebitReject",
    "Stakeholder",
    "TransportFailure",
    "UserPhoneUpdated",
    "WalletCard",
    "WalletCheck",
    "WalletCompany",
    "WalletUser",
]
