"""Internal domain enums shared by entities, records, and the code mapper.

Values are the internal vocabulary persisted by the ledger. Partner-side codes
live in ``bankbridge.adapters.partner_codes`` and never leak past the adapter.
Status enums that are read from partner payloads carry an ``UNKNOWN`` member so
a code the partner adds later degrades to a visible value instead of an error.
"""

from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    PHYSICAL = "physical"
    CORPORATE = "corporate"
    UNKNOWN = "unknown"


class Civility(str, Enum):
    MR = "mr"
    MRS = "mrs"
    MISS = "miss"


class ParentType(str, Enum):
    LEADER = "leader"
    SHAREHOLDER = "shareholder"
    EMPLOYEE = "employee"
    UNKNOWN = "unknown"


class EmployeeType(str, Enum):
    NONE = "none"
    LEADER = "leader"
    EMPLOYEE = "employee"
    UNKNOWN = "unknown"


class ControllingPersonType(str, Enum):
    SHAREHOLDER = "shareholder"
    OTHER_MEANS = "other_means"
    DIRECTOR = "director"
    UNKNOWN = "unknown"


class LegalForm(str, Enum):
    EI = "ei"
    MICRO = "micro"
    EURL = "eurl"
    SARL = "sarl"
    SASU = "sasu"
    SAS = "sas"
    SA = "sa"
    SCI = "sci"
    SNC = "snc"


class WalletStatus(str, Enum):
    PENDING = "pending"
    VALIDATED = "validated"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class CardStatus(str, Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"
    LOST = "lost"
    STOLEN = "stolen"
    DESTROYED = "destroyed"
    UNKNOWN = "unknown"


class CardActivationStatus(str, Enum):
    ACTIVATED = "activated"
    NOT_ACTIVATED = "not_activated"
    UNKNOWN = "unknown"


class CardDesign(str, Enum):
    STANDARD = "standard"
    PREMIUM = "premium"
    UNKNOWN = "unknown"


class CardTransactionStatus(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    REFUNDED = "refunded"
    REVERSED = "reversed"
    SETTLED = "settled"
    CLEARED = "cleared"
    UNKNOWN = "unknown"


class TransferStatus(str, Enum):
    PENDING = "pending"
    VALIDATED = "validated"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class PayinMethod(str, Enum):
    CARD = "card"
    CREDIT_TRANSFER = "credit_transfer"
    DIRECT_DEBIT = "direct_debit"
    CHEQUE = "cheque"
    UNKNOWN = "unknown"


class PayinRefundStatus(str, Enum):
    PENDING = "pending"
    VALIDATED = "validated"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class DepositStatus(str, Enum):
    """Lifecycle of a cheque deposit, derived from the partner ``codeStatus``."""

    PENDING = "pending"
    RECEIVED = "received"
    CREDITED = "credited"
    REJECTED = "rejected"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class DrawerType(str, Enum):
    PERSON = "person"
    COMPANY = "company"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    VALIDATED = "validated"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


class BeneficiaryType(str, Enum):
    CREDITOR = "creditor"
    DEBTOR = "debtor"


class RejectReason(str, Enum):
    """SEPA direct-debit reject reasons (ISO 20022 reason codes)."""

    ACCOUNT_IDENTIFIER_INCORRECT = "account_identifier_incorrect"
    ACCOUNT_CLOSED = "account_closed"
    ACCOUNT_BLOCKED = "account_blocked"
    TRANSACTION_FORBIDDEN = "transaction_forbidden"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_MANDATE = "no_mandate"
    REFUSED_BY_DEBTOR = "refused_by_debtor"
    REASON_NOT_SPECIFIED = "reason_not_specified"
    SPECIFIC_SERVICE = "specific_service"
    UNKNOWN = "unknown"


__all__ = [
    "BeneficiaryType",
    "CardActivationStatus",
    "CardDesign",
    "CardStatus",
    "CardTransactionStatus",
    "Civility",
    "ControllingPersonType",
    "DepositStatus",
    "DocumentStatus",
    "DrawerType",
    "EmployeeType",
    "LegalForm",
    "ParentType",
    "PayinMethod",
    "PayinRefundStatus",
    "RejectReason",
    "TransferStatus",
    "UserType",
    "WalletStatus",
]
