"""Bidirectional mapping tables between partner codes and internal enums.

Partner codes arrive as strings or integers depending on the endpoint (``"1"``
and ``1`` are the same user type), so lookups compare on the stripped text of
the code. Unknown inbound codes resolve to the table's fallback member and are
logged once per call; unknown outbound members are programming errors.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from bankbridge.domain.enums import (
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
    LegalForm,
    ParentType,
    PayinMethod,
    PayinRefundStatus,
    RejectReason,
    TransferStatus,
    UserType,
    WalletStatus,
)

_log = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


_TRUE_TOKENS = {"1", "true", "yes", "on"}
_FALSE_TOKENS = {"0", "false", "no", "off", ""}


def parse_partner_flag(value: Any) -> Optional[bool]:
    """Read a partner boolean (``true``, ``1``, ``"0"``, ``""``...).

    ``None`` reads as ``False``; anything that is not a boolean spelling gives ``None``.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0
    token = str(value).strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    return None


def _code_key(code: Any) -> str:
    if isinstance(code, bool):
        return "1" if code else "0"
    return str(code).strip().upper()


class CodeTable(Generic[E]):
    """One partner code per internal member; extra inbound aliases allowed."""

    def __init__(
        self,
        name: str,
        outbound: Mapping[E, Any],
        *,
        aliases: Optional[Mapping[Any, E]] = None,
        fallback: Optional[E] = None,
    ) -> None:
        self.name = name
        self._outbound: Dict[E, Any] = dict(outbound)
        self._inbound: Dict[str, E] = {_code_key(code): member for member, code in outbound.items()}
        for code, member in (aliases or {}).items():
            self._inbound[_code_key(code)] = member
        self.fallback = fallback

    def to_partner(self, member: E) -> Any:
        try:
            return self._outbound[member]
        except KeyError as exc:
            raise ValueError(f"{self.name}: no partner code for {member!r}") from exc

    def to_internal(self, code: Any) -> E:
        """Resolve a partner code.

        Raises:
            ValueError: If the code is unknown and the table has no fallback.
        """
        member = self._inbound.get(_code_key(code)) if code is not None else None
        if member is not None:
            return member
        if self.fallback is None:
            raise ValueError(f"{self.name}: unknown partner code {code!r}")
        _log.warning("%s: unknown partner code %r mapped to %s", self.name, code, self.fallback.value)
        return self.fallback

    def lookup(self, code: Any) -> Optional[E]:
        """Like ``to_internal`` for optional fields: empty or unknown codes give ``None``."""
        if code is None or str(code).strip() == "":
            return None
        member = self._inbound.get(_code_key(code))
        if member is None:
            _log.warning("%s: ignoring unknown partner code %r", self.name, code)
        return member

    def known_codes(self) -> Dict[str, E]:
        return dict(self._inbound)


# ---- Users ----
USER_TYPE = CodeTable(
    "user_type",
    {UserType.PHYSICAL: 1, UserType.CORPORATE: 2},
    aliases={3: UserType.CORPORATE, 4: UserType.CORPORATE},
    fallback=UserType.UNKNOWN,
)

CIVILITY = CodeTable(
    "civility",
    {Civility.MR: "M", Civility.MRS: "MME", Civility.MISS: "MLLE"},
    aliases={"MR": Civility.MR, "MRS": Civility.MRS},
)

PARENT_TYPE = CodeTable(
    "parent_type",
    {
        ParentType.LEADER: "leader",
        ParentType.SHAREHOLDER: "shareholder",
        ParentType.EMPLOYEE: "employee",
    },
    fallback=ParentType.UNKNOWN,
)

EMPLOYEE_TYPE = CodeTable(
    "employee_type",
    {EmployeeType.NONE: 0, EmployeeType.LEADER: 1, EmployeeType.EMPLOYEE: 2},
    fallback=EmployeeType.UNKNOWN,
)

CONTROLLING_PERSON_TYPE = CodeTable(
    "controlling_person_type",
    {
        ControllingPersonType.SHAREHOLDER: 1,
        ControllingPersonType.OTHER_MEANS: 2,
        ControllingPersonType.DIRECTOR: 3,
    },
    fallback=ControllingPersonType.UNKNOWN,
)

# INSEE legal category codes.
LEGAL_FORM = CodeTable(
    "legal_form",
    {
        LegalForm.EI: "1000",
        LegalForm.MICRO: "1000",
        LegalForm.EURL: "5498",
        LegalForm.SARL: "5499",
        LegalForm.SASU: "5720",
        LegalForm.SAS: "5710",
        LegalForm.SA: "5599",
        LegalForm.SCI: "6540",
        LegalForm.SNC: "5202",
    },
    aliases={"1000": LegalForm.EI},
)

SPECIFIED_US_PERSON_NO = 0
ENTITY_TYPE_ACTIVE_NON_FINANCIAL_OTHER = 5

# ---- Wallets ----
WALLET_TYPE_PAYMENT_ACCOUNT = 10

WALLET_STATUS = CodeTable(
    "wallet_status",
    {
        WalletStatus.PENDING: "PENDING",
        WalletStatus.VALIDATED: "VALIDATED",
        WalletStatus.CANCELED: "CANCELED",
    },
    aliases={"CANCELLED": WalletStatus.CANCELED},
    fallback=WalletStatus.UNKNOWN,
)

# ---- Cards ----
CARD_STATUS = CodeTable(
    "card_status",
    {
        CardStatus.UNLOCKED: "UNLOCK",
        CardStatus.LOCKED: "LOCK",
        CardStatus.LOST: "LOST",
        CardStatus.STOLEN: "STOLEN",
        CardStatus.DESTROYED: "DESTROYED",
    },
    fallback=CardStatus.UNKNOWN,
)

# ``cards/{id}/LockUnlock/`` takes a numeric lock status instead of the label.
CARD_LOCK_STATUS = CodeTable(
    "card_lock_status",
    {
        CardStatus.UNLOCKED: 0,
        CardStatus.LOCKED: 1,
        CardStatus.LOST: 2,
        CardStatus.STOLEN: 3,
        CardStatus.DESTROYED: 4,
    },
)

CARD_ACTIVATION = CodeTable(
    "card_activation",
    {CardActivationStatus.NOT_ACTIVATED: 0, CardActivationStatus.ACTIVATED: 1},
    aliases={"true": CardActivationStatus.ACTIVATED, "false": CardActivationStatus.NOT_ACTIVATED},
    fallback=CardActivationStatus.UNKNOWN,
)

CARD_DESIGN = CodeTable(
    "card_design",
    {CardDesign.STANDARD: "13379", CardDesign.PREMIUM: "13380"},
    fallback=CardDesign.UNKNOWN,
)

CARD_TRANSACTION_STATUS = CodeTable(
    "card_transaction_status",
    {
        CardTransactionStatus.ACCEPTED: "A",
        CardTransactionStatus.DECLINED: "I",
        CardTransactionStatus.REFUNDED: "R",
        CardTransactionStatus.REVERSED: "V",
        CardTransactionStatus.SETTLED: "S",
        CardTransactionStatus.CLEARED: "C",
    },
    fallback=CardTransactionStatus.UNKNOWN,
)

# ---- Transfers, payins, documents ----
TRANSFER_STATUS = CodeTable(
    "transfer_status",
    {
        TransferStatus.PENDING: "PENDING",
        TransferStatus.VALIDATED: "VALIDATED",
        TransferStatus.CANCELED: "CANCELED",
    },
    aliases={"CANCELLED": TransferStatus.CANCELED},
    fallback=TransferStatus.UNKNOWN,
)

PAYIN_METHOD = CodeTable(
    "payin_method",
    {
        PayinMethod.CARD: 3,
        PayinMethod.CREDIT_TRANSFER: 20,
        PayinMethod.DIRECT_DEBIT: 21,
        PayinMethod.CHEQUE: 26,
    },
    fallback=PayinMethod.UNKNOWN,
)

PAYIN_REFUND_STATUS = CodeTable(
    "payin_refund_status",
    {
        PayinRefundStatus.PENDING: "PENDING",
        PayinRefundStatus.VALIDATED: "VALIDATED",
        PayinRefundStatus.CANCELED: "CANCELED",
    },
    fallback=PayinRefundStatus.UNKNOWN,
)

# Cheque deposits report their progress through ``codeStatus`` only.
DEPOSIT_STATUS = CodeTable(
    "deposit_status",
    {
        DepositStatus.PENDING: "151125",
        DepositStatus.RECEIVED: "151126",
        DepositStatus.CREDITED: "151127",
        DepositStatus.REJECTED: "151128",
        DepositStatus.CANCELED: "151129",
    },
    fallback=DepositStatus.UNKNOWN,
)

DRAWER_TYPE = CodeTable(
    "drawer_type",
    {DrawerType.PERSON: True, DrawerType.COMPANY: False},
    aliases={"TRUE": DrawerType.PERSON, "FALSE": DrawerType.COMPANY},
)

DOCUMENT_STATUS = CodeTable(
    "document_status",
    {
        DocumentStatus.PENDING: "PENDING",
        DocumentStatus.VALIDATED: "VALIDATED",
        DocumentStatus.CANCELED: "CANCELED",
    },
    fallback=DocumentStatus.UNKNOWN,
)

REJECT_REASON = CodeTable(
    "reject_reason",
    {
        RejectReason.ACCOUNT_IDENTIFIER_INCORRECT: "AC01",
        RejectReason.ACCOUNT_BLOCKED: "AC06",
        RejectReason.ACCOUNT_CLOSED: "AC04",
        RejectReason.TRANSACTION_FORBIDDEN: "AG01",
        RejectReason.INSUFFICIENT_FUNDS: "AM04",
        RejectReason.NO_MANDATE: "MD01",
        RejectReason.REFUSED_BY_DEBTOR: "MS02",
        RejectReason.REASON_NOT_SPECIFIED: "MS03",
        RejectReason.SPECIFIC_SERVICE: "SL01",
    },
    fallback=RejectReason.UNKNOWN,
)

# ---- Misc partner constants ----
CURRENCY_EUR = "EUR"
TRANSFER_TYPE_CLIENT_FEES = 3


__all__ = [
    "CARD_ACTIVATION",
    "CARD_DESIGN",
    "CARD_LOCK_STATUS",
    "CARD_STATUS",
    "CARD_TRANSACTION_STATUS",
    "CIVILITY",
    "CONTROLLING_PERSON_TYPE",
    "CURRENCY_EUR",
    "CodeTable",
    "DEPOSIT_STATUS",
    "DOCUMENT_STATUS",
    "DRAWER_TYPE",
    "EMPLOYEE_TYPE",
    "ENTITY_TYPE_ACTIVE_NON_FINANCIAL_OTHER",
    "LEGAL_FORM",
    "PARENT_TYPE",
    "PAYIN_METHOD",
    "PAYIN_REFUND_STATUS",
    "REJECT_REASON",
    "SPECIFIED_US_PERSON_NO",
    "TRANSFER_STATUS",
    "TRANSFER_TYPE_CLIENT_FEES",
    "USER_TYPE",
    "WALLET_STATUS",
    "WALLET_TYPE_PAYMENT_ACCOUNT",
    "parse_partner_flag",
]
