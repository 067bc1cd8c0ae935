from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .entities import Address, Invoice, WalletCard, WalletCheck, WalletCompany, WalletUser
from .enums import CardStatus
from .records import (
    PartnerBalance,
    PartnerBeneficiary,
    PartnerCard,
    PartnerDocument,
    PartnerPayin,
    PartnerPayout,
    PartnerTransfer,
    PartnerUser,
    PartnerWallet,
)

PartnerId = int | str


# ---- Collaborators (outside the adapter) ----
class PartnerResponse(Protocol):
    """Minimal response surface the facade reads (a ``requests.Response`` fits)."""

    status_code: int
    text: str

    def json(self) -> Any: ...


class PartnerTransport(Protocol):
    """Synchronous HTTP transport bound to the partner base URL and credentials."""

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> PartnerResponse: ...


class EventSink(Protocol):
    """Receives domain notifications (e.g. ``UserPhoneUpdated``)."""

    def publish(self, event: object) -> None: ...


# ---- Port exposed to ledger workflows ----
class BankPort(Protocol):
    """One typed method per partner-facing domain operation."""

    def create_user(self, wallet_user: WalletUser) -> PartnerUser: ...
    def get_user(self, partner_user_id: PartnerId) -> PartnerUser: ...
    def update_user(
        self, wallet_user: WalletUser, fields: Optional[Sequence[str]] = None
    ) -> PartnerUser: ...
    def user_diff(
        self, wallet_user: WalletUser, fields: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]: ...
    def create_kyc_request(self, partner_user_id: PartnerId) -> PartnerUser: ...
    def create_company(self, wallet_company: WalletCompany) -> PartnerUser: ...
    def update_company(self, wallet_company: WalletCompany) -> PartnerUser: ...

    def create_wallet(self, wallet_company: WalletCompany) -> PartnerWallet: ...
    def get_wallet(self, wallet_id: PartnerId) -> PartnerWallet: ...
    def close_wallet(self, wallet_id: PartnerId) -> PartnerWallet: ...
    def get_balances(self, wallet_id: PartnerId) -> List[PartnerBalance]: ...

    def create_physical_card(self, wallet_card: WalletCard) -> PartnerCard: ...
    def create_virtual_card(self, wallet_card: WalletCard) -> PartnerCard: ...
    def convert_to_physical_card(self, card_id: PartnerId, address: Address) -> PartnerCard: ...
    def activate_card(self, card_id: PartnerId) -> PartnerCard: ...
    def set_card_status(self, card_id: PartnerId, status: CardStatus) -> PartnerCard: ...
    def lock_card(self, card_id: PartnerId) -> PartnerCard: ...
    def unlock_card(self, card_id: PartnerId) -> PartnerCard: ...
    def set_card_pin(self, card_id: PartnerId, new_pin: str, confirm_pin: str) -> PartnerCard: ...
    def unblock_card_pin(self, card_id: PartnerId) -> PartnerCard: ...
    def update_card_limits(self, wallet_card: WalletCard) -> PartnerCard: ...
    def update_card_options(self, wallet_card: WalletCard) -> PartnerCard: ...
    def register_3d_secure(self, wallet_card: WalletCard) -> None: ...
    def get_card(self, card_id: PartnerId) -> PartnerCard: ...

    def create_payout(
        self,
        wallet_id: PartnerId,
        beneficiary_id: PartnerId,
        amount: Decimal,
        label: Optional[str],
        *,
        payout_schedule_id: Optional[int] = None,
        currency: str = "EUR",
        document_url: Optional[str] = None,
    ) -> PartnerPayout: ...
    def cancel_payout(self, payout_id: PartnerId) -> PartnerPayout: ...

    def create_beneficiary(
        self, partner_user_id: PartnerId, name: str, iban: str, bic: str
    ) -> PartnerBeneficiary: ...
    def get_beneficiary(self, beneficiary_id: PartnerId) -> PartnerBeneficiary: ...
    def create_b2b_debtor(
        self,
        partner_company_id: PartnerId,
        name: str,
        sepa_creditor_identifier: str,
        mandate_reference: str,
        address: str,
        *,
        is_recurrent: bool = False,
    ) -> PartnerBeneficiary: ...
    def get_b2b_debtor(self, beneficiary_id: PartnerId) -> PartnerBeneficiary: ...
    def update_b2b_debtor(self, beneficiary: PartnerBeneficiary) -> None: ...
    def blacklist_beneficiary_sdd(self, beneficiary_id: PartnerId) -> None: ...

    def create_check(self, check: WalletCheck) -> PartnerPayin: ...
    def create_document(
        self, partner_user_id: PartnerId, document_type_id: int, name: str, content_base64: str
    ) -> PartnerDocument: ...

    def find_transfers(self, query: Mapping[str, Any]) -> List[PartnerTransfer]: ...
    def debit_client_invoice(
        self, client_wallet_id: PartnerId, fee_wallet_id: PartnerId, invoice: Invoice
    ) -> PartnerTransfer: ...

    def extract_push_record(self, push: Any, resource: str) -> Any: ...


__all__ = ["BankPort", "EventSink", "PartnerId", "PartnerResponse", "PartnerTransport"]
