"""REST facade over the banking partner API.

``BankRestAdapter`` exposes one typed method per partner-facing domain
operation. Every method follows the same path: build the request, send it
through the injected transport, check the status, extract the single record,
and normalize it. Any failure on that path is classified once, logged once,
and raised as a ``PartnerError``.

Dependencies:
    - ``PartnerTransport`` (``PartnerSession`` in production) for HTTP.
    - ``request_builders`` / ``normalizers`` for the pure translations.
    - ``classify_error`` as the single classification boundary.

Call context:
    Constructed at composition time with an immutable ``PartnerConfig``; the
    adapter keeps no per-call state and never reads the process environment.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

from bankbridge.domain.entities import (
    Address,
    Invoice,
    WalletCard,
    WalletCheck,
    WalletCompany,
    WalletUser,
)
from bankbridge.domain.enums import CardStatus
from bankbridge.domain.errors import IneligibleBeneficiary, MalformedRecord, PartnerError
from bankbridge.domain.events import UserPhoneUpdated
from bankbridge.domain.ports import BankPort, EventSink, PartnerId, PartnerTransport
from bankbridge.domain.records import (
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
from bankbridge.domain.sepa import iban_country, in_sepa_zone
from bankbridge.domain.time_utils import PARTNER_TIMEZONE

from . import request_builders as rb
from .api_errors import ensure_ok, json_object
from .error_mapping import classify_error
from .http_client import PartnerSession
from .normalizers import (
    PUSH_RESOURCES,
    normalize_balance,
    normalize_beneficiary,
    normalize_card,
    normalize_document,
    normalize_payin,
    normalize_payout,
    normalize_transfer,
    normalize_user,
    normalize_wallet,
)
from .partner_codes import CURRENCY_EUR
from .partner_config import PartnerConfig
from .results import collection, only_element, only_record

T = TypeVar("T")


class BankRestAdapter(BankPort):
    """Partner facade returning typed records or raising classified errors."""

    def __init__(
        self,
        transport: PartnerTransport,
        config: PartnerConfig,
        *,
        events: Optional[EventSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Wire the adapter.

        Args:
            transport: HTTP transport bound to the partner base URL.
            config: Product identifiers (tariff, perms group, card print).
            events: Optional sink for domain notifications.
            clock: Returns "now"; used for minute-granular access tags.
        """
        self._log = logging.getLogger(__name__)
        self.transport = transport
        self.config = config
        self.events = events
        self._clock = clock or (lambda: datetime.now(PARTNER_TIMEZONE))

    @classmethod
    def from_config(
        cls, config: PartnerConfig, *, events: Optional[EventSink] = None
    ) -> "BankRestAdapter":
        return cls(PartnerSession.from_config(config), config, events=events)

    # ---- Plumbing ----
    def _execute(self, operation: str, context: Mapping[str, Any], call: Callable[[], T]) -> T:
        try:
            return call()
        except Exception as exc:
            if isinstance(exc, PartnerError) and exc.operation is not None:
                # Already classified and logged by a nested facade call.
                raise
            error = classify_error(exc, operation=operation, context=context)
            if error is None:
                raise
            self._log.error(
                "%s failed [%s] %s: %s", operation, error.kind, error.context, error.message
            )
            if error is exc:
                raise
            raise error from exc

    def _send(self, request: rb.PartnerRequest) -> Any:
        resp = self.transport.request(
            request.method,
            request.path,
            json_body=request.json_body,
            params=request.params,
        )
        ensure_ok(resp, request.label)
        return resp

    def _payload(self, request: rb.PartnerRequest) -> Dict[str, Any]:
        return json_object(self._send(request), request.label)

    def _one(
        self,
        request: rb.PartnerRequest,
        key: str,
        normalize: Callable[[Mapping[str, Any]], T],
    ) -> T:
        return normalize(only_record(self._payload(request), key))

    def _many(
        self,
        request: rb.PartnerRequest,
        key: str,
        normalize: Callable[[Mapping[str, Any]], T],
    ) -> List[T]:
        records = []
        for raw in collection(self._payload(request), key):
            if not isinstance(raw, Mapping):
                raise MalformedRecord(f"Element of '{key}' is not an object.", field=key)
            records.append(normalize(raw))
        return records

    def _fetch_user_record(self, partner_user_id: PartnerId) -> Mapping[str, Any]:
        return only_record(self._payload(rb.build_get_user(partner_user_id)), "users")

    def _publish(self, event: object) -> None:
        if self.events is None:
            self._log.debug("No event sink configured; dropping %s", type(event).__name__)
            return
        self.events.publish(event)
        self._log.info("Published %s", type(event).__name__)

    def _now(self) -> datetime:
        return self._clock()

    # ---- Users and companies ----
    def create_user(self, wallet_user: WalletUser) -> PartnerUser:
        """Register a wallet user with the partner.

        An individual company already is the partner user: the wallet user
        takes over the company's partner id and the record is updated instead.
        """
        wallet_company = wallet_user.wallet_company
        if wallet_company.company.is_individual_company:
            wallet_user.partner_user_id = wallet_company.partner_user_id
            return self.update_user(wallet_user)
        return self._execute(
            "create_user",
            {"wallet_user_id": wallet_user.id},
            lambda: self._one(rb.build_create_user(wallet_user), "users", normalize_user),
        )

    def get_user(self, partner_user_id: PartnerId) -> PartnerUser:
        return self._execute(
            "get_user",
            {"partner_user_id": partner_user_id},
            lambda: self._one(rb.build_get_user(partner_user_id), "users", normalize_user),
        )

    def user_diff(
        self, wallet_user: WalletUser, fields: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """Fields of the local user that differ from the partner's current record."""

        def _call() -> Dict[str, Any]:
            desired = rb.format_user_body(wallet_user, fields)
            current = self._fetch_user_record(wallet_user.partner_user_id)
            return rb.diff_fields(desired, current)

        return self._execute(
            "user_diff",
            {"wallet_user_id": wallet_user.id, "partner_user_id": wallet_user.partner_user_id},
            _call,
        )

    def update_user(
        self, wallet_user: WalletUser, fields: Optional[Sequence[str]] = None
    ) -> PartnerUser:
        """Push the fields that changed since the partner's last-known record.

        Nothing is sent when the records already agree. A changed phone number
        publishes ``UserPhoneUpdated`` once the partner has accepted it.
        """

        def _call() -> PartnerUser:
            desired = rb.format_user_body(wallet_user, fields)
            current = self._fetch_user_record(wallet_user.partner_user_id)
            diff = rb.diff_fields(desired, current)
            if not diff:
                self._log.info(
                    "Partner user %s already in sync (wallet user %s, fields=%s)",
                    wallet_user.partner_user_id,
                    wallet_user.id,
                    list(fields or []),
                )
                return normalize_user(current)
            user = self._one(
                rb.build_update_user(wallet_user.partner_user_id, diff), "users", normalize_user
            )
            if "phone" in diff:
                self._publish(
                    UserPhoneUpdated(
                        wallet_user_id=wallet_user.id,
                        partner_user_id=wallet_user.partner_user_id,
                        phone=diff["phone"],
                    )
                )
            return user

        return self._execute(
            "update_user",
            {"wallet_user_id": wallet_user.id, "partner_user_id": wallet_user.partner_user_id},
            _call,
        )

    def create_kyc_request(self, partner_user_id: PartnerId) -> PartnerUser:
        return self._execute(
            "create_kyc_request",
            {"partner_user_id": partner_user_id},
            lambda: self._one(rb.build_kyc_review(partner_user_id), "users", normalize_user),
        )

    def create_company(self, wallet_company: WalletCompany) -> PartnerUser:
        return self._execute(
            "create_company",
            {"wallet_company_id": wallet_company.id},
            lambda: self._one(rb.build_create_company(wallet_company), "users", normalize_user),
        )

    def update_company(self, wallet_company: WalletCompany) -> PartnerUser:
        return self._execute(
            "update_company",
            {"wallet_company_id": wallet_company.id, "partner_user_id": wallet_company.partner_user_id},
            lambda: self._one(rb.build_update_company(wallet_company), "users", normalize_user),
        )

    # ---- Wallets ----
    def create_wallet(self, wallet_company: WalletCompany) -> PartnerWallet:
        return self._execute(
            "create_wallet",
            {"wallet_company_id": wallet_company.id, "partner_user_id": wallet_company.partner_user_id},
            lambda: self._one(
                rb.build_create_wallet(
                    wallet_company, self.config.tariff_id, self.config.wallet_event_name
                ),
                "wallets",
                normalize_wallet,
            ),
        )

    def get_wallet(self, wallet_id: PartnerId) -> PartnerWallet:
        return self._execute(
            "get_wallet",
            {"wallet_id": wallet_id},
            lambda: self._one(rb.build_get_wallet(wallet_id), "wallets", normalize_wallet),
        )

    def close_wallet(self, wallet_id: PartnerId) -> PartnerWallet:
        return self._execute(
            "close_wallet",
            {"wallet_id": wallet_id},
            lambda: self._one(rb.build_close_wallet(wallet_id), "wallets", normalize_wallet),
        )

    def get_balances(self, wallet_id: PartnerId) -> List[PartnerBalance]:
        return self._execute(
            "get_balances",
            {"wallet_id": wallet_id},
            lambda: self._many(rb.build_get_balances(wallet_id), "balances", normalize_balance),
        )

    # ---- Cards ----
    def create_virtual_card(self, wallet_card: WalletCard) -> PartnerCard:
        return self._execute(
            "create_virtual_card",
            {"wallet_card_id": wallet_card.id},
            lambda: self._one(
                rb.build_create_virtual_card(wallet_card, self.config, self._now()),
                "cards",
                normalize_card,
            ),
        )

    def create_physical_card(self, wallet_card: WalletCard) -> PartnerCard:
        """Issue a virtual card, then order its physical counterpart."""
        context: Dict[str, Any] = {"wallet_card_id": wallet_card.id}

        def _call() -> PartnerCard:
            virtual = self._one(
                rb.build_create_virtual_card(wallet_card, self.config, self._now()),
                "cards",
                normalize_card,
            )
            context["card_id"] = virtual.card_id
            return self._one(
                rb.build_convert_to_physical(virtual.card_id, wallet_card.delivery_address),
                "cards",
                normalize_card,
            )

        return self._execute("create_physical_card", context, _call)

    def convert_to_physical_card(self, card_id: PartnerId, address: Address) -> PartnerCard:
        return self._execute(
            "convert_to_physical_card",
            {"card_id": card_id},
            lambda: self._one(rb.build_convert_to_physical(card_id, address), "cards", normalize_card),
        )

    def activate_card(self, card_id: PartnerId) -> PartnerCard:
        return self._execute(
            "activate_card",
            {"card_id": card_id},
            lambda: self._one(rb.build_activate_card(card_id), "cards", normalize_card),
        )

    def set_card_status(self, card_id: PartnerId, status: CardStatus) -> PartnerCard:
        return self._execute(
            "set_card_status",
            {"card_id": card_id, "status": status.value},
            lambda: self._one(rb.build_set_card_status(card_id, status), "cards", normalize_card),
        )

    def lock_card(self, card_id: PartnerId) -> PartnerCard:
        return self.set_card_status(card_id, CardStatus.LOCKED)

    def unlock_card(self, card_id: PartnerId) -> PartnerCard:
        return self.set_card_status(card_id, CardStatus.UNLOCKED)

    def set_card_pin(self, card_id: PartnerId, new_pin: str, confirm_pin: str) -> PartnerCard:
        # PINs stay out of the error context and the logs.
        return self._execute(
            "set_card_pin",
            {"card_id": card_id},
            lambda: self._one(
                rb.build_set_card_pin(card_id, new_pin, confirm_pin), "cards", normalize_card
            ),
        )

    def unblock_card_pin(self, card_id: PartnerId) -> PartnerCard:
        return self._execute(
            "unblock_card_pin",
            {"card_id": card_id},
            lambda: self._one(rb.build_unblock_card_pin(card_id), "cards", normalize_card),
        )

    def update_card_limits(self, wallet_card: WalletCard) -> PartnerCard:
        return self._execute(
            "update_card_limits",
            {"wallet_card_id": wallet_card.id, "card_id": wallet_card.partner_card_id},
            lambda: self._one(rb.build_update_card_limits(wallet_card), "cards", normalize_card),
        )

    def update_card_options(self, wallet_card: WalletCard) -> PartnerCard:
        return self._execute(
            "update_card_options",
            {"wallet_card_id": wallet_card.id, "card_id": wallet_card.partner_card_id},
            lambda: self._one(rb.build_update_card_options(wallet_card), "cards", normalize_card),
        )

    def register_3d_secure(self, wallet_card: WalletCard) -> None:
        self._execute(
            "register_3d_secure",
            {"wallet_card_id": wallet_card.id, "card_id": wallet_card.partner_card_id},
            lambda: self._send(rb.build_register_3ds(wallet_card)),
        )

    def get_card(self, card_id: PartnerId) -> PartnerCard:
        return self._execute(
            "get_card",
            {"card_id": card_id},
            lambda: self._one(rb.build_get_card(card_id), "cards", normalize_card),
        )

    # ---- Payouts ----
    def create_payout(
        self,
        wallet_id: PartnerId,
        beneficiary_id: PartnerId,
        amount: Decimal,
        label: Optional[str],
        *,
        payout_schedule_id: Optional[int] = None,
        currency: str = CURRENCY_EUR,
        document_url: Optional[str] = None,
    ) -> PartnerPayout:
        context = {
            "wallet_id": wallet_id,
            "beneficiary_id": beneficiary_id,
            "amount": rb.format_amount(amount),
            "currency": currency,
        }
        return self._execute(
            "create_payout",
            context,
            lambda: self._one(
                rb.build_create_payout(
                    wallet_id,
                    beneficiary_id,
                    amount,
                    label,
                    payout_schedule_id,
                    currency,
                    document_url,
                    self._now(),
                ),
                "payouts",
                normalize_payout,
            ),
        )

    def cancel_payout(self, payout_id: PartnerId) -> PartnerPayout:
        return self._execute(
            "cancel_payout",
            {"payout_id": payout_id},
            lambda: self._one(rb.build_cancel_payout(payout_id), "payouts", normalize_payout),
        )

    # ---- Beneficiaries ----
    def create_beneficiary(
        self, partner_user_id: PartnerId, name: str, iban: str, bic: str
    ) -> PartnerBeneficiary:
        """Register a credit-transfer creditor; only SEPA IBANs are accepted."""
        if not in_sepa_zone(iban):
            error = IneligibleBeneficiary(
                "Beneficiary IBAN is outside the SEPA zone.",
                operation="create_beneficiary",
                context={"partner_user_id": partner_user_id, "iban_country": iban_country(iban)},
            )
            self._log.error(
                "create_beneficiary failed [%s] %s: %s", error.kind, error.context, error.message
            )
            raise error
        return self._execute(
            "create_beneficiary",
            {"partner_user_id": partner_user_id},
            lambda: self._one(
                rb.build_create_beneficiary(partner_user_id, name, iban, bic),
                "beneficiaries",
                normalize_beneficiary,
            ),
        )

    def get_beneficiary(self, beneficiary_id: PartnerId) -> PartnerBeneficiary:
        return self._execute(
            "get_beneficiary",
            {"beneficiary_id": beneficiary_id},
            lambda: self._one(
                rb.build_get_beneficiary(beneficiary_id), "beneficiaries", normalize_beneficiary
            ),
        )

    def create_b2b_debtor(
        self,
        partner_company_id: PartnerId,
        name: str,
        sepa_creditor_identifier: str,
        mandate_reference: str,
        address: str,
        *,
        is_recurrent: bool = False,
    ) -> PartnerBeneficiary:
        def _call() -> PartnerBeneficiary:
            request = rb.build_create_b2b_debtor(
                partner_company_id,
                name,
                sepa_creditor_identifier,
                mandate_reference,
                address,
                is_recurrent,
            )
            return self._one(request, "beneficiaries", normalize_beneficiary)

        return self._execute(
            "create_b2b_debtor",
            {
                "partner_company_id": partner_company_id,
                "sepa_creditor_identifier": sepa_creditor_identifier,
                "mandate_reference": mandate_reference,
            },
            _call,
        )

    def get_b2b_debtor(self, beneficiary_id: PartnerId) -> PartnerBeneficiary:
        return self._execute(
            "get_b2b_debtor",
            {"beneficiary_id": beneficiary_id},
            lambda: self._one(
                rb.build_get_beneficiary(beneficiary_id), "beneficiaries", normalize_beneficiary
            ),
        )

    def update_b2b_debtor(self, beneficiary: PartnerBeneficiary) -> None:
        self._execute(
            "update_b2b_debtor",
            {"beneficiary_id": beneficiary.beneficiary_id},
            lambda: self._send(rb.build_update_b2b_debtor(beneficiary)),
        )

    def blacklist_beneficiary_sdd(self, beneficiary_id: PartnerId) -> None:
        self._execute(
            "blacklist_beneficiary_sdd",
            {"beneficiary_id": beneficiary_id},
            lambda: self._send(rb.build_blacklist_beneficiary_sdd(beneficiary_id)),
        )

    # ---- Payins and documents ----
    def create_check(self, check: WalletCheck) -> PartnerPayin:
        return self._execute(
            "create_check",
            {"wallet_id": check.partner_wallet_id, "amount": rb.format_amount(check.amount)},
            lambda: self._one(rb.build_create_check(check), "payins", normalize_payin),
        )

    def create_document(
        self, partner_user_id: PartnerId, document_type_id: int, name: str, content_base64: str
    ) -> PartnerDocument:
        return self._execute(
            "create_document",
            {"partner_user_id": partner_user_id, "document_type_id": document_type_id, "name": name},
            lambda: self._one(
                rb.build_create_document(partner_user_id, document_type_id, name, content_base64),
                "documents",
                normalize_document,
            ),
        )

    # ---- Transfers ----
    def find_transfers(self, query: Mapping[str, Any]) -> List[PartnerTransfer]:
        return self._execute(
            "find_transfers",
            dict(query),
            lambda: self._many(rb.build_find_transfers(query), "transfers", normalize_transfer),
        )

    def debit_client_invoice(
        self, client_wallet_id: PartnerId, fee_wallet_id: PartnerId, invoice: Invoice
    ) -> PartnerTransfer:
        return self._execute(
            "debit_client_invoice",
            {"invoice_id": invoice.id, "client_wallet_id": client_wallet_id},
            lambda: self._one(
                rb.build_debit_client_invoice(client_wallet_id, fee_wallet_id, invoice, self._now()),
                "transfers",
                normalize_transfer,
            ),
        )

    # ---- Push notifications ----
    def extract_push_record(self, push: Any, resource: str) -> Any:
        """Normalize the single record carried by a partner push notification.

        ``push`` is either the record list itself or an object holding it
        under the resource's collection key (``{"payins": [...]}``).
        """
        try:
            key, normalize = PUSH_RESOURCES[resource]
        except KeyError as exc:
            raise ValueError(f"Unknown push resource: {resource!r}") from exc

        def _call() -> Any:
            records = push if isinstance(push, list) else collection(push, key)
            raw = only_element(records)
            if not isinstance(raw, Mapping):
                raise MalformedRecord(f"Element of '{key}' is not an object.", field=key)
            return normalize(raw)

        return self._execute("extract_push_record", {"resource": resource}, _call)


__all__ = ["BankRestAdapter"]
