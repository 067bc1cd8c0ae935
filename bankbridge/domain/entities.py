from __future__ import annotations

"""Internal domain objects handed to the partner adapter by ledger workflows."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from .enums import Civility, DrawerType, LegalForm

CMC7_SEGMENT_LENGTHS = (7, 12, 12)
CMC7_LENGTH = sum(CMC7_SEGMENT_LENGTHS)


@dataclass(frozen=True)
class Cmc7:
    """Magnetic line of a French cheque, split in its three fixed-width zones."""

    a: str
    """Cheque number zone (7 characters)."""
    b: str
    """Routing zone (12 characters)."""
    c: str
    """Account zone (12 characters)."""

    def __post_init__(self) -> None:
        for name, value, width in zip("abc", (self.a, self.b, self.c), CMC7_SEGMENT_LENGTHS):
            if not isinstance(value, str) or len(value) != width:
                raise ValueError(f"Cmc7.{name} must be a {width}-character string.")

    @classmethod
    def parse(cls, packed: str) -> "Cmc7":
        """Split a packed 31-character CMC7 line into its segments."""
        text = str(packed or "").replace(" ", "")
        if len(text) != CMC7_LENGTH:
            raise ValueError(
                f"CMC7 line must be {CMC7_LENGTH} characters, got {len(text)}."
            )
        first, second, _ = CMC7_SEGMENT_LENGTHS
        return cls(a=text[:first], b=text[first:first + second], c=text[first + second:])

    @property
    def packed(self) -> str:
        return f"{self.a}{self.b}{self.c}"

    def __str__(self) -> str:
        return self.packed


@dataclass(frozen=True)
class Address:
    """Postal delivery address, used for card shipping."""

    first_name: str
    last_name: str
    street: str
    city: str
    postal_code: str
    country_code: str
    title: Optional[Civility] = None
    additional_information_1: Optional[str] = None
    additional_information_2: Optional[str] = None


@dataclass(frozen=True)
class PersonProfile:
    """Civil and KYC data of a natural person."""

    civility: Optional[Civility]
    first_name: str
    last_name: str
    birth_date: date
    mailing_street: str
    mailing_postal_code: str
    mailing_city: str
    mailing_country_code: str
    nationality: str
    birth_place: str
    birth_country: str
    mobile_phone: Optional[str] = None
    income_range: Optional[str] = None
    personal_assets_range: Optional[str] = None


@dataclass(frozen=True)
class Stakeholder:
    """Role of a person within the company that owns the wallet."""

    is_director: bool = False
    is_beneficiary: bool = False
    effective_beneficiary_percentage: Optional[int] = None


@dataclass(frozen=True)
class Company:
    name: str
    legal_form: LegalForm
    ape_code: str
    siret: str
    registration_date: date
    street: str
    postal_code: str
    city: str
    country_code: str
    email: Optional[str] = None
    phone: Optional[str] = None
    annual_turnover: Optional[str] = None
    employees_range: Optional[str] = None
    last_net_income_range: Optional[str] = None
    is_individual_company: bool = False


@dataclass
class WalletCompany:
    """Company-side aggregate of a bank account opened with the partner."""

    id: int
    company: Company
    partner_email: str
    partner_user_id: Optional[int] = None
    partner_wallet_id: Optional[int] = None
    activity_outside_eu: bool = False
    economic_sanctions: bool = False
    resident_countries_sanctions: bool = False
    involved_sanctions: bool = False
    wallet_users: List["WalletUser"] = field(default_factory=list, repr=False, compare=False)

    def first_user(self) -> Optional["WalletUser"]:
        return self.wallet_users[0] if self.wallet_users else None


@dataclass
class WalletUser:
    """A natural person attached to a wallet company (director, shareholder...)."""

    id: int
    wallet_company: WalletCompany
    profile: PersonProfile
    stakeholder: Stakeholder
    partner_email: str
    partner_user_id: Optional[int] = None


@dataclass
class WalletCard:
    """Payment card requested for a wallet user."""

    MAX_LIMIT_ATM_WEEK = 2000
    MAX_LIMIT_PAYMENT_WEEK = 10000

    id: int
    wallet_user: WalletUser
    delivery_address: Address
    partner_card_id: Optional[int] = None
    new_pin: Optional[str] = field(default=None, repr=False)
    foreign: bool = True
    online: bool = True
    atm: bool = True
    nfc: bool = True
    limit_atm_week: int = MAX_LIMIT_ATM_WEEK
    limit_payment_week: int = MAX_LIMIT_PAYMENT_WEEK


@dataclass(frozen=True)
class WalletCheck:
    """Cheque remitted for deposit on a wallet."""

    partner_wallet_id: int
    amount: Decimal
    cmc7: str
    rlmc_key: str
    drawer_type: DrawerType
    drawer_first_name: Optional[str] = None
    drawer_last_name: Optional[str] = None
    drawer: Optional[str] = None


@dataclass(frozen=True)
class Invoice:
    """Fee invoice debited from a client wallet."""

    id: int
    total_including_taxes: Decimal


__all__ = [
    "Address",
    "CMC7_LENGTH",
    "CMC7_SEGMENT_LENGTHS",
    "Cmc7",
    "Company",
    "Invoice",
    "PersonProfile",
    "Stakeholder",
    "WalletCard",
    "WalletCheck",
    "WalletCompany",
    "WalletUser",
]
