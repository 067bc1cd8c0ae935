from datetime import date
from decimal import Decimal

import pytest

from bankbridge.adapters import request_builders as rb
from bankbridge.adapters.access_tag import generate_access_tag
from bankbridge.adapters.normalizers import normalize_user
from bankbridge.domain.entities import Invoice, Stakeholder, WalletCheck
from bankbridge.domain.enums import (
    BeneficiaryType,
    CardStatus,
    Civility,
    ControllingPersonType,
    DrawerType,
    EmployeeType,
    ParentType,
    UserType,
)
from bankbridge.domain.errors import IncompleteRequest
from bankbridge.domain.records import MandateWhitelistEntry, PartnerBeneficiary
from bankbridge.tests.unit.helpers import (
    FIXED_MINUTE,
    FIXED_NOW,
    make_address,
    make_company,
    make_config,
    make_wallet_card,
    make_wallet_company,
    make_wallet_user,
)


def test_format_user_body_for_a_physical_person() -> None:
    wallet_user = make_wallet_user()

    body = rb.format_user_body(wallet_user)

    assert body["userTypeId"] == 1
    assert body["email"] == "jeanne@wallets.test"
    assert body["title"] == "MME"
    assert body["birthday"] == "1985-07-02"
    assert body["parentUserId"] == 5001
    assert body["parentType"] == "leader"
    assert body["employeeType"] == 1
    assert body["controllingPersonType"] == 1
    assert body["specifiedUSPerson"] == 0
    assert body["effectiveBeneficiary"] == 60


def test_format_user_body_maps_stakeholder_roles() -> None:
    wallet_user = make_wallet_user(stakeholder=Stakeholder(is_director=False, is_beneficiary=False))

    body = rb.format_user_body(wallet_user)

    assert body["parentType"] == "shareholder"
    assert body["employeeType"] == 0
    assert body["controllingPersonType"] == 3
    assert "effectiveBeneficiary" not in body


def test_format_user_body_returns_exactly_the_requested_fields() -> None:
    wallet_user = make_wallet_user()
    full = rb.format_user_body(wallet_user)

    subset = rb.format_user_body(wallet_user, ["phone", "city", "notAField"])

    assert subset == {"phone": full["phone"], "city": full["city"]}


def test_select_fields_without_selection_keeps_everything() -> None:
    payload = {"a": 1, "b": None}

    assert rb.select_fields(payload, None) == payload
    assert rb.select_fields(payload, []) == payload


def test_individual_company_body_lets_personal_fields_win() -> None:
    wallet_company = make_wallet_company(company=make_company(is_individual_company=True))
    make_wallet_user(wallet_company)

    body = rb.format_individual_company_body(wallet_company)

    assert body["email"] == "jeanne@wallets.test"
    assert body["userTypeId"] == 1
    assert body["legalName"] == "Acme Conseil"
    assert body["legalAnnualTurnOver"] == "0-39"
    assert body["legalNetIncomeRange"] == "0-4"
    assert body["firstname"] == "Jeanne"
    assert body["incomeRange"] == "19-23"
    assert body["personalAssets"] == "0-2"
    assert rb.format_company_body(wallet_company) == body


def test_individual_company_body_without_user_keeps_company_email() -> None:
    wallet_company = make_wallet_company(company=make_company(is_individual_company=True))

    body = rb.format_individual_company_body(wallet_company)

    assert body["email"] == "contact@acme.test"
    assert "firstname" not in body


def test_company_body_for_a_corporation() -> None:
    body = rb.format_company_body(make_wallet_company())

    assert body["userTypeId"] == 2
    assert body["legalForm"] == "5710"
    assert body["legalRegistrationDate"] == "2019-05-14"
    assert body["entityType"] == 5
    assert body["economicSanctions"] is False


def test_create_user_carries_email_access_tag() -> None:
    wallet_user = make_wallet_user()

    request = rb.build_create_user(wallet_user)

    assert (request.method, request.path) == ("POST", "users")
    assert request.json_body["accessTag"] == generate_access_tag("createUser", "jeanne@wallets.test")
    assert request.json_body["lastname"] == "Martin"


def test_create_payout_request_matches_partner_contract() -> None:
    request = rb.build_create_payout(
        "W", "B", Decimal("100.00"), "rent", None, "EUR", None, FIXED_NOW
    )

    assert (request.method, request.path) == ("POST", "payouts")
    assert request.json_body["walletId"] == "W"
    assert request.json_body["beneficiaryId"] == "B"
    assert request.json_body["amount"] == "100.00"
    assert request.json_body["accessTag"] == generate_access_tag(
        "createPayout", "W", "B", None, Decimal("100.00"), "rent", FIXED_MINUTE
    )
    assert "supportingFileLink" not in request.json_body


def test_create_payout_includes_document_link_when_given() -> None:
    request = rb.build_create_payout(
        9001, 4401, Decimal("12.5"), None, 3, "EUR", "https://docs.test/f.pdf", FIXED_NOW
    )

    assert request.json_body["amount"] == "12.50"
    assert request.json_body["supportingFileLink"] == "https://docs.test/f.pdf"
    assert "label" not in request.json_body


def test_virtual_card_request_omits_unset_delivery_optionals() -> None:
    wallet_card = make_wallet_card()

    request = rb.build_create_virtual_card(wallet_card, make_config(), FIXED_NOW)
    body = request.json_body

    assert request.path == "cards/CreateVirtual"
    assert body["accessTag"] == generate_access_tag(
        "createVirtualCard", FIXED_MINUTE, 5002, 9001, "jeanne@wallets.test"
    )
    assert body["permsGroup"] == "TRZ-CU-011"
    assert body["cardPrint"] == "8529"
    assert body["limitAtmWeek"] == 2000
    assert body["limitPaymentDay"] == 0
    assert body["limitPaymentWeek"] == 10000
    assert "deliveryTitle" not in body
    assert "deliveryAddress2" not in body
    assert "deliveryAddress3" not in body


def test_convert_to_physical_includes_set_optionals() -> None:
    address = make_address(title=Civility.MR, additional_information_1="Bat. B")

    request = rb.build_convert_to_physical(7001, address)

    assert (request.method, request.path) == ("PUT", "cards/7001/ConvertVirtual/")
    assert request.json_body["deliveryTitle"] == "M"
    assert request.json_body["deliveryAddress2"] == "Bat. B"
    assert "deliveryAddress3" not in request.json_body
    assert request.json_body["accessTag"] == generate_access_tag("convertToPhysicalCard", 7001)


def test_card_maintenance_requests() -> None:
    wallet_card = make_wallet_card(limit_atm_week=500, nfc=False)

    assert rb.build_set_card_status(7001, CardStatus.LOCKED).json_body == {"lockStatus": 1}
    assert rb.build_set_card_pin(7001, "1111", "1111").json_body == {
        "newPIN": "1111",
        "confirmPIN": "1111",
    }
    assert rb.build_update_card_limits(wallet_card).json_body == {
        "limitAtmWeek": 500,
        "limitPaymentWeek": 10000,
    }
    assert rb.build_update_card_options(wallet_card).json_body["nfc"] is False
    assert rb.build_unblock_card_pin(7001).path == "cards/7001/UnblockPIN/"
    assert rb.build_register_3ds(wallet_card).json_body["cardId"] == 7001


def test_update_card_limits_requires_partner_card_id() -> None:
    with pytest.raises(IncompleteRequest) as excinfo:
        rb.build_update_card_limits(make_wallet_card(partner_card_id=None))

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.kind == "incomplete_request"


def test_create_check_splits_cmc7_in_partner_zones() -> None:
    check = WalletCheck(
        partner_wallet_id=9001,
        amount=Decimal("250"),
        cmc7="1234567" + "012345678901" + "987654321098",
        rlmc_key="42",
        drawer_type=DrawerType.COMPANY,
        drawer="Client SARL",
    )

    body = rb.build_create_check(check).json_body

    cheque = body["additionalData"]["cheque"]
    assert cheque["cmc7"] == {"a": "1234567", "b": "012345678901", "c": "987654321098"}
    assert cheque["drawerData"] == {"firstName": "", "lastName": "Client SARL", "isNaturalPerson": False}
    assert body["paymentMethodId"] == 26
    assert body["amount"] == "250.00"


def test_b2b_debtor_and_blacklist_bodies() -> None:
    debtor = rb.build_create_b2b_debtor(5001, "Energy Co", "FR12ZZZ123456", "RUM-1", "1 rue X", True)
    assert debtor.json_body["usableForSct"] is False
    assert debtor.json_body["sddB2bWhitelist"] == [
        {"uniqueMandateReference": "RUM-1", "isRecurrent": True}
    ]

    blacklist = rb.build_blacklist_beneficiary_sdd(4401)
    assert (blacklist.method, blacklist.path) == ("PUT", "beneficiaries/4401")
    assert blacklist.json_body == {"sddCoreBlacklist": ["*"], "sddB2bWhitelist": []}


def test_update_b2b_debtor_sends_current_whitelist() -> None:
    beneficiary = PartnerBeneficiary(
        beneficiary_id=4402,
        user_id=5001,
        name="Energy Co",
        type=BeneficiaryType.DEBTOR,
        sepa_creditor_identifier="FR12ZZZ123456",
        sdd_b2b_whitelist=(MandateWhitelistEntry("RUM-1"), MandateWhitelistEntry("RUM-2", True)),
    )

    body = rb.build_update_b2b_debtor(beneficiary).json_body

    assert [entry["uniqueMandateReference"] for entry in body["sddB2bWhitelist"]] == ["RUM-1", "RUM-2"]
    assert "address" not in body


def test_debit_client_invoice_transfer() -> None:
    request = rb.build_debit_client_invoice(9001, 9999, Invoice(id=314, total_including_taxes=Decimal("9.9")), FIXED_NOW)

    assert request.json_body == {
        "accessTag": generate_access_tag("invoice_314", FIXED_MINUTE),
        "walletId": "9001",
        "beneficiaryWalletId": "9999",
        "amount": "9.90",
        "label": "Frais bancaires",
        "currency": "EUR",
        "transferTypeId": 3,
        "transferTag": "invoice_314",
    }


def test_wallet_requests_use_config_and_operator_origin() -> None:
    request = rb.build_create_wallet(make_wallet_company(), "77", "bankbridge-wallet")

    assert request.json_body["tariffId"] == "77"
    assert request.json_body["walletTypeId"] == 10
    assert request.json_body["accessTag"] == generate_access_tag("createWallet", 5001)
    assert rb.build_get_wallet(9001).params == {"origin": "OPERATOR"}
    assert rb.build_close_wallet(9001).json_body == {"origin": "OPERATOR"}
    assert rb.build_get_balances(9001).params == {"walletId": 9001}


def test_diff_fields_compares_text_and_numbers() -> None:
    desired = {"phone": "+33600000000", "effectiveBeneficiary": 60, "parentUserId": 5001, "city": "Lyon"}
    current = {"phone": "+33611223344", "effectiveBeneficiary": "60.00", "parentUserId": "5001"}

    assert rb.diff_fields(desired, current) == {"phone": "+33600000000", "city": "Lyon"}


def test_diff_fields_reads_partner_boolean_spellings() -> None:
    desired = {"activityOutsideEu": False, "specifiedUSPerson": 0, "economicSanctions": True}
    current = {"activityOutsideEu": 0, "specifiedUSPerson": False, "economicSanctions": "true"}

    assert rb.diff_fields(desired, current) == {}
    assert rb.diff_fields({"involvedSanctions": False}, {"involvedSanctions": "1"}) == {
        "involvedSanctions": False
    }
    assert rb.diff_fields({"involvedSanctions": True}, {}) == {"involvedSanctions": True}


def test_payout_tag_is_the_same_for_equal_amounts() -> None:
    tags = {
        rb.build_create_payout(9001, 4401, amount, "rent", None, "EUR", None, FIXED_NOW).json_body[
            "accessTag"
        ]
        for amount in (100, Decimal("100"), Decimal("100.00"), 100.0)
    }

    assert len(tags) == 1


def test_created_user_reads_back_with_the_same_values() -> None:
    body = rb.build_create_user(make_wallet_user()).json_body

    user = normalize_user({**body, "userId": "5002"})

    assert user.user_id == 5002
    assert user.user_type is UserType.PHYSICAL
    assert user.title is Civility.MRS
    assert (user.first_name, user.last_name) == ("Jeanne", "Martin")
    assert user.birthday == date(1985, 7, 2)
    assert (user.address1, user.postcode, user.city, user.country) == (
        "3 avenue Foch",
        "69006",
        "Lyon",
        "FR",
    )
    assert user.phone == "+33611223344"
    assert user.parent_user_id == 5001
    assert user.parent_type is ParentType.LEADER
    assert user.employee_type is EmployeeType.LEADER
    assert user.controlling_person_type is ControllingPersonType.SHAREHOLDER
    assert user.effective_beneficiary == Decimal(60)
    assert user.specified_us_person is False
