from datetime import datetime
from decimal import Decimal
import hashlib

from bankbridge.adapters.access_tag import canonical_text, generate_access_tag, minute_stamp


def test_access_tag_is_md5_of_concatenated_elements() -> None:
    expected = hashlib.md5("createBeneficiary5001FR7630006000011234567890189".encode()).hexdigest()

    tag = generate_access_tag("createBeneficiary", 5001, "FR7630006000011234567890189")

    assert tag == expected
    assert len(tag) == 32


def test_access_tag_is_deterministic_for_equal_inputs() -> None:
    first = generate_access_tag("createPayout", 9001, 4401, None, Decimal("100.00"), "rent", "2024-03-01 10:15")
    second = generate_access_tag("createPayout", 9001, 4401, None, Decimal("100.00"), "rent", "2024-03-01 10:15")

    assert first == second


def test_access_tag_changes_with_any_argument() -> None:
    base = ("createPayout", 9001, 4401, None, Decimal("100.00"), "rent", "2024-03-01 10:15")
    variants = [
        ("createPayout", 9002, 4401, None, Decimal("100.00"), "rent", "2024-03-01 10:15"),
        ("createPayout", 9001, 4401, 3, Decimal("100.00"), "rent", "2024-03-01 10:15"),
        ("createPayout", 9001, 4401, None, Decimal("100.01"), "rent", "2024-03-01 10:15"),
        ("createPayout", 9001, 4401, None, Decimal("100.00"), "rent", "2024-03-01 10:16"),
    ]

    tags = {generate_access_tag(*variant) for variant in variants}

    assert generate_access_tag(*base) not in tags
    assert len(tags) == len(variants)


def test_amounts_render_with_two_decimals_whatever_their_type() -> None:
    assert canonical_text(Decimal("100")) == "100.00"
    assert canonical_text(100.0) == "100.00"
    assert generate_access_tag("x", Decimal("100")) == generate_access_tag("x", 100.0)


def test_scalars_render_like_empty_and_flag_text() -> None:
    assert canonical_text(None) == ""
    assert canonical_text(True) == "1"
    assert canonical_text(False) == ""


def test_minute_stamp_drops_seconds() -> None:
    now = datetime(2024, 3, 1, 10, 15, 59)

    assert minute_stamp(now) == "2024-03-01 10:15"
    assert canonical_text(now) == "2024-03-01 10:15"
