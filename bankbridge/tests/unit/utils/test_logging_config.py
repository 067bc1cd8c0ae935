from __future__ import annotations

import logging

import pytest

from bankbridge.utils.logging import (
    RedactingFilter,
    configure_logging,
    mask_secrets,
    parse_level,
    resolve_level,
)


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    urllib3_logger = logging.getLogger("urllib3")
    saved = (root.level, urllib3_logger.level, list(root.handlers))
    yield root
    for handler in list(root.handlers):
        if handler not in saved[2]:
            root.removeHandler(handler)
    root.setLevel(saved[0])
    urllib3_logger.setLevel(saved[1])


def _redacting_handlers(root: logging.Logger) -> list:
    return [h for h in root.handlers if any(isinstance(f, RedactingFilter) for f in h.filters)]


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("bankbridge.test", logging.INFO, __file__, 1, msg, args, None)


def test_parse_level_accepts_names_and_numbers() -> None:
    assert parse_level("warning") == logging.WARNING
    assert parse_level(" 10 ") == logging.DEBUG
    assert parse_level("") is None
    assert parse_level("loud") is None


def test_parse_level_ignores_non_ascii_digits() -> None:
    assert parse_level("²") is None


def test_default_level_without_env() -> None:
    assert resolve_level({}, logging.WARNING) == logging.WARNING


def test_explicit_level_wins_over_debug_flag() -> None:
    env = {"BANKBRIDGE_LOG_LEVEL": "error", "BANKBRIDGE_DEBUG": "1"}

    assert resolve_level(env) == logging.ERROR


def test_unreadable_level_falls_back_to_debug_flag_or_default() -> None:
    assert resolve_level({"BANKBRIDGE_LOG_LEVEL": "²", "BANKBRIDGE_DEBUG": "yes"}) == logging.DEBUG
    assert resolve_level({"BANKBRIDGE_LOG_LEVEL": "²"}) == logging.INFO


def test_configure_logging_installs_one_masking_handler(restore_root) -> None:
    env = {"BANKBRIDGE_DEBUG": "on"}

    assert configure_logging(env) == logging.DEBUG
    assert configure_logging(env) == logging.DEBUG

    assert len(_redacting_handlers(restore_root)) == 1
    assert restore_root.level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_configure_logging_reports_unreadable_level(restore_root, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="bankbridge.utils.logging"):
        level = configure_logging({"BANKBRIDGE_LOG_LEVEL": "²"})

    assert level == logging.INFO
    assert "BANKBRIDGE_LOG_LEVEL" in caplog.text


def test_mask_secrets_hides_card_numbers_and_tokens() -> None:
    text = mask_secrets("pan 5198720012344839 auth Bearer abc.def-123, wallet 9001")

    assert "5198720012344839" not in text
    assert "************4839" in text
    assert "abc.def-123" not in text
    assert "Bearer ***" in text
    assert "wallet 9001" in text


def test_mask_secrets_leaves_longer_digit_runs_alone() -> None:
    reference = "76300060000112345678901"

    assert mask_secrets(reference) == reference


def test_installed_handler_masks_formatted_arguments(restore_root) -> None:
    configure_logging({})
    handler = _redacting_handlers(restore_root)[0]
    record = _record("card %s issued for wallet %s", "4970101234567890", 9001)

    assert handler.filter(record)

    line = handler.format(record)
    assert "4970101234567890" not in line
    assert "************7890 issued for wallet 9001" in line
