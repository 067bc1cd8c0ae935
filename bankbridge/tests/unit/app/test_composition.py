from __future__ import annotations

import logging

import pytest

from bankbridge.adapters.bank_rest import BankRestAdapter
from bankbridge.adapters.http_client import PartnerSession
from bankbridge.app.composition import build_bank_adapter
from bankbridge.tests.unit.helpers import EventSinkStub
from bankbridge.utils.logging import RedactingFilter


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    urllib3_level = logging.getLogger("urllib3").level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
    root.setLevel(saved_level)
    logging.getLogger("urllib3").setLevel(urllib3_level)


def _env(**overrides: str) -> dict:
    env = {
        "BANKBRIDGE_PARTNER_BASE_URL": "https://partner.test/v1/",
        "BANKBRIDGE_PARTNER_TOKEN": "secret-token",
        "BANKBRIDGE_PARTNER_TARIFF_ID": "77",
        "BANKBRIDGE_PARTNER_PERMS_GROUP": "TRZ-CU-011",
        "BANKBRIDGE_PARTNER_CARD_PRINT": "8529",
        "BANKBRIDGE_LOG_LEVEL": "warning",
    }
    env.update(overrides)
    return env


def test_build_bank_adapter_configures_logging_and_session(restore_root) -> None:
    sink = EventSinkStub()

    adapter = build_bank_adapter(_env(), events=sink)

    assert isinstance(adapter, BankRestAdapter)
    assert isinstance(adapter.transport, PartnerSession)
    assert adapter.config.tariff_id == "77"
    assert restore_root.level == logging.WARNING
    assert any(
        isinstance(flt, RedactingFilter) for handler in restore_root.handlers for flt in handler.filters
    )


def test_build_bank_adapter_reports_missing_configuration(restore_root, caplog) -> None:
    env = _env()
    del env["BANKBRIDGE_PARTNER_TOKEN"]

    with caplog.at_level(logging.ERROR), pytest.raises(ValueError):
        build_bank_adapter(env)

    assert "BANKBRIDGE_PARTNER_TOKEN" in caplog.text
    assert "secret-token" not in caplog.text
