"""Tests for printer state codes and reason parsing."""

import pytest

from indicator_printers.core import PrinterRecord, PrinterState, parse_state_reasons
from indicator_printers.core.models import ReconciliationResult


@pytest.mark.parametrize(
    "raw,expected",
    [
        (3, PrinterState.IDLE),
        (4, PrinterState.PROCESSING),
        (5, PrinterState.STOPPED),
        (6, PrinterState.OTHER),
        ("4", PrinterState.PROCESSING),
        ("stopped", PrinterState.STOPPED),
        ("Processing", PrinterState.PROCESSING),
        ("bogus", PrinterState.OTHER),
        (PrinterState.IDLE, PrinterState.IDLE),
    ],
)
def test_state_code_coercion(raw, expected) -> None:
    assert PrinterState.coerce(raw) == expected


def test_parse_state_reasons_keeps_order_and_drops_duplicates() -> None:
    assert parse_state_reasons("toner-low  cover-open toner-low") == (
        "toner-low",
        "cover-open",
    )


def test_parse_state_reasons_handles_empty_values() -> None:
    assert parse_state_reasons("") == ()
    assert parse_state_reasons(None) == ()
    assert parse_state_reasons(["media-low", " "]) == ("media-low",)


def test_parse_state_reasons_drops_none_marker() -> None:
    assert parse_state_reasons("none") == ()
    assert parse_state_reasons(["none"]) == ()
    assert parse_state_reasons("none toner-low") == ("toner-low",)


def test_record_visibility_follows_job_count() -> None:
    record = PrinterRecord(name="kitchen", job_count=0)
    assert record.visible is False

    record.update(state=PrinterState.PROCESSING, job_count=2, reasons=())
    assert record.visible is True


def test_record_update_reports_changes() -> None:
    record = PrinterRecord(name="kitchen")
    assert record.update(state=PrinterState.IDLE, job_count=1, reasons=["offline"])
    assert not record.update(state=PrinterState.IDLE, job_count=1, reasons=["offline"])
    assert record.update(state=PrinterState.IDLE, job_count=1, reasons=[])


def test_reconciliation_result_helpers() -> None:
    result = ReconciliationResult(changes={"kitchen": True, "office": False})

    assert result.changed is True
    assert result.changed_printers == ["kitchen"]
    assert result.get("office") is False
    assert ReconciliationResult().is_empty()
