"""Tests for StateReconciler."""

from indicator_printers.core import PrinterState, StateReconciler


def test_observe_creates_record_with_queried_job_count(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=3)

    result = reconciler.observe("kitchen", 4, "toner-low")

    assert result.changes == {"kitchen": True}
    record = reconciler.get("kitchen")
    assert record is not None
    assert record.state == PrinterState.PROCESSING
    assert record.job_count == 3
    assert record.reasons == frozenset({"toner-low"})
    assert spooler.count_calls == ["kitchen"]


def test_observe_same_state_is_not_a_change(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=3)
    reconciler.observe("kitchen", PrinterState.PROCESSING, "")

    result = reconciler.observe("kitchen", PrinterState.PROCESSING, "")

    assert result.changes == {"kitchen": False}
    assert result.changed is False


def test_observe_job_count_change_is_a_change(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=3)
    reconciler.observe("kitchen", PrinterState.PROCESSING, "")
    spooler.set_jobs("kitchen", 2)

    result = reconciler.observe("kitchen", PrinterState.PROCESSING, "")

    assert result.changed is True
    assert reconciler.get("kitchen").job_count == 2


def test_observe_unknown_printer_is_abandoned(spooler, reconciler) -> None:
    result = reconciler.observe("ghost", PrinterState.IDLE, "offline")

    assert result.is_empty()
    assert reconciler.get("ghost") is None
    assert reconciler.records() == []


def test_observe_rejects_empty_name(spooler, reconciler) -> None:
    result = reconciler.observe("", PrinterState.IDLE, "")

    assert result.is_empty()
    assert spooler.count_calls == []


def test_zero_jobs_keeps_record_but_hides_it(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=1)
    reconciler.observe("kitchen", PrinterState.PROCESSING, "")
    spooler.set_jobs("kitchen", 0)

    reconciler.observe("kitchen", PrinterState.IDLE, "")

    record = reconciler.get("kitchen")
    assert record is not None
    assert record.visible is False
    assert reconciler.any_visible is False


def test_rescan_recomputes_every_printer(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=2)
    spooler.add("office", PrinterState.IDLE, jobs=0)

    result = reconciler.rescan()

    assert result.full_rescan is True
    assert result.changes == {"kitchen": True, "office": True}
    assert [record.name for record in reconciler.records()] == ["kitchen", "office"]

    second = reconciler.rescan()
    assert second.changes == {"kitchen": False, "office": False}


def test_rescan_drops_printers_no_longer_listed(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=2)
    spooler.add("office", PrinterState.IDLE, jobs=1)
    reconciler.rescan()

    del spooler.printers["office"]
    result = reconciler.rescan()

    assert result.changes["office"] is True
    assert reconciler.get("office") is None
    assert reconciler.get("kitchen") is not None


def test_rescan_skips_destinations_with_failed_job_query(spooler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=2)
    spooler.add("broken", PrinterState.IDLE, jobs=-1)
    reconciler = StateReconciler(spooler)

    result = reconciler.rescan()

    assert "broken" not in result.changes
    assert reconciler.get("broken") is None


def test_observe_none_reason_matches_rescanned_record(spooler, reconciler) -> None:
    spooler.add("kitchen", PrinterState.PROCESSING, jobs=2)
    reconciler.rescan()

    flags = [
        reconciler.observe("kitchen", PrinterState.PROCESSING, "none").changed
        for _ in range(3)
    ]

    assert flags == [False, False, False]
    assert reconciler.get("kitchen").reasons == frozenset()
