import pytest

pytest.importorskip("cups")
pytest.importorskip("gi")

from indicator_printers.adapters.notifier import CupsNotifierListener  # noqa: E402
from indicator_printers.core import (  # noqa: E402
    JobEvent,
    JobEventKind,
    PrinterEvent,
    PrinterState,
)

PRINTER_ARGS = ("", "ipp://localhost/printers/kitchen", "kitchen", 4, "none", True)


class StubParameters:
    def __init__(self, values: tuple) -> None:
        self._values = values

    def unpack(self) -> tuple:
        return self._values


def _emit(listener: CupsNotifierListener, signal: str, args: tuple) -> None:
    listener._on_signal(
        None,
        ":1.5",
        "/org/cups/cupsd/Notifier",
        "org.cups.cupsd.Notifier",
        signal,
        StubParameters(args),
    )


@pytest.fixture
def listener():
    listener = CupsNotifierListener()
    printer_events: list[PrinterEvent] = []
    job_events: list[JobEvent] = []
    listener.register_printer_handler(printer_events.append)
    listener.register_job_handler(job_events.append)
    return listener, printer_events, job_events


def test_printer_signal_reaches_printer_handlers(listener) -> None:
    notifier, printer_events, job_events = listener

    _emit(notifier, "PrinterStateChanged", PRINTER_ARGS)

    (event,) = printer_events
    assert event.printer == "kitchen"
    assert event.state == PrinterState.PROCESSING
    assert job_events == []


def test_job_signal_reaches_job_handlers(listener) -> None:
    notifier, printer_events, job_events = listener

    _emit(notifier, "JobCompleted", PRINTER_ARGS + (12, 9, "", "doc", 1))

    (event,) = job_events
    assert event.kind == JobEventKind.COMPLETED
    assert event.job_id == 12
    assert printer_events == []


def test_unknown_signal_is_ignored(listener) -> None:
    notifier, printer_events, job_events = listener

    _emit(notifier, "ServerRestarted", ("",))

    assert printer_events == []
    assert job_events == []


def test_failing_handler_does_not_stop_dispatch(caplog) -> None:
    printer_events: list[PrinterEvent] = []
    notifier = CupsNotifierListener()

    def _boom(event: PrinterEvent) -> None:
        raise ValueError("handler bug")

    notifier.register_printer_handler(_boom)
    notifier.register_printer_handler(printer_events.append)

    _emit(notifier, "PrinterStopped", PRINTER_ARGS)

    assert len(printer_events) == 1
    assert "Handler for PrinterStopped failed" in caplog.text
