"""Spooler notification events delivered to the service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Sequence, Union

from .models import PrinterState

__all__ = [
    "JobEvent",
    "JobEventKind",
    "JobState",
    "PrinterEvent",
    "PrinterEventKind",
    "event_from_signal",
]


class JobState(IntEnum):
    """IPP ``job-state`` values."""

    PENDING = 3
    HELD = 4
    PROCESSING = 5
    STOPPED = 6
    CANCELED = 7
    ABORTED = 8
    COMPLETED = 9

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.CANCELED, JobState.ABORTED, JobState.COMPLETED)

    @classmethod
    def coerce(cls, value: int) -> Optional["JobState"]:
        try:
            return cls(value)
        except ValueError:
            return None


class PrinterEventKind(str, Enum):
    STATE_CHANGED = "state-changed"
    STOPPED = "stopped"
    ADDED = "added"
    DELETED = "deleted"


class JobEventKind(str, Enum):
    CREATED = "created"
    STATE = "state"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class PrinterEvent:
    """A printer-level notification (state change, added, deleted)."""

    kind: PrinterEventKind
    printer: str
    state: PrinterState
    reasons: str = ""

    @property
    def requires_rescan(self) -> bool:
        return self.kind in (PrinterEventKind.ADDED, PrinterEventKind.DELETED)


@dataclass(slots=True, frozen=True)
class JobEvent:
    """A job lifecycle notification.

    The printer fields are only reliable for non-terminal jobs; terminal
    notifications must trigger a full registry rescan instead.
    """

    kind: JobEventKind
    printer: str
    job_id: int
    job_state: Optional[JobState]
    printer_state: PrinterState = PrinterState.OTHER
    reasons: str = ""

    @property
    def requires_rescan(self) -> bool:
        if self.kind == JobEventKind.COMPLETED:
            return True
        return self.job_state is not None and self.job_state.is_terminal


_PRINTER_SIGNALS = {
    "PrinterStateChanged": PrinterEventKind.STATE_CHANGED,
    "PrinterStopped": PrinterEventKind.STOPPED,
    "PrinterAdded": PrinterEventKind.ADDED,
    "PrinterDeleted": PrinterEventKind.DELETED,
}

_JOB_SIGNALS = {
    "JobCreated": JobEventKind.CREATED,
    "JobState": JobEventKind.STATE,
    "JobCompleted": JobEventKind.COMPLETED,
}


def event_from_signal(
    signal: str, args: Sequence[Any]
) -> Optional[Union[PrinterEvent, JobEvent]]:
    """Translate an ``org.cups.cupsd.Notifier`` signal into an event.

    Printer signals carry ``(text, printer_uri, printer, printer_state,
    printer_state_reasons, printer_is_accepting_jobs)``; job signals append
    ``(job_id, job_state, job_state_reasons, job_name,
    job_impressions_completed)``. Unknown or malformed signals return None.
    """

    if signal in _PRINTER_SIGNALS:
        if len(args) < 6:
            return None
        _, _, printer, state, reasons, _ = args[:6]
        return PrinterEvent(
            kind=_PRINTER_SIGNALS[signal],
            printer=str(printer),
            state=PrinterState.coerce(int(state)),
            reasons=str(reasons),
        )

    if signal in _JOB_SIGNALS:
        if len(args) < 8:
            return None
        _, _, printer, state, reasons, _, job_id, job_state = args[:8]
        return JobEvent(
            kind=_JOB_SIGNALS[signal],
            printer=str(printer),
            job_id=int(job_id),
            job_state=JobState.coerce(int(job_state)),
            printer_state=PrinterState.coerce(int(state)),
            reasons=str(reasons),
        )

    return None
