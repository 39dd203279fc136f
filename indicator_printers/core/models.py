"""Printer and reconciliation data types."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

LOGGER = logging.getLogger(__name__)

__all__ = [
    "Destination",
    "PrinterRecord",
    "PrinterState",
    "ReconciliationResult",
    "StateCode",
    "parse_state_reasons",
]


class PrinterState(str, Enum):
    """Printer state codes as displayed by the indicator."""

    IDLE = "idle"
    PROCESSING = "processing"
    STOPPED = "stopped"
    OTHER = "other"

    @classmethod
    def from_ipp(cls, value: int) -> "PrinterState":
        """Map an IPP ``printer-state`` integer (3, 4, 5) to a state code."""
        return _IPP_PRINTER_STATES.get(value, cls.OTHER)

    @classmethod
    def coerce(cls, value: "StateCode") -> "PrinterState":
        if isinstance(value, PrinterState):
            return value
        if isinstance(value, bool):
            return cls.OTHER
        if isinstance(value, int):
            return cls.from_ipp(value)
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized.isdigit():
                return cls.from_ipp(int(normalized))
            try:
                return cls(normalized)
            except ValueError:
                return cls.OTHER
        return cls.OTHER


_IPP_PRINTER_STATES = {
    3: PrinterState.IDLE,
    4: PrinterState.PROCESSING,
    5: PrinterState.STOPPED,
}

StateCode = Union[PrinterState, int, str]

_NO_REASON = "none"


def parse_state_reasons(raw: Union[str, Iterable[str], None]) -> tuple[str, ...]:
    """Split a space separated ``printer-state-reasons`` value.

    Order is preserved and duplicates are dropped. The spooler reports a
    printer without reasons as ``none``, which yields an empty tuple. Accepts
    an iterable of tokens as well, since pycups reports reasons as a list.
    """

    if raw is None:
        return ()
    tokens = raw.split() if isinstance(raw, str) else [str(item) for item in raw]
    seen: dict[str, None] = {}
    for token in tokens:
        token = token.strip()
        if token and token != _NO_REASON:
            seen.setdefault(token, None)
    return tuple(seen)


@dataclass(slots=True, frozen=True)
class Destination:
    """A printer as reported by the spooler's listing API."""

    name: str
    state: PrinterState
    reasons: tuple[str, ...] = ()


@dataclass(slots=True)
class PrinterRecord:
    """Displayed state of one printer, keyed by name."""

    name: str
    state: PrinterState = PrinterState.OTHER
    job_count: int = 0
    reasons: frozenset[str] = frozenset()

    @property
    def visible(self) -> bool:
        return self.job_count > 0

    def update(
        self,
        *,
        state: PrinterState,
        job_count: int,
        reasons: Iterable[str],
    ) -> bool:
        """Apply new values in place and report whether anything changed."""

        new_reasons = frozenset(reasons)
        changed = (
            state != self.state
            or job_count != self.job_count
            or new_reasons != self.reasons
        )
        self.state = state
        self.job_count = job_count
        self.reasons = new_reasons
        return changed


@dataclass(slots=True)
class ReconciliationResult:
    """Outcome of a reconciliation pass: printer name -> changed flag."""

    changes: dict[str, bool] = field(default_factory=dict)
    full_rescan: bool = False

    @property
    def changed(self) -> bool:
        return any(self.changes.values())

    @property
    def changed_printers(self) -> list[str]:
        return [name for name, changed in self.changes.items() if changed]

    def is_empty(self) -> bool:
        return not self.changes

    def get(self, printer: str) -> Optional[bool]:
        return self.changes.get(printer)

    def __iter__(self) -> Iterator[tuple[str, bool]]:
        return iter(self.changes.items())
