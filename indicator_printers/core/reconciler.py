"""Canonical printer state, reconciled against the spooler.

The reconciler keeps one ``PrinterRecord`` per printer and diffs what the
spooler reports against what was last displayed. Job counts always come from
a fresh registry query: job lifecycle notifications omit or misreport the
printer for cancelled, aborted and completed jobs, so those are reconciled
with ``rescan()`` rather than with the last printer name seen.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .models import (
    PrinterRecord,
    PrinterState,
    ReconciliationResult,
    StateCode,
    parse_state_reasons,
)
from .protocols import SpoolerQuery

LOGGER = logging.getLogger(__name__)


class StateReconciler:
    """Maps printer names to their displayed state."""

    def __init__(self, spooler: SpoolerQuery) -> None:
        self._spooler = spooler
        self._records: dict[str, PrinterRecord] = {}

    def observe(
        self,
        printer: str,
        state: StateCode,
        reasons: Union[str, Iterable[str], None] = "",
    ) -> ReconciliationResult:
        """Reconcile a single printer from a state-changed notification."""

        if not printer:
            LOGGER.warning("Ignoring printer state change without a printer name")
            return ReconciliationResult()

        job_count = self._spooler.count_active_jobs(printer)
        if job_count < 0:
            LOGGER.debug(
                "Printer %s is unknown to the spooler (job count %d); skipping",
                printer,
                job_count,
            )
            return ReconciliationResult()

        state_code = PrinterState.coerce(state)
        reason_codes = parse_state_reasons(reasons)

        record = self._records.get(printer)
        is_new = record is None
        if record is None:
            record = self._records[printer] = PrinterRecord(name=printer)
        changed = (
            record.update(state=state_code, job_count=job_count, reasons=reason_codes)
            or is_new
        )

        LOGGER.debug(
            "Observed %s: state=%s jobs=%d reasons=%s changed=%s",
            printer,
            state_code.value,
            job_count,
            " ".join(reason_codes) or "none",
            changed,
        )
        return ReconciliationResult(changes={printer: changed})

    def rescan(self) -> ReconciliationResult:
        """Recompute every record from a full registry scan.

        Printers no longer listed by the spooler are dropped; printers whose
        job count query fails are skipped.
        """

        try:
            destinations = self._spooler.list_destinations()
        except Exception as exc:  # pragma: no cover - adapters already degrade
            LOGGER.warning("Printer registry scan failed: %s", exc)
            destinations = []

        previous = self._records
        records: dict[str, PrinterRecord] = {}
        result = ReconciliationResult(full_rescan=True)

        for destination in destinations:
            job_count = self._spooler.count_active_jobs(destination.name)
            if job_count < 0:
                LOGGER.debug(
                    "Skipping destination %s: job count unavailable", destination.name
                )
                continue

            record = previous.get(destination.name)
            is_new = record is None
            if record is None:
                record = PrinterRecord(name=destination.name)
            changed = (
                record.update(
                    state=destination.state,
                    job_count=job_count,
                    reasons=destination.reasons,
                )
                or is_new
            )
            records[destination.name] = record
            result.changes[destination.name] = changed

        for name in previous.keys() - records.keys():
            result.changes[name] = True

        self._records = records
        LOGGER.debug(
            "Registry rescan: %d printers, %d changed",
            len(records),
            len(result.changed_printers),
        )
        return result

    def get(self, printer: str) -> Optional[PrinterRecord]:
        return self._records.get(printer)

    def records(self) -> list[PrinterRecord]:
        return list(self._records.values())

    @property
    def any_visible(self) -> bool:
        return any(record.visible for record in self._records.values())
