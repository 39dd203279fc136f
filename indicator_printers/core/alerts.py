"""Per-printer alert deduplication for state-reason changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from gettext import gettext as _
from gettext import ngettext
from types import MappingProxyType
from typing import Iterable, Mapping

from .models import parse_state_reasons

LOGGER = logging.getLogger(__name__)

__all__ = ["Alert", "AlertDeduplicator", "PRINTER_ALERTS", "build_printer_alerts"]


def N_(message: str) -> str:
    return message


def build_printer_alerts() -> Mapping[str, str]:
    """State reason -> message template with a ``%s`` for the printer name.

    Templates are marked for extraction only; they are translated when an
    alert is built so the active catalog applies.
    """

    return MappingProxyType(
        {
            "media-low": N_("The printer “%s” is low on paper."),
            "media-empty": N_("The printer “%s” is out of paper."),
            "toner-low": N_("The printer “%s” is low on toner."),
            "toner-empty": N_("The printer “%s” is out of toner."),
            "cover-open": N_("A cover is open on the printer “%s”."),
            "door-open": N_("A door is open on the printer “%s”."),
            "cups-missing-filter": N_(
                "The printer “%s” can’t be used, because required software is missing."
            ),
            "offline": N_("The printer “%s” is currently off-line."),
        }
    )


PRINTER_ALERTS = build_printer_alerts()


@dataclass(slots=True, frozen=True)
class Alert:
    printer: str
    reason: str
    message: str
    secondary_text: str
    job_count: int

    @property
    def title(self) -> str:
        return _("Printing Problem")


def _jobs_queued_text(job_count: int) -> str:
    return ngettext(
        "You have %d job queued to print on this printer.",
        "You have %d jobs queued to print on this printer.",
        job_count,
    ) % job_count


class AlertDeduplicator:
    """Remembers which state reasons were already announced per printer.

    The stored set for a printer is replaced with every snapshot, so it
    always equals the most recent one. A reason that clears and later comes
    back is announced again.
    """

    def __init__(self, messages: Mapping[str, str] = PRINTER_ALERTS) -> None:
        self._messages = messages
        self._notified: dict[str, frozenset[str]] = {}

    def diff_reasons(self, printer: str, reasons: Iterable[str]) -> set[str]:
        """Return reasons not present in the previous snapshot and store the new one."""

        new_reasons = frozenset(reasons)
        previous = self._notified.get(printer, frozenset())
        self._notified[printer] = new_reasons
        return set(new_reasons - previous)

    def process(
        self,
        printer: str,
        reasons: str | Iterable[str],
        job_count: int,
    ) -> list[Alert]:
        """Diff a reasons snapshot and build alerts for newly introduced ones.

        Printers without queued jobs (or unknown to the spooler) never alert,
        but their snapshot is still stored.
        """

        ordered = parse_state_reasons(reasons)
        introduced = self.diff_reasons(printer, ordered)

        if job_count <= 0:
            LOGGER.debug(
                "No alerts for %s: %d active jobs (new reasons: %s)",
                printer,
                job_count,
                ", ".join(sorted(introduced)) or "none",
            )
            return []

        alerts: list[Alert] = []
        for reason in ordered:
            if reason not in introduced:
                continue
            template = self._messages.get(reason)
            if template is None:
                continue
            alerts.append(
                Alert(
                    printer=printer,
                    reason=reason,
                    message=_(template) % printer,
                    secondary_text=_jobs_queued_text(job_count),
                    job_count=job_count,
                )
            )

        if alerts:
            LOGGER.info(
                "Printer %s reported %s",
                printer,
                ", ".join(alert.reason for alert in alerts),
            )
        return alerts

    def notified(self, printer: str) -> frozenset[str]:
        return self._notified.get(printer, frozenset())

    def forget(self, printer: str) -> None:
        self._notified.pop(printer, None)
