"""Printers service: routes spooler events through the reconciliation engine."""

from __future__ import annotations

import logging
from typing import Optional

from .core import (
    AlertDeduplicator,
    AlertSink,
    JobEvent,
    PrinterEvent,
    PrinterEventKind,
    PrintersMenu,
    ReconciliationResult,
    SettingsLauncher,
    StateReconciler,
    SubscriptionLease,
)
from .core.menu import MenuModelBuilder, PRINTER_ACTION, SETTINGS_ACTION

LOGGER = logging.getLogger(__name__)


class PrintersService:
    """Single-threaded owner of printer records, alert state and the menu.

    All handlers run on the event loop thread in delivery order.
    """

    def __init__(
        self,
        reconciler: StateReconciler,
        builder: MenuModelBuilder,
        menu: PrintersMenu,
        *,
        deduplicator: Optional[AlertDeduplicator] = None,
        lease: Optional[SubscriptionLease] = None,
        launcher: Optional[SettingsLauncher] = None,
        alert_sink: Optional[AlertSink] = None,
        alerts_enabled: bool = True,
    ) -> None:
        self._reconciler = reconciler
        self._builder = builder
        self._menu = menu
        self._deduplicator = deduplicator or AlertDeduplicator()
        self._lease = lease
        self._launcher = launcher
        self._alert_sink = alert_sink
        self._alerts_enabled = alerts_enabled

    @property
    def menu(self) -> PrintersMenu:
        return self._menu

    @property
    def reconciler(self) -> StateReconciler:
        return self._reconciler

    @property
    def lease(self) -> Optional[SubscriptionLease]:
        return self._lease

    def start(self) -> bool:
        """Subscribe to spooler events and publish the initial menu.

        Returns whether the menu was exported.
        """

        if self._lease is not None:
            self._lease.create()
        return self._menu.publish()

    def stop(self) -> None:
        if self._lease is not None:
            self._lease.cancel()
        self._menu.unpublish()

    # ------------------------------------------------------------------
    # Spooler events
    # ------------------------------------------------------------------
    def handle_printer_event(self, event: PrinterEvent) -> ReconciliationResult:
        if event.requires_rescan:
            if event.kind == PrinterEventKind.DELETED:
                self._deduplicator.forget(event.printer)
            LOGGER.debug("Printer %s %s; rescanning", event.printer, event.kind.value)
            return self._rescan()

        result = self._reconciler.observe(event.printer, event.state, event.reasons)
        if result.is_empty():
            self._menu.refresh_header()
            return result

        self._announce(event.printer, event.reasons)
        self._apply(result)
        return result

    def handle_job_event(self, event: JobEvent) -> ReconciliationResult:
        if event.requires_rescan:
            LOGGER.debug(
                "Job %d reached %s; rescanning all printers",
                event.job_id,
                event.job_state.name.lower() if event.job_state else event.kind.value,
            )
            return self._rescan()

        result = self._reconciler.observe(
            event.printer, event.printer_state, event.reasons
        )
        self._apply(result)
        return result

    def rescan(self) -> ReconciliationResult:
        return self._rescan()

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------
    def activate(self, action: str, target: Optional[str] = None) -> None:
        name = action.split(".", 1)[1] if action.startswith("indicator.") else action
        if self._launcher is None:
            LOGGER.debug("No settings launcher configured; ignoring %s", name)
            return

        if name == PRINTER_ACTION:
            if not target:
                LOGGER.warning("Printer action activated without a printer name")
                return
            self._launcher.open_settings(target)
        elif name == SETTINGS_ACTION:
            self._launcher.open_settings(None)
        else:
            LOGGER.debug("Ignoring activation of unknown action %s", action)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _rescan(self) -> ReconciliationResult:
        self._menu.refresh_printers()
        return self._builder.last_rescan

    def _apply(self, result: ReconciliationResult) -> None:
        if result.changed:
            self._menu.refresh_printers()
        else:
            self._menu.refresh_header()

    def _announce(self, printer: str, reasons: str) -> None:
        record = self._reconciler.get(printer)
        job_count = record.job_count if record is not None else 0
        alerts = self._deduplicator.process(printer, reasons, job_count)
        if not alerts or not self._alerts_enabled or self._alert_sink is None:
            return
        for alert in alerts:
            self._alert_sink.show_alert(alert)
