"""Listener for CUPS D-Bus notifications (``org.cups.cupsd.Notifier``)."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from gi.repository import Gio, GLib

from .. import constants
from ..core import JobEvent, PrinterEvent, event_from_signal

LOGGER = logging.getLogger(__name__)

PrinterHandler = Callable[[PrinterEvent], object]
JobHandler = Callable[[JobEvent], object]


class NotifierUnavailableError(RuntimeError):
    """Raised when the system bus or the notifier signals cannot be reached."""


class CupsNotifierListener:
    """Routes notifier signals on the system bus to registered handlers."""

    def __init__(self, *, connection: Optional[Gio.DBusConnection] = None) -> None:
        self._connection = connection
        self._subscription_id: Optional[int] = None
        self._printer_handlers: List[PrinterHandler] = []
        self._job_handlers: List[JobHandler] = []

    def register_printer_handler(self, handler: PrinterHandler) -> None:
        self._printer_handlers.append(handler)

    def register_job_handler(self, handler: JobHandler) -> None:
        self._job_handlers.append(handler)

    def start(self) -> None:
        if self._subscription_id is not None:
            return

        if self._connection is None:
            try:
                self._connection = Gio.bus_get_sync(Gio.BusType.SYSTEM, None)
            except GLib.Error as exc:
                raise NotifierUnavailableError(
                    f"Cannot connect to the system bus: {exc.message}"
                ) from exc

        self._subscription_id = self._connection.signal_subscribe(
            None,
            constants.CUPS_NOTIFIER_INTERFACE,
            None,
            constants.CUPS_NOTIFIER_PATH,
            None,
            Gio.DBusSignalFlags.NONE,
            self._on_signal,
        )
        if not self._subscription_id:
            raise NotifierUnavailableError(
                f"Cannot subscribe to {constants.CUPS_NOTIFIER_INTERFACE} signals"
            )
        LOGGER.info("Listening for CUPS notifications on the system bus")

    def stop(self) -> None:
        if self._connection is not None and self._subscription_id:
            self._connection.signal_unsubscribe(self._subscription_id)
        self._subscription_id = None
        self._printer_handlers.clear()
        self._job_handlers.clear()

    def _on_signal(
        self,
        connection: Gio.DBusConnection,
        sender: Optional[str],
        path: str,
        interface: str,
        signal: str,
        parameters: GLib.Variant,
    ) -> None:
        event = event_from_signal(signal, parameters.unpack())
        if event is None:
            LOGGER.debug("Ignoring notifier signal %s", signal)
            return

        handlers = (
            self._printer_handlers
            if isinstance(event, PrinterEvent)
            else self._job_handlers
        )
        for handler in list(handlers):
            try:
                handler(event)
            except Exception:
                LOGGER.exception("Handler for %s failed", signal)
