"""Printer alerts shown through the freedesktop notification service."""

from __future__ import annotations

import logging
from gettext import gettext as _
from typing import Optional

from gi.repository import Gio, GLib

from .. import constants
from ..core import Alert, SettingsLauncher

LOGGER = logging.getLogger(__name__)

_NOTIFICATIONS_NAME = "org.freedesktop.Notifications"
_NOTIFICATIONS_PATH = "/org/freedesktop/Notifications"
_SETTINGS_ACTION = "settings"
_URGENCY_CRITICAL = 2


class DesktopNotifications:
    """``AlertSink`` posting one notification per alert.

    Each notification offers a "Settings…" action that opens the printer's
    settings through the launcher.
    """

    def __init__(
        self,
        *,
        launcher: Optional[SettingsLauncher] = None,
        connection: Optional[Gio.DBusConnection] = None,
    ) -> None:
        self._launcher = launcher
        self._connection = connection
        self._pending: dict[int, str] = {}
        self._signal_ids: list[int] = []

    def start(self) -> bool:
        if self._connection is None:
            try:
                self._connection = Gio.bus_get_sync(Gio.BusType.SESSION, None)
            except GLib.Error as exc:
                LOGGER.warning("Notifications unavailable: %s", exc.message)
                return False

        for signal, callback in (
            ("ActionInvoked", self._on_action_invoked),
            ("NotificationClosed", self._on_closed),
        ):
            self._signal_ids.append(
                self._connection.signal_subscribe(
                    _NOTIFICATIONS_NAME,
                    _NOTIFICATIONS_NAME,
                    signal,
                    _NOTIFICATIONS_PATH,
                    None,
                    Gio.DBusSignalFlags.NONE,
                    callback,
                )
            )
        return True

    def stop(self) -> None:
        if self._connection is not None:
            for signal_id in self._signal_ids:
                self._connection.signal_unsubscribe(signal_id)
        self._signal_ids.clear()
        self._pending.clear()

    def show_alert(self, alert: Alert) -> None:
        if self._connection is None:
            LOGGER.info("%s %s", alert.message, alert.secondary_text)
            return

        parameters = GLib.Variant(
            "(susssasa{sv}i)",
            (
                constants.APP_NAME,
                0,
                constants.PRINTER_ICON,
                alert.message,
                alert.secondary_text,
                [_SETTINGS_ACTION, _("Settings…")],
                {"urgency": GLib.Variant("y", _URGENCY_CRITICAL)},
                -1,
            ),
        )
        self._connection.call(
            _NOTIFICATIONS_NAME,
            _NOTIFICATIONS_PATH,
            _NOTIFICATIONS_NAME,
            "Notify",
            parameters,
            GLib.VariantType.new("(u)"),
            Gio.DBusCallFlags.NONE,
            -1,
            None,
            self._on_notified,
            alert.printer,
        )

    def _on_notified(
        self, connection: Gio.DBusConnection, result: Gio.AsyncResult, printer: str
    ) -> None:
        try:
            (notification_id,) = connection.call_finish(result).unpack()
        except GLib.Error as exc:
            LOGGER.warning("Failed to show alert for %s: %s", printer, exc.message)
            return
        self._pending[notification_id] = printer

    def _on_action_invoked(
        self, connection, sender, path, interface, signal, parameters
    ) -> None:
        notification_id, action = parameters.unpack()
        printer = self._pending.get(notification_id)
        if printer is None or action != _SETTINGS_ACTION:
            return
        if self._launcher is not None:
            self._launcher.open_settings(printer)

    def _on_closed(self, connection, sender, path, interface, signal, parameters) -> None:
        notification_id, _reason = parameters.unpack()
        self._pending.pop(notification_id, None)
