"""Constants used across the indicator-printers package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "indicator-printers"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME
GETTEXT_DOMAIN = APP_NAME

DEFAULT_BUS_NAME = "org.ayatana.indicator.printers"
DEFAULT_OBJECT_PATH = "/org/ayatana/indicator/printers"
DEFAULT_PROFILES = ("phone", "desktop")

DEFAULT_SETTINGS_COMMAND = "gnome-control-center printers"

CUPS_NOTIFIER_INTERFACE = "org.cups.cupsd.Notifier"
CUPS_NOTIFIER_PATH = "/org/cups/cupsd/Notifier"
CUPS_NOTIFY_RECIPIENT = "dbus://"
CUPS_NOTIFY_EVENTS = (
    "job-created",
    "job-completed",
    "job-state-changed",
    "job-state",
    "printer-added",
    "printer-deleted",
    "printer-stopped",
    "printer-state-changed",
)

DEFAULT_LEASE_SECONDS = 300
DEFAULT_RENEW_MARGIN_SECONDS = 60

PRINTER_ICON = "printer"
HEADER_ICON = "printer-symbolic"

ATTR_SECONDARY_TEXT = "x-ayatana-secondary-text"
ATTR_SECONDARY_COUNT = "x-ayatana-secondary-count"
ATTR_ITEM_TYPE = "x-ayatana-type"
