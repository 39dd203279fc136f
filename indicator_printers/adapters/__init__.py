"""Adapter modules for CUPS and D-Bus integrations."""

from .cups_spooler import CupsSpooler
from .gmenu import GioMenuPublisher
from .notifications import DesktopNotifications
from .notifier import CupsNotifierListener, NotifierUnavailableError

__all__ = [
    "CupsNotifierListener",
    "CupsSpooler",
    "DesktopNotifications",
    "GioMenuPublisher",
    "NotifierUnavailableError",
]
