"""Core primitives for indicator-printers."""

from .alerts import PRINTER_ALERTS, Alert, AlertDeduplicator
from .events import (
    JobEvent,
    JobEventKind,
    JobState,
    PrinterEvent,
    PrinterEventKind,
    event_from_signal,
)
from .menu import (
    ACTIONS,
    HeaderState,
    MenuItem,
    MenuModelBuilder,
    MenuSection,
    PrintersMenu,
)
from .models import (
    Destination,
    PrinterRecord,
    PrinterState,
    ReconciliationResult,
    parse_state_reasons,
)
from .protocols import (
    AlertSink,
    MenuSurface,
    SettingsLauncher,
    SpoolerQuery,
    SubscriptionManager,
)
from .reconciler import StateReconciler
from .subscription import LeaseState, SubscriptionLease

__all__ = [
    "ACTIONS",
    "Alert",
    "AlertDeduplicator",
    "AlertSink",
    "Destination",
    "HeaderState",
    "JobEvent",
    "JobEventKind",
    "JobState",
    "LeaseState",
    "MenuItem",
    "MenuModelBuilder",
    "MenuSection",
    "MenuSurface",
    "PRINTER_ALERTS",
    "PrinterEvent",
    "PrinterEventKind",
    "PrinterRecord",
    "PrinterState",
    "PrintersMenu",
    "ReconciliationResult",
    "SettingsLauncher",
    "SpoolerQuery",
    "StateReconciler",
    "SubscriptionLease",
    "SubscriptionManager",
    "event_from_signal",
    "parse_state_reasons",
]
