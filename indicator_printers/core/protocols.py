"""Protocol definitions for the spooler, menu surface and launcher seams."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from .alerts import Alert
    from .menu import HeaderState, MenuSection
    from .models import Destination


class SpoolerQuery(Protocol):
    """Listing and job-count queries against the print spooler."""

    def list_destinations(self) -> list["Destination"]:
        """Return every destination known to the spooler, in display order."""
        ...

    def count_active_jobs(self, printer: str) -> int:
        """Return the current user's active job count for ``printer``.

        A negative value means the spooler does not know the printer.
        """
        ...


class SubscriptionManager(Protocol):
    """Lease management for spooler change notifications."""

    def create_subscription(self, lease_seconds: int) -> int:
        """Create a subscription and return its id, or 0 on failure."""
        ...

    def renew_subscription(self, subscription_id: int, lease_seconds: int) -> bool:
        ...

    def cancel_subscription(self, subscription_id: int) -> None:
        ...


class MenuSurface(Protocol):
    """Exports the declarative menu model and action group."""

    def publish(
        self,
        profiles: Mapping[str, Iterable["MenuSection"]],
        header: "HeaderState",
    ) -> bool:
        """Export every profile menu plus the action group.

        Returns False when the export failed; the caller continues without a
        live menu.
        """
        ...

    def replace_section(
        self, profile: str, position: int, section: "MenuSection"
    ) -> None:
        ...

    def update_header(self, header: "HeaderState") -> None:
        ...

    def unpublish(self) -> None:
        ...


class SettingsLauncher(Protocol):
    def open_settings(self, printer: Optional[str] = None) -> None:
        """Launch the settings application without waiting for it."""
        ...


class AlertSink(Protocol):
    def show_alert(self, alert: "Alert") -> None:
        ...
