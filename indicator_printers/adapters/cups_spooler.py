"""CUPS adapter: destination listing, job counts and notification leases."""

from __future__ import annotations

import logging
from typing import Any, Optional

import cups

from .. import constants
from ..core import Destination, PrinterState, parse_state_reasons

LOGGER = logging.getLogger(__name__)


class CupsSpooler:
    """Blocking pycups client implementing the spooler query and lease protocols.

    Failures are logged and reported as empty or unknown results; a
    connection that failed is dropped and reopened on the next call.
    """

    def __init__(
        self,
        *,
        server: Optional[str] = None,
        notify_events: tuple[str, ...] = constants.CUPS_NOTIFY_EVENTS,
        recipient_uri: str = constants.CUPS_NOTIFY_RECIPIENT,
    ) -> None:
        self._server = server
        self._notify_events = list(notify_events)
        self._recipient_uri = recipient_uri
        self._connection: Optional[cups.Connection] = None

    def _ensure_connection(self) -> cups.Connection:
        if self._connection is None:
            if self._server:
                cups.setServer(self._server)
            self._connection = cups.Connection()
        return self._connection

    def _reset(self) -> None:
        self._connection = None

    # ------------------------------------------------------------------
    # SpoolerQuery
    # ------------------------------------------------------------------
    def list_destinations(self) -> list[Destination]:
        printers = self._get_printers()
        if printers is None:
            return []

        destinations = []
        for name in sorted(printers, key=str.lower):
            attributes = printers[name]
            destinations.append(
                Destination(
                    name=name,
                    state=PrinterState.from_ipp(int(attributes.get("printer-state", 0))),
                    reasons=parse_state_reasons(
                        attributes.get("printer-state-reasons", ())
                    ),
                )
            )
        return destinations

    def count_active_jobs(self, printer: str) -> int:
        printers = self._get_printers()
        if printers is None or printer not in printers:
            return -1

        try:
            jobs = self._ensure_connection().getJobs(
                which_jobs="not-completed",
                my_jobs=True,
                requested_attributes=["job-id", "job-printer-uri"],
            )
        except (cups.IPPError, RuntimeError) as exc:
            LOGGER.warning("Failed to query jobs for %s: %s", printer, exc)
            self._reset()
            return -1

        return sum(
            1 for attributes in jobs.values() if _job_printer(attributes) == printer
        )

    def _get_printers(self) -> Optional[dict[str, dict[str, Any]]]:
        try:
            return self._ensure_connection().getPrinters()
        except (cups.IPPError, RuntimeError) as exc:
            LOGGER.warning("Failed to list printers: %s", exc)
            self._reset()
            return None

    # ------------------------------------------------------------------
    # SubscriptionManager
    # ------------------------------------------------------------------
    def create_subscription(self, lease_seconds: int) -> int:
        try:
            subscription_id = self._ensure_connection().createSubscription(
                "/",
                events=self._notify_events,
                recipient_uri=self._recipient_uri,
                lease_duration=lease_seconds,
            )
        except (cups.IPPError, RuntimeError) as exc:
            LOGGER.warning("Failed to create CUPS subscription: %s", exc)
            self._reset()
            return 0
        return int(subscription_id)

    def renew_subscription(self, subscription_id: int, lease_seconds: int) -> bool:
        try:
            self._ensure_connection().renewSubscription(
                subscription_id, lease_duration=lease_seconds
            )
        except (cups.IPPError, RuntimeError) as exc:
            LOGGER.debug("Failed to renew CUPS subscription %d: %s", subscription_id, exc)
            self._reset()
            return False
        return True

    def cancel_subscription(self, subscription_id: int) -> None:
        if subscription_id <= 0:
            return
        try:
            self._ensure_connection().cancelSubscription(subscription_id)
        except (cups.IPPError, RuntimeError) as exc:
            LOGGER.warning(
                "Failed to cancel CUPS subscription %d: %s", subscription_id, exc
            )
            self._reset()


def _job_printer(attributes: dict[str, Any]) -> Optional[str]:
    uri = attributes.get("job-printer-uri")
    if not uri:
        return None
    return str(uri).rstrip("/").rsplit("/", 1)[-1]
