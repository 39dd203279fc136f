"""Spooler notification subscription with lease renewal."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

from .. import constants
from .protocols import SubscriptionManager

LOGGER = logging.getLogger(__name__)


class LeaseState(str, Enum):
    UNSUBSCRIBED = "unsubscribed"
    ACTIVE = "active"


@dataclass(slots=True)
class LeaseInfo:
    subscription_id: int
    created_at: datetime
    expires_at: datetime


class SubscriptionLease:
    """Keeps one spooler subscription alive.

    Renewal failure is not an error: the subscription is simply recreated.
    An id of 0 means there is no subscription, in which case ``cancel`` does
    nothing.
    """

    def __init__(
        self,
        manager: SubscriptionManager,
        *,
        lease_seconds: int = constants.DEFAULT_LEASE_SECONDS,
        renew_margin_seconds: int = constants.DEFAULT_RENEW_MARGIN_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._manager = manager
        self.lease_seconds = lease_seconds
        self.renew_margin_seconds = renew_margin_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lease: Optional[LeaseInfo] = None
        self._renewal_task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()

    @property
    def subscription_id(self) -> int:
        return self._lease.subscription_id if self._lease else 0

    @property
    def state(self) -> LeaseState:
        return LeaseState.ACTIVE if self.subscription_id > 0 else LeaseState.UNSUBSCRIBED

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._lease.expires_at if self._lease else None

    @property
    def renewal_interval(self) -> float:
        return float(max(1, self.lease_seconds - self.renew_margin_seconds))

    def create(self) -> int:
        """Create a fresh subscription; returns its id or 0 on failure."""

        try:
            subscription_id = self._manager.create_subscription(self.lease_seconds)
        except Exception as exc:
            LOGGER.warning("Failed to create spooler subscription: %s", exc)
            subscription_id = 0

        if subscription_id <= 0:
            LOGGER.warning("Spooler subscription unavailable; events will be missed")
            self._lease = None
            return 0

        self._lease = self._new_lease(subscription_id)
        LOGGER.info(
            "Created spooler subscription %d (lease %ds)",
            subscription_id,
            self.lease_seconds,
        )
        return subscription_id

    def renew(self) -> int:
        """Renew the current subscription, recreating it if renewal fails."""

        subscription_id = self.subscription_id
        if subscription_id <= 0:
            return self.create()

        try:
            renewed = self._manager.renew_subscription(
                subscription_id, self.lease_seconds
            )
        except Exception as exc:
            LOGGER.debug("Renewing subscription %d raised: %s", subscription_id, exc)
            renewed = False

        if not renewed:
            LOGGER.info(
                "Subscription %d could not be renewed; creating a new one",
                subscription_id,
            )
            return self.create()

        self._lease = self._new_lease(subscription_id)
        LOGGER.debug(
            "Renewed subscription %d until %s", subscription_id, self._lease.expires_at
        )
        return subscription_id

    def cancel(self) -> None:
        subscription_id = self.subscription_id
        if subscription_id <= 0:
            return

        try:
            self._manager.cancel_subscription(subscription_id)
        except Exception as exc:
            LOGGER.warning("Failed to cancel subscription %d: %s", subscription_id, exc)
        else:
            LOGGER.info("Cancelled spooler subscription %d", subscription_id)
        self._lease = None

    def start_renewal_loop(
        self, on_renewed: Optional[Callable[[int], Awaitable[None]]] = None
    ) -> None:
        if self._renewal_task is not None and not self._renewal_task.done():
            return
        self._stop_event.clear()
        self._renewal_task = asyncio.create_task(self._renewal_loop(on_renewed))

    async def stop(self) -> None:
        """Stop the renewal loop. The subscription itself stays until ``cancel``."""

        self._stop_event.set()
        if self._renewal_task is not None:
            self._renewal_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._renewal_task
            self._renewal_task = None

    async def _renewal_loop(
        self, on_renewed: Optional[Callable[[int], Awaitable[None]]]
    ) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=self.renewal_interval
                )
                break
            except asyncio.TimeoutError:
                pass

            subscription_id = self.renew()
            if on_renewed is not None:
                try:
                    await on_renewed(subscription_id)
                except Exception:  # pragma: no cover - defensive logging
                    LOGGER.exception("Subscription renewal callback failed")

    def _new_lease(self, subscription_id: int) -> LeaseInfo:
        now = self._clock()
        return LeaseInfo(
            subscription_id=subscription_id,
            created_at=now,
            expires_at=now + timedelta(seconds=self.lease_seconds),
        )
