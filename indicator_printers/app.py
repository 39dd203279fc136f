"""Main application entry-point for indicator-printers."""

from __future__ import annotations

import asyncio
import logging
import signal
from enum import Enum
from typing import Optional

from gi.events import GLibEventLoopPolicy

from .adapters import (
    CupsNotifierListener,
    CupsSpooler,
    DesktopNotifications,
    GioMenuPublisher,
    NotifierUnavailableError,
)
from .config import IndicatorConfig, load_config
from .core import (
    AlertDeduplicator,
    JobEvent,
    MenuModelBuilder,
    PrinterEvent,
    PrintersMenu,
    StateReconciler,
    SubscriptionLease,
)
from .health import HealthReporter, HealthServer
from .i18n import configure_translations
from .launcher import CommandSettingsLauncher
from .logging import configure_logging
from .service import PrintersService

LOGGER = logging.getLogger(__name__)


class ServiceState(str, Enum):
    STARTING = "starting"
    ACTIVE = "active"
    DEGRADED = "degraded"
    STOPPING = "stopping"


class IndicatorPrintersApp:
    """Coordinates startup and shutdown of the printers service.

    Startup order: listen for spooler notifications (fatal when impossible),
    subscribe, publish the menu, then keep the lease renewed until a shutdown
    signal or loss of the bus name.
    """

    def __init__(
        self,
        config: Optional[IndicatorConfig] = None,
        *,
        spooler: Optional[CupsSpooler] = None,
        notifier: Optional[CupsNotifierListener] = None,
    ) -> None:
        self._config = config or load_config()
        self._spooler = spooler or CupsSpooler(server=self._config.cups.server)
        self._notifier = notifier or CupsNotifierListener()
        self._launcher = CommandSettingsLauncher(
            self._config.indicator.settings_command
        )
        self._alerts = DesktopNotifications(launcher=self._launcher)
        self._lease = SubscriptionLease(
            self._spooler,
            lease_seconds=self._config.cups.lease_seconds,
            renew_margin_seconds=self._config.cups.renew_margin_seconds,
        )
        self._publisher = GioMenuPublisher(
            bus_name=self._config.dbus.bus_name,
            object_path=self._config.dbus.object_path,
            on_activate=self._on_activate,
            on_name_lost=self.request_shutdown,
        )
        reconciler = StateReconciler(self._spooler)
        builder = MenuModelBuilder(reconciler)
        self._service = PrintersService(
            reconciler,
            builder,
            PrintersMenu(
                builder, self._publisher, profiles=self._config.indicator.profiles
            ),
            deduplicator=AlertDeduplicator(),
            lease=self._lease,
            launcher=self._launcher,
            alert_sink=self._alerts,
            alerts_enabled=self._config.alerts.enabled,
        )
        self._health = HealthReporter()
        self._health_server: Optional[HealthServer] = None
        self._shutdown_event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._state = ServiceState.STARTING

    @property
    def service(self) -> PrintersService:
        return self._service

    async def run(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._shutdown_event = asyncio.Event()

        LOGGER.info("indicator-printers starting with config: %s", self._config.path)
        self._notifier.register_printer_handler(self._on_printer_event)
        self._notifier.register_job_handler(self._on_job_event)
        self._notifier.start()
        await self._health.update("notifier", True, None)

        try:
            await self._start_services()
            await self._shutdown_event.wait()
        except asyncio.CancelledError:
            LOGGER.info("indicator-printers received shutdown signal")
            raise
        finally:
            await self._stop_services()

    def request_shutdown(self) -> None:
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    @classmethod
    def start(cls, config: Optional[IndicatorConfig] = None) -> int:
        config = config or load_config()
        configure_logging(config.logging.level, log_path=config.logging.path)
        configure_translations()
        asyncio.set_event_loop_policy(GLibEventLoopPolicy())
        instance = cls(config=config)
        try:
            asyncio.run(instance.run())
        except NotifierUnavailableError as exc:
            LOGGER.error("Cannot listen for printer notifications: %s", exc)
            return 1
        except KeyboardInterrupt:
            LOGGER.info("indicator-printers received shutdown signal")
        return 0

    async def _transition_state(
        self, state: ServiceState, *, detail: Optional[str] = None
    ) -> None:
        if state == self._state:
            return
        LOGGER.info(
            "Service state transition %s -> %s (%s)",
            self._state.value,
            state.value,
            detail or state.value,
        )
        self._state = state
        await self._health.set_service_state(
            state.value, healthy=state == ServiceState.ACTIVE, detail=detail
        )

    async def _start_services(self) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            self._loop.add_signal_handler(sig, self.request_shutdown)

        self._alerts.start()
        exported = self._service.start()
        await self._health.update(
            "menu", exported, None if exported else "menu export failed"
        )
        await self._report_subscription(self._lease.subscription_id)
        await self._report_printers()
        self._lease.start_renewal_loop(on_renewed=self._report_subscription)

        health = self._config.health
        if health.enabled and health.port > 0:
            server = HealthServer(self._health, health.host, health.port)
            try:
                await server.start()
            except OSError as exc:
                LOGGER.error("Failed to start health endpoint: %s", exc)
            else:
                self._health_server = server

        if exported:
            await self._transition_state(ServiceState.ACTIVE, detail="menu exported")
        else:
            await self._transition_state(
                ServiceState.DEGRADED, detail="running without a live menu"
            )

    async def _stop_services(self) -> None:
        await self._transition_state(ServiceState.STOPPING, detail="shutdown requested")
        if self._loop is not None:
            for sig in (signal.SIGINT, signal.SIGTERM):
                self._loop.remove_signal_handler(sig)

        await self._lease.stop()
        self._service.stop()
        self._alerts.stop()
        self._notifier.stop()

        if self._health_server is not None:
            await self._health_server.stop()
            self._health_server = None

    async def _report_subscription(self, subscription_id: int) -> None:
        if subscription_id > 0:
            await self._health.update("subscription", True, f"id={subscription_id}")
        else:
            await self._health.update("subscription", False, "no subscription")

    async def _report_printers(self) -> None:
        await self._health.set_printers(self._service.reconciler.records())

    def _schedule_printer_report(self) -> None:
        if self._loop is not None:
            self._loop.create_task(self._report_printers())

    def _on_printer_event(self, event: PrinterEvent) -> None:
        self._service.handle_printer_event(event)
        self._schedule_printer_report()

    def _on_job_event(self, event: JobEvent) -> None:
        self._service.handle_job_event(event)
        self._schedule_printer_report()

    def _on_activate(self, action: str, target: Optional[str]) -> None:
        self._service.activate(action, target)
