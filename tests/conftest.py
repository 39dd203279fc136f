from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import pytest

from indicator_printers.core import (
    Alert,
    Destination,
    HeaderState,
    MenuModelBuilder,
    MenuSection,
    PrinterState,
    PrintersMenu,
    StateReconciler,
)


class FakeSpooler:
    """In-memory spooler: printers with a state, reasons and job count."""

    def __init__(self) -> None:
        self.printers: dict[str, dict[str, Any]] = {}
        self.list_calls = 0
        self.count_calls: list[str] = []
        self.created: list[int] = []
        self.renewed: list[int] = []
        self.cancelled: list[int] = []
        self.next_subscription_id = 41
        self.renew_result = True
        self.create_error: Optional[Exception] = None

    def add(
        self,
        name: str,
        state: PrinterState = PrinterState.IDLE,
        jobs: int = 0,
        reasons: Iterable[str] = (),
    ) -> None:
        self.printers[name] = {"state": state, "jobs": jobs, "reasons": tuple(reasons)}

    def set_jobs(self, name: str, jobs: int) -> None:
        self.printers[name]["jobs"] = jobs

    def set_state(self, name: str, state: PrinterState) -> None:
        self.printers[name]["state"] = state

    def list_destinations(self) -> list[Destination]:
        self.list_calls += 1
        return [
            Destination(name=name, state=info["state"], reasons=info["reasons"])
            for name, info in self.printers.items()
        ]

    def count_active_jobs(self, printer: str) -> int:
        self.count_calls.append(printer)
        info = self.printers.get(printer)
        if info is None:
            return -1
        return info["jobs"]

    def create_subscription(self, lease_seconds: int) -> int:
        if self.create_error is not None:
            raise self.create_error
        self.next_subscription_id += 1
        self.created.append(self.next_subscription_id)
        return self.next_subscription_id

    def renew_subscription(self, subscription_id: int, lease_seconds: int) -> bool:
        self.renewed.append(subscription_id)
        return self.renew_result

    def cancel_subscription(self, subscription_id: int) -> None:
        self.cancelled.append(subscription_id)


class FakeSurface:
    def __init__(self, *, publish_result: bool = True) -> None:
        self.publish_result = publish_result
        self.published: Optional[dict[str, tuple[MenuSection, ...]]] = None
        self.headers: list[HeaderState] = []
        self.replacements: list[tuple[str, int, MenuSection]] = []
        self.unpublished = 0

    def publish(
        self, profiles: Mapping[str, Iterable[MenuSection]], header: HeaderState
    ) -> bool:
        self.published = {name: tuple(sections) for name, sections in profiles.items()}
        self.headers.append(header)
        return self.publish_result

    def replace_section(self, profile: str, position: int, section: MenuSection) -> None:
        self.replacements.append((profile, position, section))

    def update_header(self, header: HeaderState) -> None:
        self.headers.append(header)

    def unpublish(self) -> None:
        self.unpublished += 1


class FakeLauncher:
    def __init__(self) -> None:
        self.opened: list[Optional[str]] = []

    def open_settings(self, printer: Optional[str] = None) -> None:
        self.opened.append(printer)


class FakeAlertSink:
    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def show_alert(self, alert: Alert) -> None:
        self.alerts.append(alert)


@pytest.fixture
def spooler() -> FakeSpooler:
    return FakeSpooler()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def reconciler(spooler: FakeSpooler) -> StateReconciler:
    return StateReconciler(spooler)


@pytest.fixture
def builder(reconciler: StateReconciler) -> MenuModelBuilder:
    return MenuModelBuilder(reconciler)


@pytest.fixture
def menu(builder: MenuModelBuilder, surface: FakeSurface) -> PrintersMenu:
    return PrintersMenu(builder, surface)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def alert_sink() -> FakeAlertSink:
    return FakeAlertSink()
