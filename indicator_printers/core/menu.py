"""Declarative menu and action model for the printers indicator.

Every UI profile gets a root with one header item. The header's submenu holds
an ordered list of sections: the printers section first, then the settings
section. The printers section is never patched in place; each rebuild
replaces it wholesale, so references to a previous section are stale after a
refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from gettext import gettext as _
from typing import Any, Iterable, Mapping, Optional, Sequence

from .. import constants
from .models import PrinterRecord, PrinterState, ReconciliationResult
from .protocols import MenuSurface
from .reconciler import StateReconciler

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ACTIONS",
    "ActionSpec",
    "HeaderState",
    "MenuItem",
    "MenuModelBuilder",
    "MenuSection",
    "PRINTERS_SECTION",
    "PrintersMenu",
    "ProfileMenu",
    "SETTINGS_SECTION",
]

PRINTERS_SECTION = 0
SETTINGS_SECTION = 1

HEADER_ACTION = "_header"
PRINTER_ACTION = "printer"
SETTINGS_ACTION = "settings"


@dataclass(slots=True, frozen=True)
class ActionSpec:
    name: str
    parameter_type: Optional[str] = None
    stateful: bool = False


ACTIONS: tuple[ActionSpec, ...] = (
    ActionSpec(HEADER_ACTION, stateful=True),
    ActionSpec(PRINTER_ACTION, parameter_type="s"),
    ActionSpec(SETTINGS_ACTION),
)


@dataclass(slots=True, frozen=True)
class MenuItem:
    label: str
    action: str
    target: Optional[str] = None
    icon: Optional[str] = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def secondary_text(self) -> Optional[str]:
        return self.attributes.get(constants.ATTR_SECONDARY_TEXT)

    @property
    def secondary_count(self) -> Optional[int]:
        return self.attributes.get(constants.ATTR_SECONDARY_COUNT)


@dataclass(slots=True, frozen=True)
class MenuSection:
    items: tuple[MenuItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def find(self, label: str) -> Optional[MenuItem]:
        for item in self.items:
            if item.label == label:
                return item
        return None


@dataclass(slots=True, frozen=True)
class HeaderState:
    """State payload of the header action (``_header``)."""

    title: str
    tooltip: str
    visible: bool = True
    icon: Optional[str] = None
    accessible_desc: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "tooltip": self.tooltip,
            "visible": self.visible,
        }
        if self.icon is not None:
            payload["icon"] = self.icon
        if self.accessible_desc is not None:
            payload["accessible-desc"] = self.accessible_desc
        return payload


class MenuModelBuilder:
    """Turns reconciled printer state into menu sections and header state."""

    def __init__(self, reconciler: StateReconciler) -> None:
        self._reconciler = reconciler
        self._last_rescan = ReconciliationResult(full_rescan=True)

    @property
    def last_rescan(self) -> ReconciliationResult:
        return self._last_rescan

    def rebuild_printers_section(self) -> tuple[MenuSection, bool]:
        """Rescan the registry and build one item per printer with active jobs."""

        self._last_rescan = self._reconciler.rescan()
        items = tuple(
            self.printer_item(record)
            for record in self._reconciler.records()
            if record.visible
        )
        return MenuSection(items=items), bool(items)

    def printer_item(self, record: PrinterRecord) -> MenuItem:
        attributes: dict[str, Any] = {}
        if record.state == PrinterState.STOPPED:
            attributes[constants.ATTR_SECONDARY_TEXT] = _("Paused")
        elif record.state == PrinterState.PROCESSING:
            attributes[constants.ATTR_SECONDARY_COUNT] = record.job_count

        return MenuItem(
            label=record.name,
            action=f"indicator.{PRINTER_ACTION}",
            target=record.name,
            icon=constants.PRINTER_ICON,
            attributes=attributes,
        )

    def rebuild_header(self, any_visible: bool) -> HeaderState:
        if any_visible:
            return HeaderState(
                title=_("Printers"),
                tooltip=_("Show printer status"),
                icon=constants.HEADER_ICON,
                accessible_desc=_("Printers"),
            )
        return HeaderState(title=_("Printers"), tooltip=_("Show printer status"))

    def settings_section(self) -> MenuSection:
        return MenuSection(
            items=(
                MenuItem(label=_("Printers…"), action=f"indicator.{SETTINGS_ACTION}"),
            )
        )


class ProfileMenu:
    """Ordered sections shown under the header item of one UI profile."""

    def __init__(self, name: str, sections: Iterable[MenuSection]) -> None:
        self.name = name
        self._sections: list[MenuSection] = list(sections)

    @property
    def sections(self) -> Sequence[MenuSection]:
        return tuple(self._sections)

    def section(self, position: int) -> MenuSection:
        return self._sections[position]

    def replace_section(self, position: int, section: MenuSection) -> MenuSection:
        old = self._sections.pop(position)
        self._sections.insert(position, section)
        return old


class PrintersMenu:
    """Owns the per-profile menu model and keeps the published copy in sync."""

    def __init__(
        self,
        builder: MenuModelBuilder,
        surface: MenuSurface,
        *,
        profiles: Iterable[str] = constants.DEFAULT_PROFILES,
    ) -> None:
        self._builder = builder
        self._surface = surface
        self._any_visible = False
        self._header = builder.rebuild_header(False)
        self._profiles: dict[str, ProfileMenu] = {
            name: ProfileMenu(name, (MenuSection(), builder.settings_section()))
            for name in profiles
        }
        self._published = False

    @property
    def header(self) -> HeaderState:
        return self._header

    @property
    def any_visible(self) -> bool:
        return self._any_visible

    @property
    def published(self) -> bool:
        return self._published

    def profile(self, name: str) -> ProfileMenu:
        return self._profiles[name]

    def profiles(self) -> dict[str, ProfileMenu]:
        return dict(self._profiles)

    def printers_section(self, profile: str) -> MenuSection:
        return self._profiles[profile].section(PRINTERS_SECTION)

    def publish(self) -> bool:
        """Build the initial model and export it."""

        section, any_visible = self._builder.rebuild_printers_section()
        for profile in self._profiles.values():
            profile.replace_section(PRINTERS_SECTION, section)
        self._any_visible = any_visible
        self._header = self._builder.rebuild_header(any_visible)

        self._published = self._surface.publish(
            {name: profile.sections for name, profile in self._profiles.items()},
            self._header,
        )
        if not self._published:
            LOGGER.warning("Menu export failed; continuing without a live menu")
        return self._published

    def refresh_printers(self) -> tuple[MenuSection, bool]:
        section, any_visible = self._builder.rebuild_printers_section()
        for name, profile in self._profiles.items():
            profile.replace_section(PRINTERS_SECTION, section)
            if self._published:
                self._surface.replace_section(name, PRINTERS_SECTION, section)
        self._any_visible = any_visible
        LOGGER.debug(
            "Printers section rebuilt with %d item(s) for %d profile(s)",
            len(section),
            len(self._profiles),
        )
        self.refresh_header()
        return section, any_visible

    def refresh_header(self) -> HeaderState:
        self._header = self._builder.rebuild_header(self._any_visible)
        if self._published:
            self._surface.update_header(self._header)
        return self._header

    def unpublish(self) -> None:
        if not self._published:
            return
        self._surface.unpublish()
        self._published = False
