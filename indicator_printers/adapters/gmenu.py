"""Exports the printers menu and action group on the session bus with Gio."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from gi.repository import Gio, GLib

from .. import constants
from ..core import ACTIONS, HeaderState, MenuItem, MenuSection

LOGGER = logging.getLogger(__name__)

ActivateCallback = Callable[[str, Optional[str]], None]


def _variant(value: Any) -> GLib.Variant:
    if isinstance(value, bool):
        return GLib.Variant("b", value)
    if isinstance(value, int):
        return GLib.Variant("x", value)
    return GLib.Variant("s", str(value))


def header_variant(header: HeaderState) -> GLib.Variant:
    payload: dict[str, GLib.Variant] = {}
    for key, value in header.as_dict().items():
        if key == "icon":
            payload[key] = Gio.ThemedIcon.new(value).serialize()
        else:
            payload[key] = _variant(value)
    return GLib.Variant("a{sv}", payload)


def build_menu_item(item: MenuItem) -> Gio.MenuItem:
    menu_item = Gio.MenuItem.new(item.label, None)
    if item.target is not None:
        menu_item.set_action_and_target_value(item.action, GLib.Variant("s", item.target))
    else:
        menu_item.set_action_and_target_value(item.action, None)
    if item.icon:
        menu_item.set_icon(Gio.ThemedIcon.new(item.icon))
    for name, value in item.attributes.items():
        menu_item.set_attribute_value(name, _variant(value))
    return menu_item


def build_section(section: MenuSection) -> Gio.Menu:
    menu = Gio.Menu()
    for item in section.items:
        menu.append_item(build_menu_item(item))
    return menu


class GioMenuPublisher:
    """``MenuSurface`` backed by ``Gio.Menu`` and ``Gio.SimpleActionGroup``.

    The action group is exported at the object path and every profile's menu
    at ``<object path>/<profile>``.
    """

    def __init__(
        self,
        *,
        bus_name: str = constants.DEFAULT_BUS_NAME,
        object_path: str = constants.DEFAULT_OBJECT_PATH,
        on_activate: Optional[ActivateCallback] = None,
        on_name_lost: Optional[Callable[[], None]] = None,
        connection: Optional[Gio.DBusConnection] = None,
    ) -> None:
        self._bus_name = bus_name
        self._object_path = object_path
        self._on_activate = on_activate
        self._on_name_lost = on_name_lost
        self._connection = connection
        self._actions = Gio.SimpleActionGroup()
        self._header_action: Optional[Gio.SimpleAction] = None
        self._submenus: dict[str, Gio.Menu] = {}
        self._roots: dict[str, Gio.Menu] = {}
        self._menu_export_ids: list[int] = []
        self._actions_export_id = 0
        self._owner_id = 0

    def publish(
        self,
        profiles: Mapping[str, Iterable[MenuSection]],
        header: HeaderState,
    ) -> bool:
        self._build_actions(header)
        for profile, sections in profiles.items():
            self._build_profile(profile, sections)

        try:
            if self._connection is None:
                self._connection = Gio.bus_get_sync(Gio.BusType.SESSION, None)
        except GLib.Error as exc:
            LOGGER.error("Cannot connect to the session bus: %s", exc.message)
            return False

        try:
            self._actions_export_id = self._connection.export_action_group(
                self._object_path, self._actions
            )
        except GLib.Error as exc:
            LOGGER.error(
                "Unable to export action group on %s: %s", self._object_path, exc.message
            )
            return False

        for profile, root in self._roots.items():
            path = f"{self._object_path}/{profile}"
            try:
                self._menu_export_ids.append(
                    self._connection.export_menu_model(path, root)
                )
            except GLib.Error as exc:
                LOGGER.error("Unable to export menu on %s: %s", path, exc.message)
                self.unpublish()
                return False

        self._owner_id = Gio.bus_own_name_on_connection(
            self._connection,
            self._bus_name,
            Gio.BusNameOwnerFlags.NONE,
            self._name_acquired,
            self._name_lost,
        )
        return True

    def replace_section(self, profile: str, position: int, section: MenuSection) -> None:
        submenu = self._submenus.get(profile)
        if submenu is None:
            return
        submenu.remove(position)
        submenu.insert_section(position, None, build_section(section))

    def update_header(self, header: HeaderState) -> None:
        if self._header_action is not None:
            self._header_action.set_state(header_variant(header))

    def unpublish(self) -> None:
        if self._connection is not None:
            for export_id in self._menu_export_ids:
                self._connection.unexport_menu_model(export_id)
            if self._actions_export_id:
                self._connection.unexport_action_group(self._actions_export_id)
        self._menu_export_ids.clear()
        self._actions_export_id = 0
        if self._owner_id:
            Gio.bus_unown_name(self._owner_id)
            self._owner_id = 0

    def _build_actions(self, header: HeaderState) -> None:
        for spec in ACTIONS:
            if spec.stateful:
                action = Gio.SimpleAction.new_stateful(
                    spec.name, None, header_variant(header)
                )
                self._header_action = action
            else:
                parameter_type = (
                    GLib.VariantType.new(spec.parameter_type)
                    if spec.parameter_type
                    else None
                )
                action = Gio.SimpleAction.new(spec.name, parameter_type)
                action.connect("activate", self._activated)
            self._actions.add_action(action)

    def _build_profile(self, profile: str, sections: Iterable[MenuSection]) -> None:
        submenu = Gio.Menu()
        for section in sections:
            submenu.append_section(None, build_section(section))

        header_item = Gio.MenuItem.new(None, "indicator._header")
        header_item.set_attribute_value(
            constants.ATTR_ITEM_TYPE, GLib.Variant("s", "org.ayatana.indicator.root")
        )
        header_item.set_submenu(submenu)

        root = Gio.Menu()
        root.append_item(header_item)
        self._submenus[profile] = submenu
        self._roots[profile] = root

    def _activated(
        self, action: Gio.SimpleAction, parameter: Optional[GLib.Variant]
    ) -> None:
        if self._on_activate is None:
            return
        target = parameter.get_string() if parameter is not None else None
        self._on_activate(action.get_name(), target)

    def _name_acquired(self, connection: Gio.DBusConnection, name: str) -> None:
        LOGGER.info("Acquired bus name %s", name)

    def _name_lost(self, connection: Optional[Gio.DBusConnection], name: str) -> None:
        LOGGER.warning("Lost bus name %s", name)
        if self._on_name_lost is not None:
            self._on_name_lost()
