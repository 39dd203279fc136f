import asyncio
from unittest.mock import AsyncMock

import pytest

from indicator_printers.launcher import CommandSettingsLauncher


def test_build_argv_without_printer() -> None:
    launcher = CommandSettingsLauncher("gnome-control-center printers")

    assert launcher.build_argv() == ["gnome-control-center", "printers"]


def test_build_argv_with_printer() -> None:
    launcher = CommandSettingsLauncher("gnome-control-center printers")

    assert launcher.build_argv("office laser") == [
        "gnome-control-center",
        "printers",
        "show-printer",
        "office laser",
    ]


def test_open_settings_without_loop_logs_warning(caplog) -> None:
    launcher = CommandSettingsLauncher("gnome-control-center printers")

    launcher.open_settings("kitchen")

    assert "without a running event loop" in caplog.text


@pytest.mark.asyncio
async def test_open_settings_spawns_detached_process(monkeypatch) -> None:
    spawn = AsyncMock()
    monkeypatch.setattr(asyncio, "create_subprocess_exec", spawn)
    launcher = CommandSettingsLauncher("gnome-control-center printers")

    launcher.open_settings("kitchen")
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    spawn.assert_awaited_once()
    args, kwargs = spawn.call_args
    assert args == ("gnome-control-center", "printers", "show-printer", "kitchen")
    assert kwargs["start_new_session"] is True


@pytest.mark.asyncio
async def test_missing_command_is_logged(monkeypatch, caplog) -> None:
    monkeypatch.setattr(
        asyncio,
        "create_subprocess_exec",
        AsyncMock(side_effect=FileNotFoundError("no such file")),
    )
    launcher = CommandSettingsLauncher("not-installed")

    launcher.open_settings()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert "Could not spawn printer settings" in caplog.text
