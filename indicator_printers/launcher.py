"""Launches the external printer settings application."""

from __future__ import annotations

import asyncio
import logging
import shlex
from typing import Optional, Sequence

from . import constants

LOGGER = logging.getLogger(__name__)


class CommandSettingsLauncher:
    """Spawns the settings command without waiting for it to exit.

    ``open_settings("kitchen")`` runs ``<command> show-printer kitchen``;
    without a printer the bare command is run.
    """

    def __init__(self, command: str = constants.DEFAULT_SETTINGS_COMMAND) -> None:
        self._argv = shlex.split(command)
        self._tasks: set[asyncio.Task[None]] = set()

    def build_argv(self, printer: Optional[str] = None) -> list[str]:
        argv = list(self._argv)
        if printer:
            argv.extend(["show-printer", printer])
        return argv

    def open_settings(self, printer: Optional[str] = None) -> None:
        argv = self.build_argv(printer)
        if not argv:
            LOGGER.warning("No settings command configured")
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.warning("Cannot launch %s without a running event loop", argv[0])
            return

        task = loop.create_task(self._spawn(argv))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _spawn(self, argv: Sequence[str]) -> None:
        try:
            await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            LOGGER.warning("Could not spawn printer settings (%s): %s", argv[0], exc)
        else:
            LOGGER.debug("Launched %s", shlex.join(argv))
