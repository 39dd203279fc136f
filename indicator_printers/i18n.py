"""Message catalog setup for user visible strings."""

from __future__ import annotations

import gettext
from typing import Optional

from . import constants


def configure_translations(
    domain: str = constants.GETTEXT_DOMAIN, localedir: Optional[str] = None
) -> None:
    """Select the catalog used by the module level ``gettext`` calls.

    ``localedir`` defaults to the system locale directory.
    """

    gettext.bindtextdomain(domain, localedir)
    gettext.textdomain(domain)
