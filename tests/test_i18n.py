import gettext

from indicator_printers import constants
from indicator_printers.core import AlertDeduplicator
from indicator_printers.i18n import configure_translations


def test_configure_translations_binds_package_domain(monkeypatch) -> None:
    calls: list[tuple] = []
    monkeypatch.setattr(
        gettext, "bindtextdomain", lambda domain, localedir=None: calls.append(
            ("bind", domain, localedir)
        )
    )
    monkeypatch.setattr(
        gettext, "textdomain", lambda domain=None: calls.append(("select", domain))
    )

    configure_translations(localedir="/usr/share/locale")

    assert calls == [
        ("bind", constants.GETTEXT_DOMAIN, "/usr/share/locale"),
        ("select", constants.GETTEXT_DOMAIN),
    ]


def test_alert_text_falls_back_without_catalog(tmp_path) -> None:
    previous = gettext.textdomain()
    configure_translations(localedir=str(tmp_path))
    try:
        (alert,) = AlertDeduplicator().process("kitchen", "offline", 1)
    finally:
        gettext.textdomain(previous)

    assert alert.message == "The printer “kitchen” is currently off-line."
    assert alert.title == "Printing Problem"


def test_alert_templates_are_translated_when_alerts_are_built(monkeypatch) -> None:
    from indicator_printers.core import alerts

    monkeypatch.setattr(alerts, "_", lambda message: message.replace("printer", "imprimante"))

    (alert,) = AlertDeduplicator().process("kitchen", "toner-low", 1)

    assert alert.message == "The imprimante “kitchen” is low on toner."
