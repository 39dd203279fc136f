from pathlib import Path

from indicator_printers import cli


def test_show_config_prints_resolved_sections(tmp_path: Path, capsys, monkeypatch) -> None:
    calls: list[bool] = []
    monkeypatch.setattr(cli, "configure_translations", lambda: calls.append(True))
    config_path = tmp_path / "indicator-printers.cfg"
    config_path.write_text("[cups]\nlease_seconds = 600\n", encoding="utf-8")

    exit_code = cli.main(["--config", str(config_path), "show-config"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert f"Configuration loaded from {config_path}" in output
    assert "[cups]" in output
    assert "lease_seconds = 600" in output
    assert "[dbus]" in output
    assert calls == [True]


def test_parser_requires_a_command() -> None:
    parser = cli.build_parser()

    args = parser.parse_args(["status"])

    assert args.command == "status"
    assert args.config == cli.constants.DEFAULT_CONFIG_PATH
