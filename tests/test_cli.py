"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from blockinfile.cli import _build_parser, main


def test_cli_parses_options_as_given() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["--path", "hosts", "--block", "x", "--indent", "2", "--insertafter", "# end", "-v"]
    )
    assert args.path == "hosts"
    assert args.block == "x"
    assert args.indent == 2
    assert args.insertafter == "# end"
    assert args.verbose is True
    assert args.state is None


def test_cli_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert "blockinfile v0.1.10" in capsys.readouterr().out


def test_cli_inserts_block_and_reports_update(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "hosts").write_text("127.0.0.1 localhost\n", encoding="utf-8")

    main(["--path", "hosts", "--block", "10.0.0.1 alpha"])

    assert (tmp_path / "hosts").read_text(encoding="utf-8") == (
        "127.0.0.1 localhost\n# BEGIN MANAGED BLOCK\n10.0.0.1 alpha\n# END MANAGED BLOCK\n"
    )
    assert "hosts updated" in capsys.readouterr().out

    main(["--path", "hosts", "--block", "10.0.0.1 alpha"])
    assert "already up to date" in capsys.readouterr().out


def test_cli_config_file_with_command_line_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "blockinfile.yml"
    config_file.write_text(
        "path: app.ini\nblock: from yaml\nmarker: '; {mark} app'\n", encoding="utf-8"
    )

    main(["--config", str(config_file), "--block", "from cli"])

    assert (tmp_path / "app.ini").read_text(encoding="utf-8") == (
        "; BEGIN app\nfrom cli\n; END app\n"
    )


def test_cli_state_false_removes_block(tmp_path: Path) -> None:
    target = tmp_path / "app.conf"
    target.write_text("a\n# BEGIN MANAGED BLOCK\nx\n# END MANAGED BLOCK\nb\n", encoding="utf-8")

    main(["--path", str(target), "--block", "x", "--state", "false"])

    assert target.read_text(encoding="utf-8") == "a\nb\n"


def test_cli_dry_run_prints_diff(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "app.conf"

    main(["--path", str(target), "--block", "x", "--dry-run"])

    out = capsys.readouterr().out
    assert "changes (dry-run)" in out
    assert "+x" in out
    assert not target.exists()


def test_cli_conflicting_anchors_exit_non_zero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    target = tmp_path / "app.conf"

    with pytest.raises(SystemExit) as excinfo:
        main(["--path", str(target), "--block", "x", "--insertbefore", "a", "--insertafter", "b"])

    assert excinfo.value.code == 1
    assert "only one of these flags" in capsys.readouterr().err
    assert not target.exists()


def test_cli_missing_path_exits_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--block", "x"])

    assert excinfo.value.code == 1
    assert 'required flag "path" not set' in capsys.readouterr().err


def test_cli_keeps_non_utf8_bytes_intact(tmp_path: Path) -> None:
    target = tmp_path / "latin1.conf"
    target.write_bytes(b"caf\xe9=1\n")

    main(["--path", str(target), "--block", "x"])

    assert target.read_bytes() == (
        b"caf\xe9=1\n# BEGIN MANAGED BLOCK\nx\n# END MANAGED BLOCK\n"
    )


def test_cli_dry_run_on_non_utf8_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "latin1.conf"
    target.write_bytes(b"caf\xe9=1\n")

    main(["--path", str(target), "--block", "x", "--dry-run"])

    assert "+x" in capsys.readouterr().out
    assert target.read_bytes() == b"caf\xe9=1\n"


def test_cli_log_file_receives_debug_trace(tmp_path: Path) -> None:
    target = tmp_path / "app.conf"
    log_file = tmp_path / "logs" / "run.log"

    main(["--path", str(target), "--block", "x", "--log-file", str(log_file)])

    trace = log_file.read_text(encoding="utf-8")
    assert "DEBUG" in trace
    assert "blockinfile.resolver" in trace
    assert "Updated managed block" in trace
