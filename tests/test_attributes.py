"""Tests for the attribute applier."""

from __future__ import annotations

import stat
import subprocess
from pathlib import Path

import pytest

from blockinfile.attributes import AttributeApplier
from blockinfile.errors import FileAttributeError


class RecordingRunner:
    def __init__(self, fail_with: Exception | None = None) -> None:
        self.calls: list[list[str]] = []
        self._fail_with = fail_with

    def __call__(self, args) -> str:  # type: ignore[no-untyped-def]
        self.calls.append(list(args))
        if self._fail_with is not None:
            raise self._fail_with
        return ""


@pytest.fixture
def target(tmp_path: Path) -> Path:
    path = tmp_path / "app.conf"
    path.write_text("content\n", encoding="utf-8")
    path.chmod(0o600)
    return path


@pytest.mark.parametrize(
    ("owner", "group", "expected"),
    [
        ("alice", "staff", "alice:staff"),
        ("alice", None, "alice"),
        (None, "staff", ":staff"),
    ],
)
def test_ownership_command_is_built_from_owner_and_group(
    target: Path, owner: str | None, group: str | None, expected: str
) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target, owner=owner, group=group)

    assert runner.calls == [["chown", expected, str(target)]]


def test_nothing_runs_without_attributes(target: Path) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target)

    assert runner.calls == []
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


@pytest.mark.parametrize("mode", ["0644", "644"])
def test_octal_mode_is_applied_directly(target: Path, mode: str) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target, mode=mode)

    assert runner.calls == []
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_symbolic_mode_is_delegated_to_chmod(target: Path) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target, mode="u+rwx")

    assert runner.calls == [["chmod", "u+rwx", str(target)]]


def test_ownership_runs_before_mode(target: Path) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target, mode="g+w", owner="alice")

    assert [call[0] for call in runner.calls] == ["chown", "chmod"]


def test_failed_chown_raises_with_command_output(target: Path) -> None:
    error = subprocess.CalledProcessError(
        1, ["chown", "nobody", str(target)], output="chown: invalid user: 'nobody'\n"
    )
    applier = AttributeApplier(runner=RecordingRunner(fail_with=error))

    with pytest.raises(FileAttributeError, match="invalid user"):
        applier.apply(target, owner="nobody")


def test_failed_symbolic_chmod_raises(target: Path) -> None:
    error = subprocess.CalledProcessError(1, ["chmod"], output="chmod: invalid mode: 'q+z'")
    applier = AttributeApplier(runner=RecordingRunner(fail_with=error))

    with pytest.raises(FileAttributeError, match="failed to change mode via chmod"):
        applier.apply(target, mode="q+z")


def test_chmod_on_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileAttributeError, match="failed to change mode"):
        AttributeApplier(runner=RecordingRunner()).apply(tmp_path / "missing", mode="0644")


@pytest.mark.parametrize("mode", ["-1", "+644", "6_44", "0o644", " 644", "17777"])
def test_non_plain_octal_modes_are_not_applied_directly(target: Path, mode: str) -> None:
    runner = RecordingRunner()

    AttributeApplier(runner=runner).apply(target, mode=mode)

    assert runner.calls == [["chmod", mode, str(target)]]
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_negative_mode_fails_without_touching_permissions(target: Path) -> None:
    error = subprocess.CalledProcessError(1, ["chmod", "-1"], output="chmod: invalid option -- '1'")
    applier = AttributeApplier(runner=RecordingRunner(fail_with=error))

    with pytest.raises(FileAttributeError):
        applier.apply(target, mode="-1")

    assert stat.S_IMODE(target.stat().st_mode) == 0o600
