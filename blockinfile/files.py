"""File collaborators: load, back up, and rewrite the target file."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Callable

from .errors import FileIOError
from .logging import get_logger

_NEW_FILE_MODE = 0o644


class TextLoader:
    """Reads the whole target file, creating it first when it is missing."""

    def touch(self, path: Path) -> None:
        """Create ``path`` if needed without bumping the mtime of an existing file."""
        try:
            fd = os.open(path, os.O_RDONLY | os.O_CREAT, _NEW_FILE_MODE)
        except OSError as exc:
            raise FileIOError(f"Unable to create {path}: {exc.strerror or exc}") from exc
        os.close(fd)

    def read(self, path: Path) -> str:
        try:
            with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
                return handle.read()
        except OSError as exc:
            raise FileIOError(f"Unable to read {path}: {exc.strerror or exc}") from exc
        except UnicodeError as exc:
            raise FileIOError(f"Unable to decode {path}: {exc}") from exc


class TextWriter:
    """Truncates and rewrites the target file when its content changed."""

    def __init__(self) -> None:
        self.logger = get_logger("files")

    def write(self, path: Path, text: str, original: str) -> bool:
        """Write ``text`` to ``path`` unless it equals ``original``; return whether it wrote."""
        if text == original:
            self.logger.debug("Content of %s unchanged; skipping write", path)
            return False
        try:
            with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
                handle.write(text)
        except OSError as exc:
            raise FileIOError(f"Unable to write {path}: {exc.strerror or exc}") from exc
        except UnicodeError as exc:
            raise FileIOError(f"Unable to encode text for {path}: {exc}") from exc
        self.logger.debug("Wrote %d characters to %s", len(text), path)
        return True


class BackupMaker:
    """Copies the unmodified target to a timestamped sibling file."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _local_now
        self.logger = get_logger("files")

    def backup_path(self, path: Path) -> Path:
        stamp = self._clock().isoformat(timespec="seconds")
        return path.with_name(f"{path.name}.{stamp}")

    def backup(self, path: Path) -> Path:
        """Copy ``path`` to ``<path>.<RFC 3339 timestamp>`` and return the copy's path."""
        target = self.backup_path(path)
        try:
            data = path.read_bytes()
            target.write_bytes(data)
            os.chmod(target, _NEW_FILE_MODE)
        except OSError as exc:
            raise FileIOError(f"Error creating {target}: {exc.strerror or exc}") from exc
        self.logger.debug("Backup written to %s", target)
        return target


def _local_now() -> datetime:
    return datetime.now().astimezone().replace(microsecond=0)


__all__ = ["BackupMaker", "TextLoader", "TextWriter"]
