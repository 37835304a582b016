"""Apply POSIX mode and ownership to the target file after an update."""

from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from .errors import FileAttributeError
from .logging import get_logger

_OCTAL_MODE_RE = re.compile(r"[0-7]{1,4}")


class AttributeApplier:
    """Runs chown/chmod against the target file.

    Octal modes are applied with :func:`os.chmod`; symbolic modes such as
    ``u+rwx`` and all ownership changes go through the system commands so
    user and group names resolve the same way they do in a shell.
    """

    def __init__(self, runner: Callable[[Iterable[str]], str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("attributes")

    def apply(
        self,
        path: Path,
        *,
        mode: Optional[str] = None,
        owner: Optional[str] = None,
        group: Optional[str] = None,
    ) -> None:
        if owner or group:
            self.apply_ownership(path, owner, group)
        if mode:
            self.apply_mode(path, mode)

    def apply_ownership(self, path: Path, owner: Optional[str], group: Optional[str]) -> None:
        if owner and group:
            spec = f"{owner}:{group}"
        elif owner:
            spec = owner
        elif group:
            spec = f":{group}"
        else:
            return
        self.logger.debug("Changing ownership of %s to %s", path, spec)
        try:
            self._runner(["chown", spec, str(path)])
        except subprocess.CalledProcessError as exc:
            raise FileAttributeError(
                f"failed to change ownership: {_command_output(exc)}, error: {exc}"
            ) from exc
        except OSError as exc:
            raise FileAttributeError(f"failed to change ownership: {exc}") from exc

    def apply_mode(self, path: Path, mode: str) -> None:
        if not _OCTAL_MODE_RE.fullmatch(mode):
            self._apply_symbolic_mode(path, mode)
            return
        numeric = int(mode, 8)
        self.logger.debug("Changing mode of %s to %o", path, numeric)
        try:
            os.chmod(path, numeric)
        except OSError as exc:
            raise FileAttributeError(f"failed to change mode: {exc}") from exc

    def _apply_symbolic_mode(self, path: Path, mode: str) -> None:
        self.logger.debug("Changing mode of %s via chmod %s", path, mode)
        try:
            self._runner(["chmod", mode, str(path)])
        except subprocess.CalledProcessError as exc:
            raise FileAttributeError(
                f"failed to change mode via chmod: {_command_output(exc)}, error: {exc}"
            ) from exc
        except OSError as exc:
            raise FileAttributeError(f"failed to change mode via chmod: {exc}") from exc

    @staticmethod
    def _default_runner(args: Iterable[str]) -> str:
        completed = subprocess.run(
            list(args),
            check=True,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        return completed.stdout


def _command_output(exc: subprocess.CalledProcessError) -> str:
    output = exc.output or ""
    return output.strip() if isinstance(output, str) else output.decode(errors="replace").strip()


__all__ = ["AttributeApplier"]
