"""Core data models shared across blockinfile components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import ConfigError


class State(str, Enum):
    """Desired presence of the managed block."""

    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class BlockConfig:
    """Desired state of the managed block inside a single file."""

    state: State = State.PRESENT
    block: str = ""
    indent: int = 0
    begin_marker: str = "# BEGIN MANAGED BLOCK"
    end_marker: str = "# END MANAGED BLOCK"
    insert_before: Optional[str] = None
    insert_after: Optional[str] = None

    @property
    def wants_block(self) -> bool:
        """Return True when the block should exist after resolution."""
        return self.state is State.PRESENT and bool(self.block)

    def validate(self) -> None:
        if self.indent < 0:
            raise ConfigError(f"indent must be >= 0, got {self.indent}")
        if self.insert_before and self.insert_after:
            raise ConfigError(
                "only one of these flags can be used at a time [insertbefore|insertafter]"
            )
        if self.begin_marker == self.end_marker:
            raise ConfigError(
                f"begin and end markers must differ, both are {self.begin_marker!r}"
            )


@dataclass(frozen=True)
class FileSettings:
    """Target file and the side effects applied around the content update."""

    path: Path
    backup: bool = False
    mode: Optional[str] = None
    owner: Optional[str] = None
    group: Optional[str] = None


@dataclass
class UpdateOutcome:
    """Result of a block update against one file."""

    path: Path
    changed: bool
    diff: str = ""
    dry_run: bool = False
    backup_path: Optional[Path] = None
