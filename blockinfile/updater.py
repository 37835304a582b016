"""Apply a managed block to a file on disk."""

from __future__ import annotations

import difflib

from .attributes import AttributeApplier
from .files import BackupMaker, TextLoader, TextWriter
from .logging import get_logger
from .models import BlockConfig, FileSettings, UpdateOutcome
from .resolver import BlockResolver


class BlockUpdater:
    """Coordinates read, resolve, backup, write, and attribute steps for one file."""

    def __init__(
        self,
        resolver: BlockResolver | None = None,
        loader: TextLoader | None = None,
        writer: TextWriter | None = None,
        backup_maker: BackupMaker | None = None,
        attribute_applier: AttributeApplier | None = None,
    ) -> None:
        self.resolver = resolver or BlockResolver()
        self.loader = loader or TextLoader()
        self.writer = writer or TextWriter()
        self.backup_maker = backup_maker or BackupMaker()
        self.attribute_applier = attribute_applier or AttributeApplier()
        self.logger = get_logger("updater")

    def run(
        self, config: BlockConfig, settings: FileSettings, *, dry_run: bool = False
    ) -> UpdateOutcome:
        """Bring ``settings.path`` to the state described by ``config``."""
        config.validate()
        path = settings.path
        if not config.wants_block:
            self.logger.debug("Block is absent or empty; removing %r", config.begin_marker)

        if dry_run:
            original = self.loader.read(path) if path.exists() else ""
            updated = self.resolver.resolve(original, config)
            self.logger.info("Dry-run completed; %s not written", path)
            return UpdateOutcome(
                path=path,
                changed=updated != original,
                diff=self._render_diff(original, updated, path.name),
                dry_run=True,
            )

        self.loader.touch(path)
        original = self.loader.read(path)
        updated = self.resolver.resolve(original, config)

        backup_path = None
        changed = updated != original
        if changed:
            if settings.backup:
                backup_path = self.backup_maker.backup(path)
            self.writer.write(path, updated, original)
            self.logger.info("Updated managed block in %s", path)
        else:
            self.logger.info("%s already up to date; skipping write", path)

        # Attributes are applied even when the content did not change.
        self.attribute_applier.apply(
            path, mode=settings.mode, owner=settings.owner, group=settings.group
        )
        return UpdateOutcome(
            path=path,
            changed=changed,
            diff=self._render_diff(original, updated, path.name) if changed else "",
            backup_path=backup_path,
        )

    @staticmethod
    def _render_diff(original: str, updated: str, name: str) -> str:
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"{name} (original)",
            tofile=f"{name} (updated)",
        )
        return "".join(diff)


__all__ = ["BlockUpdater"]
