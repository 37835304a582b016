"""Locate, replace, insert, or remove the managed block inside raw file text."""

from __future__ import annotations

import re
from typing import Tuple

from .logging import get_logger
from .models import BlockConfig

_LINE_BREAK_RE = re.compile(r"\r?\n")


class BlockResolver:
    """Computes the new file text for a desired managed block.

    Markers are matched by plain substring search against the last occurrence
    in the text, so a marker that happens to be the prefix of another block's
    marker (``# BEGIN app`` vs ``# BEGIN app global``) never hits the wrong
    block. The begin marker is always searched together with its newline.
    """

    def __init__(self) -> None:
        self.logger = get_logger("resolver")

    def resolve(self, source_text: str, config: BlockConfig) -> str:
        """Return ``source_text`` with the managed block in its desired state."""
        if not config.wants_block:
            self.logger.debug("Removing block delimited by %r", config.begin_marker)
            return self.remove_block(source_text, config.begin_marker, config.end_marker)

        rendered = self.render_block(config)

        if config.insert_before:
            text = self.remove_block(source_text, config.begin_marker, config.end_marker)
            index = text.rfind(config.insert_before)
            if index < 0:
                self.logger.debug("Anchor %r not found; appending block", config.insert_before)
                return _append(text, rendered)
            self.logger.debug("Inserting block before anchor %r", config.insert_before)
            return f"{text[:index]}{rendered}\n{text[index:]}"

        if config.insert_after:
            text = self.remove_block(source_text, config.begin_marker, config.end_marker)
            index = text.rfind(config.insert_after)
            if index < 0:
                self.logger.debug("Anchor %r not found; appending block", config.insert_after)
                return _append(text, rendered)
            index += len(config.insert_after)
            self.logger.debug("Inserting block after anchor %r", config.insert_after)
            return f"{text[:index]}\n{rendered}{text[index:]}"

        if config.begin_marker + "\n" in source_text:
            self.logger.debug("Replacing existing block in place")
            return self._block_pattern(config).sub(lambda _match: rendered, source_text)

        self.logger.debug("No existing block; appending at end of text")
        return _append(source_text, rendered)

    def remove_block(self, source_text: str, begin_marker: str, end_marker: str) -> str:
        """Drop the last managed block, including its indentation and closing newline."""
        begin_index = source_text.rfind(begin_marker + "\n")
        if begin_index < 0:
            return source_text

        text = strip_leading_spaces(source_text, begin_index)
        begin_index = text.rfind(begin_marker + "\n")
        begin_line_end = begin_index + len(begin_marker) + 1

        end_index = text.rfind(end_marker)
        if end_index < begin_line_end:
            # Unterminated block: only the begin marker line can be attributed to us.
            return text[:begin_index] + text[begin_line_end:]
        return text[:begin_index] + text[end_index + len(end_marker) + 1 :]

    def render_block(self, config: BlockConfig) -> str:
        """Return ``begin\\ncontent\\nend`` with every line indented."""
        begin, content, end = format_block(config)
        return f"{begin}\n{content}\n{end}"

    @staticmethod
    def _block_pattern(config: BlockConfig) -> re.Pattern[str]:
        # Leading spaces belong to the block so a changed indent replaces them.
        return re.compile(
            " *"
            + re.escape(config.begin_marker + "\n")
            + ".*?"
            + re.escape(config.end_marker),
            re.DOTALL,
        )


def format_block(config: BlockConfig) -> Tuple[str, str, str]:
    """Return the indented begin marker, content, and end marker lines."""
    padding = " " * config.indent
    content = padding + _LINE_BREAK_RE.sub(lambda _match: "\n" + padding, config.block)
    return padding + config.begin_marker, content, padding + config.end_marker


def strip_leading_spaces(source_text: str, begin_index: int) -> str:
    """Remove the run of spaces directly before ``begin_index``."""
    start = begin_index
    while start > 0 and source_text[start - 1] == " ":
        start -= 1
    return source_text[:start] + source_text[begin_index:]


def _append(text: str, rendered: str) -> str:
    return f"{text}{rendered}\n"


def resolve(source_text: str, config: BlockConfig) -> str:
    """Return the new file text for ``config`` applied to ``source_text``."""
    return BlockResolver().resolve(source_text, config)


__all__ = ["BlockResolver", "format_block", "resolve", "strip_leading_spaces"]
