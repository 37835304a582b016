"""Option handling for blockinfile: YAML batch files, coercion, and validation."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigError
from .models import BlockConfig, FileSettings, State

DEFAULT_MARKER = "# {mark} MANAGED BLOCK"
DEFAULT_MARKER_BEGIN = "BEGIN"
DEFAULT_MARKER_END = "END"
MARK_PLACEHOLDER = "{mark}"

_TRUE_VALUES = {"1", "t", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "f", "false", "no", "n", "off"}


@dataclass
class Options:
    """Raw option values as given on the command line or in a YAML file.

    ``None`` means "not given", so a command-line value can be layered over
    a value from the YAML batch file with :meth:`merged`.
    """

    backup: Any = None
    block: Any = None
    indent: Any = None
    insertbefore: Any = None
    insertafter: Any = None
    marker: Any = None
    markerbegin: Any = None
    markerend: Any = None
    path: Any = None
    state: Any = None
    mode: Any = None
    owner: Any = None
    group: Any = None

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    def merged(self, override: "Options") -> "Options":
        """Return a copy where every value given in ``override`` wins."""
        changes = {
            name: getattr(override, name)
            for name in self.names()
            if getattr(override, name) is not None
        }
        return replace(self, **changes)


def load_options_file(config_path: Path) -> Options:
    """Load options from a YAML batch file."""
    config_file = config_path.expanduser()
    if not config_file.is_file():
        raise ConfigError(f"Config file {config_file} does not exist")

    data = _read_yaml(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    known = set(Options.names())
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        raise ConfigError(f"Unknown option(s) in {config_file.name}: {', '.join(unknown)}")

    return Options(**{str(key): value for key, value in data.items()})


def build_block_config(options: Options) -> BlockConfig:
    """Translate options into a validated :class:`BlockConfig`."""
    marker = _as_str(options.marker, "marker") or DEFAULT_MARKER
    marker_begin = _as_str(options.markerbegin, "markerbegin")
    marker_end = _as_str(options.markerend, "markerend")

    present = _as_bool(options.state, "state", default=True)
    config = BlockConfig(
        state=State.PRESENT if present else State.ABSENT,
        block=_as_str(options.block, "block") or "",
        indent=_as_int(options.indent, "indent", default=0),
        begin_marker=render_marker(
            marker, DEFAULT_MARKER_BEGIN if marker_begin is None else marker_begin
        ),
        end_marker=render_marker(
            marker, DEFAULT_MARKER_END if marker_end is None else marker_end
        ),
        insert_before=_as_str(options.insertbefore, "insertbefore") or None,
        insert_after=_as_str(options.insertafter, "insertafter") or None,
    )
    config.validate()
    return config


def build_file_settings(options: Options, *, cwd: Path | None = None) -> FileSettings:
    """Translate options into the target path and its side-effect settings."""
    raw_path = _as_str(options.path, "path")
    if not raw_path:
        raise ConfigError('required flag "path" not set')
    return FileSettings(
        path=resolve_path(raw_path, cwd=cwd),
        backup=_as_bool(options.backup, "backup", default=False),
        mode=_as_mode(options.mode),
        owner=_as_str(options.owner, "owner") or None,
        group=_as_str(options.group, "group") or None,
    )


def build_configs(
    options: Options, *, cwd: Path | None = None
) -> Tuple[BlockConfig, FileSettings]:
    """Validate every option before any file is touched."""
    settings = build_file_settings(options, cwd=cwd)
    config = build_block_config(options)
    return config, settings


def render_marker(template: str, mark: str) -> str:
    return template.replace(MARK_PLACEHOLDER, mark, 1)


def resolve_path(raw_path: str, *, cwd: Path | None = None) -> Path:
    """Return ``raw_path`` as an absolute path, prefixing relative paths with ``cwd``."""
    path = Path(raw_path).expanduser()
    if path.is_absolute():
        return path
    return (cwd or Path.cwd()) / path


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"Option {name!r} must be a string, got {type(value).__name__}")


def _as_mode(value: Any) -> Optional[str]:
    if isinstance(value, int) and not isinstance(value, bool):
        # YAML reads 0644 as the integer 420; only a quoted string keeps the digits.
        raise ConfigError(f"Option 'mode' must be a quoted string such as '0644', got {value!r}")
    return _as_str(value, "mode") or None


def _as_int(value: Any, name: str, *, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigError(f"Option {name!r} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError(f"Option {name!r} must be an integer, got {value!r}")


def _as_bool(value: Any, name: str, *, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigError(f"Option {name!r} must be a boolean, got {value!r}")


__all__ = [
    "DEFAULT_MARKER",
    "Options",
    "build_block_config",
    "build_configs",
    "build_file_settings",
    "load_options_file",
    "render_marker",
    "resolve_path",
]
