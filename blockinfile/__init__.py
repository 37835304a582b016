"""Maintain a marker-delimited block of text inside a file."""

from .models import BlockConfig, FileSettings, State, UpdateOutcome
from .resolver import BlockResolver, resolve

__version__ = "0.1.10"

__all__ = [
    "BlockConfig",
    "BlockResolver",
    "FileSettings",
    "State",
    "UpdateOutcome",
    "__version__",
    "resolve",
]
