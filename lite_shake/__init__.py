"""lite-shake: cross-module tree shaking for ES modules."""

from .errors import (
    GrammarUnavailableError,
    ModuleParseError,
    ModuleReadError,
    OutputCollisionError,
    OutputWriteError,
    ShakeError,
)
from .settings import Settings
from .shaker import TreeShaker, shake

__version__ = "0.1.0"

__all__ = [
    "GrammarUnavailableError",
    "ModuleParseError",
    "ModuleReadError",
    "OutputCollisionError",
    "OutputWriteError",
    "ShakeError",
    "Settings",
    "TreeShaker",
    "shake",
]
