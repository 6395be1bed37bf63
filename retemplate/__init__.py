"""Reversible template-driven search and replace over a file tree."""

from retemplate.applier import apply_replace
from retemplate.errors import (
    ConfigError,
    DuplicatePlaceholderError,
    InvalidPatternError,
    NonReversibleError,
    UnknownPlaceholderError,
    UnusedInterpolationError,
)
from retemplate.paths import PathFilter
from retemplate.replace import ReplaceSpec

__all__ = [
    "ConfigError",
    "DuplicatePlaceholderError",
    "InvalidPatternError",
    "NonReversibleError",
    "PathFilter",
    "ReplaceSpec",
    "UnknownPlaceholderError",
    "UnusedInterpolationError",
    "apply_replace",
]
