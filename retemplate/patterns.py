"""Pattern registry: placeholder name -> compiled regex fragment."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional

from retemplate.errors import InvalidPatternError
from retemplate.models import Location

NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class PlaceholderPattern:
    name: str
    pattern: re.Pattern

    @property
    def source(self) -> str:
        return self.pattern.pattern


class PatternRegistry(Mapping[str, PlaceholderPattern]):
    """Immutable mapping of every interpolation a template pair may use.

    Equality compares names and regex sources, so two registries built from
    the same ``regex_groups`` compare equal.
    """

    def __init__(self, patterns: Mapping[str, PlaceholderPattern] | None = None):
        self._patterns: dict[str, PlaceholderPattern] = dict(patterns or {})

    @classmethod
    def compile(
        cls,
        regex_groups: Mapping[str, str],
        location: Optional[Location] = None,
    ) -> PatternRegistry:
        """Compile every fragment; the first invalid one raises ``InvalidPatternError``."""
        patterns: dict[str, PlaceholderPattern] = {}
        for name, source in regex_groups.items():
            if not isinstance(name, str) or not NAME_RE.fullmatch(name):
                raise InvalidPatternError(
                    str(name), str(source),
                    ValueError("group names must be identifiers"), location,
                )
            if not isinstance(source, str):
                raise InvalidPatternError(
                    name, str(source),
                    TypeError(f"expected a string, got {type(source).__name__}"), location,
                )
            try:
                compiled = re.compile(source)
            except re.error as e:
                raise InvalidPatternError(name, source, e, location) from e
            patterns[name] = PlaceholderPattern(name=name, pattern=compiled)
        return cls(patterns)

    def __getitem__(self, name: str) -> PlaceholderPattern:
        return self._patterns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def sources(self) -> dict[str, str]:
        return {name: p.source for name, p in self._patterns.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PatternRegistry):
            return NotImplemented
        return self.sources() == other.sources()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.sources().items())))

    def __repr__(self) -> str:
        return f"PatternRegistry({self.sources()!r})"
