"""Transformation capability and the registry of transformation kinds.

A transformation exposes ``apply``, ``reverse`` and ``identity``. Failures
come back as result values (``error`` set) rather than exceptions, so a
caller can run or reverse a whole list and decide what to surface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from retemplate.applier import apply_replace
from retemplate.errors import ConfigError, NonReversibleError
from retemplate.models import ApplyResult, Location
from retemplate.paths import PathFilter
from retemplate.replace import ReplaceSpec

logger = logging.getLogger(__name__)


class Transformation(Protocol):
    def apply(self, root: Path | str) -> ApplyResult: ...

    def reverse(self) -> ReverseResult: ...

    def identity(self) -> str: ...


@dataclass
class ReverseResult:
    transformation: Optional[Transformation] = None
    error: Optional[NonReversibleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildResult:
    transformation: Optional[Transformation] = None
    error: Optional[ConfigError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Replace:
    """A ReplaceSpec bound to the paths it applies to."""

    spec: ReplaceSpec
    paths: PathFilter = field(default_factory=PathFilter)
    encoding: str = "utf-8"

    def apply(self, root: Path | str) -> ApplyResult:
        try:
            visit = apply_replace(self.spec, root, self.paths, self.encoding)
        except (ConfigError, OSError) as e:
            logger.debug("%s failed: %s", self.identity(), e)
            return ApplyResult(identity=self.identity(), error=e)
        return ApplyResult(identity=self.identity(), visit=visit)

    def reverse(self) -> ReverseResult:
        try:
            spec = self.spec.reverse()
        except NonReversibleError as e:
            return ReverseResult(error=e)
        return ReverseResult(transformation=Replace(spec, self.paths, self.encoding))

    def identity(self) -> str:
        return self.spec.describe()

    def __str__(self) -> str:
        return f"{self.spec} path={self.paths}"


def apply_all(transformations: list[Transformation], root: Path | str) -> list[ApplyResult]:
    """Apply transformations in order, stopping at the first that errors."""
    results: list[ApplyResult] = []
    for t in transformations:
        result = t.apply(root)
        results.append(result)
        if not result.ok:
            break
    return results


def reverse_all(transformations: list[Transformation]) -> tuple[list[Transformation], list[NonReversibleError]]:
    """Reverse every transformation and the order they run in.

    Returns the reversed list and every reversal error; the list is only
    usable when the error list is empty.
    """
    reversed_items: list[Transformation] = []
    errors: list[NonReversibleError] = []
    for t in reversed(transformations):
        result = t.reverse()
        if result.ok:
            reversed_items.append(result.transformation)
        else:
            errors.append(result.error)
    return reversed_items, errors


# -- kinds registry --

Factory = Callable[[dict[str, Any], Optional[Location]], Transformation]

_KINDS: dict[str, Factory] = {}


def register(kind: str, factory: Factory) -> None:
    """Register a factory that builds a transformation from a config entry."""
    _KINDS[kind] = factory


def get_transformation_kind(kind: str) -> Factory:
    factory = _KINDS.get(kind)
    if not factory:
        raise ValueError(f"Unknown transformation type: {kind!r}. Available: {list_kinds()}")
    return factory


def list_kinds() -> list[str]:
    return list(_KINDS.keys())


def _replace_from_entry(entry: dict[str, Any], location: Optional[Location]) -> Replace:
    spec = ReplaceSpec.create(
        before=entry["before"],
        after=entry["after"],
        regex_groups=entry.get("regex_groups") or {},
        first_only=entry.get("first_only", False),
        multiline=entry.get("multiline", False),
        repeated_groups=entry.get("repeated_groups", False),
        location=location,
    )
    # compile now so an after-side name that before never captures fails
    # the build instead of a later entry in the middle of a run
    spec.replacer
    return Replace(spec=spec, paths=entry.get("paths") or PathFilter())


register("replace", _replace_from_entry)


def build_transformation(
    entry: dict[str, Any], location: Optional[Location] = None
) -> BuildResult:
    """Build one transformation from a validated config entry."""
    kind = entry.get("type", "replace")
    try:
        factory = get_transformation_kind(kind)
    except ValueError as e:
        return BuildResult(error=ConfigError(str(e), location))
    try:
        return BuildResult(transformation=factory(entry, location))
    except ConfigError as e:
        return BuildResult(error=e)
