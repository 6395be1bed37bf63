"""YAML loader for transformation descriptors.

Example file::

    transformations:
      - before: "foo${x}bar"
        after: "bar${x}foo"
        regex_groups:
          x: "[A-Z]+"
        paths:
          include: ["**/*.java"]
          exclude: ["third_party/**"]
        first_only: false
        multiline: false
        repeated_groups: false

``paths`` may also be a plain list of include globs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from retemplate.errors import ConfigError
from retemplate.models import Location
from retemplate.paths import PathFilter
from retemplate.transformations import BuildResult, build_transformation

_ENTRY_KEYS = frozenset(
    {"type", "before", "after", "regex_groups", "paths", "first_only", "multiline", "repeated_groups"}
)
_REQUIRED_KEYS = ("before", "after")
_BOOL_KEYS = ("first_only", "multiline", "repeated_groups")
_PATH_KEYS = frozenset({"include", "exclude"})


@dataclass
class ConfigEntry:
    """One validated transformation descriptor and where it was declared."""

    fields: dict[str, Any]
    location: Location


def load_config(path: str | Path) -> list[ConfigEntry]:
    """Load and validate a config file.

    Unknown keys cause a ``ConfigError`` so typos are caught early.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        text = f.read()
    # one parse: the node tree gives entry lines, the constructed data the values
    loader = yaml.SafeLoader(text)
    try:
        node = loader.get_single_node()
        raw = loader.construct_document(node) if node is not None else None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", Location(str(path))) from e
    finally:
        loader.dispose()
    lines = _entry_lines(node)

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Config must be a mapping, got {type(raw).__name__}", Location(str(path))
        )
    unknown_sections = set(raw) - {"transformations"}
    if unknown_sections:
        raise ConfigError(
            f"Unknown top-level keys: {sorted(unknown_sections)}. Allowed: ['transformations']",
            Location(str(path)),
        )
    items = raw.get("transformations") or []
    if not isinstance(items, list):
        raise ConfigError("'transformations' must be a list", Location(str(path)))

    entries = []
    for i, item in enumerate(items):
        location = Location(str(path), lines[i] if i < len(lines) else None)
        entries.append(ConfigEntry(fields=parse_entry(item, location), location=location))
    return entries


def parse_entry(raw: Any, location: Location) -> dict[str, Any]:
    """Validate one descriptor and normalize ``paths`` into a ``PathFilter``."""
    if not isinstance(raw, dict):
        raise ConfigError(f"Transformation must be a mapping, got {type(raw).__name__}", location)
    unknown = set(raw) - _ENTRY_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown keys in transformation: {sorted(unknown)}. Allowed: {sorted(_ENTRY_KEYS)}",
            location,
        )
    for key in _REQUIRED_KEYS:
        if not isinstance(raw.get(key), str):
            raise ConfigError(f"'{key}' is required and must be a string", location)
    for key in _BOOL_KEYS:
        if not isinstance(raw.get(key, False), bool):
            raise ConfigError(f"'{key}' must be true or false", location)

    groups = raw.get("regex_groups") or {}
    if not isinstance(groups, dict):
        raise ConfigError(f"'regex_groups' must be a mapping, got {type(groups).__name__}", location)

    entry = dict(raw)
    entry["regex_groups"] = {str(k): v for k, v in groups.items()}
    entry["paths"] = _parse_paths(raw.get("paths"), location)
    return entry


def _parse_paths(raw: Any, location: Location) -> PathFilter:
    if raw is None:
        return PathFilter()
    if isinstance(raw, str):
        return PathFilter.of([raw])
    if isinstance(raw, list):
        return PathFilter.of([str(g) for g in raw])
    if not isinstance(raw, dict):
        raise ConfigError(f"'paths' must be a list or mapping, got {type(raw).__name__}", location)
    unknown = set(raw) - _PATH_KEYS
    if unknown:
        raise ConfigError(
            f"Unknown keys in 'paths': {sorted(unknown)}. Allowed: {sorted(_PATH_KEYS)}",
            location,
        )
    return PathFilter.of(
        include=[str(g) for g in raw.get("include") or ["**"]],
        exclude=[str(g) for g in raw.get("exclude") or []],
    )


def _entry_lines(node: yaml.Node | None) -> list[int]:
    """1-based line of every item under ``transformations``."""
    if not isinstance(node, yaml.MappingNode):
        return []
    for key, value in node.value:
        if key.value == "transformations" and isinstance(value, yaml.SequenceNode):
            return [item.start_mark.line + 1 for item in value.value]
    return []


def load_transformations(path: str | Path) -> list[BuildResult]:
    """Load a config file and build every transformation in it."""
    return [build_transformation(e.fields, e.location) for e in load_config(path)]


def dump_entry(transformation) -> dict[str, Any]:
    """Render a ``Replace`` back into its descriptor form."""
    spec = transformation.spec
    entry: dict[str, Any] = {
        "before": spec.before.template,
        "after": spec.after.template,
    }
    if spec.registry:
        entry["regex_groups"] = spec.registry.sources()
    paths = transformation.paths
    if paths != PathFilter():
        entry["paths"] = {"include": list(paths.include), "exclude": list(paths.exclude)}
    for key in _BOOL_KEYS:
        if getattr(spec, key):
            entry[key] = True
    return entry
