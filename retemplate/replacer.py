"""Compile a before/after template pair into a regex-backed replacer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from retemplate.errors import ConfigError, UnknownPlaceholderError
from retemplate.patterns import PatternRegistry
from retemplate.tokens import Literal, Placeholder, TemplateTokens

GROUP_PREFIX = "_ph"

# after-side recipe: literal text or the logical key to splice in
RecipePart = Union[Literal, Placeholder]


def build_pattern(before: TemplateTokens, registry: PatternRegistry) -> tuple[str, dict[str, tuple[str, ...]]]:
    """Return the composite regex source and the name -> group names table.

    Each placeholder occurrence gets its own named group, so a repeated name
    is matched independently at every position.
    """
    parts: list[str] = []
    groups: dict[str, list[str]] = {}
    for token in before.tokens:
        if isinstance(token, Literal):
            parts.append(re.escape(token.text))
            continue
        group = f"{GROUP_PREFIX}{token.index}"
        groups.setdefault(token.name, []).append(group)
        parts.append(f"(?P<{group}>(?:{registry[token.name].source}))")
    return "".join(parts), {name: tuple(g) for name, g in groups.items()}


@dataclass(frozen=True)
class CompiledReplacer:
    """Matcher plus substitution recipe; immutable and shared across files."""

    pattern: re.Pattern
    groups: dict[str, tuple[str, ...]]
    recipe: tuple[RecipePart, ...]
    first_only: bool = False
    multiline: bool = False

    def _expand(self, match: re.Match) -> str:
        out: list[str] = []
        for part in self.recipe:
            if isinstance(part, Literal):
                out.append(part.text)
            else:
                # first occurrence wins when a name is captured more than once
                out.append(match.group(self.groups[part.name][0]))
        return "".join(out)

    def replace_count(self, text: str) -> tuple[str, int]:
        """Rewrite ``text`` and return it with the number of replacements."""
        limit = 1 if self.first_only else 0
        if self.multiline:
            return self.pattern.subn(self._expand, text, count=limit)

        lines = text.split("\n")
        total = 0
        for i, line in enumerate(lines):
            # match without a CRLF line's \r so a trailing $ still anchors
            eol = "\r" if line.endswith("\r") else ""
            body, n = self.pattern.subn(self._expand, line[: len(line) - len(eol)], count=limit)
            lines[i] = body + eol
            total += n
            if self.first_only and n:
                break
        return "\n".join(lines), total

    def replace(self, text: str) -> str:
        return self.replace_count(text)[0]


def compile_replacer(
    before: TemplateTokens,
    after: TemplateTokens,
    registry: PatternRegistry,
    first_only: bool = False,
    multiline: bool = False,
) -> CompiledReplacer:
    """Build the replacer; fails if ``after`` uses a name ``before`` never captures."""
    before.validate_known(registry)
    source, groups = build_pattern(before, registry)

    missing = [name for name in after.names if name not in groups]
    if missing:
        raise UnknownPlaceholderError(missing, after.template, after.location)

    flags = re.MULTILINE | re.DOTALL if multiline else 0
    try:
        pattern = re.compile(source, flags)
    except re.error as e:
        # fragments are valid alone but not in composition, e.g. a global (?i)
        raise ConfigError(
            f"Cannot compile {before.template!r} into a regex: {e}", before.location
        ) from e
    return CompiledReplacer(
        pattern=pattern,
        groups=groups,
        recipe=after.tokens,
        first_only=first_only,
        multiline=multiline,
    )
