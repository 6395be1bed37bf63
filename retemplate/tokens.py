"""Template tokenizer: splits ``foo${x}bar`` into literal and placeholder tokens.

Syntax:

- ``${name}`` is a placeholder; ``name`` must be an identifier.
- ``$$`` is a literal ``$``.
- Any other ``$`` is an error, so typos like ``$x`` are caught early.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from retemplate.errors import (
    DuplicatePlaceholderError,
    TemplateSyntaxError,
    UnknownPlaceholderError,
    UnusedInterpolationError,
)
from retemplate.models import Location
from retemplate.patterns import NAME_RE


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Placeholder:
    name: str
    index: int  # position among the template's placeholders


Token = Union[Literal, Placeholder]


@dataclass(frozen=True)
class TemplateTokens:
    """A tokenized template plus the location it was declared at."""

    template: str
    tokens: tuple[Token, ...]
    location: Optional[Location] = None

    def __str__(self) -> str:
        return self.template

    @property
    def placeholders(self) -> list[Placeholder]:
        return [t for t in self.tokens if isinstance(t, Placeholder)]

    @property
    def names(self) -> list[str]:
        """Placeholder names in order of first appearance."""
        seen: dict[str, None] = {}
        for p in self.placeholders:
            seen.setdefault(p.name, None)
        return list(seen)

    def validate_known(self, known_names: Iterable[str]) -> None:
        known = set(known_names)
        unknown = [name for name in self.names if name not in known]
        if unknown:
            raise UnknownPlaceholderError(unknown, self.template, self.location)

    def validate_unused(self, defined_names: Iterable[str]) -> None:
        """Fail if a defined interpolation is never referenced by this template."""
        used = set(self.names)
        unused = [name for name in defined_names if name not in used]
        if unused:
            raise UnusedInterpolationError(unused, self.template, self.location)


def tokenize(
    template: str,
    known_names: Optional[Iterable[str]] = None,
    repeated_groups: bool = False,
    location: Optional[Location] = None,
) -> TemplateTokens:
    """Parse ``template`` into tokens.

    ``known_names=None`` skips the unknown-placeholder check; the after
    template is only checked once it is compiled or reversed.
    """
    tokens: list[Token] = []
    literal: list[str] = []
    seen: set[str] = set()
    count = 0
    i = 0
    n = len(template)

    while i < n:
        ch = template[i]
        i += 1
        if ch != "$":
            literal.append(ch)
            continue
        if i >= n or template[i] not in "${":
            raise TemplateSyntaxError(
                f"Expect $ or {{ after every $ in string: {template!r}", location
            )
        if template[i] == "$":
            literal.append("$")
            i += 1
            continue

        end = template.find("}", i + 1)
        if end == -1:
            raise TemplateSyntaxError(
                f"Unterminated '${{'. Expected '}}': {template!r}", location
            )
        name = template[i + 1:end]
        if not NAME_RE.fullmatch(name):
            raise TemplateSyntaxError(
                f"Invalid interpolation name {name!r} in {template!r}", location
            )
        if name in seen and not repeated_groups:
            raise DuplicatePlaceholderError(name, template, location)
        seen.add(name)

        if literal:
            tokens.append(Literal("".join(literal)))
            literal = []
        tokens.append(Placeholder(name=name, index=count))
        count += 1
        i = end + 1

    if literal:
        tokens.append(Literal("".join(literal)))

    result = TemplateTokens(template=template, tokens=tuple(tokens), location=location)
    if known_names is not None:
        result.validate_known(known_names)
    return result
