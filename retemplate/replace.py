"""ReplaceSpec: a reversible before/after template pair.

Example::

    spec = ReplaceSpec.create(
        before="foo${x}bar",
        after="bar${x}foo",
        regex_groups={"x": "[A-Z]+"},
    )
    spec.replacer.replace("fooABCDbar")  # -> "barABCDfoo"
    spec.reverse().replacer.replace("barABCDfoo")  # -> "fooABCDbar"
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import cached_property
from typing import Mapping, Optional

from retemplate.errors import ConfigError, NonReversibleError
from retemplate.models import Location
from retemplate.patterns import PatternRegistry
from retemplate.replacer import CompiledReplacer, compile_replacer
from retemplate.tokens import TemplateTokens, tokenize


@dataclass(frozen=True)
class ReplaceSpec:
    before: TemplateTokens
    after: TemplateTokens
    registry: PatternRegistry
    first_only: bool = False
    multiline: bool = False
    repeated_groups: bool = False

    @classmethod
    def create(
        cls,
        before: str,
        after: str,
        regex_groups: Mapping[str, str] | None = None,
        first_only: bool = False,
        multiline: bool = False,
        repeated_groups: bool = False,
        location: Optional[Location] = None,
    ) -> ReplaceSpec:
        """Validate and build a spec. Raises a ``ConfigError`` subclass."""
        registry = PatternRegistry.compile(regex_groups or {}, location)
        before_tokens = tokenize(before, registry, repeated_groups, location)
        # after is only checked against the registry when it becomes the
        # before side of a reversed spec, or when the replacer is compiled.
        after_tokens = tokenize(after, None, repeated_groups, location)
        before_tokens.validate_unused(registry)
        return cls(
            before=before_tokens,
            after=after_tokens,
            registry=registry,
            first_only=first_only,
            multiline=multiline,
            repeated_groups=repeated_groups,
        )

    @property
    def location(self) -> Optional[Location]:
        return self.before.location

    @cached_property
    def replacer(self) -> CompiledReplacer:
        return compile_replacer(
            self.before, self.after, self.registry, self.first_only, self.multiline
        )

    def reverse(self) -> ReplaceSpec:
        """Swap before and after. Raises ``NonReversibleError``."""
        try:
            self.after.validate_known(self.registry)
            self.after.validate_unused(self.registry)
        except ConfigError as e:
            raise NonReversibleError(e.message, e.location, cause=e) from e
        return replace(self, before=self.after, after=self.before)

    def describe(self) -> str:
        # before is almost always unique, so it identifies the transformation
        return f"Replace {self.before}"

    def __str__(self) -> str:
        return (
            f"Replace(before={self.before.template!r}, after={self.after.template!r}, "
            f"regex_groups={self.registry.sources()!r}, first_only={self.first_only}, "
            f"multiline={self.multiline})"
        )
