"""Error taxonomy for building and applying replace transformations."""

from __future__ import annotations

from typing import Optional

from retemplate.models import Location


class RetemplateError(Exception):
    """Base class for every error raised by retemplate."""


class ConfigError(RetemplateError):
    """A transformation could not be built from its configuration.

    Raised before any file is touched. ``location`` points at the
    declaring configuration entry when it is known.
    """

    def __init__(self, message: str, location: Optional[Location] = None):
        self.message = message
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class InvalidPatternError(ConfigError):
    def __init__(self, name: str, source: str, cause: Exception | None = None,
                 location: Optional[Location] = None):
        self.name = name
        self.source = source
        self.cause = cause
        message = f"'regex_groups' includes invalid regex for key {name}: {source}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message, location)


class TemplateSyntaxError(ConfigError):
    pass


class UnknownPlaceholderError(ConfigError):
    def __init__(self, names: list[str], template: str,
                 location: Optional[Location] = None):
        self.names = list(names)
        super().__init__(
            f"Following interpolations are used but not in regex_groups: "
            f"{self.names} (template: {template!r})",
            location,
        )

    @property
    def name(self) -> str:
        return self.names[0]


class DuplicatePlaceholderError(ConfigError):
    def __init__(self, name: str, template: str,
                 location: Optional[Location] = None):
        self.name = name
        super().__init__(
            f"Regex group is used in template multiple times: {name} "
            f"(template: {template!r}). Set repeated_groups to allow it",
            location,
        )


class UnusedInterpolationError(ConfigError):
    def __init__(self, names: list[str], template: str,
                 location: Optional[Location] = None):
        self.names = list(names)
        super().__init__(
            f"Following interpolations are defined but not used: "
            f"{self.names} (template: {template!r})",
            location,
        )

    @property
    def name(self) -> str:
        return self.names[0]


class NonReversibleError(RetemplateError):
    """The transformation cannot be inverted; wraps the validation failure."""

    def __init__(self, message: str, location: Optional[Location] = None,
                 cause: Exception | None = None):
        self.message = message
        self.location = location
        self.cause = cause
        super().__init__(f"{location}: {message}" if location else message)


class ApplyError(OSError):
    """Reading or writing a file failed; aborts the rest of the walk."""

    def __init__(self, path, cause: Exception, action: str = "rewrite"):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause}")


class NoopError(RetemplateError):
    """A transformation did not change any file and no-ops are not ignored."""
