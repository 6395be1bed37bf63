"""Result and diagnostic value types shared by the engine and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Location:
    """Where a transformation was declared (config file and line)."""

    source: str
    line: Optional[int] = None  # 1-based

    def __str__(self) -> str:
        if self.line is None:
            return self.source
        return f"{self.source}:{self.line}"


@dataclass
class Event:
    """A structured diagnostic produced while applying a transformation."""

    kind: str  # "changed", "noop"
    message: str
    path: Optional[str] = None


@dataclass
class VisitResult:
    """Counters accumulated by one tree walk."""

    files_visited: int = 0
    files_changed: int = 0
    changed_paths: list[Path] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    @property
    def noop(self) -> bool:
        return self.files_changed == 0

    def record(self, path: Path, changed: bool) -> None:
        self.files_visited += 1
        if changed:
            self.files_changed += 1
            self.changed_paths.append(path)
            self.events.append(Event(kind="changed", message=f"Rewrote {path}", path=str(path)))


@dataclass
class ApplyResult:
    """Outcome of applying one transformation to a working tree."""

    identity: str
    visit: Optional[VisitResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def noop(self) -> bool:
        return self.visit is not None and self.visit.noop
