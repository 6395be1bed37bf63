"""Glob path filter and the lazy file walker used by the tree applier."""

from __future__ import annotations

import errno
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence

PathPredicate = Callable[[str], bool]


def glob_to_regex(glob: str) -> str:
    """Translate a glob over ``/``-separated paths into a regex source.

    ``*`` and ``?`` never cross a ``/``; ``**`` matches any number of
    segments, including none when written as ``**/``.
    """
    out: list[str] = []
    i = 0
    n = len(glob)
    while i < n:
        if glob.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif glob.startswith("**", i):
            out.append(".*")
            i += 2
        elif glob[i] == "*":
            out.append("[^/]*")
            i += 1
        elif glob[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(glob[i]))
            i += 1
    return "".join(out)


@lru_cache(maxsize=None)
def _compile_globs(globs: tuple[str, ...]) -> re.Pattern:
    return re.compile("|".join(f"(?:{glob_to_regex(g)})" for g in globs) or "(?!)")


@dataclass(frozen=True)
class PathFilter:
    """Include/exclude globs over paths relative to the walked root."""

    include: tuple[str, ...] = ("**",)
    exclude: tuple[str, ...] = ()

    @classmethod
    def of(cls, include: Sequence[str] = ("**",), exclude: Sequence[str] = ()) -> PathFilter:
        return cls(include=tuple(include), exclude=tuple(exclude))

    def accepts(self, relative_path: str) -> bool:
        path = relative_path.replace(os.sep, "/")
        if not _compile_globs(self.include).fullmatch(path):
            return False
        return not self.exclude or not _compile_globs(self.exclude).fullmatch(path)

    __call__ = accepts

    def __str__(self) -> str:
        if not self.exclude:
            return f"glob({list(self.include)})"
        return f"glob(include={list(self.include)}, exclude={list(self.exclude)})"


def _raise(error: OSError) -> None:
    raise error


def iter_files(root: Path | str, accepts: Optional[PathPredicate] = None) -> Iterator[Path]:
    """Yield regular files under ``root`` whose relative path is accepted.

    Walks lazily, in sorted order per directory. Symlinked directories are
    not followed. A missing root or a directory that cannot be listed
    raises ``OSError`` instead of being skipped.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(root))
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if accepts is None or accepts(relative):
                yield path
