"""Tree applier: run a ReplaceSpec over every selected file under a root."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from retemplate.errors import ApplyError
from retemplate.models import Event, VisitResult
from retemplate.paths import PathPredicate, iter_files
from retemplate.replace import ReplaceSpec
from retemplate.replacer import CompiledReplacer

logger = logging.getLogger(__name__)


def noop_message(identity: str) -> str:
    return f"Transformation '{identity}' was a no-op. It didn't affect the workdir."


def rewrite_file(replacer: CompiledReplacer, path: Path, encoding: str = "utf-8") -> bool:
    """Rewrite one file in place. Returns True if its content changed."""
    try:
        # newline="" keeps \r\n intact; surrogateescape round-trips undecodable bytes
        with open(path, encoding=encoding, errors="surrogateescape", newline="") as f:
            original = f.read()
        content, count = replacer.replace_count(original)
        if content == original:
            return False
        with open(path, "w", encoding=encoding, errors="surrogateescape", newline="") as f:
            f.write(content)
    except OSError as e:
        raise ApplyError(path, e) from e
    logger.debug("Rewrote %s (%d replacement(s))", path, count)
    return True


def apply_replace(
    spec: ReplaceSpec,
    root: Path | str,
    path_filter: Optional[PathPredicate] = None,
    encoding: str = "utf-8",
) -> VisitResult:
    """Apply ``spec`` to every regular file under ``root`` accepted by ``path_filter``.

    The replacer is compiled before the walk starts, so configuration errors
    never leave the tree half-rewritten. An I/O failure, including a root
    that is not a directory, aborts the walk as ``ApplyError``; files
    already rewritten stay rewritten.
    """
    replacer = spec.replacer
    result = VisitResult()
    try:
        for path in iter_files(root, path_filter):
            result.record(path, rewrite_file(replacer, path, encoding))
    except ApplyError:
        raise
    except OSError as e:
        raise ApplyError(e.filename or root, e, action="walk") from e

    logger.info(
        "Applied %s to %d files. %d changed.", spec, result.files_visited, result.files_changed
    )
    if result.noop:
        result.events.append(Event(kind="noop", message=noop_message(spec.describe())))
    return result
