"""CLI entry point: python -m retemplate apply|check|reverse CONFIG ..."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from retemplate.applier import noop_message
from retemplate.errors import ConfigError, NoopError
from retemplate.models import ApplyResult


def _load_or_exit(config_path: str) -> list:
    from retemplate.config import load_transformations

    try:
        built = load_transformations(config_path)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    failed = [b.error for b in built if not b.ok]
    for error in failed:
        print(f"Error: {error}", file=sys.stderr)
    if failed:
        sys.exit(1)
    return [b.transformation for b in built]


def report_noop(result: ApplyResult, ignore_noop: bool) -> None:
    """Warn about a transformation that changed nothing, or fail the run."""
    message = noop_message(result.identity)
    if not ignore_noop:
        raise NoopError(message)
    print(f"Warning: {message}", file=sys.stderr)


def cmd_apply(args: argparse.Namespace) -> None:
    from retemplate.transformations import apply_all, reverse_all

    transformations = _load_or_exit(args.config)
    if args.reverse:
        transformations, errors = reverse_all(transformations)
        if errors:
            for error in errors:
                print(f"Error: cannot reverse: {error}", file=sys.stderr)
            sys.exit(1)

    root = Path(args.root)
    if not root.is_dir():
        print(f"Error: {root} is not a directory", file=sys.stderr)
        sys.exit(1)

    for result in apply_all(transformations, root):
        if not result.ok:
            print(f"Error: {result.identity}: {result.error}", file=sys.stderr)
            sys.exit(1)
        visit = result.visit
        print(f"{result.identity}: {visit.files_changed} of {visit.files_visited} files changed")
        if args.verbose:
            for path in visit.changed_paths:
                print(f"  {path.relative_to(root)}")
        if result.noop:
            try:
                report_noop(result, args.ignore_noop)
            except NoopError as e:
                print(f"Error: {e}", file=sys.stderr)
                print("Pass --ignore-noop to continue past transformations that change nothing.",
                      file=sys.stderr)
                sys.exit(1)


def cmd_check(args: argparse.Namespace) -> None:
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    from rich.text import Text

    transformations = _load_or_exit(args.config)

    table = Table(title=f"Transformations in {args.config}")
    table.add_column("#", justify="right")
    table.add_column("IDENTITY")
    table.add_column("AFTER")
    table.add_column("FLAGS")
    table.add_column("PATHS")
    table.add_column("REVERSIBLE")

    for i, t in enumerate(transformations, 1):
        spec = t.spec
        flags = [name for name in ("first_only", "multiline", "repeated_groups") if getattr(spec, name)]
        reversed_ = t.reverse()
        if reversed_.ok:
            reversible = "[bold green]yes[/bold green]"
        else:
            reversible = f"[red]no[/red] [dim]{escape(reversed_.error.message)}[/dim]"
        table.add_row(
            str(i),
            Text(t.identity()),
            Text(spec.after.template),
            ", ".join(flags) or "[dim]-[/dim]",
            Text(str(t.paths)),
            reversible,
        )

    Console().print(table)


def cmd_reverse(args: argparse.Namespace) -> None:
    import yaml

    from retemplate.config import dump_entry
    from retemplate.transformations import reverse_all

    transformations = _load_or_exit(args.config)
    reversed_items, errors = reverse_all(transformations)
    if errors:
        for error in errors:
            print(f"Error: cannot reverse: {error}", file=sys.stderr)
        sys.exit(1)

    doc = {"transformations": [dump_entry(t) for t in reversed_items]}
    print(yaml.safe_dump(doc, sort_keys=False, default_flow_style=False), end="")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="retemplate",
        description="Reversible template-driven search and replace",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # -- apply --
    p_apply = subparsers.add_parser("apply", help="Rewrite files under a directory")
    p_apply.add_argument("config", help="Path to YAML file with transformations")
    p_apply.add_argument("--root", default=".", help="Directory to rewrite (default: .)")
    p_apply.add_argument("--reverse", action="store_true", default=False,
                         help="Apply the inverse transformations, in reverse order")
    p_apply.add_argument("--ignore-noop", action="store_true", default=False,
                         help="Warn instead of failing when a transformation changes nothing")
    p_apply.set_defaults(func=cmd_apply)

    # -- check --
    p_check = subparsers.add_parser("check", help="Validate a config and show reversibility")
    p_check.add_argument("config", help="Path to YAML file with transformations")
    p_check.set_defaults(func=cmd_check)

    # -- reverse --
    p_reverse = subparsers.add_parser("reverse", help="Print the inverse config as YAML")
    p_reverse.add_argument("config", help="Path to YAML file with transformations")
    p_reverse.set_defaults(func=cmd_reverse)

    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    args.func(args)


if __name__ == "__main__":
    main()
