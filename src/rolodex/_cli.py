"""Rolodex CLI — rolodex search / rolodex watch / rolodex demo.

Entry point for the ``rolodex`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _add_live_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config-root", default=".", help="Directory holding rolodex.yaml")
    parser.add_argument(
        "--debounce-ms", type=int, default=None, help="Quiet window before a query settles",
    )
    parser.add_argument(
        "--verbose", action="store_true", default=None, help="Print pipeline events to stderr",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the rolodex CLI."""
    parser = argparse.ArgumentParser(
        prog="rolodex",
        description="Live, debounced search over a contact list.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # rolodex search
    search_parser = subparsers.add_parser(
        "search",
        help="Filter a contacts file once and print the matches",
    )
    search_parser.add_argument("file", help="Contacts file (JSON, YAML or CSV)")
    search_parser.add_argument("query", nargs="?", default="", help="Search text")
    search_parser.add_argument("--config-root", default=".", help="Directory holding rolodex.yaml")

    # rolodex watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Live search: stdin lines are search text, file edits reload",
    )
    watch_parser.add_argument("file", nargs="?", default=None, help="Contacts file")
    _add_live_options(watch_parser)

    # rolodex demo
    demo_parser = subparsers.add_parser(
        "demo",
        help="Live search over the built-in sample contacts",
    )
    _add_live_options(demo_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from rolodex import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from rolodex.app import demo, search, watch

    if args.command == "search":
        code = search(args.file, args.query, root=args.config_root)
    elif args.command == "watch":
        code = watch(
            args.file, root=args.config_root,
            debounce_ms=args.debounce_ms, verbose=args.verbose,
        )
    else:
        code = demo(root=args.config_root, debounce_ms=args.debounce_ms, verbose=args.verbose)
    sys.exit(code)


if __name__ == "__main__":
    main()
