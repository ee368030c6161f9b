"""Kiln CLI — kiln dev / kiln build / kiln init.

Entry point for the ``kiln`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the kiln CLI."""
    parser = argparse.ArgumentParser(
        prog="kiln",
        description="Static-site generator with incremental rebuilds and live reload.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # kiln dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Build, watch and serve with live reload",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    dev_parser.add_argument("--host", default=None, help="Bind address (default 127.0.0.1)")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port (default 3000)")

    # kiln build
    build_parser = subparsers.add_parser(
        "build",
        help="Compile documents to static HTML",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    build_parser.add_argument(
        "documents", nargs="*", help="Documents to compile (default: all)",
    )
    build_parser.add_argument("--output", default=None, help="Output directory (default dist)")
    build_parser.add_argument(
        "--clean", action="store_true", default=None,
        help="Remove the output directory before building",
    )

    # kiln init
    init_parser = subparsers.add_parser(
        "init",
        help="Create a sample site structure",
    )
    init_parser.add_argument("root", nargs="?", default=".", help="Site root directory")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from kiln import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from kiln._errors import KilnError
    from kiln.app import build, dev, init

    try:
        if args.command == "dev":
            dev(root=args.root, host=args.host, port=args.port)
        elif args.command == "build":
            result = build(
                root=args.root,
                documents=args.documents or None,
                output=args.output,
                clean=args.clean,
            )
            if not result.ok:
                sys.exit(1)
        elif args.command == "init":
            init(root=args.root)
    except KilnError as exc:
        print(f"kiln: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
