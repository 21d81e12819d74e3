"""Perch CLI — render pages to static files.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — compose page directories into HTML documents.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch render -----------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render a page to a static file")
    render_parser.add_argument(
        "input",
        nargs="?",
        default="page.py",
        help="Page entry logic (default: page.py)",
    )
    render_parser.add_argument(
        "-o",
        "--output",
        default="index.html",
        help="Output file (default: index.html)",
    )
    render_parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Output encoding (default: utf-8)",
    )
    render_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resource resolution and rendering details",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "render":
        from perch.cli._render import render_page

        render_page(args)
