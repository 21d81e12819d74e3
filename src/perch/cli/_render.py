"""``perch render`` — one-shot static rendering of a page."""

import argparse
import logging
import sys

from perch.errors import NotFound, WriteFailure
from perch.static import StaticRenderer


def render_page(args: argparse.Namespace) -> None:
    """Render ``args.input`` to ``args.output``; exit 1 on failure."""
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        written = StaticRenderer.render_to_file(args.input, args.output, encoding=args.encoding)
    except (NotFound, WriteFailure) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(f"Rendered {args.input} -> {args.output} ({written} bytes)")
