"""
forge-render entrypoint - render a file or URL through a Forge server.
"""

import argparse
import sys
from pathlib import Path

from forgesdk.client import ForgeClient
from forgesdk.config import get_settings
from forgesdk.shared.errors import ForgeError
from forgesdk.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)

FORMATS = ["pdf", "png", "jpeg", "bmp", "tga", "qoi", "svg"]


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="forge-render",
        description="Render HTML or URLs to documents with a Forge server.",
    )
    parser.add_argument(
        "--server",
        default=settings.base_url,
        help=f"Server base URL (default: {settings.base_url})",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=settings.timeout_ms,
        help="HTTP timeout in milliseconds",
    )
    parser.add_argument("--log-level", default=settings.log_level)

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Check whether the server is up")

    render = sub.add_parser("render", help="Render an HTML file or a URL")
    source = render.add_mutually_exclusive_group(required=True)
    source.add_argument("input", nargs="?", type=Path, help="HTML file to render")
    source.add_argument("--url", help="Page URL to render instead of a file")
    render.add_argument("-o", "--output", type=Path, required=True)
    render.add_argument("-f", "--format", choices=FORMATS)
    render.add_argument("--paper")
    render.add_argument("--orientation", choices=["portrait", "landscape"])
    render.add_argument("--margins")
    render.add_argument("--density", type=int)
    render.add_argument("--title", help="PDF document title")

    return parser


def _render(client: ForgeClient, args: argparse.Namespace) -> int:
    if args.url:
        builder = client.render_url(args.url)
    else:
        builder = client.render_html(args.input.read_text(encoding="utf-8"))

    if args.format:
        builder.format(args.format)
    elif args.output.suffix.lstrip(".").lower() in FORMATS:
        builder.format(args.output.suffix.lstrip(".").lower())
    if args.paper:
        builder.paper(args.paper)
    if args.orientation:
        builder.orientation(args.orientation)
    if args.margins:
        builder.margins(args.margins)
    if args.density:
        builder.density(args.density)
    if args.title:
        builder.pdf_title(args.title)

    data = builder.send()
    args.output.write_bytes(data)
    print(f"Wrote {len(data)} bytes to {args.output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the forge-render command."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    with ForgeClient(args.server, timeout=args.timeout) as client:
        if args.command == "health":
            healthy = client.health()
            print("healthy" if healthy else "unhealthy")
            return 0 if healthy else 1

        try:
            return _render(client, args)
        except ForgeError as e:
            logger.debug(f"Render failed: {e.to_dict()}")
            print(f"error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
