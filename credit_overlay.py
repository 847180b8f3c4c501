#!/usr/bin/env python3
"""Overlay a credit label onto a local or remote image from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv

from compositor import composite_label
from image_source import RemoteImageFetcher
from overlay_engine import FontMetricsMeasurer, compose_label, render_svg
from overlay_types import StyleConfig

logger = logging.getLogger(__name__)


def _parse_css(raw: str | None) -> dict[str, Any] | None:
    """Decode the ``--css`` JSON object."""

    if not raw:
        return None
    try:
        css = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid --css JSON: {exc}") from exc
    if not isinstance(css, dict):
        raise SystemExit("--css must be a JSON object.")
    return css


async def _load_image(source: str, fetcher: RemoteImageFetcher) -> bytes:
    if source.startswith(("http://", "https://")):
        return await fetcher.fetch(source)
    path = Path(source)
    if not path.exists():
        raise SystemExit(f"Image '{source}' does not exist.")
    return path.read_bytes()


async def render_overlay(
    image: str | None,
    text: str,
    css: dict[str, Any] | None,
    output_path: str,
    svg_only: bool,
) -> str:
    """Render the label and write either the SVG or the composited JPEG."""

    document = await compose_label(
        text,
        StyleConfig.from_mapping(css),
        measurer=FontMetricsMeasurer(),
    )
    logger.debug("Label box: %s", document.background)
    if svg_only:
        Path(output_path).write_bytes(render_svg(document))
        return f"Wrote label SVG to {output_path}"

    if not image:
        raise SystemExit("An image path or URL is required unless --svg is used.")
    base = await _load_image(image, RemoteImageFetcher.from_env())
    jpeg = composite_label(base, document)
    Path(output_path).write_bytes(jpeg)
    return f"Wrote {output_path}"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Overlay a styled credit label onto an image."
    )
    parser.add_argument(
        "text",
        help="Label text; supports **bold**, __bold__, *italic* and _italic_.",
    )
    parser.add_argument(
        "image",
        nargs="?",
        help="Path or http(s) URL of the base image.",
    )
    parser.add_argument(
        "--css",
        help="JSON object of style options, e.g. '{\"fontSize\": \"28\"}'.",
    )
    parser.add_argument(
        "--output",
        help="Output file (default: credit_overlay.jpg, or credit_overlay.svg with --svg).",
    )
    parser.add_argument(
        "--svg",
        action="store_true",
        help="Write the label overlay as SVG instead of compositing.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output.",
    )

    args = parser.parse_args(argv)
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_path = args.output or (
        "credit_overlay.svg" if args.svg else "credit_overlay.jpg"
    )
    message = asyncio.run(
        render_overlay(
            image=args.image,
            text=args.text,
            css=_parse_css(args.css),
            output_path=output_path,
            svg_only=args.svg,
        )
    )
    print(message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
