"""HTTP service that overlays credit labels onto remote images."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import MethodNotAllowed, NotFound
from werkzeug.wrappers import Response

from api_keys import ApiKeyTable
from compositor import composite_label
from image_source import ImageFetcher, RemoteImageFetcher
from overlay_engine import FontMetricsMeasurer, TextMeasurer, compose_label
from overlay_engine import style
from overlay_types import CANVAS_HEIGHT, CANVAS_WIDTH, StyleConfig

logger = logging.getLogger(__name__)

__all__ = ["run_web_app", "create_app", "create_app_from_env"]

ENDPOINT = "/credit-overlay"
MAX_TEXT_LENGTH = 254

CSS_OPTIONS = (
    ("fontSize", "Font size in pixels", style.DEFAULT_FONT_SIZE),
    ("fontWeight", "Font weight", style.DEFAULT_FONT_WEIGHT),
    ("fontFamily", "Font family", style.DEFAULT_FONT_FAMILY),
    ("color", "Text color", style.DEFAULT_COLOR),
    ("backgroundColor", "Background color", style.DEFAULT_BACKGROUND_COLOR),
    ("opacity", "Background opacity (0-1)", style.DEFAULT_OPACITY),
    ("padding", "Padding in CSS format: 1, 2, 3, or 4 values", style.DEFAULT_PADDING),
    ("borderRadius", "Border radius in pixels", style.DEFAULT_BORDER_RADIUS),
    ("textShadow", "Text shadow (x-offset y-offset blur color)", style.DEFAULT_TEXT_SHADOW),
    ("boxShadow", "Box shadow (x-offset y-offset blur color)", style.DEFAULT_BOX_SHADOW),
)


def is_valid_url(value: str) -> bool:
    """Return True for absolute URLs with a scheme and host."""

    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def _error(message: str, status: int, details: str | None = None) -> Response:
    payload: dict[str, str] = {"error": message}
    if details is not None:
        payload["details"] = details
    response = jsonify(payload)
    response.status_code = status
    return response


def create_app(
    api_keys: ApiKeyTable,
    image_fetcher: ImageFetcher | None = None,
    measurer: TextMeasurer | None = None,
) -> Flask:
    """Create the Flask app wired to the provided collaborators."""
    template_dir = Path(__file__).resolve().parent / "templates"
    app = Flask(__name__, template_folder=str(template_dir))

    fetcher = image_fetcher or RemoteImageFetcher()
    text_measurer = measurer or FontMetricsMeasurer()

    if not api_keys:
        logger.warning("No API keys configured; every request will be rejected.")

    @app.route("/", methods=["GET"])
    def docs() -> Response:  # pyright: ignore[reportUnusedFunction]
        body = render_template(
            "docs.txt",
            endpoint=ENDPOINT,
            max_text_length=MAX_TEXT_LENGTH,
            css_options=[
                {"name": name, "description": description, "default": default}
                for name, description, default in CSS_OPTIONS
            ],
            width=CANVAS_WIDTH,
            height=CANVAS_HEIGHT,
        )
        return Response(body, mimetype="text/plain")

    @app.route(ENDPOINT, methods=["POST"])
    async def credit_overlay() -> Response:  # pyright: ignore[reportUnusedFunction]
        payload: Any = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}

        caller = api_keys.caller_for(payload.get("api_key"))
        if caller is None:
            return _error("Unauthorized", 403)

        url = payload.get("url")
        text = payload.get("text")
        if not isinstance(url, str) or not url or not isinstance(text, str) or not text:
            return _error("Missing url or text", 400)
        if not is_valid_url(url):
            return _error("Invalid URL format", 400)
        if len(text) > MAX_TEXT_LENGTH:
            return _error(
                f"Text length exceeds maximum limit of {MAX_TEXT_LENGTH} characters",
                400,
            )

        css = payload.get("css")
        now = datetime.now().astimezone()
        logger.info(
            "[credit-overlay] Request received: date=%s iso=%s caller=%s "
            "url=%s text=%s css=%s",
            now.strftime("%Y-%m-%d %H:%M:%S"),
            now.isoformat(),
            caller,
            url,
            text,
            json.dumps(css),
        )

        try:
            image_bytes = await fetcher.fetch(url)
            document = await compose_label(
                text,
                StyleConfig.from_mapping(css),
                measurer=text_measurer,
            )
            output = await asyncio.to_thread(composite_label, image_bytes, document)
        except Exception as exc:
            logger.exception("Processing failed for caller %s", caller)
            return _error("Processing failed", 500, details=str(exc))

        return Response(output, mimetype="image/jpeg")

    @app.errorhandler(NotFound)
    @app.errorhandler(MethodNotAllowed)
    def not_found(_exc: Exception) -> Response:  # pyright: ignore[reportUnusedFunction]
        return _error("Path not found", 404)

    return app


def create_app_from_env() -> Flask:
    """Create the Flask app using API_KEY and CREDIT_OVERLAY_* environment variables."""
    load_dotenv()
    return create_app(
        ApiKeyTable.from_env_value(os.getenv("API_KEY")),
        RemoteImageFetcher.from_env(),
    )


def run_web_app(app: Flask, host: str, port: int) -> None:
    """Serve ``app`` with the Flask development server."""
    use_reloader_env = os.getenv("USE_RELOADER")
    use_reloader = (
        str(use_reloader_env).lower() in {"1", "true", "yes", "on"}
        if use_reloader_env is not None
        else False
    )
    logger.info("Image service running on %s:%d", host, port)
    app.run(host=host, port=port, debug=False, use_reloader=use_reloader)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the overlay service."""
    parser = argparse.ArgumentParser(
        description="Credit overlay image service"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host/IP to bind (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port to listen on (default: 3000).",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    run_web_app(create_app_from_env(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
