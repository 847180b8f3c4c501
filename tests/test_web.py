import unittest
from typing import Any
from unittest.mock import Mock, patch

from flask import Flask
from flask.testing import FlaskClient
from werkzeug.wrappers import Response

from api_keys import ApiKeyTable
from credit_overlay_web import create_app, is_valid_url
from image_source import ImageFetcher, ImageFetchError
from overlay_engine.measure import MeasurementError, TextMeasurer
from overlay_engine.svg import render_svg
from overlay_types import Dimensions, FontDescriptor


class _FakeFetcher(ImageFetcher):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.urls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return b"base-image"


class _FakeMeasurer(TextMeasurer):
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.texts: list[str] = []

    async def measure(self, text: str, font: FontDescriptor) -> Dimensions:
        if self.error is not None:
            raise self.error
        self.texts.append(text)
        return Dimensions(120, 24)


class WebAppTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fetcher = _FakeFetcher()
        self.measurer = _FakeMeasurer()
        self.app: Flask = create_app(
            ApiKeyTable({"newsroom": "good-key"}),
            self.fetcher,
            self.measurer,
        )
        self.app.config["TESTING"] = True
        self.client: FlaskClient = self.app.test_client()

    def _post(self, **overrides: Any) -> Response:
        body: dict[str, Any] = {
            "api_key": "good-key",
            "url": "https://img.example/photo.jpg",
            "text": "Photo: **Jane**",
        }
        body.update(overrides)
        return self.client.post("/credit-overlay", json=body)

    def test_docs_page(self) -> None:
        response: Response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.mimetype.startswith("text/plain"))
        body = response.get_data(as_text=True)
        self.assertIn("POST /credit-overlay", body)
        self.assertIn("12px 25px 12px 15px", body)
        self.assertIn("max 254 characters", body)
        self.assertIn("1000x563", body)

    def test_unknown_api_key(self) -> None:
        response = self._post(api_key="bad-key")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json(), {"error": "Unauthorized"})

    def test_missing_api_key_checked_before_fields(self) -> None:
        response = self.client.post("/credit-overlay", json={})
        self.assertEqual(response.status_code, 403)

    def test_missing_text(self) -> None:
        response = self._post(text="")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "Missing url or text"})

    def test_invalid_url(self) -> None:
        response = self._post(url="not a url")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "Invalid URL format"})

    def test_text_too_long(self) -> None:
        response = self._post(text="x" * 255)
        self.assertEqual(response.status_code, 400)
        self.assertIn("254", response.get_json()["error"])

    @patch("credit_overlay_web.composite_label")
    def test_success_returns_jpeg(self, mock_composite: Mock) -> None:
        mock_composite.return_value = b"\xff\xd8jpeg"
        with self.assertLogs("credit_overlay_web", level="INFO") as logs:
            response = self._post(css={"fontSize": "28", "padding": "20px"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/jpeg")
        self.assertEqual(response.get_data(), b"\xff\xd8jpeg")
        self.assertEqual(self.fetcher.urls, ["https://img.example/photo.jpg"])
        self.assertEqual(self.measurer.texts, ["Photo: Jane"])
        self.assertTrue(any("caller=newsroom" in line for line in logs.output))

        base, document = mock_composite.call_args.args
        self.assertEqual(base, b"base-image")
        self.assertEqual((document.width, document.height), (1000, 563))
        svg = render_svg(document)
        self.assertIn(b'font-size="28px"', svg)
        # 120 + 20 + 20 wide, anchored bottom-right.
        self.assertIn(b'x="840"', svg)

    @patch("credit_overlay_web.composite_label")
    def test_non_object_css_is_ignored(self, mock_composite: Mock) -> None:
        mock_composite.return_value = b"jpeg"
        response = self._post(css="bold please")
        self.assertEqual(response.status_code, 200)

    def test_fetch_failure_is_processing_error(self) -> None:
        self.fetcher.error = ImageFetchError("Image download failed (404)")
        with self.assertLogs("credit_overlay_web", level="ERROR"):
            response = self._post()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.get_json(),
            {"error": "Processing failed", "details": "Image download failed (404)"},
        )

    def test_measurement_failure_is_processing_error(self) -> None:
        self.measurer.error = MeasurementError("font missing")
        with self.assertLogs("credit_overlay_web", level="ERROR"):
            response = self._post()
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()["details"], "font missing")

    def test_unknown_path(self) -> None:
        response = self.client.get("/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"error": "Path not found"})

    def test_wrong_method_reads_as_unknown_path(self) -> None:
        response = self.client.get("/credit-overlay")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"error": "Path not found"})


class IsValidUrlTests(unittest.TestCase):
    def test_valid(self) -> None:
        self.assertTrue(is_valid_url("https://example.com/image.jpg"))
        self.assertTrue(is_valid_url("http://localhost:8080/x.png"))

    def test_invalid(self) -> None:
        self.assertFalse(is_valid_url("example.com/image.jpg"))
        self.assertFalse(is_valid_url("https://"))
        self.assertFalse(is_valid_url("http://[::1"))


if __name__ == "__main__":
    unittest.main()
