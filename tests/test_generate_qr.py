"""Tests for the generate_qr command line tool."""

from pathlib import Path

import pytest
import requests

import generate_qr
from conftest import open_png


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200):
        self.content = content
        self.status = status

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


@pytest.fixture
def settings(tmp_path: Path) -> str:
    return str(tmp_path / "missing-settings.json")


class TestMain:
    def test_plain(self, tmp_path: Path, settings: str) -> None:
        out = tmp_path / "out" / "code.png"
        code = generate_qr.main(["--content", "hello", "--size", "150", "--output", str(out), "--settings", settings])
        assert code == 0
        assert open_png(out.read_bytes()).size == (150, 150)

    def test_local_watermark(self, tmp_path: Path, settings: str, red_overlay: bytes) -> None:
        logo = tmp_path / "logo.png"
        logo.write_bytes(red_overlay)
        out = tmp_path / "code.png"
        code = generate_qr.main([
            "--content", "hello", "--size", "256", "--watermark", str(logo),
            "--output", str(out), "--settings", settings,
        ])
        assert code == 0
        img = open_png(out.read_bytes()).convert("RGBA")
        assert img.getpixel((128, 128)) == (255, 0, 0, 255)

    def test_watermark_url(
        self, tmp_path: Path, settings: str, red_overlay: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen = {}

        def fake_get(url, timeout):
            seen["url"] = url
            seen["timeout"] = timeout
            return FakeResponse(red_overlay)

        monkeypatch.setattr(generate_qr.requests, "get", fake_get)
        out = tmp_path / "code.png"
        code = generate_qr.main([
            "--content", "hello", "--size", "256", "--watermark-url", "https://example.com/logo.png",
            "--output", str(out), "--settings", settings,
        ])
        assert code == 0
        assert seen == {"url": "https://example.com/logo.png", "timeout": 15}
        assert open_png(out.read_bytes()).convert("RGBA").getpixel((128, 128)) == (255, 0, 0, 255)

    def test_watermark_download_failure(
        self, tmp_path: Path, settings: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(generate_qr.requests, "get", lambda url, timeout: FakeResponse(b"", 404))
        out = tmp_path / "code.png"
        code = generate_qr.main([
            "--content", "hello", "--size", "256", "--watermark-url", "https://example.com/x.png",
            "--output", str(out), "--settings", settings,
        ])
        assert code == 1
        assert not out.exists()

    def test_missing_watermark_file(self, tmp_path: Path, settings: str) -> None:
        code = generate_qr.main([
            "--content", "hello", "--size", "256", "--watermark", str(tmp_path / "nope.png"),
            "--output", str(tmp_path / "code.png"), "--settings", settings,
        ])
        assert code == 1

    def test_jpeg_watermark_fails(self, tmp_path: Path, settings: str, jpeg_overlay: bytes) -> None:
        logo = tmp_path / "logo.jpg"
        logo.write_bytes(jpeg_overlay)
        out = tmp_path / "code.png"
        code = generate_qr.main([
            "--content", "hello", "--size", "256", "--watermark", str(logo),
            "--output", str(out), "--settings", settings,
        ])
        assert code == 1
        assert not out.exists()

    def test_non_positive_size_is_usage_error(self, settings: str) -> None:
        with pytest.raises(SystemExit) as exc:
            generate_qr.main(["--content", "hello", "--size", "0", "--settings", settings])
        assert exc.value.code == 2

    def test_watermark_options_are_exclusive(self, settings: str) -> None:
        with pytest.raises(SystemExit):
            generate_qr.main([
                "--content", "hello", "--size", "100",
                "--watermark", "a.png", "--watermark-url", "https://example.com/a.png",
            ])
