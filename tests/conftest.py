"""Shared fixtures: sample files built with the real libraries, fake providers."""
from __future__ import annotations

import io
import time
from pathlib import Path
from typing import Callable

import pytest

from anyconvert.exceptions import ConversionTimeoutError
from anyconvert.models.config import ConversionConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.providers import FFmpegTranscoder, OptionProfile, ProviderSet, Rasterizer


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------

def make_png(size: tuple[int, int] = (40, 30), color: str = "red") -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_gif(frames: int = 2) -> bytes:
    from PIL import Image

    images = [Image.new("RGB", (20, 20), c) for c in ("red", "blue", "green")[:frames]]
    buffer = io.BytesIO()
    images[0].save(buffer, format="GIF", save_all=True, append_images=images[1:])
    return buffer.getvalue()


def make_pdf(text: str = "Hello PDF") -> bytes:
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.drawString(72, 720, text)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_request(filename: str, target: str, data: bytes = b"data") -> ConversionRequest:
    return ConversionRequest(source_bytes=data, source_filename=filename, target_format=target)


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------

class FakeTranscoder(FFmpegTranscoder):
    """Transcoder that never runs ffmpeg.

    ``behaviour`` maps an output suffix (``"pdf"``, ``"png"``...) to either
    bytes to write, an exception to raise, or a callable producing bytes.
    Suffixes without an entry get ``default_output`` written.
    """

    def __init__(
        self,
        behaviour: dict[str, bytes | Exception | Callable[[], bytes]] | None = None,
        default_output: bytes = b"converted",
        delay: float = 0.0,
    ) -> None:
        super().__init__()
        self.behaviour = behaviour or {}
        self.default_output = default_output
        self.delay = delay
        self.calls: list[tuple[Path, Path, OptionProfile]] = []
        self._missing = []

    def transcode(self, input_path, output_path, profile=OptionProfile(), timeout=None):
        self.calls.append((input_path, output_path, profile))
        assert input_path.exists(), "input must be written before transcoding"
        if self.delay:
            if timeout is not None and self.delay > timeout:
                # Same contract as the real transcoder: killed at the timeout
                time.sleep(timeout)
                raise ConversionTimeoutError(f"Transcoding exceeded the {timeout:g}s time limit")
            time.sleep(self.delay)
        action = self.behaviour.get(output_path.suffix.lstrip("."), self.default_output)
        if isinstance(action, Exception):
            raise action
        if callable(action):
            action = action()
        output_path.write_bytes(action)
        return output_path


class UnavailableRasterizer(Rasterizer):
    """Rasterizer reporting that pypdfium2 and Pillow are missing."""

    def _probe(self) -> list[str]:
        return ["PIL", "pypdfium2"]


@pytest.fixture
def config(tmp_path: Path) -> ConversionConfig:
    """Config whose workspaces live under the test's tmp dir."""
    return ConversionConfig(temp_dir=tmp_path / "workspaces", timeout_seconds=30)


@pytest.fixture
def workspace_root(config: ConversionConfig) -> Path:
    return config.temp_dir


@pytest.fixture
def fake_transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def providers(fake_transcoder: FakeTranscoder) -> ProviderSet:
    """Real authoring/rasterizer/extractor with a fake transcoder."""
    return ProviderSet(transcoder=fake_transcoder)

