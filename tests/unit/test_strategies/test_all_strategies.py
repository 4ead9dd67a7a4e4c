"""Tests for the conversion strategies.

Tests cover:
- text_document.py: TextToDocumentStrategy
- image_document.py: ImageToDocumentStrategy and its fallback chain
- document_image.py: DocumentToImageStrategy
- text_image.py: TextToImageStrategy, layout_lines
- document_text.py: DocumentToTextStrategy
- media.py: MediaTranscodeStrategy
- base.py: BaseStrategy

Document, image and PDF inputs are built with reportlab and Pillow.
ffmpeg is replaced by FakeTranscoder from conftest.
"""
from __future__ import annotations

import io
import time
from pathlib import Path
from typing import ClassVar

import pytest

from conftest import (
    FakeTranscoder,
    UnavailableRasterizer,
    make_gif,
    make_pdf,
    make_png,
    make_request,
)

from anyconvert.exceptions import (
    ConversionFailedError,
    ConversionTimeoutError,
    EnvironmentUnsupportedError,
    TranscodeError,
    UnsupportedConversionError,
)
from anyconvert.models.config import ConversionConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.providers import ProviderSet, Rasterizer
from anyconvert.strategies.base import BaseStrategy
from anyconvert.strategies.document_image import DocumentToImageStrategy
from anyconvert.strategies.document_text import DocumentToTextStrategy
from anyconvert.strategies.image_document import ImageToDocumentStrategy
from anyconvert.strategies.media import MediaTranscodeStrategy
from anyconvert.strategies.text_document import TextToDocumentStrategy
from anyconvert.strategies.text_image import (
    MAX_LINE_LENGTH,
    MAX_LINES,
    TextToImageStrategy,
    layout_lines,
)


# ===========================================================================
# BaseStrategy
# ===========================================================================


class _StubStrategy(BaseStrategy):
    name: ClassVar[str] = "stub"
    supported_outputs: ClassVar[tuple[str, ...]] = ("stub",)

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        return self._success(request, b"stub", "application/x-stub", note="hi")


class TestBaseStrategy:

    def test_success_uses_request_output_filename(self, config: ConversionConfig):
        outcome = _StubStrategy(config=config).convert(make_request("a.txt", "stub"))
        assert outcome.success is True
        assert outcome.filename == "a.stub"
        assert outcome.strategy == "stub"
        assert outcome.extra == {"note": "hi"}

    def test_provider_errors_wraps_untyped_exceptions(self):
        with pytest.raises(ConversionFailedError, match="render failed: boom"):
            with BaseStrategy.provider_errors("render failed"):
                raise RuntimeError("boom")

    def test_provider_errors_keeps_typed_errors(self):
        with pytest.raises(EnvironmentUnsupportedError):
            with BaseStrategy.provider_errors("render failed"):
                raise EnvironmentUnsupportedError("missing")

    def test_decode_text_replaces_invalid_utf8_and_strips_bom(self):
        assert BaseStrategy._decode_text(b"\xef\xbb\xbfhi \xff") == "hi �"

    def test_default_providers_follow_config(self):
        strategy = _StubStrategy(config=ConversionConfig(ffmpeg_binary="/opt/ffmpeg"))
        assert strategy.providers.transcoder.binary == "/opt/ffmpeg"

    def test_remaining_time_without_deadline_is_configured_timeout(self):
        strategy = _StubStrategy(config=ConversionConfig(timeout_seconds=42))
        assert strategy.remaining_time() == 42

    def test_remaining_time_counts_down_to_deadline(self, config):
        strategy = _StubStrategy(config=config)
        strategy.deadline = time.monotonic() + 10
        assert 0 < strategy.remaining_time() <= 10

    def test_remaining_time_after_deadline_raises(self, config):
        strategy = _StubStrategy(config=config)
        strategy.deadline = time.monotonic() - 1
        with pytest.raises(ConversionTimeoutError):
            strategy.remaining_time()


# ===========================================================================
# TextToDocumentStrategy
# ===========================================================================


class TestTextToDocument:

    def test_txt_to_pdf(self, config, providers):
        request = make_request("report.txt", "pdf", b"line one\nline two\nline three")
        outcome = TextToDocumentStrategy(providers, config).convert(request)

        assert outcome.success
        assert outcome.data.startswith(b"%PDF")
        assert outcome.content_type == "application/pdf"
        assert outcome.filename == "report.pdf"

    def test_pdf_contains_the_text(self, config, providers):
        import pdfplumber

        request = make_request("notes.md", "pdf", b"# Title\nSome body text")
        outcome = TextToDocumentStrategy(providers, config).convert(request)

        with pdfplumber.open(io.BytesIO(outcome.data)) as pdf:
            text = pdf.pages[0].extract_text()
        assert "# Title" in text
        assert "Some body text" in text

    def test_long_text_wraps_and_spans_pages(self, config, providers):
        from pypdf import PdfReader

        text = "\n".join(f"line {i} " + "word " * 40 for i in range(80))
        request = make_request("long.txt", "pdf", text.encode())
        outcome = TextToDocumentStrategy(providers, config).convert(request)

        assert len(PdfReader(io.BytesIO(outcome.data)).pages) > 1

    def test_md_to_docx_single_paragraph(self, config, providers):
        from docx import Document

        request = make_request("notes.md", "docx", b"first\nsecond")
        outcome = TextToDocumentStrategy(providers, config).convert(request)

        assert outcome.content_type == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        document = Document(io.BytesIO(outcome.data))
        paragraphs = [p for p in document.paragraphs if p.text]
        assert len(paragraphs) == 1
        assert len(paragraphs[0].runs) == 1
        assert "first" in paragraphs[0].text and "second" in paragraphs[0].text

    def test_rejects_non_text_input(self, config, providers):
        with pytest.raises(UnsupportedConversionError, match="Cannot convert PNG to DOCX"):
            TextToDocumentStrategy(providers, config).convert(make_request("a.png", "docx"))


# ===========================================================================
# ImageToDocumentStrategy
# ===========================================================================


class TestImageToDocument:

    def test_primary_direct_render_success(self, config):
        transcoder = FakeTranscoder(behaviour={"pdf": b"%PDF-direct"})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        outcome = strategy.convert(make_request("photo.png", "pdf", make_png()))

        assert outcome.data == b"%PDF-direct"
        assert outcome.extra["method"] == "direct_render"
        assert len(transcoder.calls) == 1

    def test_png_falls_back_to_embedding_original(self, config):
        transcoder = FakeTranscoder(behaviour={"pdf": TranscodeError("no pdf muxer")})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        outcome = strategy.convert(make_request("photo.png", "pdf", make_png()))

        assert outcome.success
        assert outcome.data.startswith(b"%PDF")
        assert outcome.extra["method"] == "embed_original"
        # Embedding the original needs no second transcode
        assert len(transcoder.calls) == 1

    def test_jpeg_falls_back_to_embedding_original(self, config):
        from PIL import Image

        buffer = io.BytesIO()
        Image.new("RGB", (50, 80), "blue").save(buffer, format="JPEG")
        transcoder = FakeTranscoder(behaviour={"pdf": TranscodeError("no pdf muxer")})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        outcome = strategy.convert(make_request("photo.jpeg", "pdf", buffer.getvalue()))

        assert outcome.extra["method"] == "embed_original"

    def test_webp_falls_back_to_first_frame_png(self, config):
        transcoder = FakeTranscoder(behaviour={
            "pdf": TranscodeError("no pdf muxer"),
            "png": make_png,
        })
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        outcome = strategy.convert(make_request("anim.webp", "pdf", b"RIFFxxxxWEBP"))

        assert outcome.data.startswith(b"%PDF")
        assert outcome.extra["method"] == "embed_first_frame"
        _, still_path, profile = transcoder.calls[1]
        assert still_path.name == "temp.png"
        assert profile.name == "first_frame"

    def test_fallback_chain_is_explicit(self, config, providers):
        strategy = ImageToDocumentStrategy(providers, config)
        assert [s.name for s in strategy.fallback_chain("png")] == [
            "direct_render", "embed_original",
        ]
        assert [s.name for s in strategy.fallback_chain("tiff")] == [
            "direct_render", "embed_first_frame",
        ]

    def test_all_steps_failing_reports_conversion_failed(self, config):
        transcoder = FakeTranscoder(behaviour={
            "pdf": TranscodeError("no pdf muxer"),
            "png": TranscodeError("FFmpeg failed: corrupt bmp"),
        })
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        with pytest.raises(ConversionFailedError, match="corrupt bmp") as exc:
            strategy.convert(make_request("broken.bmp", "pdf", b"BM"))
        assert "BMP" in exc.value.message

    def test_corrupt_png_fails_after_fallback(self, config):
        transcoder = FakeTranscoder(behaviour={"pdf": TranscodeError("no pdf muxer")})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        with pytest.raises(ConversionFailedError, match="embed_original"):
            strategy.convert(make_request("bad.png", "pdf", b"not a png"))

    def test_timeout_is_not_retried(self, config):
        transcoder = FakeTranscoder(behaviour={"pdf": ConversionTimeoutError("too slow")})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        with pytest.raises(ConversionTimeoutError):
            strategy.convert(make_request("photo.png", "pdf", make_png()))

    def test_expired_deadline_stops_the_chain(self, config, workspace_root):
        transcoder = FakeTranscoder()
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)
        strategy.deadline = time.monotonic() - 1

        with pytest.raises(ConversionTimeoutError):
            strategy.convert(make_request("photo.bmp", "pdf", b"BM"))

        assert transcoder.calls == []
        assert list(workspace_root.iterdir()) == []

    def test_workspace_released_after_fallback(self, config, workspace_root):
        transcoder = FakeTranscoder(behaviour={"pdf": TranscodeError("no pdf muxer")})
        strategy = ImageToDocumentStrategy(ProviderSet(transcoder=transcoder), config)

        strategy.convert(make_request("photo.png", "pdf", make_png()))

        assert list(workspace_root.iterdir()) == []

    def test_rejects_non_image_input(self, config, providers):
        with pytest.raises(UnsupportedConversionError):
            ImageToDocumentStrategy(providers, config).convert(make_request("a.mp4", "pdf"))


# ===========================================================================
# DocumentToImageStrategy
# ===========================================================================


class TestDocumentToImage:

    @pytest.mark.parametrize("fmt,magic,content_type", [
        ("png", b"\x89PNG", "image/png"),
        ("jpg", b"\xff\xd8", "image/jpeg"),
    ])
    def test_renders_first_page(self, config, providers, fmt, magic, content_type):
        request = make_request("scan.pdf", fmt, make_pdf())
        outcome = DocumentToImageStrategy(providers, config).convert(request)

        assert outcome.data.startswith(magic)
        assert outcome.content_type == content_type
        assert outcome.filename == f"scan.{fmt}"

    def test_renders_at_double_scale(self, config, providers):
        from PIL import Image

        request = make_request("scan.pdf", "png", make_pdf())
        outcome = DocumentToImageStrategy(providers, config).convert(request)

        width, height = Image.open(io.BytesIO(outcome.data)).size
        # A4 is 595 x 842 points
        assert 1180 <= width <= 1200
        assert 1675 <= height <= 1695

    def test_missing_rasterizer_is_environment_unsupported(self, config):
        providers = ProviderSet(transcoder=FakeTranscoder(), rasterizer=UnavailableRasterizer())
        with pytest.raises(EnvironmentUnsupportedError, match="PDF to PNG"):
            DocumentToImageStrategy(providers, config).convert(
                make_request("scan.pdf", "png", make_pdf())
            )

    def test_corrupt_pdf_is_conversion_failed(self, config, providers):
        with pytest.raises(ConversionFailedError, match="PDF to JPG conversion failed"):
            DocumentToImageStrategy(providers, config).convert(
                make_request("scan.pdf", "jpg", b"%PDF-garbage")
            )


# ===========================================================================
# TextToImageStrategy
# ===========================================================================


class _RecordingRasterizer(Rasterizer):
    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] | None = None

    def render_text_lines(self, lines, canvas_size=(800, 600)):
        self.lines = list(lines)
        return super().render_text_lines(lines, canvas_size)


class TestTextToImage:

    def test_layout_keeps_first_twenty_lines(self):
        text = "\n".join(f"line {i}" for i in range(30))
        lines = layout_lines(text)
        assert len(lines) == MAX_LINES
        assert lines[-1] == "line 19"

    def test_layout_truncates_long_lines(self):
        lines = layout_lines("x" * 200 + "\nshort")
        assert lines[0] == "x" * MAX_LINE_LENGTH
        assert lines[1] == "short"

    def test_layout_strips_carriage_returns(self):
        assert layout_lines("a\r\nb\r\n") == ["a", "b", ""]

    def test_renders_only_laid_out_lines(self, config):
        rasterizer = _RecordingRasterizer()
        providers = ProviderSet(transcoder=FakeTranscoder(), rasterizer=rasterizer)
        text = "\n".join("y" * 120 for _ in range(25))

        outcome = TextToImageStrategy(providers, config).convert(
            make_request("notes.txt", "png", text.encode())
        )

        assert outcome.success
        assert len(rasterizer.lines) == 20
        assert all(len(line) == 80 for line in rasterizer.lines)
        assert outcome.extra["lines_rendered"] == 20

    @pytest.mark.parametrize("fmt,pil_format", [
        ("png", "PNG"),
        ("jpg", "JPEG"),
        ("jpeg", "JPEG"),
        ("webp", "WEBP"),
    ])
    def test_encodes_requested_format(self, config, providers, fmt, pil_format):
        from PIL import Image

        outcome = TextToImageStrategy(providers, config).convert(
            make_request("notes.md", fmt, b"# hello\nworld")
        )

        image = Image.open(io.BytesIO(outcome.data))
        assert image.format == pil_format
        assert image.size == (800, 600)

    def test_missing_rasterizer_is_environment_unsupported(self, config):
        providers = ProviderSet(transcoder=FakeTranscoder(), rasterizer=UnavailableRasterizer())
        with pytest.raises(EnvironmentUnsupportedError, match="Text rendering"):
            TextToImageStrategy(providers, config).convert(make_request("a.txt", "png"))


# ===========================================================================
# DocumentToTextStrategy
# ===========================================================================


class TestDocumentToText:

    def test_markdown_passthrough(self, config, providers):
        outcome = DocumentToTextStrategy(providers, config).convert(
            make_request("README.md", "txt", "# Título\n".encode())
        )
        assert outcome.data.decode("utf-8") == "# Título\n"
        assert outcome.content_type == "text/plain"
        assert outcome.filename == "README.txt"

    def test_pdf_text_extraction(self, config, providers):
        outcome = DocumentToTextStrategy(providers, config).convert(
            make_request("paper.pdf", "txt", make_pdf("Extract me please"))
        )
        assert "Extract me please" in outcome.data.decode("utf-8")
        assert outcome.extra["page_count"] == 1

    def test_corrupt_pdf_is_conversion_failed(self, config, providers):
        with pytest.raises(ConversionFailedError, match="PDF to TXT"):
            DocumentToTextStrategy(providers, config).convert(
                make_request("paper.pdf", "txt", b"not a pdf")
            )

    def test_rejects_other_inputs(self, config, providers):
        with pytest.raises(UnsupportedConversionError, match="Cannot convert DOCX to TXT"):
            DocumentToTextStrategy(providers, config).convert(make_request("a.docx", "txt"))


# ===========================================================================
# MediaTranscodeStrategy
# ===========================================================================


class TestMediaTranscode:

    def test_mkv_to_gif_uses_fastest_preset(self, config, fake_transcoder, providers):
        fake_transcoder.default_output = b"GIF89a..."
        outcome = MediaTranscodeStrategy(providers, config).convert(
            make_request("clip.mkv", "gif", b"\x1aE\xdf\xa3")
        )

        assert outcome.content_type == "image/gif"
        assert outcome.filename == "clip.gif"
        assert outcome.extra["profile"] == "fastest"
        input_path, output_path, profile = fake_transcoder.calls[0]
        assert input_path.name == "input.mkv"
        assert output_path.name == "output.gif"
        assert profile.output_options == {"preset": "ultrafast"}

    def test_gif_to_png_extracts_first_frame(self, config, fake_transcoder, providers):
        MediaTranscodeStrategy(providers, config).convert(
            make_request("anim.gif", "png", make_gif())
        )
        assert fake_transcoder.calls[0][2].name == "first_frame"

    def test_unknown_output_extension_gets_generic_content_type(self, config, providers):
        outcome = MediaTranscodeStrategy(providers, config).convert(
            make_request("clip.mp4", "mkv")
        )
        assert outcome.content_type == "application/octet-stream"

    def test_transcode_failure_surfaces_diagnostic(self, config):
        transcoder = FakeTranscoder(behaviour={"mp3": TranscodeError("FFmpeg failed: Invalid data")})
        strategy = MediaTranscodeStrategy(ProviderSet(transcoder=transcoder), config)

        with pytest.raises(ConversionFailedError) as exc:
            strategy.convert(make_request("song.wav", "mp3"))
        assert exc.value.message == (
            "Incompatible or invalid conversion from WAV to MP3: FFmpeg failed: Invalid data"
        )

    def test_missing_ffmpeg_is_environment_unsupported(self, config):
        class NoFFmpeg(FakeTranscoder):
            def _probe(self):
                return ["ffmpeg (executable)"]

            def transcode(self, *args, **kwargs):
                self.ensure_available()

        transcoder = NoFFmpeg()
        transcoder._missing = None
        strategy = MediaTranscodeStrategy(ProviderSet(transcoder=transcoder), config)

        with pytest.raises(EnvironmentUnsupportedError):
            strategy.convert(make_request("song.wav", "mp3"))

    @pytest.mark.parametrize("behaviour", [
        {},
        {"mp3": TranscodeError("FFmpeg failed")},
        {"mp3": RuntimeError("unexpected")},
    ])
    def test_workspace_removed_on_every_path(self, config, workspace_root, behaviour):
        transcoder = FakeTranscoder(behaviour=behaviour)
        strategy = MediaTranscodeStrategy(ProviderSet(transcoder=transcoder), config)

        try:
            strategy.convert(make_request("song.wav", "mp3"))
        except ConversionFailedError:
            pass

        assert transcoder.calls
        workspace = transcoder.calls[0][0].parent
        assert not workspace.exists()
        assert list(workspace_root.iterdir()) == []

    def test_source_bytes_written_to_workspace(self, config):
        seen: dict[str, bytes] = {}

        class Capturing(FakeTranscoder):
            def transcode(self, input_path, output_path, profile=None, timeout=None):
                seen["input"] = Path(input_path).read_bytes()
                seen["timeout"] = timeout
                return super().transcode(input_path, output_path, profile, timeout)

        strategy = MediaTranscodeStrategy(ProviderSet(transcoder=Capturing()), config)
        strategy.convert(make_request("song.wav", "ogg", b"RIFF-audio"))

        assert seen["input"] == b"RIFF-audio"
        assert seen["timeout"] == config.timeout_seconds
