"""Plain text and Markdown to a raster preview image."""
from __future__ import annotations

from typing import ClassVar

from anyconvert.core.classifier import (
    TEXT_EXTENSIONS,
    TEXT_RASTER_OUTPUTS,
    StrategyName,
)
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import (
    EnvironmentUnsupportedError,
    UnsupportedConversionError,
)
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.strategies.base import BaseStrategy
from anyconvert.utils.mimetypes import content_type_for

MAX_LINES = 20
MAX_LINE_LENGTH = 80


def layout_lines(text: str) -> list[str]:
    """The lines that end up on the canvas: at most 20, each at most 80 chars."""
    lines = text.split("\n")[:MAX_LINES]
    return [line.rstrip("\r")[:MAX_LINE_LENGTH] for line in lines]


@StrategyRegistry.register
class TextToImageStrategy(BaseStrategy):
    """Render the start of a text file onto a fixed-size canvas."""

    name: ClassVar[str] = StrategyName.TEXT_TO_IMAGE.value
    supported_outputs: ClassVar[tuple[str, ...]] = tuple(sorted(TEXT_RASTER_OUTPUTS))

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension
        ext_out = request.output_extension

        if ext_in not in TEXT_EXTENSIONS or ext_out not in TEXT_RASTER_OUTPUTS:
            raise UnsupportedConversionError(
                f"Cannot convert {ext_in.upper()} to {ext_out.upper()}."
            )

        rasterizer = self.providers.rasterizer
        if not rasterizer.can_render_text():
            raise EnvironmentUnsupportedError(
                f"Cannot convert {ext_in.upper()} to {ext_out.upper()}: Text "
                "rendering requires native dependencies not available in this "
                "environment."
            )

        lines = layout_lines(self._decode_text(request.source_bytes))
        with self.provider_errors(
            f"Cannot convert {ext_in.upper()} to {ext_out.upper()}"
        ):
            image = rasterizer.render_text_lines(lines)
            data = rasterizer.encode(image, ext_out)

        return self._success(
            request, data, content_type_for(ext_out), lines_rendered=len(lines),
        )
