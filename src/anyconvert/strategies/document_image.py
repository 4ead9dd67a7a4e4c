"""First page of a PDF to JPG or PNG."""
from __future__ import annotations

from typing import ClassVar

from anyconvert.core.classifier import PDF_RASTER_OUTPUTS, StrategyName
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import (
    EnvironmentUnsupportedError,
    UnsupportedConversionError,
)
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.strategies.base import BaseStrategy
from anyconvert.utils.mimetypes import content_type_for

# Only the first page is rendered; multi-page output is not offered.
PAGE_INDEX = 0
RENDER_SCALE = 2.0


@StrategyRegistry.register
class DocumentToImageStrategy(BaseStrategy):
    """Rasterize page one of a PDF at twice its natural size."""

    name: ClassVar[str] = StrategyName.DOCUMENT_TO_IMAGE.value
    supported_outputs: ClassVar[tuple[str, ...]] = tuple(sorted(PDF_RASTER_OUTPUTS))

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension
        ext_out = request.output_extension

        if ext_in != "pdf" or ext_out not in PDF_RASTER_OUTPUTS:
            raise UnsupportedConversionError(
                f"Cannot convert {ext_in.upper()} to {ext_out.upper()}."
            )

        rasterizer = self.providers.rasterizer
        if not rasterizer.can_render_pdf():
            raise EnvironmentUnsupportedError(
                f"PDF to {ext_out.upper()} conversion requires native "
                "dependencies not available in this environment."
            )

        with self.provider_errors(f"PDF to {ext_out.upper()} conversion failed"):
            image = rasterizer.render_pdf_page(
                request.source_bytes, page_index=PAGE_INDEX, scale=RENDER_SCALE,
            )
            data = rasterizer.encode(image, ext_out)

        return self._success(request, data, content_type_for(ext_out))
