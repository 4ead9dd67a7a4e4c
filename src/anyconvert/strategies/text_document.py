"""Plain text and Markdown to PDF or DOCX."""
from __future__ import annotations

from typing import ClassVar

from anyconvert.core.classifier import TEXT_EXTENSIONS, StrategyName
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import UnsupportedConversionError
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.strategies.base import BaseStrategy
from anyconvert.utils.mimetypes import content_type_for


@StrategyRegistry.register
class TextToDocumentStrategy(BaseStrategy):
    """Lay text out as a PDF page flow or a single DOCX paragraph."""

    name: ClassVar[str] = StrategyName.TEXT_TO_DOCUMENT.value
    supported_outputs: ClassVar[tuple[str, ...]] = ("pdf", "docx")

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension
        ext_out = request.output_extension

        if ext_in not in TEXT_EXTENSIONS or ext_out not in self.supported_outputs:
            raise UnsupportedConversionError(
                f"Cannot convert {ext_in.upper()} to {ext_out.upper()} "
                "directly via document task."
            )

        text = self._decode_text(request.source_bytes)
        authoring = self.providers.authoring

        with self.provider_errors(f"{ext_in.upper()} to {ext_out.upper()} conversion failed"):
            if ext_out == "pdf":
                data = authoring.render_text_to_pdf(text)
            else:
                data = authoring.render_text_to_docx(text)

        return self._success(request, data, content_type_for(ext_out))
