"""Text extraction to TXT."""
from __future__ import annotations

from typing import ClassVar

from anyconvert.core.classifier import TEXT_EXTENSIONS, StrategyName
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import UnsupportedConversionError
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.strategies.base import BaseStrategy


@StrategyRegistry.register
class DocumentToTextStrategy(BaseStrategy):
    """Pass text through or extract the text layer of a PDF."""

    name: ClassVar[str] = StrategyName.DOCUMENT_TO_TEXT.value
    supported_outputs: ClassVar[tuple[str, ...]] = ("txt",)

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension

        if ext_in in TEXT_EXTENSIONS:
            text = self._decode_text(request.source_bytes)
            return self._success(request, text.encode("utf-8"), "text/plain")

        if ext_in == "pdf":
            extractor = self.providers.extractor
            with self.provider_errors("PDF to TXT conversion failed"):
                text = extractor.extract_all_text(request.source_bytes)
                pages = extractor.page_count(request.source_bytes)
            return self._success(
                request, text.encode("utf-8"), "text/plain", page_count=pages,
            )

        raise UnsupportedConversionError(
            f"Cannot convert {ext_in.upper()} to TXT directly via document task."
        )
