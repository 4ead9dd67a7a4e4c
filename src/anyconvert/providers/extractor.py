"""PDF text extraction."""
from __future__ import annotations

import io
from typing import ClassVar

from anyconvert.providers.base import BaseProvider


class TextExtractor(BaseProvider):
    """Pull the text layer out of PDF documents."""

    name: ClassVar[str] = "extractor"
    requires: ClassVar[tuple[str, ...]] = ("pdfplumber", "pypdf")

    def extract_all_text(self, pdf_bytes: bytes) -> str:
        """Text of every page in page order, separated by blank lines."""
        self.ensure_available("pdfplumber")

        import pdfplumber

        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            parts = [page.extract_text() or "" for page in pdf.pages]
        return "\n\n".join(parts)

    def page_count(self, pdf_bytes: bytes) -> int:
        self.ensure_available("pypdf")

        from pypdf import PdfReader

        return len(PdfReader(io.BytesIO(pdf_bytes)).pages)
