"""PDF and DOCX authoring."""
from __future__ import annotations

import io
from typing import ClassVar

from anyconvert.providers.base import BaseProvider

# Page geometry in millimetres
TEXT_MARGIN_MM = 15
TEXT_WIDTH_MM = 180
IMAGE_MARGIN_MM = 10
IMAGE_WIDTH_MM = 190

FONT_NAME = "Helvetica"
FONT_SIZE = 16
DOCX_FONT_SIZE_PT = 12

_EMBEDDABLE = {"png": "png", "jpg": "jpeg", "jpeg": "jpeg"}


class DocumentAuthoring(BaseProvider):
    """Write PDF pages with reportlab and Word documents with python-docx."""

    name: ClassVar[str] = "authoring"
    requires: ClassVar[tuple[str, ...]] = ("reportlab", "docx")

    def render_text_to_pdf(self, text: str) -> bytes:
        """Lay ``text`` out as one flowed block on A4 pages.

        Lines are word-wrapped to a fixed width. When a page fills up the
        text continues on a new one.
        """
        self.ensure_available("reportlab")

        from reportlab.lib.pagesizes import A4
        from reportlab.lib.units import mm
        from reportlab.lib.utils import simpleSplit
        from reportlab.pdfgen import canvas

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setFont(FONT_NAME, FONT_SIZE)
        _, page_height = A4
        margin = TEXT_MARGIN_MM * mm
        leading = FONT_SIZE * 1.15
        top = page_height - margin - FONT_SIZE

        y = top
        for raw_line in text.splitlines() or [""]:
            wrapped = simpleSplit(raw_line, FONT_NAME, FONT_SIZE, TEXT_WIDTH_MM * mm)
            for line in wrapped or [""]:
                if y < margin:
                    pdf.showPage()
                    pdf.setFont(FONT_NAME, FONT_SIZE)
                    y = top
                pdf.drawString(margin, y, line)
                y -= leading

        pdf.save()
        return buffer.getvalue()

    def embed_image_to_pdf(self, image_bytes: bytes, image_format: str) -> bytes:
        """Place a PNG or JPEG on a single A4 page.

        The image is scaled to a fixed width, keeping its aspect ratio, and
        shrunk further if it would run off the bottom of the page.

        Raises:
            ValueError: for formats other than png/jpg/jpeg.
        """
        self.ensure_available("reportlab")

        from reportlab.lib.pagesizes import A4
        from reportlab.lib.units import mm
        from reportlab.lib.utils import ImageReader
        from reportlab.pdfgen import canvas

        if image_format.lower() not in _EMBEDDABLE:
            raise ValueError(f"Cannot embed {image_format.upper()} into a PDF page")

        image = ImageReader(io.BytesIO(image_bytes))
        img_width, img_height = image.getSize()
        if not img_width or not img_height:
            raise ValueError("Image has no pixels")

        page_width, page_height = A4
        margin = IMAGE_MARGIN_MM * mm
        width = IMAGE_WIDTH_MM * mm
        height = width * img_height / img_width
        max_height = page_height - 2 * margin
        if height > max_height:
            width = width * max_height / height
            height = max_height

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.drawImage(image, margin, page_height - margin - height, width, height)
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def render_text_to_docx(self, text: str) -> bytes:
        """Write ``text`` as a single paragraph with a single run."""
        self.ensure_available("docx")

        from docx import Document
        from docx.shared import Pt

        document = Document()
        paragraph = document.add_paragraph()
        run = paragraph.add_run(text)
        run.font.size = Pt(DOCX_FONT_SIZE_PT)

        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()
