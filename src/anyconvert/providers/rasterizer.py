"""PDF page and text rasterization with pypdfium2 and Pillow."""
from __future__ import annotations

import io
from typing import TYPE_CHECKING, ClassVar, Sequence

from anyconvert.providers.base import BaseProvider

if TYPE_CHECKING:
    from PIL.Image import Image

CANVAS_SIZE = (800, 600)
FONT_SIZE = 16
LEFT_MARGIN = 20
TOP_MARGIN = 30
LINE_HEIGHT = 20
BOTTOM_LIMIT = 580

_MONOSPACE_FONTS = (
    "DejaVuSansMono.ttf",
    "LiberationMono-Regular.ttf",
    "Menlo.ttc",
    "consola.ttf",
    "cour.ttf",
)

_PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "avif": "AVIF",
}


class Rasterizer(BaseProvider):
    """Render PDF pages and plain text to pixels, then encode them.

    Text rendering only needs Pillow. PDF rendering additionally needs
    pypdfium2; use :meth:`can_render_pdf` and :meth:`can_render_text` to
    ask for each separately.
    """

    name: ClassVar[str] = "rasterizer"
    requires: ClassVar[tuple[str, ...]] = ("PIL", "pypdfium2")

    def can_render_pdf(self) -> bool:
        return self.is_available("PIL", "pypdfium2")

    def can_render_text(self) -> bool:
        return self.is_available("PIL")

    def render_pdf_page(
        self,
        pdf_bytes: bytes,
        page_index: int = 0,
        scale: float = 2.0,
    ) -> "Image":
        """Render one page of a PDF at ``scale`` times its natural size."""
        self.ensure_available("PIL", "pypdfium2")

        import pypdfium2 as pdfium

        pdf = pdfium.PdfDocument(pdf_bytes)
        try:
            page = pdf[page_index]
            try:
                bitmap = page.render(scale=scale)
                return bitmap.to_pil().copy()
            finally:
                page.close()
        finally:
            pdf.close()

    def render_text_lines(
        self,
        lines: Sequence[str],
        canvas_size: tuple[int, int] = CANVAS_SIZE,
    ) -> "Image":
        """Draw ``lines`` in black monospace on a white canvas.

        Drawing stops once the next baseline would fall below the
        bottom limit; remaining lines are dropped.
        """
        self.ensure_available("PIL")

        from PIL import Image, ImageDraw, ImageFont

        canvas = Image.new("RGB", canvas_size, "white")
        draw = ImageDraw.Draw(canvas)
        font = _monospace_font()
        freetype = isinstance(font, ImageFont.FreeTypeFont)

        y = TOP_MARGIN
        for line in lines:
            if y > BOTTOM_LIMIT:
                break
            if freetype:
                draw.text((LEFT_MARGIN, y), line, fill="black", font=font, anchor="ls")
            else:
                draw.text((LEFT_MARGIN, y - FONT_SIZE), line, fill="black", font=font)
            y += LINE_HEIGHT
        return canvas

    def encode(self, image: "Image", output_format: str) -> bytes:
        """Encode ``image`` as jpg/jpeg/png/webp/avif.

        Raises:
            ValueError: for any other format.
        """
        self.ensure_available("PIL")

        from PIL import Image

        pil_format = _PIL_FORMATS.get(output_format.lower())
        if pil_format is None:
            raise ValueError(f"Cannot encode pixels as {output_format.upper()}")

        if pil_format == "JPEG" and image.mode != "RGB":
            if image.mode in ("RGBA", "LA", "P"):
                image = image.convert("RGBA")
                background = Image.new("RGB", image.size, (255, 255, 255))
                background.paste(image, mask=image.split()[-1])
                image = background
            else:
                image = image.convert("RGB")

        buffer = io.BytesIO()
        image.save(buffer, format=pil_format)
        return buffer.getvalue()


def _monospace_font():
    from PIL import ImageFont

    for candidate in _MONOSPACE_FONTS:
        try:
            return ImageFont.truetype(candidate, FONT_SIZE)
        except OSError:
            continue
    try:
        return ImageFont.load_default(size=FONT_SIZE)
    except TypeError:
        # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()
