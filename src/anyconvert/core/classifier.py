"""Classification of an extension pair to a conversion strategy.

Classification is pure: it never touches a provider, so it can answer
"which strategy would run" without doing any work. Rules are evaluated in
order and the first match wins.
"""
from __future__ import annotations

import re
from enum import Enum

from anyconvert.exceptions import UnsupportedConversionError

TEXT_EXTENSIONS = frozenset({"txt", "md"})
RASTER_IMAGE_EXTENSIONS = frozenset(
    {"jpg", "jpeg", "png", "webp", "gif", "bmp", "tiff", "avif"}
)
PDF_RASTER_OUTPUTS = frozenset({"jpg", "png"})
TEXT_RASTER_OUTPUTS = frozenset({"jpg", "jpeg", "png", "webp", "avif"})

# Extensions end up in workspace file names and the output filename
_EXTENSION_PATTERN = re.compile(r"[a-z0-9]+")


class StrategyName(str, Enum):
    """Identifiers of the conversion strategies."""
    TEXT_TO_DOCUMENT = "text_to_document"
    IMAGE_TO_DOCUMENT = "image_to_document"
    DOCUMENT_TO_TEXT = "document_to_text"
    DOCUMENT_TO_IMAGE = "document_to_image"
    TEXT_TO_IMAGE = "text_to_image"
    MEDIA_TRANSCODE = "media_transcode"


def _reject(input_extension: str, output_extension: str) -> UnsupportedConversionError:
    return UnsupportedConversionError(
        f"Cannot convert {input_extension.upper()} to "
        f"{output_extension.upper()} directly via document task."
    )


def classify(input_extension: str, output_extension: str) -> StrategyName:
    """Pick the strategy for ``input_extension -> output_extension``.

    Raises:
        UnsupportedConversionError: when the pair is rejected outright.
    """
    ext_in = input_extension.lower()
    ext_out = output_extension.lower()

    if not ext_in or not ext_out:
        raise UnsupportedConversionError(
            f"Cannot convert {ext_in.upper() or 'file without extension'} "
            f"to {ext_out.upper() or 'unspecified format'}."
        )

    if not (
        _EXTENSION_PATTERN.fullmatch(ext_in) and _EXTENSION_PATTERN.fullmatch(ext_out)
    ):
        raise UnsupportedConversionError(
            f"Cannot convert {ext_in.upper()} to {ext_out.upper()}: "
            "not a valid format name."
        )

    if ext_out == "pdf":
        if ext_in in TEXT_EXTENSIONS:
            return StrategyName.TEXT_TO_DOCUMENT
        if ext_in in RASTER_IMAGE_EXTENSIONS:
            return StrategyName.IMAGE_TO_DOCUMENT
        raise _reject(ext_in, ext_out)

    if ext_out == "docx":
        if ext_in in TEXT_EXTENSIONS:
            return StrategyName.TEXT_TO_DOCUMENT
        raise _reject(ext_in, ext_out)

    if ext_out == "txt":
        if ext_in in TEXT_EXTENSIONS or ext_in == "pdf":
            return StrategyName.DOCUMENT_TO_TEXT
        raise _reject(ext_in, ext_out)

    if ext_in == "pdf" and ext_out in PDF_RASTER_OUTPUTS:
        return StrategyName.DOCUMENT_TO_IMAGE

    if ext_in in TEXT_EXTENSIONS and ext_out in TEXT_RASTER_OUTPUTS:
        return StrategyName.TEXT_TO_IMAGE

    return StrategyName.MEDIA_TRANSCODE
