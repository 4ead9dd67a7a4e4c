"""Conversion strategies - auto-registration on import."""
from anyconvert.strategies.base import BaseStrategy
from anyconvert.strategies.document_image import DocumentToImageStrategy
from anyconvert.strategies.document_text import DocumentToTextStrategy
from anyconvert.strategies.image_document import ImageToDocumentStrategy
from anyconvert.strategies.media import MediaTranscodeStrategy
from anyconvert.strategies.text_document import TextToDocumentStrategy
from anyconvert.strategies.text_image import TextToImageStrategy

__all__ = [
    "BaseStrategy",
    "DocumentToImageStrategy",
    "DocumentToTextStrategy",
    "ImageToDocumentStrategy",
    "MediaTranscodeStrategy",
    "TextToDocumentStrategy",
    "TextToImageStrategy",
]
