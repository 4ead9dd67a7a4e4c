"""Capability providers wrapping the external conversion libraries."""
from __future__ import annotations

from typing import TYPE_CHECKING

from anyconvert.providers.authoring import DocumentAuthoring
from anyconvert.providers.base import BaseProvider
from anyconvert.providers.extractor import TextExtractor
from anyconvert.providers.rasterizer import Rasterizer
from anyconvert.providers.transcoder import FFmpegTranscoder, OptionProfile

if TYPE_CHECKING:
    from anyconvert.models.config import ConversionConfig


class ProviderSet:
    """The providers one dispatcher hands to its strategies.

    Any provider can be replaced, which is how tests substitute fakes.
    """

    def __init__(
        self,
        authoring: DocumentAuthoring | None = None,
        transcoder: FFmpegTranscoder | None = None,
        rasterizer: Rasterizer | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        self.authoring = authoring or DocumentAuthoring()
        self.transcoder = transcoder or FFmpegTranscoder()
        self.rasterizer = rasterizer or Rasterizer()
        self.extractor = extractor or TextExtractor()

    @classmethod
    def from_config(cls, config: "ConversionConfig") -> "ProviderSet":
        return cls(transcoder=FFmpegTranscoder(binary=config.ffmpeg_binary))

    def all(self) -> list[BaseProvider]:
        return [self.authoring, self.transcoder, self.rasterizer, self.extractor]


__all__ = [
    "BaseProvider",
    "DocumentAuthoring",
    "FFmpegTranscoder",
    "OptionProfile",
    "ProviderSet",
    "Rasterizer",
    "TextExtractor",
]
