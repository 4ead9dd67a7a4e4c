"""Raster images to PDF, with an explicit fallback chain."""
from __future__ import annotations

from typing import Callable, ClassVar, NamedTuple

from anyconvert.core.classifier import RASTER_IMAGE_EXTENSIONS, StrategyName
from anyconvert.core.registry import StrategyRegistry
from anyconvert.core.workspace import WorkspaceHandle
from anyconvert.exceptions import (
    ConversionError,
    ConversionFailedError,
    ConversionTimeoutError,
    UnsupportedConversionError,
)
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.providers.transcoder import DEFAULT, FIRST_FRAME
from anyconvert.strategies.base import BaseStrategy
from anyconvert.utils.logging import get_logger

logger = get_logger("strategies.image_document")

# Formats reportlab can place on a page without converting them first
DIRECTLY_EMBEDDABLE = frozenset({"jpg", "jpeg", "png"})


class FallbackStep(NamedTuple):
    name: str
    run: Callable[[ConversionRequest, WorkspaceHandle], bytes]


@StrategyRegistry.register
class ImageToDocumentStrategy(BaseStrategy):
    """Put an image on a PDF page.

    The steps run strictly one after another, each only if the previous
    one failed:

    1. ``direct_render``: let ffmpeg write the PDF.
    2. ``embed_original`` (jpg/jpeg/png) or ``embed_first_frame`` (other
       formats, frame 0 extracted to PNG by ffmpeg): embed the image on a
       single page with reportlab.
    """

    name: ClassVar[str] = StrategyName.IMAGE_TO_DOCUMENT.value
    supported_outputs: ClassVar[tuple[str, ...]] = ("pdf",)

    def fallback_chain(self, input_extension: str) -> list[FallbackStep]:
        """The ordered steps attempted for ``input_extension``."""
        steps = [FallbackStep("direct_render", self._direct_render)]
        if input_extension in DIRECTLY_EMBEDDABLE:
            steps.append(FallbackStep("embed_original", self._embed_original))
        else:
            steps.append(FallbackStep("embed_first_frame", self._embed_first_frame))
        return steps

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension

        if ext_in not in RASTER_IMAGE_EXTENSIONS or request.output_extension != "pdf":
            raise UnsupportedConversionError(
                f"Cannot convert {ext_in.upper()} to PDF directly via document task."
            )

        errors: list[str] = []
        with self.workspace.scoped() as workspace:
            workspace.file(f"input.{ext_in}").write_bytes(request.source_bytes)

            for step in self.fallback_chain(ext_in):
                try:
                    with self.provider_errors(step.name):
                        data = step.run(request, workspace)
                except ConversionTimeoutError:
                    raise
                except ConversionError as e:
                    logger.warning(
                        "Image to PDF step '%s' failed for %s: %s",
                        step.name, request.source_filename, e.message,
                    )
                    errors.append(e.message)
                    continue
                return self._success(request, data, "application/pdf", method=step.name)

        raise ConversionFailedError(
            f"Cannot convert {ext_in.upper()} to PDF: {errors[-1]}"
        )

    def _direct_render(self, request: ConversionRequest, workspace: WorkspaceHandle) -> bytes:
        output = workspace.file("output.pdf")
        try:
            self.providers.transcoder.transcode(
                workspace.file(f"input.{request.input_extension}"),
                output,
                DEFAULT,
                timeout=self.remaining_time(),
            )
            return output.read_bytes()
        finally:
            # Leave no partial output behind for the next step
            output.unlink(missing_ok=True)

    def _embed_original(self, request: ConversionRequest, workspace: WorkspaceHandle) -> bytes:
        return self.providers.authoring.embed_image_to_pdf(
            request.source_bytes, request.input_extension,
        )

    def _embed_first_frame(self, request: ConversionRequest, workspace: WorkspaceHandle) -> bytes:
        still = workspace.file("temp.png")
        self.providers.transcoder.transcode(
            workspace.file(f"input.{request.input_extension}"),
            still,
            FIRST_FRAME,
            timeout=self.remaining_time(),
        )
        return self.providers.authoring.embed_image_to_pdf(still.read_bytes(), "png")
