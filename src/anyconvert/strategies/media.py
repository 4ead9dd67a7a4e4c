"""General audio, video and image transcoding through ffmpeg."""
from __future__ import annotations

from typing import ClassVar

from anyconvert.core.classifier import StrategyName
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import ConversionFailedError, TranscodeError
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome
from anyconvert.providers.transcoder import build_profile
from anyconvert.strategies.base import BaseStrategy
from anyconvert.utils.mimetypes import content_type_for


@StrategyRegistry.register
class MediaTranscodeStrategy(BaseStrategy):
    """Transcode any pair no other strategy claims.

    The input is written into a fresh workspace, ffmpeg converts it with
    the option profile for the pair, and the output file is read back.
    The workspace is removed however the conversion ends.
    """

    name: ClassVar[str] = StrategyName.MEDIA_TRANSCODE.value
    supported_outputs: ClassVar[tuple[str, ...]] = (
        "mp4", "webm", "gif", "mp3", "wav", "aac", "ogg", "flac",
        "png", "jpg", "webp", "avif",
    )

    def convert(self, request: ConversionRequest) -> ConversionOutcome:
        ext_in = request.input_extension
        ext_out = request.output_extension
        profile = build_profile(ext_in, ext_out)
        failure = (
            f"Incompatible or invalid conversion from {ext_in.upper()} "
            f"to {ext_out.upper()}"
        )

        with self.workspace.scoped() as workspace:
            input_path = workspace.file(f"input.{ext_in}")
            output_path = workspace.file(f"output.{ext_out}")

            with self.provider_errors(failure):
                input_path.write_bytes(request.source_bytes)
                try:
                    self.providers.transcoder.transcode(
                        input_path,
                        output_path,
                        profile,
                        timeout=self.remaining_time(),
                    )
                except TranscodeError as e:
                    raise ConversionFailedError(
                        f"{failure}: {e.message}"
                    ) from e
                data = output_path.read_bytes()

        return self._success(
            request, data, content_type_for(ext_out), profile=profile.name,
        )
