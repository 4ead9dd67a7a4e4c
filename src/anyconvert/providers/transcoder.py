"""General media transcoding through ffmpeg."""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from anyconvert.exceptions import (
    ConversionTimeoutError,
    ProviderUnavailableError,
    TranscodeError,
)
from anyconvert.providers.base import BaseProvider
from anyconvert.utils.deps import find_executable, missing_modules
from anyconvert.utils.logging import get_logger

logger = get_logger("providers.transcoder")

STILL_IMAGE_OUTPUTS = frozenset({"png", "jpg", "jpeg", "webp", "avif"})
FASTEST_PRESET_OUTPUTS = frozenset({"mp4", "webm", "gif"})
AVIF_MAX_INPUT_SECONDS = 10
AVIF_CRF = 30

# Keep the tail of ffmpeg's stderr; the banner at the top is noise.
_STDERR_TAIL_LINES = 12


class OptionProfile(BaseModel):
    """Named set of ffmpeg output options."""

    model_config = ConfigDict(frozen=True)

    name: str = "default"
    output_options: dict[str, Any] = Field(default_factory=dict)


FIRST_FRAME = OptionProfile(
    name="first_frame",
    output_options={
        "vf": "select=eq(n\\,0)",
        "vsync": "0",
        "frames:v": 1,
        "q:v": 2,
        "update": 1,
    },
)
FASTEST = OptionProfile(name="fastest", output_options={"preset": "ultrafast"})
FAST = OptionProfile(name="fast", output_options={"preset": "fast"})
AVIF = OptionProfile(
    name="avif",
    output_options={
        "preset": "fast",
        "crf": AVIF_CRF,
        "t": AVIF_MAX_INPUT_SECONDS,
    },
)
DEFAULT = OptionProfile()


def build_profile(input_extension: str, output_extension: str) -> OptionProfile:
    """Pick the option profile for a transcode. First matching rule wins."""
    ext_in = input_extension.lower()
    ext_out = output_extension.lower()

    if ext_in == "gif" and ext_out in STILL_IMAGE_OUTPUTS:
        return FIRST_FRAME
    if ext_out in FASTEST_PRESET_OUTPUTS:
        return FASTEST
    if ext_out == "webp":
        # libwebp does not accept ultrafast
        return FAST
    if ext_out == "avif":
        return AVIF
    return DEFAULT


class FFmpegTranscoder(BaseProvider):
    """File-in, file-out transcoding with the ffmpeg command line tool."""

    name: ClassVar[str] = "transcoder"
    requires: ClassVar[tuple[str, ...]] = ("ffmpeg",)

    def __init__(self, binary: str = "ffmpeg") -> None:
        super().__init__()
        self.binary = binary

    def _probe(self) -> list[str]:
        missing = missing_modules(*self.requires)
        if find_executable(self.binary) is None:
            missing.append(f"{self.binary} (executable)")
        return missing

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        profile: OptionProfile = DEFAULT,
        timeout: float | None = None,
    ) -> Path:
        """Run ffmpeg on ``input_path`` writing ``output_path``.

        Args:
            input_path: Existing input file.
            output_path: Destination; overwritten if present.
            profile: Output options for the command.
            timeout: Seconds before the ffmpeg process is killed.

        Returns:
            ``output_path``.

        Raises:
            TranscodeError: if ffmpeg exits non-zero or writes nothing.
            ConversionTimeoutError: if ``timeout`` expires.
            ProviderUnavailableError: if ffmpeg is not installed.
        """
        self.ensure_available()

        import ffmpeg

        stream = (
            ffmpeg.input(str(input_path))
            .output(str(output_path), **profile.output_options)
            .global_args("-nostdin", "-hide_banner")
        )

        logger.info(
            "Starting ffmpeg: %s -> %s (profile=%s)",
            input_path.name, output_path.name, profile.name,
        )
        try:
            process = ffmpeg.run_async(
                stream,
                cmd=self.binary,
                pipe_stdout=True,
                pipe_stderr=True,
                overwrite_output=True,
            )
        except FileNotFoundError as e:
            raise ProviderUnavailableError(self.name, [self.binary]) from e

        try:
            _, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            logger.error("ffmpeg killed after %ss", timeout)
            raise ConversionTimeoutError(
                f"Transcoding exceeded the {timeout:g}s time limit"
            )

        diagnostic = _tail(stderr)
        if process.returncode != 0:
            logger.error("FFmpeg error (exit %s): %s", process.returncode, diagnostic)
            raise TranscodeError(
                f"FFmpeg failed: {diagnostic or f'exit status {process.returncode}'}",
                stderr=diagnostic,
            )
        if not output_path.exists():
            raise TranscodeError("FFmpeg failed: no output file was written", stderr=diagnostic)

        logger.info("FFmpeg conversion finished: %s", output_path.name)
        return output_path

    def version(self) -> str | None:
        """First line of ``ffmpeg -version``, or None if it cannot run."""
        try:
            result = subprocess.run(
                [self.binary, "-version"],
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired):
            return None
        if result.returncode != 0 or not result.stdout:
            return None
        return result.stdout.splitlines()[0]

    def describe(self) -> dict:
        info = super().describe()
        info["binary"] = self.binary
        return info


def _tail(stderr: bytes | None) -> str:
    if not stderr:
        return ""
    lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
    return "\n".join(lines[-_STDERR_TAIL_LINES:])
