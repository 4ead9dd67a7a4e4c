"""Conversion request model."""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from anyconvert.utils.filename import extension_of, replace_extension


class ConversionRequest(BaseModel):
    """One file plus the format it should be converted to.

    Requests are immutable. The input extension comes from the file name
    only; the content itself is never sniffed.
    """

    model_config = ConfigDict(frozen=True)

    source_bytes: bytes
    source_filename: str
    target_format: str

    @property
    def input_extension(self) -> str:
        return extension_of(self.source_filename)

    @property
    def output_extension(self) -> str:
        return self.target_format.strip().lower().lstrip(".")

    @property
    def output_filename(self) -> str:
        return replace_extension(self.source_filename, self.output_extension)

    @property
    def size(self) -> int:
        return len(self.source_bytes)

    @classmethod
    def from_path(cls, path: str | Path, target_format: str) -> "ConversionRequest":
        """Build a request from a file on disk."""
        path = Path(path)
        return cls(
            source_bytes=path.read_bytes(),
            source_filename=path.name,
            target_format=target_format,
        )
