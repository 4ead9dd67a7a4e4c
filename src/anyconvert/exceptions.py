"""Typed conversion errors.

Each error carries the :class:`FailureKind` the dispatcher reports when it
turns the exception into a failed :class:`ConversionOutcome`.
"""
from __future__ import annotations

from typing import ClassVar

from anyconvert.models.result import FailureKind


class ConversionError(Exception):
    """Base class for every error a conversion can end with."""

    kind: ClassVar[FailureKind] = FailureKind.CONVERSION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnsupportedConversionError(ConversionError):
    """No strategy handles the requested extension pair."""

    kind = FailureKind.UNSUPPORTED_CONVERSION


class EnvironmentUnsupportedError(ConversionError):
    """The pair is supported but a required provider is missing here."""

    kind = FailureKind.ENVIRONMENT_UNSUPPORTED


class ProviderUnavailableError(EnvironmentUnsupportedError):
    """A provider was called although its dependencies are missing."""

    def __init__(self, provider: str, missing: list[str]) -> None:
        super().__init__(
            f"Provider '{provider}' is unavailable, missing: {', '.join(missing)}"
        )
        self.provider = provider
        self.missing = missing


class ConversionFailedError(ConversionError):
    """A provider ran and reported an error."""

    kind = FailureKind.CONVERSION_FAILED


class TranscodeError(ConversionFailedError):
    """ffmpeg exited with an error."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class ConversionTimeoutError(ConversionError):
    """The conversion ran past its time budget."""

    kind = FailureKind.TIMEOUT
