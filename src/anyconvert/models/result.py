"""Conversion outcome models."""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Why a conversion did not produce output."""
    UNSUPPORTED_CONVERSION = "UnsupportedConversion"
    ENVIRONMENT_UNSUPPORTED = "EnvironmentUnsupported"
    CONVERSION_FAILED = "ConversionFailed"
    TIMEOUT = "Timeout"


_HTTP_STATUS: dict[FailureKind, int] = {
    FailureKind.UNSUPPORTED_CONVERSION: 400,
    FailureKind.ENVIRONMENT_UNSUPPORTED: 400,
    FailureKind.CONVERSION_FAILED: 400,
    FailureKind.TIMEOUT: 504,
}


class ConversionOutcome(BaseModel):
    """Result of one dispatch: either converted bytes or a failure."""

    success: bool
    data: bytes = b""
    content_type: str | None = None
    filename: str | None = None

    # Failure details
    kind: FailureKind | None = None
    message: str | None = None

    # Processing info
    strategy: str | None = None
    elapsed_ms: float | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: bytes,
        content_type: str,
        filename: str,
        **kwargs: Any,
    ) -> "ConversionOutcome":
        return cls(
            success=True,
            data=data,
            content_type=content_type,
            filename=filename,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        message: str,
        **kwargs: Any,
    ) -> "ConversionOutcome":
        return cls(success=False, kind=kind, message=message, **kwargs)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def http_status(self) -> int:
        """Status code an HTTP surface should answer with."""
        if self.success:
            return 200
        return _HTTP_STATUS.get(self.kind, 400)

    def to_dict(self) -> dict[str, Any]:
        """Return the outcome without the payload bytes."""
        return self.model_dump(mode="json", exclude={"data"}) | {"size": self.size}
