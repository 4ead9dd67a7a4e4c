"""Base strategy interface."""
from __future__ import annotations

import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, ClassVar, Iterator

from anyconvert.core.workspace import TemporaryWorkspace
from anyconvert.exceptions import (
    ConversionError,
    ConversionFailedError,
    ConversionTimeoutError,
)
from anyconvert.models.result import ConversionOutcome

if TYPE_CHECKING:
    from anyconvert.models.config import ConversionConfig
    from anyconvert.models.request import ConversionRequest
    from anyconvert.providers import ProviderSet


class BaseStrategy(ABC):
    """Abstract base class for conversion strategies.

    A strategy validates the request, calls one or more providers and
    returns a successful :class:`ConversionOutcome`. Every failure is
    raised as a :class:`ConversionError` subclass; provider exceptions
    are wrapped with :meth:`provider_errors` so nothing untyped escapes.
    """

    # Class attributes for registration
    name: ClassVar[str]
    supported_outputs: ClassVar[tuple[str, ...]]

    def __init__(
        self,
        providers: "ProviderSet | None" = None,
        config: "ConversionConfig | None" = None,
    ) -> None:
        from anyconvert.models.config import ConversionConfig
        from anyconvert.providers import ProviderSet

        self.config = config or ConversionConfig()
        self.providers = providers or ProviderSet.from_config(self.config)
        self.workspace = TemporaryWorkspace(
            base_dir=self.config.temp_dir,
            prefix=self.config.workspace_prefix,
        )
        # Monotonic time the dispatcher stops waiting, None for no limit
        self.deadline: float | None = None

    @abstractmethod
    def convert(self, request: "ConversionRequest") -> ConversionOutcome:
        """Convert the request or raise a :class:`ConversionError`."""
        ...

    def _success(
        self,
        request: "ConversionRequest",
        data: bytes,
        content_type: str,
        **extra: object,
    ) -> ConversionOutcome:
        return ConversionOutcome.ok(
            data=data,
            content_type=content_type,
            filename=request.output_filename,
            strategy=self.name,
            extra=dict(extra),
        )

    def remaining_time(self) -> float | None:
        """Seconds a provider call may still take.

        Without a deadline this is the configured per-request timeout.

        Raises:
            ConversionTimeoutError: if the deadline has already passed.
        """
        if self.deadline is None:
            return self.config.timeout_seconds
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise ConversionTimeoutError("Conversion ran out of time")
        return remaining

    @staticmethod
    @contextmanager
    def provider_errors(prefix: str) -> Iterator[None]:
        """Turn any untyped exception raised in the block into a failure."""
        try:
            yield
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionFailedError(f"{prefix}: {e}") from e

    @staticmethod
    def _decode_text(data: bytes) -> str:
        return data.decode("utf-8-sig", errors="replace")
