"""Main conversion dispatcher."""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, wait
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from typing import Iterator

from anyconvert.core.classifier import StrategyName, classify
from anyconvert.core.registry import StrategyRegistry
from anyconvert.exceptions import ConversionError, UnsupportedConversionError
from anyconvert.models.config import ConversionConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome, FailureKind
from anyconvert.providers import ProviderSet
from anyconvert.utils.logging import get_logger
from anyconvert.utils.parallel import process_batch

logger = get_logger("dispatcher")

# How long a timed-out dispatch waits for its strategy to release the workspace
CLEANUP_GRACE_SECONDS = 5.0


class ConversionDispatcher:
    """Classify a request, run the matching strategy, normalize the result.

    :meth:`dispatch` never raises. Every failure, expected or not, comes
    back as a failed :class:`ConversionOutcome`. Dispatchers hold no
    per-request state and may be shared between threads.
    """

    def __init__(
        self,
        config: ConversionConfig | None = None,
        providers: ProviderSet | None = None,
    ) -> None:
        self.config = config or ConversionConfig()
        self.providers = providers or ProviderSet.from_config(self.config)
        # Ensure strategies are registered
        import anyconvert.strategies  # noqa: F401

    def classify(self, request: ConversionRequest) -> StrategyName:
        """Which strategy would handle ``request``, without running it.

        Raises:
            UnsupportedConversionError: if no strategy accepts the pair.
        """
        return classify(request.input_extension, request.output_extension)

    def dispatch(self, request: ConversionRequest) -> ConversionOutcome:
        """Convert one request."""
        start_time = time.perf_counter()
        logger.info(
            "Conversion request: %s -> %s",
            request.input_extension or "<none>", request.output_extension,
        )

        try:
            outcome = self._run_with_timeout(request)
        except Exception as e:
            logger.exception("Unexpected error converting %s", request.source_filename)
            outcome = ConversionOutcome.failure(
                FailureKind.CONVERSION_FAILED, f"Conversion failed: {e}",
            )

        outcome.elapsed_ms = (time.perf_counter() - start_time) * 1000
        if not outcome.success:
            outcome.message = _name_pair(request, outcome.message or "Conversion failed")
            logger.info(
                "Conversion %s -> %s failed (%s): %s",
                request.input_extension, request.output_extension,
                outcome.kind.value if outcome.kind else None, outcome.message,
            )
        return outcome

    def dispatch_batch(
        self,
        requests: list[ConversionRequest],
        show_progress: bool = True,
    ) -> Iterator[tuple[ConversionRequest, ConversionOutcome]]:
        """Convert several requests in parallel, yielding as each finishes."""
        from rich.progress import Progress, SpinnerColumn, TextColumn

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            disable=not show_progress,
        ) as progress:
            task = progress.add_task("Converting...", total=len(requests))
            for request, outcome in process_batch(
                requests, self.dispatch, max_workers=self.config.max_workers,
            ):
                if isinstance(outcome, Exception):
                    outcome = ConversionOutcome.failure(
                        FailureKind.CONVERSION_FAILED,
                        _name_pair(request, f"Conversion failed: {outcome}"),
                    )
                progress.advance(task)
                yield request, outcome

    def _run_with_timeout(self, request: ConversionRequest) -> ConversionOutcome:
        timeout = self.config.timeout_seconds
        if timeout is None:
            return self._execute(request)

        deadline = time.monotonic() + timeout
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="anyconvert")
        future = executor.submit(self._execute, request, deadline)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeoutError:
            logger.error(
                "Conversion of %s timed out after %ss", request.source_filename, timeout,
            )
            # Providers only get the time left before the deadline, so the
            # strategy returns and releases its workspace shortly after it.
            done, _ = wait([future], timeout=CLEANUP_GRACE_SECONDS)
            if not done:
                logger.warning(
                    "Conversion of %s is still running; its workspace is "
                    "released when it returns",
                    request.source_filename,
                )
            return ConversionOutcome.failure(
                FailureKind.TIMEOUT,
                f"Conversion of {request.input_extension.upper()} to "
                f"{request.output_extension.upper()} exceeded the "
                f"{timeout:g}s time limit",
            )
        finally:
            executor.shutdown(wait=False)

    def _execute(
        self,
        request: ConversionRequest,
        deadline: float | None = None,
    ) -> ConversionOutcome:
        strategy_name: str | None = None
        try:
            self._check_size(request)
            strategy_name = self.classify(request).value
            strategy = StrategyRegistry.get_strategy(
                strategy_name, providers=self.providers, config=self.config,
            )
            if strategy is None:
                raise UnsupportedConversionError(
                    f"Cannot convert {request.input_extension.upper()} to "
                    f"{request.output_extension.upper()}: strategy "
                    f"'{strategy_name}' is disabled"
                )
            strategy.deadline = deadline

            logger.info("Selected strategy %s for %s", strategy_name, request.source_filename)
            outcome = strategy.convert(request)
            return self._normalize(request, outcome)

        except ConversionError as e:
            return ConversionOutcome.failure(e.kind, e.message, strategy=strategy_name)

    def _check_size(self, request: ConversionRequest) -> None:
        max_size = self.config.max_file_size_bytes
        if request.size > max_size:
            raise UnsupportedConversionError(
                f"Cannot convert {request.input_extension.upper()} to "
                f"{request.output_extension.upper()}: file exceeds max size "
                f"({request.size} > {max_size} bytes)"
            )

    @staticmethod
    def _normalize(
        request: ConversionRequest,
        outcome: ConversionOutcome,
    ) -> ConversionOutcome:
        if not outcome.success:
            return outcome
        if not outcome.data:
            raise UnsupportedConversionError(
                f"Unsupported conversion: {request.input_extension.upper()} to "
                f"{request.output_extension.upper()} produced no output"
            )
        outcome.filename = request.output_filename
        return outcome


# Convenience function
def convert(
    source: str | Path | bytes,
    target_format: str,
    filename: str | None = None,
    config: ConversionConfig | None = None,
) -> ConversionOutcome:
    """Convert a file to ``target_format``.

    This is the main entry point for the library.

    Args:
        source: File path or raw bytes
        target_format: Output extension, e.g. ``"pdf"``
        filename: Original filename; required when ``source`` is bytes
        config: Conversion configuration

    Returns:
        ConversionOutcome with the converted bytes or the failure
    """
    if isinstance(source, bytes):
        if not filename:
            raise ValueError("filename is required when converting raw bytes")
        request = ConversionRequest(
            source_bytes=source, source_filename=filename, target_format=target_format,
        )
    else:
        path = Path(source)
        request = ConversionRequest(
            source_bytes=path.read_bytes(),
            source_filename=filename or path.name,
            target_format=target_format,
        )

    return ConversionDispatcher(config).dispatch(request)


def _name_pair(request: ConversionRequest, message: str) -> str:
    """Make sure a failure message names both formats of the conversion."""
    source = request.input_extension.upper() or "file without extension"
    target = request.output_extension.upper() or "unspecified format"
    if source in message and target in message:
        return message
    return f"Cannot convert {source} to {target}: {message}"
