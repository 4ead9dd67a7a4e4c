"""Packaging of conversion outcomes for the outbound transport."""
from __future__ import annotations

import base64
from typing import Any

from anyconvert.models.result import ConversionOutcome


class ResultEncoder:
    """Turn a :class:`ConversionOutcome` into a response body."""

    @staticmethod
    def to_envelope(outcome: ConversionOutcome) -> dict[str, Any]:
        """JSON envelope with the payload base64 encoded.

        Success::

            {"success": true, "filename": ..., "contentType": ...,
             "data": "<base64>", "size": ...}

        Failure::

            {"error": ..., "kind": ...}
        """
        if not outcome.success:
            return ResultEncoder.error_envelope(outcome)
        return {
            "success": True,
            "filename": outcome.filename,
            "contentType": outcome.content_type,
            "data": base64.b64encode(outcome.data).decode("ascii"),
            "size": outcome.size,
        }

    @staticmethod
    def error_envelope(outcome: ConversionOutcome) -> dict[str, Any]:
        kind = outcome.kind.value if outcome.kind else None
        return {"error": outcome.message or "Conversion failed", "kind": kind}

    @staticmethod
    def to_binary(outcome: ConversionOutcome) -> tuple[bytes, dict[str, str]]:
        """Raw body plus the headers describing it.

        Raises:
            ValueError: if the outcome is a failure.
        """
        if not outcome.success:
            raise ValueError("Cannot encode a failed outcome as a binary body")
        headers = {
            "Content-Type": outcome.content_type or "application/octet-stream",
            "Content-Disposition": f'attachment; filename="{outcome.filename}"',
            "Content-Length": str(outcome.size),
        }
        return outcome.data, headers

    @staticmethod
    def decode_envelope(envelope: dict[str, Any]) -> bytes:
        """Payload bytes from a success envelope."""
        return base64.b64decode(envelope["data"])
