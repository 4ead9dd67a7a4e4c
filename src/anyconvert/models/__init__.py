"""anyconvert data models."""
from anyconvert.models.config import ConversionConfig, ServerConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome, FailureKind

__all__ = [
    "ConversionConfig",
    "ServerConfig",
    "ConversionRequest",
    "ConversionOutcome",
    "FailureKind",
]
