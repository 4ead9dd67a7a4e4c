"""anyconvert - file format conversion dispatch for documents, images and media."""
from anyconvert.core.capabilities import CapabilityRegistry, Category
from anyconvert.core.dispatcher import ConversionDispatcher, convert
from anyconvert.core.encoder import ResultEncoder
from anyconvert.core.workspace import TemporaryWorkspace
from anyconvert.exceptions import (
    ConversionError,
    ConversionFailedError,
    ConversionTimeoutError,
    EnvironmentUnsupportedError,
    UnsupportedConversionError,
)
from anyconvert.models.config import ConversionConfig, ServerConfig
from anyconvert.models.request import ConversionRequest
from anyconvert.models.result import ConversionOutcome, FailureKind

try:
    from anyconvert._version import __version__
except ImportError:
    __version__ = "0.0.0-dev"

__all__ = [
    "__version__",
    "convert",
    "ConversionDispatcher",
    "ConversionConfig",
    "ServerConfig",
    "ConversionRequest",
    "ConversionOutcome",
    "FailureKind",
    "CapabilityRegistry",
    "Category",
    "ResultEncoder",
    "TemporaryWorkspace",
    "ConversionError",
    "ConversionFailedError",
    "ConversionTimeoutError",
    "EnvironmentUnsupportedError",
    "UnsupportedConversionError",
]
