"""anyconvert utility functions."""
from anyconvert.utils.deps import find_executable, missing_modules
from anyconvert.utils.filename import (
    extension_of,
    replace_extension,
    sanitize_filename,
)
from anyconvert.utils.mimetypes import content_type_for
from anyconvert.utils.parallel import process_batch

__all__ = [
    "content_type_for",
    "extension_of",
    "find_executable",
    "missing_modules",
    "process_batch",
    "replace_extension",
    "sanitize_filename",
]
