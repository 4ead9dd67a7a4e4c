"""Static table of supported conversions per file category."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

from anyconvert.exceptions import UnsupportedConversionError
from anyconvert.utils.filename import extension_of


class Category(str, Enum):
    """File-type category of an input extension."""
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    DOCUMENT = "document"
    UNKNOWN = "unknown"


class CapabilityEntry(NamedTuple):
    inputs: frozenset[str]
    outputs: frozenset[str]


def _entry(inputs: tuple[str, ...], outputs: tuple[str, ...]) -> CapabilityEntry:
    return CapabilityEntry(frozenset(inputs), frozenset(outputs))


# Dict order matters: the first category listing an input wins.
_TABLE: Mapping[Category, CapabilityEntry] = MappingProxyType({
    Category.VIDEO: _entry(
        ("mp4", "webm", "avi", "mov", "mkv", "flv", "wmv", "m4v"),
        ("mp4", "webm", "gif", "mp3", "wav", "aac"),
    ),
    Category.AUDIO: _entry(
        ("mp3", "wav", "ogg", "aac", "flac", "m4a", "wma"),
        ("mp3", "wav", "ogg", "aac", "flac"),
    ),
    Category.IMAGE: _entry(
        ("jpg", "jpeg", "png", "gif", "webp", "bmp", "tiff", "avif"),
        ("webp", "png", "jpg", "avif", "pdf"),
    ),
    Category.DOCUMENT: _entry(
        ("pdf", "txt", "md"),
        ("pdf", "txt", "jpg", "png", "docx"),
    ),
})

# Display order for output pickers, matching the table rows above.
_OUTPUT_ORDER: Mapping[Category, tuple[str, ...]] = MappingProxyType({
    Category.VIDEO: ("mp4", "webm", "gif", "mp3", "wav", "aac"),
    Category.AUDIO: ("mp3", "wav", "ogg", "aac", "flac"),
    Category.IMAGE: ("webp", "png", "jpg", "avif", "pdf"),
    Category.DOCUMENT: ("pdf", "txt", "jpg", "png", "docx"),
})


def _normalize(extension: str) -> str:
    return extension.strip().lower().lstrip(".")


class CapabilityRegistry:
    """Read-only lookups against the capability table.

    The table is advisory for clients picking an output format. The
    dispatcher does not consult it: text to image conversions, for
    instance, are handled even though no single row declares them.
    """

    @classmethod
    def table(cls) -> Mapping[Category, CapabilityEntry]:
        return _TABLE

    @classmethod
    def category(cls, input_extension: str) -> Category:
        """Return the category whose inputs contain ``input_extension``."""
        ext = _normalize(input_extension)
        for category, entry in _TABLE.items():
            if ext in entry.inputs:
                return category
        return Category.UNKNOWN

    @classmethod
    def supported_outputs(cls, input_extension: str) -> set[str]:
        """Return every output declared for ``input_extension``.

        The input extension itself is never part of the result.
        """
        return set(cls.ordered_outputs(input_extension))

    @classmethod
    def ordered_outputs(cls, input_extension: str) -> list[str]:
        """Like :meth:`supported_outputs` but in display order."""
        ext = _normalize(input_extension)
        category = cls.category(ext)
        if category is Category.UNKNOWN:
            return []
        return [out for out in _OUTPUT_ORDER[category] if out != ext]

    @classmethod
    def is_supported(cls, input_extension: str, output_extension: str) -> bool:
        """True if some category declares ``input -> output``."""
        ext_in = _normalize(input_extension)
        ext_out = _normalize(output_extension)
        if not ext_in or ext_in == ext_out:
            return False
        return any(
            ext_in in entry.inputs and ext_out in entry.outputs
            for entry in _TABLE.values()
        )

    @classmethod
    def category_outputs(cls, category: Category) -> list[str]:
        """Outputs of one category in display order."""
        return list(_OUTPUT_ORDER.get(category, ()))

    @classmethod
    def all_inputs(cls) -> list[str]:
        return sorted({ext for entry in _TABLE.values() for ext in entry.inputs})

    # Filename-based helpers used by clients before submitting.

    @classmethod
    def supported_outputs_for(cls, filename: str) -> list[str]:
        return cls.ordered_outputs(extension_of(filename))

    @classmethod
    def category_of(cls, filename: str) -> Category:
        return cls.category(extension_of(filename))

    @classmethod
    def validate(cls, filename: str, target_format: str) -> None:
        """Reject a conversion the client should not submit.

        Raises:
            UnsupportedConversionError: if ``target_format`` is not among
                the supported outputs for ``filename``.
        """
        target = _normalize(target_format)
        if target not in cls.supported_outputs_for(filename):
            ext = extension_of(filename)
            raise UnsupportedConversionError(
                f"Incompatible conversion: {ext.upper()} cannot be "
                f"converted to {target.upper()}"
            )
