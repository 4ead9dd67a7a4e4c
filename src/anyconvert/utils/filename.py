"""Filename helpers."""
from __future__ import annotations

import re


def extension_of(filename: str) -> str:
    """Return the lower-cased suffix of ``filename`` without the dot.

    A name without a dot (or ending in one) has no extension and yields
    the empty string.
    """
    name = filename.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def replace_extension(filename: str, extension: str) -> str:
    """Replace the suffix of ``filename`` with ``.{extension}``.

    Names without a suffix get one appended.
    """
    if re.search(r"\.[^/.]+$", filename):
        return re.sub(r"\.[^/.]+$", f".{extension}", filename)
    return f"{filename}.{extension}"


def sanitize_filename(filename: str) -> str:
    """Replace unsafe characters in filename with underscores."""
    return re.sub(r'[^\w\-_. ]', '_', filename)
