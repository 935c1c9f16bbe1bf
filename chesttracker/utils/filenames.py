"""Filesystem-safe names for session keys."""

import re

_UNSAFE_CHARACTERS = re.compile(r"[^a-zA-Z0-9._\-]")
_MAX_LENGTH = 200


def sanitize_for_filename(value: str) -> str:
    """
    Make a string safe to use as a single file name component.

    Every character outside ``[a-zA-Z0-9._-]`` becomes an underscore, leading
    dots are replaced so the result is never hidden or a relative path, and the
    result is capped at a length every common filesystem accepts.

    Args:
        value: Arbitrary string (save folder name, realm name, address)

    Returns:
        Sanitized file name component, never empty
    """
    sanitized = _UNSAFE_CHARACTERS.sub("_", value)
    if sanitized.startswith("."):
        sanitized = "_" + sanitized[1:]
    sanitized = sanitized[:_MAX_LENGTH]
    return sanitized or "_"
