"""Resolves the argument of the convenience wrappers to raw JSON text."""

import logging
import os
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)

type Source = str | os.PathLike[str] | IO[str]

# Text opening with a container or string is never taken for a file name.
_JSON_OPENERS = '{["'


def read_source(source: Source) -> str:
    """
    Returns the JSON text held by or referenced from ``source``.

    Accepts raw text, a path object, a path string naming an existing file,
    or a readable file-like object.
    """
    if hasattr(source, "read"):
        logger.debug("Reading JSON text from file-like %r", source)
        return source.read()
    if isinstance(source, os.PathLike):
        logger.debug("Reading JSON text from %s", source)
        return Path(source).read_text(encoding="utf-8")
    if not isinstance(source, str):
        raise TypeError(
            f"expected JSON text, a path or a file, not {type(source).__name__}"
        )
    if _looks_like_file(source):
        logger.debug("Reading JSON text from %s", source)
        return Path(source).read_text(encoding="utf-8")
    return source


def _looks_like_file(text: str) -> bool:
    stripped = text.lstrip()
    if not stripped or stripped[0] in _JSON_OPENERS or "\n" in text:
        return False
    try:
        return Path(text).is_file()
    except (OSError, ValueError):
        return False
