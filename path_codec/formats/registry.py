"""Format registry and whole-file import.

Importing a file tries, in order:

1. The ``#PATH.JERRYIO-DATA`` metadata line, which restores the full
   document regardless of the file format.
2. Each registered format's ``decode``; the first success wins.
"""

from __future__ import annotations

import logging

from path_codec.exceptions import FormatError, PathCodecError
from path_codec.formats.base import Format, PathFileData
from path_codec.formats.document import load_path_file_data
from path_codec.formats.lemlib_v0_4 import METADATA_PREFIX, LemLibFormatV0_4

logger = logging.getLogger(__name__)

_FORMAT_TYPES: list[type[Format]] = [LemLibFormatV0_4]


def register_format(fmt: type[Format]) -> type[Format]:
    """Register a format class; usable as a class decorator."""
    if fmt not in _FORMAT_TYPES:
        _FORMAT_TYPES.append(fmt)
    return fmt


def get_all_formats() -> list[Format]:
    """Fresh instances of every registered format."""
    return [fmt() for fmt in _FORMAT_TYPES]


def get_format(name: str) -> Format:
    """Look up a format by its display name.

    Raises
    ------
    FormatError
        If no registered format has that name.
    """
    for fmt in get_all_formats():
        if fmt.name == name:
            return fmt
    raise FormatError(
        f"Unknown format '{name}'. Available: "
        f"{[f.name for f in get_all_formats()]}"
    )


def recover_path_file_data(text: str) -> PathFileData | None:
    """Load the embedded document, or ``None`` if the text has none.

    Raises
    ------
    DocumentError
        If a metadata line exists but its JSON is invalid.
    """
    for line in text.split("\n"):
        if line.startswith(METADATA_PREFIX):
            return load_path_file_data(line[len(METADATA_PREFIX):])
    return None


def import_path_file(text: str) -> PathFileData:
    """Decode *text* with the best available source of truth.

    Raises
    ------
    PathCodecError
        The last decode error when no format accepts the text.
    """
    document = recover_path_file_data(text)
    if document is not None:
        logger.info("Recovered full document from metadata (%s)", document.format)
        return document

    last_error: PathCodecError | None = None
    for fmt in get_all_formats():
        try:
            document = fmt.decode(text)
        except PathCodecError as exc:
            logger.debug("Format %s rejected file: %s", fmt.name, exc)
            last_error = exc
            continue
        logger.info("Decoded file as %s", fmt.name)
        return document

    if last_error is None:
        raise FormatError("No format registered")
    raise last_error
