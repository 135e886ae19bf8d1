"""Import Files: read a user-supplied import file into text.

Invariants:
    - Only `.json` file names are accepted (case-insensitive); others → ImportParseError
    - IO failure → FileReadError
    - Bytes that are not UTF-8 decode to U+FFFD; whether the text is usable is
      left to the JSON parser
    - No size limit
"""

import logging
from pathlib import Path

from fengshui_catalog.core.errors import ErrorContext, FileReadError, ImportParseError

logger = logging.getLogger(__name__)

ACCEPTED_SUFFIX = ".json"


def check_import_name(file_name: str | None) -> None:
    """Reject anything the `.json` file picker would not offer."""
    if not file_name or not file_name.lower().endswith(ACCEPTED_SUFFIX):
        raise ImportParseError(
            f"only {ACCEPTED_SUFFIX} files can be imported (got '{file_name}')",
            ErrorContext(file_name=file_name),
        )


def decode_import_bytes(file_name: str | None, content: bytes) -> str:
    """Decode import content as UTF-8 (a leading BOM is dropped)."""
    text = content.decode("utf-8-sig", errors="replace")
    if "\ufffd" in text:
        logger.warning(f"Import file {file_name} has bytes that are not UTF-8")
    return text


def read_import_file(path: str | Path) -> str:
    """Read an import file from disk."""
    path = Path(path)
    check_import_name(path.name)
    try:
        content = path.read_bytes()
    except OSError as e:
        logger.warning(f"Import file {path} could not be read: {e}")
        raise FileReadError(str(e), ErrorContext(file_name=path.name)) from e
    return decode_import_bytes(path.name, content)
