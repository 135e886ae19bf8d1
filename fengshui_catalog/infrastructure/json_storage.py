"""JSON Document Storage: the catalog's single persisted document on disk.

Invariants:
    - read() returns None when no document has been written yet
    - write() replaces the whole document atomically (temp file + os.replace)
    - OSError on read → FileReadError; OSError on write → WriteError (core/errors.py)
    - Text is UTF-8 both ways
"""

import logging
import os
import tempfile
from pathlib import Path

from fengshui_catalog.core.errors import ErrorContext, FileReadError, WriteError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Stores the catalog as one JSON file, like a single localStorage key."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> str | None:
        """Return the stored document text, or None if there is none."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise FileReadError(
                str(e), ErrorContext(file_name=str(self.path)),
            ) from e

    def write(self, text: str) -> None:
        """Replace the stored document with text."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(text)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise WriteError(
                str(e), ErrorContext(file_name=str(self.path)),
            ) from e

    def health_check(self) -> bool:
        """Check the document's directory can be written (for readiness probes)."""
        directory = self.path.parent
        if not directory.exists():
            directory = directory.parent
        return directory.is_dir() and os.access(directory, os.W_OK)
