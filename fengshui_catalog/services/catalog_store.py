"""Catalog Store: the owned catalog state bound to its persisted document.

Invariants:
    - The only way to mutate the catalog is save/edit/delete/import_* on this object
    - Every mutation is followed by a full persist of the catalog document
    - A failed persist never rolls back the mutation: memory and disk diverge
      until the next successful write
    - A failed load or import leaves the in-memory state exactly as it was
    - Every CatalogError is logged and handed to the notifier before it surfaces

Design Decisions:
    - Imperative shell around core: parsing, merging and remapping live in core/,
      this class only sequences them with storage IO
    - Notifier is a plain callable (the "blocking alert" of the UI); None = log only
    - Mutations return a MutationResult carrying the swallowed WriteError, so the
      API can report persisted=false without raising
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fengshui_catalog.core import messages
from fengshui_catalog.core.catalog_snapshot import dumps_snapshot, state_from_snapshot
from fengshui_catalog.core.catalog_state import CatalogState
from fengshui_catalog.core.domain_types import Category
from fengshui_catalog.core.errors import CatalogError, DecodeError, WriteError
from fengshui_catalog.core.legacy_import import parse_import
from fengshui_catalog.core.records import Record
from fengshui_catalog.core.repository_protocols import CatalogStorage
from fengshui_catalog.infrastructure.import_files import (
    check_import_name, decode_import_bytes, read_import_file,
)

logger = logging.getLogger(__name__)

Notifier = Callable[[CatalogError], None]


@dataclass
class MutationResult:
    """Outcome of one catalog mutation."""
    changed: bool
    record: Record | None = None
    write_error: WriteError | None = None

    @property
    def persisted(self) -> bool:
        return self.write_error is None


@dataclass
class ImportResult(MutationResult):
    """Outcome of replacing the catalog with an imported document."""
    counts: dict[str, int] = field(default_factory=dict)
    message: str = messages.IMPORT_SUCCEEDED


class CatalogStore:
    """Owns one CatalogState and keeps its persisted document in step."""

    def __init__(
        self,
        storage: CatalogStorage,
        notify: Notifier | None = None,
        state: CatalogState | None = None,
    ):
        self.storage = storage
        self._notify = notify
        self._state = state if state is not None else CatalogState()

    @property
    def state(self) -> CatalogState:
        return self._state

    # --- Reporting -------------------------------------------------------------

    def _report(self, error: CatalogError) -> None:
        logger.error(
            f"{type(error).__name__}: {error.message}",
            extra={"error_code": error.code, "file_name": error.context.file_name},
        )
        if self._notify is not None:
            self._notify(error)

    # --- Persistence -----------------------------------------------------------

    def load(self) -> CatalogState:
        """Replace in-memory state with the persisted document, if there is one."""
        try:
            text = self.storage.read()
        except CatalogError as e:
            self._report(e)
            raise
        if text is None:
            logger.info("No persisted catalog yet, starting empty")
            return self._state

        try:
            loaded = state_from_snapshot(json.loads(text))
        except (ValueError, RecursionError) as e:
            error = DecodeError(str(e))
            self._report(error)
            raise error from e

        self._state.replace_with(loaded)
        logger.info("Catalog loaded", extra={"counts": self._state.counts()})
        return self._state

    def persist(self) -> None:
        """Write the whole catalog. Raises WriteError; state is untouched either way."""
        text = dumps_snapshot(self._state)
        try:
            self.storage.write(text)
        except WriteError as e:
            self._report(e)
            raise

    def _persist_after_mutation(self) -> WriteError | None:
        try:
            self.persist()
        except WriteError as e:
            return e
        return None

    # --- Mutations -------------------------------------------------------------

    def save(
        self, category: Category, record: Record | Mapping[str, Any],
    ) -> MutationResult:
        """Append a new record to a category."""
        created = self._state.create(category, record)
        logger.info(
            "Record created",
            extra={"category": category.value, "record_id": created.id},
        )
        return MutationResult(
            changed=True, record=created,
            write_error=self._persist_after_mutation(),
        )

    def edit(
        self, category: Category, record_id: str, patch: Mapping[str, Any],
    ) -> MutationResult:
        """Merge patch into a record. Unknown id: nothing changes, no error."""
        updated = self._state.update(category, record_id, patch)
        if updated is None:
            logger.info(
                "Edit ignored, record not found",
                extra={"category": category.value, "record_id": record_id},
            )
        return MutationResult(
            changed=updated is not None, record=updated,
            write_error=self._persist_after_mutation(),
        )

    def delete(self, category: Category, record_id: str) -> MutationResult:
        """Remove a record. Unknown id: nothing changes, no error."""
        removed = self._state.delete(category, record_id)
        if removed:
            logger.info(
                "Record deleted",
                extra={"category": category.value, "record_id": record_id},
            )
        return MutationResult(
            changed=removed, write_error=self._persist_after_mutation(),
        )

    def import_text(self, text: str) -> ImportResult:
        """Replace the whole catalog with an import document (legacy schema allowed)."""
        try:
            imported = parse_import(text)
        except CatalogError as e:
            self._report(e)
            raise

        self._state.replace_with(imported)
        counts = self._state.counts()
        logger.info("Catalog imported", extra={"counts": counts})
        return ImportResult(
            changed=True, counts=counts,
            write_error=self._persist_after_mutation(),
        )

    def import_upload(self, file_name: str | None, content: bytes) -> ImportResult:
        """Import from uploaded bytes; the file name must end in .json."""
        try:
            check_import_name(file_name)
        except CatalogError as e:
            self._report(e)
            raise
        return self.import_text(decode_import_bytes(file_name, content))

    def import_file(self, path: str | Path) -> ImportResult:
        """Import from a .json file on disk."""
        try:
            text = read_import_file(path)
        except CatalogError as e:
            self._report(e)
            raise
        return self.import_text(text)

    # --- Queries ---------------------------------------------------------------

    def get(self, category: Category, record_id: str) -> Record | None:
        return self._state.get(category, record_id)

    def records(self, category: Category) -> list[Record]:
        return self._state.items(category)

    def search(
        self, query: str, category: Category | None = None,
    ) -> list[tuple[Category, Record]]:
        return self._state.search(query, category)

    def export_document(self, indent: int | None = 2) -> str:
        """Current-schema JSON of the whole catalog."""
        return dumps_snapshot(self._state, indent=indent)

    def health_check(self) -> bool:
        return self.storage.health_check()
