"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - The persisted catalog is reached only through CatalogStorage

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Sync methods: the storage is a single local document, there is no IO to overlap
"""

from typing import Protocol


class CatalogStorage(Protocol):
    """Contract for the persisted catalog document, implemented by the shell."""
    def read(self) -> str | None: ...
    def write(self, text: str) -> None: ...
    def health_check(self) -> bool: ...
