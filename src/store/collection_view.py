"""Lazy, read-only collection views over archive directories.

A view is sized, iterable, and supports membership tests, but never
materializes its elements: each iteration re-lists the source directories
and decodes one file at a time. Views reflect the directory state
approximately at iteration time. Mutating operations raise
``ArchiveUnsupportedOperationError`` and never touch the backing files.
"""

from __future__ import annotations

from collections.abc import Collection
from pathlib import PurePosixPath
from typing import Any, Generic, Iterator, NoReturn, TypeVar

from core.errors import ArchiveError, ArchiveUnsupportedOperationError
from store.addressing import address_of
from store.directory_store import DirectoryStore

ElementT = TypeVar("ElementT")


class ArchiveCollectionView(Collection, Generic[ElementT]):
    """Read-only projection over one or more category directories."""

    def __init__(
        self,
        directory_store: DirectoryStore,
        source_dirs: tuple[PurePosixPath, ...],
        element_types: tuple[type, ...],
        label: str,
    ) -> None:
        """Create a view.

        Args:
            directory_store: Store used to list and decode element files.
            source_dirs: Category directories relative to the archive root.
            element_types: Element classes this view yields.
            label: Display name used in reprs and error messages.
        """
        self._directory_store = directory_store
        self._source_dirs = source_dirs
        self._element_types = element_types
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    def __len__(self) -> int:
        return sum(self._directory_store.count_entries(path) for path in self._source_dirs)

    def __iter__(self) -> Iterator[ElementT]:
        for source_dir in self._source_dirs:
            for entry_file in self._directory_store.iter_entry_files(source_dir):
                result = self._directory_store.read_file(entry_file)
                if result.found and isinstance(result.element, self._element_types):
                    yield result.element  # type: ignore[misc]

    def __contains__(self, candidate: object) -> bool:
        if not isinstance(candidate, self._element_types):
            return False
        try:
            address = address_of(candidate)  # type: ignore[arg-type]
        except ArchiveError:
            return False
        if address.directory not in self._source_dirs:
            return False
        return self._directory_store.read(address.relative_path).found

    def __repr__(self) -> str:
        dirs = ", ".join(str(path) for path in self._source_dirs)
        return f"ArchiveCollectionView({self._label!r}, dirs=[{dirs}])"

    def __getitem__(self, index: Any) -> NoReturn:
        self._unsupported("index access")

    def __setitem__(self, index: Any, value: Any) -> NoReturn:
        self._unsupported("item assignment")

    def __delitem__(self, index: Any) -> NoReturn:
        self._unsupported("item deletion")

    def add(self, element: Any) -> NoReturn:
        self._unsupported("add")

    def append(self, element: Any) -> NoReturn:
        self._unsupported("append")

    def extend(self, elements: Any) -> NoReturn:
        self._unsupported("extend")

    def insert(self, index: Any, element: Any) -> NoReturn:
        self._unsupported("insert")

    def remove(self, element: Any) -> NoReturn:
        self._unsupported("remove")

    def discard(self, element: Any) -> NoReturn:
        self._unsupported("discard")

    def pop(self, *args: Any) -> NoReturn:
        self._unsupported("pop")

    def clear(self) -> NoReturn:
        self._unsupported("clear")

    def _unsupported(self, operation: str) -> NoReturn:
        raise ArchiveUnsupportedOperationError(
            f"Cannot {operation} on read-only archive view {self._label!r}. "
            "Use the archive store add operations or set_archive_contents instead."
        )
