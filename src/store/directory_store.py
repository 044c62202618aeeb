"""Directory-backed element persistence.

This module reads and writes one JSON file per archive element. With
version history enabled each identity becomes a directory holding one
``<version>.json`` per written version plus a ``0.json`` alias that
always mirrors the latest write. Without history each identity is a
single ``<key>.json`` file overwritten in place.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
import shutil
from typing import Iterator

from core.constants import JSON_FILE_SUFFIX, LATEST_VERSION_ALIAS
from core.diagnostics import DiagnosticSink, StructlogDiagnosticSink
from core.errors import ArchiveCodecError, ArchiveStoreError
from core.logging_config import get_logger
from core.types import ArchiveElement
from store.addressing import CATEGORY_DIRECTORIES
from store.element_codec import ElementCodec
from store.read_result import ReadResult

_LOGGER = get_logger(__name__)


class DirectoryStore:
    """Read/write primitive for element files under one archive root.

    The store assumes a single writer and takes no locks; concurrent
    writes to the same identity are last-writer-wins.
    """

    def __init__(
        self,
        root: Path,
        keep_version_history: bool = False,
        codec: ElementCodec | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        """Create a directory store.

        Args:
            root: Archive root directory.
            keep_version_history: Keep one file per version plus a latest alias.
            codec: Element codec; a new stateless codec when omitted.
            diagnostics: Failure sink; structlog-backed when omitted.
        """
        self._root = root
        self._keep_version_history = keep_version_history
        self._codec = codec or ElementCodec()
        self._diagnostics = diagnostics or StructlogDiagnosticSink()

    @property
    def root(self) -> Path:
        """Return the archive root directory."""
        return self._root

    @property
    def keep_version_history(self) -> bool:
        """Return whether per-version files are kept."""
        return self._keep_version_history

    def initialize(self) -> None:
        """Create the archive root and every category directory.

        Safe on a fresh or an existing tree; existing files are untouched.

        Raises:
            ArchiveStoreError: If a directory cannot be created.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            for category_dir in CATEGORY_DIRECTORIES.values():
                (self._root / category_dir).mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise ArchiveStoreError(
                f"Failed to create archive directories under {self._root}: {error}. "
                "Check write permissions for the archive store location."
            ) from error
        _LOGGER.info(
            "archive_initialized",
            root=str(self._root),
            keep_version_history=self._keep_version_history,
        )

    def remove(self) -> None:
        """Recursively delete the archive root.

        Raises:
            ArchiveStoreError: If the tree cannot be deleted.
        """
        if not self._root.exists():
            return
        try:
            shutil.rmtree(self._root)
        except OSError as error:
            raise ArchiveStoreError(
                f"Failed to remove archive directory {self._root}: {error}. "
                "Close programs holding archive files open and retry."
            ) from error
        _LOGGER.info("archive_removed", root=str(self._root))

    def element_file(self, relative_path: PurePosixPath, version: int = LATEST_VERSION_ALIAS) -> Path:
        """Return the file holding one identity at one version.

        Args:
            relative_path: Element path from the addressing scheme.
            version: Element version; ignored when history is disabled.

        Returns:
            Absolute file path.
        """
        base_path = self._root / relative_path
        if self._keep_version_history:
            return base_path / f"{version}{JSON_FILE_SUFFIX}"
        return base_path.with_name(base_path.name + JSON_FILE_SUFFIX)

    def write(self, relative_path: PurePosixPath, version: int, element: ArchiveElement) -> bool:
        """Serialize and persist one element.

        Args:
            relative_path: Element path from the addressing scheme.
            version: Element version.
            element: Element to persist.

        Returns:
            ``True`` when every target file was written.
        """
        try:
            encoded = self._codec.encode(element)
        except ArchiveCodecError as error:
            self._report("encode", self._root / relative_path, error)
            return False
        targets = [self.element_file(relative_path, version)]
        if self._keep_version_history and version != LATEST_VERSION_ALIAS:
            targets.append(self.element_file(relative_path, LATEST_VERSION_ALIAS))
        for target in targets:
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(encoded, encoding="utf-8")
            except OSError as error:
                self._report("write", target, error)
                return False
        _LOGGER.debug("archive_element_written", path=str(targets[0]), version=version)
        return True

    def read(self, relative_path: PurePosixPath, version: int = LATEST_VERSION_ALIAS) -> ReadResult:
        """Read one element identity at one version.

        Args:
            relative_path: Element path from the addressing scheme.
            version: Element version; ``0`` reads the latest alias.

        Returns:
            Typed read outcome.
        """
        return self.read_file(self.element_file(relative_path, version))

    def read_element(
        self,
        relative_path: PurePosixPath,
        version: int = LATEST_VERSION_ALIAS,
    ) -> ArchiveElement | None:
        """Read one element, returning ``None`` when missing or unreadable."""
        return self.read(relative_path, version).element

    def read_file(self, file_path: Path) -> ReadResult:
        """Decode one element file.

        Args:
            file_path: Absolute element file path.

        Returns:
            Typed read outcome; I/O and decode failures are reported.
        """
        try:
            text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ReadResult.missing()
        except UnicodeDecodeError as error:
            self._report("decode", file_path, error)
            return ReadResult.failed(str(error))
        except OSError as error:
            self._report("read", file_path, error)
            return ReadResult.failed(str(error))
        try:
            return ReadResult.of(self._codec.decode(text))
        except ArchiveCodecError as error:
            self._report("decode", file_path, error)
            return ReadResult.failed(str(error))

    def list_versions(self, relative_path: PurePosixPath) -> tuple[int, ...]:
        """List the stored versions of one identity, excluding the latest alias.

        Args:
            relative_path: Element path from the addressing scheme.

        Returns:
            Ascending version numbers; empty when history is disabled.
        """
        if not self._keep_version_history:
            return ()
        versions: list[int] = []
        for name, is_dir in self._list_entries(self._root / relative_path):
            stem = name.removesuffix(JSON_FILE_SUFFIX)
            if is_dir or stem == name or not stem.isdigit():
                continue
            if int(stem) != LATEST_VERSION_ALIAS:
                versions.append(int(stem))
        return tuple(sorted(versions))

    def count_entries(self, relative_dir: PurePosixPath) -> int:
        """Count element identities stored in one category directory."""
        return len(self._list_entries(self._root / relative_dir))

    def iter_entry_files(self, relative_dir: PurePosixPath) -> Iterator[Path]:
        """Yield the latest-content file of each identity in a directory.

        An identity is either a ``<key>.json`` file or a history directory,
        read through its ``0.json`` alias. Names are listed once per call;
        no directory handle stays open while the caller iterates.
        """
        category_dir = self._root / relative_dir
        for name, is_dir in self._list_entries(category_dir):
            if is_dir:
                yield category_dir / name / f"{LATEST_VERSION_ALIAS}{JSON_FILE_SUFFIX}"
            else:
                yield category_dir / name

    def _list_entries(self, directory: Path) -> list[tuple[str, bool]]:
        try:
            with os.scandir(directory) as entries:
                listed = [(entry.name, entry.is_dir()) for entry in entries]
        except FileNotFoundError:
            return []
        except OSError as error:
            self._report("list", directory, error)
            return []
        return [
            (name, is_dir)
            for name, is_dir in listed
            if is_dir or name.endswith(JSON_FILE_SUFFIX)
        ]

    def _report(self, action: str, path: Path, error: Exception) -> None:
        self._diagnostics.log_failure(action, str(path), type(error).__name__, str(error))
