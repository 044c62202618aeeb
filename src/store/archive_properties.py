"""Archive header persistence.

This module reads and writes the single ``archiveProperties.json`` file
at the root of an archive tree.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import ARCHIVE_PROPERTIES_FILE_NAME
from core.diagnostics import DiagnosticSink
from core.errors import ArchiveCodecError
from core.types import ArchiveHeader
from store.element_codec import ElementCodec


class ArchivePropertiesStore:
    """Filesystem-backed archive header store."""

    def __init__(self, root: Path, codec: ElementCodec, diagnostics: DiagnosticSink) -> None:
        self._path = root / ARCHIVE_PROPERTIES_FILE_NAME
        self._codec = codec
        self._diagnostics = diagnostics

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> ArchiveHeader | None:
        """Read the archive header; ``None`` when missing or unreadable."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as error:
            self._report("decode", error)
            return None
        except OSError as error:
            self._report("read", error)
            return None
        try:
            return self._codec.decode_header(text)
        except ArchiveCodecError as error:
            self._report("decode", error)
            return None

    def write(self, header: ArchiveHeader) -> bool:
        """Replace the archive header; ``False`` when the write fails."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(self._codec.encode_header(header), encoding="utf-8")
        except OSError as error:
            self._report("write", error)
            return False
        return True

    def _report(self, action: str, error: Exception) -> None:
        self._diagnostics.log_failure(action, str(self._path), type(error).__name__, str(error))
