"""Runtime configuration model for the archive store.

This module owns all environment variable and connector property parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from core.constants import (
    ARCHIVE_STORE_NAME_ENV,
    ARCHIVE_STORE_NAME_PROPERTY,
    DEFAULT_ARCHIVE_STORE_NAME,
    FALSE_FLAG_VALUES,
    KEEP_VERSION_HISTORY_ENV,
    KEEP_VERSION_HISTORY_PROPERTY,
    S3_PROFILE_ENV,
    S3_REGION_ENV,
    TRUE_FLAG_VALUES,
)
from core.errors import ArchiveConfigError


@dataclass(frozen=True)
class ArchiveStoreConfig:
    """Validated runtime configuration.

    Attributes:
        store_root: Base directory of the archive tree.
        keep_version_history: Keep one file per element version plus a latest alias.
        s3_region: Optional default AWS region for S3 exports.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    store_root: Path
    keep_version_history: bool = False
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "ArchiveStoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ArchiveConfigError: If environment values are invalid.
        """
        store_name = os.getenv(ARCHIVE_STORE_NAME_ENV) or str(DEFAULT_ARCHIVE_STORE_NAME)
        history_value = os.getenv(KEEP_VERSION_HISTORY_ENV)
        return cls(
            store_root=_resolve_store_root(store_name),
            keep_version_history=_parse_history_flag(history_value, KEEP_VERSION_HISTORY_ENV),
            s3_region=os.getenv(S3_REGION_ENV),
            s3_profile=os.getenv(S3_PROFILE_ENV),
        )

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, object] | None,
        default_store_name: str = str(DEFAULT_ARCHIVE_STORE_NAME),
    ) -> "ArchiveStoreConfig":
        """Build config from connector-style configuration properties.

        Args:
            properties: Mapping that may hold ``archiveStoreName`` and
                ``keepVersionHistory``.
            default_store_name: Store name used when none is supplied.

        Returns:
            A validated config object.

        Raises:
            ArchiveConfigError: If property values are invalid.
        """
        properties = properties or {}
        raw_store_name = properties.get(ARCHIVE_STORE_NAME_PROPERTY)
        if raw_store_name is not None and not isinstance(raw_store_name, (str, Path)):
            raise ArchiveConfigError(
                f"Invalid {ARCHIVE_STORE_NAME_PROPERTY} value: expected a path string, "
                f"got {type(raw_store_name).__name__}. Supply a directory path."
            )
        store_name = str(raw_store_name) if raw_store_name else default_store_name
        history_flag = False
        if KEEP_VERSION_HISTORY_PROPERTY in properties:
            history_flag = _parse_history_flag(
                properties[KEEP_VERSION_HISTORY_PROPERTY],
                KEEP_VERSION_HISTORY_PROPERTY,
                present_means_true=True,
            )
        return cls(store_root=_resolve_store_root(store_name), keep_version_history=history_flag)


def _resolve_store_root(store_name: str) -> Path:
    return Path(store_name).expanduser().resolve()


def _parse_history_flag(
    raw_value: object,
    source_name: str,
    present_means_true: bool = False,
) -> bool:
    """Parse the version history flag.

    Args:
        raw_value: Raw flag value from environment or properties.
        source_name: Variable or property name for error messages.
        present_means_true: Treat a present ``None`` value as enabled.

    Returns:
        Parsed boolean flag.

    Raises:
        ArchiveConfigError: If value cannot be interpreted as a boolean.
    """
    if raw_value is None:
        return present_means_true
    if isinstance(raw_value, bool):
        return raw_value
    normalized = str(raw_value).strip().lower()
    if normalized in FALSE_FLAG_VALUES:
        return False
    if normalized in TRUE_FLAG_VALUES:
        return True
    raise ArchiveConfigError(
        f"Invalid {source_name} value: expected a boolean flag, got '{raw_value}'. "
        f"Use one of {', '.join(TRUE_FLAG_VALUES + FALSE_FLAG_VALUES[1:])}."
    )
