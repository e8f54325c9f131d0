# ============================================================================
# ZIP ARCHIVE
# ============================================================================
# EPOCH: 1 - SQL EXPORT
# STATUS: Infrastructure - Artifact packing
# PURPOSE: Compress the staged SQL directory into a single archive
# CREATED: 19 OCT 2026
# ============================================================================
"""
ZIP archive packing for export artifacts.

Entries are stored relative to the packed directory, so an archive of
``<temp>/sql`` contains ``<name>.sql`` at its root.
"""

import zipfile
from pathlib import Path
from typing import List, Union

from core.errors import ArtifactIOError
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)

PathLike = Union[str, Path]


class ZipArchiver:
    """Packs a directory tree into a deflated ZIP file."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def pack(self, directory: PathLike, archive_path: PathLike) -> Path:
        """
        Pack every file under ``directory`` into ``archive_path``.

        Returns:
            Path of the written archive

        Raises:
            ArtifactIOError: Directory missing or archive not writable
        """
        source = Path(directory)
        target = Path(archive_path)
        if not source.is_dir():
            raise ArtifactIOError(
                f"Cannot pack {source}: not a directory",
                operation="pack archive",
                object_name=str(target),
            )

        entries: List[Path] = sorted(p for p in source.rglob("*") if p.is_file())
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(target, "w", self.compression) as zf:
                for path in entries:
                    zf.write(path, arcname=path.relative_to(source).as_posix())
        except OSError as e:
            raise ArtifactIOError(
                f"Failed to write archive {target}: {e}",
                operation="pack archive",
                object_name=str(target),
            ) from e

        logger.debug(f"Packed {len(entries)} file(s) into {target}")
        return target


__all__ = ["ZipArchiver"]
