"""Packaging of a finished output directory into a zip archive."""

import logging
import zipfile
from pathlib import Path

from answersheets.errors import FileSystemError
from utils.common import format_bytes

logger = logging.getLogger(__name__)


def zip_directory(directory: Path) -> Path:
    """Zip *directory* to ``<directory>.zip`` beside it and return the archive path.

    Entries keep their path relative to the directory's parent, so the
    archive's single top-level entry is the directory itself. Files are
    added in sorted order with maximum deflate compression. An existing
    archive from an earlier run is replaced; the directory is never touched.

    Raises:
        FileSystemError: if the directory cannot be read or the archive written.
    """
    directory = Path(directory)
    zip_path = directory.parent / f"{directory.name}.zip"
    try:
        files = sorted(p for p in directory.rglob("*") if p.is_file())
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED,
                             compresslevel=9) as zf:
            for path in files:
                zf.write(path, arcname=path.relative_to(directory.parent).as_posix())
    except (OSError, zipfile.BadZipFile) as exc:
        raise FileSystemError(f"Cannot create archive {zip_path}: {exc}") from exc

    logger.info("  [ZIP] Created %s (%d file(s), %s)", zip_path, len(files),
                format_bytes(zip_path.stat().st_size))
    return zip_path
