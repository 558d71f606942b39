"""
Per-destination fetch policy.

Decides, for each destination in the script, whether the engine should
fetch it, leave it alone, or clear out a suspiciously small primary
document and fetch it again. The output directory of an earlier run doubles
as the resume marker, so the only state consulted is whether each file
exists and how big it is.
"""

import enum
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from answersheets.errors import FileSystemError
from utils.common import format_bytes
from utils.config import RESPONSE_FILE_NAME, RunConfig

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    FETCH = "fetch"
    SKIP_NOT_OF_INTEREST = "not_of_interest"
    SKIP_ALREADY_PRESENT = "already_present"
    REFETCH_TOO_SMALL = "refetch_too_small"


@dataclass(frozen=True)
class PathDecision:
    action: Action
    path: Path

    @property
    def should_fetch(self) -> bool:
        return self.action in (Action.FETCH, Action.REFETCH_TOO_SMALL)


class PathPolicy:
    """Decides what to do with each destination of one run."""

    def __init__(self, config: RunConfig, output_dir: Path):
        self.config = config
        self.output_dir = Path(output_dir)

    def _is_primary(self, relative_path: str) -> bool:
        return PurePosixPath(relative_path).name == RESPONSE_FILE_NAME

    def _matches_subject(self, relative_path: str) -> bool:
        return relative_path == f"{self.config.subject}/{RESPONSE_FILE_NAME}"

    def decide(self, relative_path: str) -> PathDecision:
        """Return the decision for *relative_path*, acting on it if it is a refetch.

        With a subject filter only that subject's primary document is
        fetched, whether or not it already exists. Without one, existing
        files are kept, except a primary document smaller than the
        ``redownload_smaller_than`` threshold: its whole directory is
        removed so the subject is downloaded again from scratch.

        Raises:
            FileSystemError: if an existing file cannot be inspected or removed.
        """
        path = self.output_dir / relative_path

        if self.config.subject is not None:
            if not self._matches_subject(relative_path):
                logger.info("    [SKIP] Not of interest: %s", relative_path)
                return PathDecision(Action.SKIP_NOT_OF_INTEREST, path)
            return PathDecision(Action.FETCH, path)

        if not path.exists():
            return PathDecision(Action.FETCH, path)

        threshold = self.config.redownload_smaller_than
        if threshold is not None and self._is_primary(relative_path):
            try:
                size = path.stat().st_size
            except OSError as exc:
                raise FileSystemError(f"Cannot inspect {path}: {exc}") from exc
            if size < threshold:
                logger.info("    [REFETCH] %s is only %s, removing %s",
                            relative_path, format_bytes(size), path.parent)
                self._remove_directory(path.parent)
                return PathDecision(Action.REFETCH_TOO_SMALL, path)

        logger.info("    [SKIP] Already exists: %s", relative_path)
        return PathDecision(Action.SKIP_ALREADY_PRESENT, path)

    def _remove_directory(self, directory: Path) -> None:
        try:
            if directory == self.output_dir:
                # Never remove the run's own output directory
                (directory / RESPONSE_FILE_NAME).unlink()
            else:
                shutil.rmtree(directory)
        except OSError as exc:
            raise FileSystemError(f"Cannot remove {directory}: {exc}") from exc
