from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path("cleanup.log")


@dataclass(frozen=True)
class FileTimes:
    modified: datetime
    created: datetime

    @property
    def newest(self) -> datetime:
        return max(self.modified, self.created)


@dataclass
class FolderResult:
    folder: Path
    files_seen: int = 0
    files_deleted: int = 0
    newest: Optional[datetime] = None
    cutoff: Optional[datetime] = None


@dataclass
class RunSummary:
    timestamp: datetime
    files_seen: int = 0
    files_deleted: int = 0
    folders: List[FolderResult] = field(default_factory=list)

    def add(self, result: FolderResult) -> None:
        self.folders.append(result)
        self.files_seen += result.files_seen
        self.files_deleted += result.files_deleted

    def format_line(self) -> str:
        return (
            f"{self.timestamp.isoformat(timespec='seconds')} - "
            f"files found: {self.files_seen}, deleted: {self.files_deleted}\n"
        )


def stat_times(path: Path) -> FileTimes:
    """
    Read modification and creation times for a file.

    Creation time is st_birthtime where the platform exposes it and st_ctime on
    Windows. Linux stat has no birth time, so modification time stands in.
    """
    st = path.stat()
    birth = getattr(st, "st_birthtime", None)
    if birth is None and platform.system() == "Windows":
        birth = st.st_ctime
    if birth is None:
        birth = st.st_mtime
    return FileTimes(
        modified=datetime.fromtimestamp(st.st_mtime),
        created=datetime.fromtimestamp(birth),
    )


class FolderCleanerService:
    def __init__(
        self,
        *,
        timestamps: Optional[Callable[[Path], FileTimes]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._timestamps = timestamps or stat_times
        self._clock = clock or (lambda: datetime.now().astimezone())

    def run(self, folders: Iterable[str | Path], days: int) -> RunSummary:
        """
        Clean every folder in order and return the combined totals.

        Folders that are missing, not directories, or cannot be listed are
        logged and skipped.
        """
        summary = RunSummary(timestamp=self._clock())

        for raw in folders:
            text = str(raw).strip()
            if not text:
                continue
            folder = Path(text)
            if not folder.is_dir():
                logger.warning("Folder '%s' not found or not a directory, skipping", folder)
                continue
            try:
                result = self.clean_folder(folder, days)
            except OSError as exc:
                logger.error("Failed to process folder '%s': %s", folder, exc)
                continue
            summary.add(result)

        return summary

    def clean_folder(self, folder: Path, days: int) -> FolderResult:
        """
        Delete files older than the folder's newest file minus ``days``.

        A file goes only when both its modification and creation times are
        strictly before the cutoff. Raises OSError if the folder cannot be listed.
        """
        folder = Path(folder)
        result = FolderResult(folder=folder)

        files = self._list_files(folder)
        result.files_seen = len(files)

        stamped: List[Tuple[Path, FileTimes]] = []
        for path in files:
            try:
                times = self._timestamps(path)
            except OSError as exc:
                logger.warning("Cannot read timestamps for %s: %s", path, exc)
                continue
            stamped.append((path, times))
            if result.newest is None or times.newest > result.newest:
                result.newest = times.newest

        if result.newest is None:
            logger.info("Folder %s has no files to analyse", folder)
            return result

        try:
            result.cutoff = result.newest - timedelta(days=days)
        except OverflowError:
            # Window reaches past the earliest representable date; nothing qualifies.
            result.cutoff = datetime.min
        logger.info("Folder: %s, newest: %s, cutoff: %s", folder, result.newest, result.cutoff)

        for path, times in stamped:
            if times.modified < result.cutoff and times.created < result.cutoff:
                try:
                    path.unlink()
                except OSError as exc:
                    logger.warning("Failed to delete %s: %s", path, exc)
                    continue
                logger.info("Deleted %s", path)
                result.files_deleted += 1

        return result

    @staticmethod
    def _list_files(folder: Path) -> List[Path]:
        # Regular files only; symlinks and subdirectories are left alone.
        files: List[Path] = []
        with os.scandir(folder) as entries:
            for entry in entries:
                try:
                    if entry.is_file(follow_symlinks=False):
                        files.append(Path(entry.path))
                except OSError as exc:
                    logger.warning("Cannot inspect %s: %s", entry.path, exc)
        return sorted(files)


def append_run_summary(log_path: Path, summary: RunSummary) -> None:
    with open(log_path, "a", encoding="utf-8") as handle:
        handle.write(summary.format_line())
