"""
File storage service for persisting the task collection
"""

import json
import os
import re
import shutil
from typing import List, Optional, Iterable, Union
from pathlib import Path
from pydantic import ValidationError as PydanticValidationError

from taskmaster.config.constants import (
    BACKUP_PREFIX,
    BACKUP_SUFFIX,
    BACKUP_KEEP_COUNT,
    JSON_INDENT,
)
from taskmaster.models.task import Task
from taskmaster.models.response import Success, Result
from taskmaster.utils.date_utils import get_current_datetime
from taskmaster.utils.error_handler import BackupNotFoundError, StorageError, handle_error
from taskmaster.utils.logger import logger

BACKUP_NAME_RE = re.compile(
    rf"^{re.escape(BACKUP_PREFIX)}[0-9TZ-]+{re.escape(BACKUP_SUFFIX)}$"
)


def backup_timestamp() -> str:
    """
    Current UTC time as a file-name safe timestamp

    Colons and dots are replaced with dashes; lexical order equals
    chronological order.
    """
    now = get_current_datetime()
    return now.strftime("%Y-%m-%dT%H:%M:%S.%fZ").replace(":", "-").replace(".", "-")


class FileStorage:
    """Whole-collection JSON file storage with timestamped backups"""

    def __init__(
        self,
        data_path: Union[str, Path],
        backup_dir: Union[str, Path],
        keep_backups: int = BACKUP_KEEP_COUNT,
    ):
        """
        Initialize file storage

        Args:
            data_path: Path to the backing JSON file
            backup_dir: Directory holding backup snapshots
            keep_backups: Number of backups kept after each backup
        """
        self.data_path = Path(data_path)
        self.backup_dir = Path(backup_dir)
        self.keep_backups = keep_backups
        self.logger = logger
        self._ensure_directories()

    def _ensure_directories(self):
        """Create data and backup directories if missing"""
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def read_all(self) -> List[Task]:
        """
        Read the whole task collection

        A missing file is a first run and yields an empty collection.
        Unreadable or malformed files are logged and also yield an empty
        collection. Individual records that fail validation are skipped.

        Returns:
            Tasks in storage order
        """
        if not self.data_path.exists():
            return []

        try:
            with open(self.data_path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read tasks from {self.data_path}: {e}")
            return []

        if not isinstance(raw, list):
            self.logger.error(
                f"Failed to read tasks from {self.data_path}: "
                f"expected a list, got {type(raw).__name__}"
            )
            return []

        tasks = []
        for index, record in enumerate(raw):
            try:
                tasks.append(Task.from_storage(record))
            except PydanticValidationError as e:
                self.logger.warning(f"Skipping invalid task record #{index} in {self.data_path}: {e}")

        self.logger.debug(f"Loaded {len(tasks)} tasks from {self.data_path}")
        return tasks

    def write_all(self, tasks: Iterable[Task]) -> Result:
        """
        Replace the backing file with the given collection

        The collection is written to a temporary sibling and moved into
        place, so a failed write leaves the previous file intact.

        Args:
            tasks: Full task collection

        Returns:
            Success or Failure with the underlying error as details
        """
        tmp_path = self.data_path.with_name(self.data_path.name + ".tmp")
        try:
            data = [task.to_storage() for task in tasks]
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=JSON_INDENT)
            os.replace(tmp_path, self.data_path)
        except OSError as e:
            self._discard(tmp_path)
            return handle_error(StorageError("Failed to save tasks", details=e))

        self.logger.debug(f"Saved {len(data)} tasks to {self.data_path}")
        return Success()

    def backup(self) -> Result:
        """
        Copy the backing file into the backup directory

        Succeeds without creating a file when there is nothing to back up.
        Old backups beyond keep_backups are pruned afterwards.

        Returns:
            Success with the backup path, or Failure
        """
        backup_path = self._next_backup_path()
        try:
            if self.data_path.exists():
                # copyfile, not copy2: pruning relies on the backup's own mtime
                shutil.copyfile(self.data_path, backup_path)
                self.logger.info(f"Created backup {backup_path}")
            else:
                self.logger.debug(f"No data file at {self.data_path}, nothing to back up")
        except OSError as e:
            return handle_error(StorageError("Failed to create backup", details=e))

        self._prune_backups(self.keep_backups)
        return Success(data=str(backup_path))

    def _next_backup_path(self) -> Path:
        backup_path = self.backup_dir / f"{BACKUP_PREFIX}{backup_timestamp()}{BACKUP_SUFFIX}"
        while backup_path.exists():
            backup_path = self.backup_dir / f"{BACKUP_PREFIX}{backup_timestamp()}{BACKUP_SUFFIX}"
        return backup_path

    def _prune_backups(self, keep_count: int):
        """Delete all but the keep_count most recently modified backups"""
        try:
            entries = [
                path for path in self.backup_dir.iterdir()
                if path.is_file() and BACKUP_NAME_RE.match(path.name)
            ]
            entries.sort(key=lambda p: (p.stat().st_mtime_ns, p.name), reverse=True)
        except OSError as e:
            self.logger.warning(f"Failed to list backups for pruning: {e}")
            return

        for path in entries[keep_count:]:
            try:
                path.unlink()
                self.logger.debug(f"Pruned old backup {path.name}")
            except OSError as e:
                self.logger.warning(f"Failed to prune backup {path.name}: {e}")

    def list_backups(self) -> List[str]:
        """
        List backup file names, newest first

        Returns:
            Backup file names sorted descending
        """
        try:
            names = [
                path.name for path in self.backup_dir.iterdir()
                if BACKUP_NAME_RE.match(path.name)
            ]
        except OSError as e:
            self.logger.warning(f"Failed to list backups in {self.backup_dir}: {e}")
            return []
        return sorted(names, reverse=True)

    def restore(self, backup_filename: str) -> Result:
        """
        Overwrite the backing file with a backup

        No backup of the current file is taken first.

        Args:
            backup_filename: Backup file name inside the backup directory

        Returns:
            Success, or Failure if the backup is missing or the copy fails
        """
        backup_path = self._resolve_backup(backup_filename)
        if backup_path is None:
            return handle_error(BackupNotFoundError(backup_filename))

        try:
            shutil.copyfile(backup_path, self.data_path)
        except OSError as e:
            return handle_error(StorageError("Failed to restore backup", details=e))

        self.logger.info(f"Restored {self.data_path} from {backup_filename}")
        return Success(message=f"Restored from {backup_filename}")

    def _resolve_backup(self, backup_filename: str) -> Optional[Path]:
        # Only plain names inside the backup directory are accepted
        if not backup_filename or Path(backup_filename).name != backup_filename:
            return None
        backup_path = self.backup_dir / backup_filename
        if not backup_path.is_file():
            return None
        return backup_path

    @staticmethod
    def _discard(path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove temporary file {path}: {e}")
