"""
Pytest configuration and fixtures
"""

import pytest
from datetime import datetime, timedelta, timezone
from taskmaster.services.storage import FileStorage
from taskmaster.services.task_manager import TaskManager


class FakeClock:
    """Controllable replacement for get_current_datetime"""
    
    def __init__(self, start: datetime):
        self.now = start
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def data_path(tmp_path):
    """Path of the tasks file inside a temporary directory"""
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def backup_dir(tmp_path):
    """Temporary backup directory"""
    return tmp_path / "data" / "backups"


@pytest.fixture
def storage(data_path, backup_dir):
    """File storage with temporary files"""
    return FileStorage(data_path, backup_dir)


@pytest.fixture
def task_manager(storage):
    """Task manager on top of temporary storage"""
    return TaskManager(storage)


@pytest.fixture
def clock(monkeypatch):
    """Frozen clock used by the task manager, advanced manually"""
    fake = FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
    monkeypatch.setattr("taskmaster.services.task_manager.get_current_datetime", fake)
    return fake
