"""
Tests for file storage
"""

import json
import logging
import os
import shutil
import pytest
from datetime import datetime, timezone
from taskmaster.models.task import Task, TaskStatus, Priority
from taskmaster.services.storage import FileStorage, BACKUP_NAME_RE


def make_task(task_id="task_1_aaaaaaaa", title="Write report", **kwargs):
    created = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
    fields = {
        "id": task_id,
        "title": title,
        "created_at": created,
        "updated_at": created,
    }
    fields.update(kwargs)
    return Task(**fields)


def test_directories_created(tmp_path):
    """Test that missing data and backup directories are created"""
    data_path = tmp_path / "a" / "b" / "tasks.json"
    backup_dir = tmp_path / "c" / "d" / "backups"

    FileStorage(data_path, backup_dir)

    assert data_path.parent.is_dir()
    assert backup_dir.is_dir()
    assert not data_path.exists()


def test_read_missing_file_returns_empty(storage):
    """Test first run: no data file means no tasks"""
    assert storage.read_all() == []


def test_write_and_read_round_trip(storage):
    """Test that written tasks read back field-for-field"""
    tasks = [
        make_task(),
        make_task(
            task_id="task_2_bbbbbbbb",
            title="Ship release",
            description="Tag and publish",
            status=TaskStatus.DONE,
            priority=Priority.HIGH,
            tags=["work", "release", "work"],
            due_date=datetime(2026, 3, 5, 17, 0, tzinfo=timezone.utc),
            completed_at=datetime(2026, 3, 2, 10, 15, 30, 123456, tzinfo=timezone.utc),
        ),
    ]

    result = storage.write_all(tasks)

    assert result.success
    assert storage.read_all() == tasks


def test_file_format(storage, data_path):
    """Test camelCase keys, ISO dates and omitted optional fields"""
    storage.write_all([make_task(due_date=datetime(2026, 3, 5, tzinfo=timezone.utc))])

    with open(data_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    assert isinstance(data, list)
    record = data[0]
    assert record["id"] == "task_1_aaaaaaaa"
    assert record["status"] == "todo"
    assert record["priority"] == "medium"
    assert record["tags"] == []
    assert record["dueDate"].startswith("2026-03-05T00:00:00")
    assert record["createdAt"].startswith("2026-03-01T08:30:00")
    assert "description" not in record
    assert "completedAt" not in record
    assert "due_date" not in record


def test_read_accepts_offset_dates(storage, data_path):
    """Test that dates with offsets resolve to the same instant"""
    data_path.write_text(json.dumps([{
        "id": "task_1",
        "title": "Offset",
        "status": "in_progress",
        "priority": "low",
        "tags": [],
        "createdAt": "2026-03-01T11:30:00.000+03:00",
        "updatedAt": "2026-03-01T08:30:00.000Z",
    }]), encoding="utf-8")

    tasks = storage.read_all()

    assert len(tasks) == 1
    assert tasks[0].status == TaskStatus.IN_PROGRESS
    assert tasks[0].created_at == datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
    assert tasks[0].created_at == tasks[0].updated_at


def test_read_malformed_json_returns_empty(storage, data_path, caplog):
    """Test that unparsable content is logged and treated as empty"""
    data_path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="taskmaster"):
        assert storage.read_all() == []

    assert "Failed to read tasks" in caplog.text


def test_read_non_list_returns_empty(storage, data_path):
    """Test that a JSON object at the top level is treated as empty"""
    data_path.write_text(json.dumps({"tasks": []}), encoding="utf-8")

    assert storage.read_all() == []


def test_read_skips_invalid_records(storage, data_path, caplog):
    """Test that one broken record does not hide the others"""
    good = make_task().to_storage()
    bad = dict(good, id="task_bad", status="archived")
    data_path.write_text(json.dumps([bad, good]), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="taskmaster"):
        tasks = storage.read_all()

    assert [t.id for t in tasks] == ["task_1_aaaaaaaa"]
    assert "Skipping invalid task record #0" in caplog.text


def test_write_failure_returns_failure_and_keeps_file(storage, data_path, monkeypatch):
    """Test that a failed write is reported and the previous file survives"""
    storage.write_all([make_task()])
    before = data_path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", broken_replace)
    result = storage.write_all([make_task(), make_task(task_id="task_2")])

    assert not result.success
    assert result.error == "Failed to save tasks"
    assert result.error_code == "storage_error"
    assert isinstance(result.details, OSError)
    assert data_path.read_text(encoding="utf-8") == before
    assert not data_path.with_name("tasks.json.tmp").exists()


def test_backup_without_data_file(storage, backup_dir):
    """Test that backing up before the first save succeeds without a file"""
    result = storage.backup()

    assert result.success
    assert BACKUP_NAME_RE.match(os.path.basename(result.data))
    assert list(backup_dir.iterdir()) == []


def test_backup_copies_data_file(storage, data_path):
    """Test that a backup is a copy of the data file"""
    storage.write_all([make_task()])

    result = storage.backup()

    assert result.success
    backup_name = os.path.basename(result.data)
    assert backup_name.startswith("tasks_backup_")
    assert backup_name.endswith(".json")
    assert ":" not in backup_name
    with open(result.data, 'r', encoding='utf-8') as f:
        assert f.read() == data_path.read_text(encoding="utf-8")
    assert storage.list_backups() == [backup_name]


def test_backup_pruning_keeps_most_recent(data_path, backup_dir):
    """Test that after N+1 backups only the newest N remain"""
    storage = FileStorage(data_path, backup_dir, keep_backups=3)
    storage.write_all([make_task()])

    created = []
    for _ in range(4):
        result = storage.backup()
        assert result.success
        created.append(os.path.basename(result.data))

    remaining = storage.list_backups()
    assert len(remaining) == 3
    assert set(remaining) == set(created[1:])
    assert created[0] not in remaining


def test_list_backups_sorted_descending(storage, backup_dir):
    """Test that only backup files are listed, newest first"""
    names = [
        "tasks_backup_2026-01-02T10-00-00-000000Z.json",
        "tasks_backup_2026-01-01T10-00-00-000000Z.json",
        "tasks_backup_2026-01-03T09-59-59-999999Z.json",
    ]
    for name in names:
        (backup_dir / name).write_text("[]", encoding="utf-8")
    (backup_dir / "notes.txt").write_text("x", encoding="utf-8")
    (backup_dir / "tasks.json").write_text("[]", encoding="utf-8")

    assert storage.list_backups() == [
        "tasks_backup_2026-01-03T09-59-59-999999Z.json",
        "tasks_backup_2026-01-02T10-00-00-000000Z.json",
        "tasks_backup_2026-01-01T10-00-00-000000Z.json",
    ]


def test_restore_overwrites_data_file(storage):
    """Test restoring a backup replaces the current collection"""
    original = [make_task()]
    storage.write_all(original)
    backup_name = os.path.basename(storage.backup().data)

    storage.write_all([make_task(task_id="task_other", title="Changed")])
    result = storage.restore(backup_name)

    assert result.success
    assert storage.read_all() == original
    # No implicit backup before restore
    assert storage.list_backups() == [backup_name]


def test_restore_missing_backup(storage):
    """Test restoring an unknown backup fails with not found"""
    storage.write_all([make_task()])

    result = storage.restore("tasks_backup_2020-01-01T00-00-00-000000Z.json")

    assert not result.success
    assert result.error_code == "backup_not_found"
    assert len(storage.read_all()) == 1


def test_restore_rejects_path_components(storage, tmp_path):
    """Test that names outside the backup directory are treated as missing"""
    outside = tmp_path / "evil.json"
    outside.write_text("[]", encoding="utf-8")
    storage.write_all([make_task()])

    result = storage.restore("../../evil.json")

    assert not result.success
    assert result.error_code == "backup_not_found"
    assert len(storage.read_all()) == 1


def broken_copyfile(src, dst):
    raise OSError(13, "Permission denied")


def test_backup_copy_failure(storage, backup_dir, monkeypatch):
    """Test that a failed backup copy is reported as a storage error"""
    storage.write_all([make_task()])
    monkeypatch.setattr(shutil, "copyfile", broken_copyfile)

    result = storage.backup()

    assert not result.success
    assert result.error == "Failed to create backup"
    assert result.error_code == "storage_error"
    assert isinstance(result.details, OSError)
    assert list(backup_dir.iterdir()) == []


def test_restore_copy_failure_keeps_data_file(storage, data_path, monkeypatch):
    """Test that a failed restore copy is reported and the data file survives"""
    storage.write_all([make_task()])
    backup_name = os.path.basename(storage.backup().data)
    storage.write_all([make_task(task_id="task_other", title="Changed")])
    before = data_path.read_text(encoding="utf-8")
    monkeypatch.setattr(shutil, "copyfile", broken_copyfile)

    result = storage.restore(backup_name)

    assert not result.success
    assert result.error == "Failed to restore backup"
    assert result.error_code == "storage_error"
    assert data_path.read_text(encoding="utf-8") == before
