import json
from datetime import datetime, timedelta, timezone

from fakes import FakeDriveService
from nursenotes.services.drive import DriveBackup, backup_file_name

NOW = datetime(2026, 3, 5, 12, 0, 0, 123000, tzinfo=timezone.utc)


def test_backup_file_name():
    assert backup_file_name(NOW) == "nursenotes-backup-2026-03-05T12-00-00-123Z.json"


def test_restore_without_folder():
    drive = DriveBackup(FakeDriveService(), folder_name="Backups")

    assert drive.restore() == {"success": False, "message": "No backup folder found"}


def test_restore_with_empty_folder():
    drive = DriveBackup(FakeDriveService(), folder_name="Backups")
    drive.ensure_folder()

    assert drive.restore() == {"success": False, "message": "No backup files found"}


def test_backup_creates_folder_and_file_then_restores():
    service = FakeDriveService(now=NOW)
    drive = DriveBackup(service, folder_name="Backups")

    res = drive.backup({"notes": [{"slug": "a"}]}, now=NOW)

    assert res["fileName"] == backup_file_name(NOW)
    assert [f["name"] for f in service.files_] == ["Backups", res["fileName"]]
    restored = drive.restore()
    assert restored["success"] is True
    assert restored["data"] == {"notes": [{"slug": "a"}]}
    assert restored["fileName"] == res["fileName"]


def test_recent_backup_is_updated_in_place():
    service = FakeDriveService(now=NOW)
    drive = DriveBackup(service, folder_name="Backups")
    first = drive.backup({"v": 1}, now=NOW)

    second = drive.backup({"v": 2}, now=NOW + timedelta(minutes=30))

    assert second["fileName"] == first["fileName"]
    assert len(service.files_) == 2
    assert service.updates
    assert json.loads(service.contents[service.updates[-1]]) == {"v": 2}


def test_old_backup_gets_a_new_file():
    service = FakeDriveService(now=NOW)
    drive = DriveBackup(service, folder_name="Backups")
    drive.backup({"v": 1}, now=NOW)

    later = NOW + timedelta(hours=2)
    service.now = later
    res = drive.backup({"v": 2}, now=later)

    assert res["fileName"] == backup_file_name(later)
    assert len(service.files_) == 3
    assert drive.restore()["data"] == {"v": 2}
