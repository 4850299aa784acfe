import io
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..config import settings

log = logging.getLogger(__name__)

FOLDER_MIME = "application/vnd.google-apps.folder"
BACKUP_PREFIX = "nursenotes-backup"
# a backup newer than this is overwritten instead of adding another file
UPDATE_WINDOW = timedelta(hours=1)


def build_drive_service(access_token: str):
    from google.oauth2.credentials import Credentials
    from googleapiclient.discovery import build

    credentials = Credentials(token=access_token)
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


def backup_file_name(now: datetime) -> str:
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{BACKUP_PREFIX}-{stamp.replace(':', '-').replace('.', '-')}.json"


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class DriveBackup:
    def __init__(self, service: Any, folder_name: Optional[str] = None):
        self.service = service
        self.folder_name = folder_name or settings.DRIVE_BACKUP_FOLDER

    def find_folder(self) -> Optional[str]:
        res = (
            self.service.files()
            .list(
                q=f"name='{self.folder_name}' and mimeType='{FOLDER_MIME}' and trashed=false",
                fields="files(id, name)",
            )
            .execute()
        )
        files = res.get("files", [])
        return files[0]["id"] if files else None

    def ensure_folder(self) -> str:
        folder_id = self.find_folder()
        if folder_id:
            return folder_id
        created = (
            self.service.files()
            .create(body={"name": self.folder_name, "mimeType": FOLDER_MIME}, fields="id")
            .execute()
        )
        log.info("created drive folder %s", self.folder_name)
        return created["id"]

    def latest_backup(self, folder_id: str) -> Optional[Dict[str, Any]]:
        res = (
            self.service.files()
            .list(
                q=f"'{folder_id}' in parents and name contains '{BACKUP_PREFIX}' and trashed=false",
                orderBy="createdTime desc",
                pageSize=1,
                fields="files(id, name, createdTime)",
            )
            .execute()
        )
        files = res.get("files", [])
        return files[0] if files else None

    def backup(self, data: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
        from googleapiclient.http import MediaIoBaseUpload

        now = now or datetime.now(timezone.utc)
        folder_id = self.ensure_folder()
        file_name = backup_file_name(now)
        payload = json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")
        media = MediaIoBaseUpload(io.BytesIO(payload), mimetype="application/json")

        latest = self.latest_backup(folder_id)
        created = _parse_time(latest.get("createdTime")) if latest else None
        if latest and created and created > now - UPDATE_WINDOW:
            self.service.files().update(fileId=latest["id"], media_body=media).execute()
            log.info("updated drive backup %s", latest.get("name"))
            file_name = latest.get("name", file_name)
        else:
            self.service.files().create(
                body={"name": file_name, "parents": [folder_id], "mimeType": "application/json"},
                media_body=media,
                fields="id, name",
            ).execute()
            log.info("created drive backup %s", file_name)
        return {"fileName": file_name, "folderId": folder_id}

    def restore(self) -> Dict[str, Any]:
        folder_id = self.find_folder()
        if not folder_id:
            return {"success": False, "message": "No backup folder found"}
        latest = self.latest_backup(folder_id)
        if not latest:
            return {"success": False, "message": "No backup files found"}
        raw = self.service.files().get_media(fileId=latest["id"]).execute()
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return {
            "success": True,
            "data": json.loads(raw),
            "fileName": latest.get("name"),
            "createdTime": latest.get("createdTime"),
        }
