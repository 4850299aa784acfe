import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..config import settings
from ..deps import get_drive, get_store
from ..services.drive import DriveBackup
from ..services.store import NoteStore
from .generate import error_response

log = logging.getLogger(__name__)

router = APIRouter()

class BackupReq(BaseModel):
    data: Optional[Any] = None

@router.post("/api/drive/backup")
def backup(req: BackupReq, drive: DriveBackup = Depends(get_drive), store: NoteStore = Depends(get_store)):
    data = req.data if req.data is not None else store.export()
    try:
        res = drive.backup(data)
    except Exception as e:
        log.exception("Drive backup error")
        return error_response(500, "Failed to backup to Google Drive", str(e))
    return {"success": True, "message": "Backup saved to Google Drive", **res}

@router.get("/api/drive/restore")
def restore(apply: bool = False, drive: DriveBackup = Depends(get_drive), store: NoteStore = Depends(get_store)):
    try:
        res = drive.restore()
    except Exception as e:
        log.exception("Drive restore error")
        return error_response(500, "Failed to restore from Google Drive", str(e))
    if apply and res.get("success") and isinstance(res.get("data"), dict):
        res["imported"] = store.import_notes(res["data"])
    return res

@router.get("/api/auth/check")
def auth_check():
    return {
        "configured": {
            "GOOGLE_CLIENT_ID": bool(settings.GOOGLE_CLIENT_ID),
            "GOOGLE_CLIENT_SECRET": bool(settings.GOOGLE_CLIENT_SECRET),
            "OPENAI_API_KEY": bool(settings.OPENAI_API_KEY),
            "USE_LOCAL_LLM": settings.USE_LOCAL_LLM,
        },
        "clientIdLength": len(settings.GOOGLE_CLIENT_ID or ""),
    }
