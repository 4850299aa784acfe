from functools import lru_cache

from fastapi import Header, HTTPException

from .config import settings
from .services.drive import DriveBackup, build_drive_service
from .services.store import NoteStore


@lru_cache
def get_store() -> NoteStore:
    return NoteStore(settings.NOTES_DIR)


def get_drive(authorization: str | None = Header(default=None)) -> DriveBackup:
    token = ""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return DriveBackup(build_drive_service(token))
