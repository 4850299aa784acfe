import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from ..services.documents import DocumentParseError, UnsupportedDocument, format_for_display, parse_document

log = logging.getLogger(__name__)

router = APIRouter()

@router.post("/api/parse-document")
async def parse_upload(file: UploadFile | None = File(default=None)):
    if file is None or not file.filename:
        return JSONResponse({"error": "No file provided"}, status_code=400)
    data = await file.read()
    try:
        parsed = parse_document(file.filename, data)
    except UnsupportedDocument as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except DocumentParseError as e:
        log.warning("document parsing failed: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)
    return {**parsed.to_dict(), "display": format_for_display(parsed)}
