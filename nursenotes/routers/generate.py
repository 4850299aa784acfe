import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import settings
from ..deps import get_store
from ..services.generation import EmptyGeneration, classify_llm_error, generate_note
from ..services.prompt import (
    CURRENT_PROMPT_VERSION, DEFAULT_STYLE, build_system_prompt, course_title,
)
from ..services.store import NoteStore

log = logging.getLogger(__name__)

router = APIRouter()

class GenerateReq(BaseModel):
    title: Optional[str] = None
    course: Optional[str] = None
    courseName: Optional[str] = None
    module: Optional[str] = None
    instructors: Optional[str] = None
    source: Optional[str] = None
    sections: Optional[List[str]] = None
    noteStyle: Optional[str] = None
    save: bool = False

def error_response(status: int, error: str, details: str | None = None, **extra) -> JSONResponse:
    body = {"error": error, **extra}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status)

@router.post("/api/generate")
def generate(req: GenerateReq, store: NoteStore = Depends(get_store)):
    if not req.title or not req.course or not req.source:
        return error_response(400, "Missing required fields: title, course, and source are required")
    if not settings.llm_configured:
        log.error("OpenAI API key not found in environment variables")
        return error_response(500, "OpenAI API key not configured. Please add OPENAI_API_KEY to environment variables.")

    style = req.noteStyle or DEFAULT_STYLE
    system_prompt = build_system_prompt(
        course=req.course,
        module=req.module or "",
        instructors=req.instructors or "",
        sections=req.sections,
        style=style,
    )
    original_input = {
        "title": req.title,
        "course": req.course,
        "courseName": req.courseName or course_title(req.course),
        "module": req.module or "",
        "instructors": req.instructors or "",
        "source": req.source,
        "sections": req.sections or [],
        "noteStyle": style,
        "systemPromptVersion": CURRENT_PROMPT_VERSION,
    }

    try:
        note = generate_note(
            title=req.title,
            course=req.course,
            source=req.source,
            system_prompt=system_prompt,
            original_input=original_input,
            module=req.module or "",
            course_name=req.courseName,
            instructors=req.instructors or "",
        )
    except EmptyGeneration as e:
        return error_response(500, str(e))
    except Exception as e:
        log.exception("generate failed")
        status, message = classify_llm_error(e)
        return error_response(status, message, str(e))

    if req.save:
        store.save(note)
    return {"success": True, "message": "Notes generated successfully", **note}
