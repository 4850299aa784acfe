import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..config import settings
from ..deps import get_store
from ..services.generation import EmptyGeneration, generate_note
from ..services.prompt import build_redeploy_prompt, resolve_redeploy_prompt
from ..services.store import NoteNotFound, NoteStore
from .generate import error_response

log = logging.getLogger(__name__)

router = APIRouter()

REDEPLOY_MODES = ("previous", "current", "custom")

class RedeployReq(BaseModel):
    slug: Optional[str] = None
    redeployMode: Optional[str] = None
    customPrompt: Optional[str] = None
    originalInput: Optional[Dict[str, Any]] = None
    save: bool = False

def _validate(req: RedeployReq):
    if not req.slug or not req.redeployMode:
        return error_response(400, "Missing required fields: slug and redeployMode are required")
    if req.redeployMode not in REDEPLOY_MODES:
        return error_response(400, 'Invalid redeployMode. Must be "previous", "current", or "custom"')
    if req.redeployMode == "custom" and not req.customPrompt:
        return error_response(400, "Custom prompt is required when using custom redeploy mode")
    if not settings.llm_configured:
        log.error("OpenAI API key not found in environment variables")
        return error_response(500, "OpenAI API key not configured. Please add OPENAI_API_KEY to environment variables.")
    return None

def redeploy_with_data(req: RedeployReq, original: Dict[str, Any], store: NoteStore):
    if not original or not original.get("title") or not original.get("course") or not original.get("source"):
        return error_response(400, "Original input data is missing or incomplete")

    mode = req.redeployMode
    version, base_prompt = resolve_redeploy_prompt(mode, original.get("systemPromptVersion"), req.customPrompt)
    system_prompt = build_redeploy_prompt(
        base_prompt,
        course=original["course"],
        mode=mode,
        instructors=original.get("instructors") or "",
        generated_at=original.get("generatedAt"),
    )
    log.info("redeploying %s with %s mode (prompt %s)", req.slug, mode, version)

    try:
        note = generate_note(
            title=original["title"],
            course=original["course"],
            source=original["source"],
            system_prompt=system_prompt,
            original_input={
                **original,
                "systemPromptVersion": version,
                "redeployedFrom": req.slug,
                "redeployMode": mode,
            },
            module=original.get("module") or "",
            course_name=original.get("courseName"),
            instructors=original.get("instructors") or "",
            slug_suffix="redeployed",
            badge=f"Redeployed ({mode})",
        )
    except EmptyGeneration as e:
        return error_response(500, str(e))
    except Exception as e:
        log.exception("redeploy failed")
        return error_response(500, "Failed to redeploy notes", str(e))

    if req.save:
        store.save(note)
    return {"success": True, "message": f"Notes redeployed successfully using {mode} mode", **note}

@router.post("/api/redeploy")
def redeploy(req: RedeployReq, store: NoteStore = Depends(get_store)):
    """Redeploy a note that is already in the store."""
    invalid = _validate(req)
    if invalid is not None:
        return invalid
    try:
        original = store.get(req.slug).get("originalInput")
    except NoteNotFound:
        original = None
    if not original:
        return error_response(
            400,
            "Original input data must be provided for redeploy. Use PUT with originalInput "
            "for notes that are not in the note store.",
            requiresOriginalInput=True,
        )
    return redeploy_with_data(req, original, store)

@router.put("/api/redeploy")
def redeploy_put(req: RedeployReq, store: NoteStore = Depends(get_store)):
    invalid = _validate(req)
    if invalid is not None:
        return invalid
    return redeploy_with_data(req, req.originalInput or {}, store)
