from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from ..concept_map.compositor import INLINE, compose_html, compose_markdown
from ..concept_map.extractor import extract_concept_maps, extract_concept_maps_from_html
from ..deps import get_store
from ..services.formatters import not_found_html
from ..services.store import NoteNotFound, NoteStore

router = APIRouter()

class RenderReq(BaseModel):
    markdown: Optional[str] = None
    html: Optional[str] = None
    layout: Literal["inline", "gathered"] = INLINE

@router.get("/api/notes")
def list_notes(store: NoteStore = Depends(get_store)):
    return store.manifest()

@router.post("/api/notes/render")
def render_note(req: RenderReq):
    """Draw concept-map code blocks in a note body as diagrams."""
    if req.markdown is not None:
        html = compose_markdown(req.markdown, req.layout)
        maps = extract_concept_maps(req.markdown)
    elif req.html is not None:
        html = compose_html(req.html, req.layout)
        maps = extract_concept_maps_from_html(req.html)
    else:
        raise HTTPException(status_code=400, detail="Provide markdown or html")
    return {
        "html": html,
        "conceptMaps": [{"title": m.title, "data": m.record.to_json_dict()} for m in maps],
    }

@router.get("/api/notes/{slug}", response_class=HTMLResponse)
def get_note_html(slug: str, store: NoteStore = Depends(get_store)):
    try:
        return HTMLResponse(store.get_html(slug))
    except NoteNotFound:
        return HTMLResponse(not_found_html(slug), status_code=404)

@router.get("/api/notes/{slug}/json")
def get_note(slug: str, store: NoteStore = Depends(get_store)):
    try:
        return store.get(slug)
    except NoteNotFound:
        raise HTTPException(status_code=404, detail="Note not found")

@router.delete("/api/notes/{slug}")
def delete_note(slug: str, store: NoteStore = Depends(get_store)):
    try:
        store.delete(slug)
    except NoteNotFound:
        raise HTTPException(status_code=404, detail="Note not found")
    return {"ok": True, "slug": slug}
