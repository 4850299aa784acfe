import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from ..services import images
from .generate import error_response

log = logging.getLogger(__name__)

router = APIRouter()

class ImageSearchReq(BaseModel):
    searchType: Optional[str] = None
    term: str = ""
    specialty: Optional[str] = None

@router.get("/api/images/search")
async def search(
    query: str = "",
    start: int = 1,
    count: int = 10,
    articleType: Optional[str] = None,
    collection: Optional[str] = None,
    rankBy: Optional[str] = None,
    searchIn: Optional[str] = None,
    imageType: Optional[str] = None,
    license: Optional[str] = None,
    specialty: Optional[str] = None,
):
    if not query:
        return error_response(400, "Query parameter is required")
    try:
        return await images.search_images(
            query, start, count,
            article_type=articleType, collection=collection, rank_by=rankBy, search_in=searchIn,
            image_type=imageType, license=license, specialty=specialty,
        )
    except images.ImageSearchError as e:
        log.error("Error in image search API: %s", e)
        return error_response(500, "Failed to search images")

@router.post("/api/images/search")
async def search_by_type(req: ImageSearchReq):
    try:
        if req.searchType == "medical-term":
            return await images.search_by_medical_term(req.term, req.specialty)
        if req.searchType == "diagrams":
            return await images.search_for_diagrams(req.term)
        if req.searchType == "clinical":
            return await images.search_for_clinical_images(req.term)
        return await images.search_images(req.term, count=15, specialty=req.specialty)
    except images.ImageSearchError as e:
        log.error("Error in image search API: %s", e)
        return error_response(500, "Failed to search images")
