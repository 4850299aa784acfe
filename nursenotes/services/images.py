from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

# query param names used by the NIH Open-i open access search
_PARAM_NAMES = {
    "article_type": "at",
    "collection": "coll",
    "rank_by": "favor",
    "search_in": "fields",
    "image_type": "it",
    "license": "lic",
    "specialty": "sp",
}


class ImageSearchError(RuntimeError):
    pass


def build_search_params(query: str, start: int = 1, count: int = 10, **filters: Optional[str]) -> Dict[str, str]:
    params = {"query": query, "m": str(start or 1), "n": str(count or 10)}
    for name, key in _PARAM_NAMES.items():
        value = filters.get(name)
        if value:
            params[key] = value
    return params


def parse_search_response(data: Dict[str, Any], start: int = 1, count: int = 10) -> Dict[str, Any]:
    results: List[Dict[str, Any]] = []
    for item in data.get("results") or []:
        for image in item.get("images") or []:
            results.append({
                "pmcid": item.get("pmcid"),
                "title": item.get("title") or "Untitled",
                "description": item.get("abstract") or item.get("description"),
                "imageUrl": image.get("fullUrl") or image.get("url"),
                "thumbnailUrl": image.get("thumbnailUrl") or image.get("smallUrl"),
                "source": "NIH Open Access",
                "license": item.get("license") or "Open Access",
                "articleUrl": item.get("articleUrl") or f"https://www.ncbi.nlm.nih.gov/pmc/articles/{item.get('pmcid')}/",
                "authors": item.get("authors"),
                "journal": item.get("journal"),
                "publishedDate": item.get("publishedDate"),
                "specialty": item.get("specialty"),
                "keywords": item.get("keywords") or [],
            })
    count = count or 10
    return {
        "results": results,
        "totalCount": data.get("totalCount") or 0,
        "currentPage": (start or 1) // count + 1,
        "hasMore": len(results) == count,
    }


async def search_images(query: str, start: int = 1, count: int = 10, **filters: Optional[str]) -> Dict[str, Any]:
    params = build_search_params(query, start, count, **filters)
    headers = {"Accept": "application/json", "User-Agent": "Medical-Notes-AI/1.0"}
    try:
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.get(settings.NIH_SEARCH_URL, params=params, headers=headers)
            r.raise_for_status()
            data = r.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ImageSearchError(f"NIH API error: {e}") from e
    return parse_search_response(data, start, count)


async def search_by_medical_term(term: str, specialty: Optional[str] = None) -> Dict[str, Any]:
    return await search_images(term, count=20, collection="pmc", image_type="ph,mc,g,x",
                               license="by", specialty=specialty, rank_by="r")


async def search_for_diagrams(condition: str) -> Dict[str, Any]:
    query = f"{condition} diagram OR {condition} pathophysiology OR {condition} anatomy"
    return await search_images(query, count=15, collection="pmc,hmd", image_type="g,mc", license="by", rank_by="r")


async def search_for_clinical_images(condition: str) -> Dict[str, Any]:
    query = f"{condition} clinical OR {condition} manifestation OR {condition} symptoms"
    return await search_images(query, count=15, collection="pmc,cxr", image_type="ph,x", license="by", rank_by="r")
