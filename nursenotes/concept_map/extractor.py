import html
import json
import logging
import re
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag
from markdown_it import MarkdownIt
from markdown_it.token import Token
from pydantic import ValidationError

from .models import CATEGORY_KEYS, ConceptMapMatch, ConceptMapRecord

log = logging.getLogger(__name__)

HEADING_PREFIX = re.compile(r"^\s*Concept\s+Map\b:?\s*", re.I)
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_HEADING_TAG = re.compile(r"^h[1-6]$")

markdown_parser = MarkdownIt("commonmark").enable("table").enable("strikethrough")


def parse_record(code: str, unescape: bool = True) -> Optional[ConceptMapRecord]:
    """Parse a code block body into a record, or None when it is not a concept map."""
    text = html.unescape(code) if unescape else code
    m = _JSON_OBJECT.search(text or "")
    if not m:
        return None
    try:
        data = json.loads(m.group(0))
    except ValueError as e:
        log.warning("concept map JSON is malformed, leaving block as-is: %s", e)
        return None
    if not isinstance(data, dict) or "central" not in data:
        return None
    if not any(isinstance(data.get(k), list) for k in CATEGORY_KEYS):
        return None
    try:
        return ConceptMapRecord.model_validate(data)
    except ValidationError as e:
        log.warning("concept map %r does not match the schema: %s", data.get("central"), e.error_count())
        return None


def heading_title(text: str) -> Optional[str]:
    """Title of a concept-map heading, or None for any other heading."""
    m = HEADING_PREFIX.match(text or "")
    if not m:
        return None
    return text[m.end():].strip()


# --- markdown ---

def inline_text(tok: Token) -> str:
    """Plain text of an inline token, without emphasis or link markup."""
    if not tok.children:
        return tok.content
    return "".join(c.content for c in tok.children if c.type in ("text", "code_inline", "softbreak"))

def _headed_token_matches(tokens: List[Token]) -> Iterator[ConceptMapMatch]:
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.type != "heading_open" or tok.level != 0:
            i += 1
            continue
        title = heading_title(inline_text(tokens[i + 1]))
        if title is None:
            i += 3
            continue
        # pair with the next top-level fence before another heading
        j = i + 3
        while j < len(tokens):
            nxt = tokens[j]
            if nxt.type == "heading_open" and nxt.level == 0:
                break
            if nxt.type in ("fence", "code_block") and nxt.level == 0:
                record = parse_record(nxt.content, unescape=False)
                if record is not None:
                    yield ConceptMapMatch(title=title or record.central, record=record, block=j, heading=i)
                break
            j += 1
        i = j


def _loose_token_matches(tokens: List[Token]) -> Iterator[ConceptMapMatch]:
    for j, tok in enumerate(tokens):
        if tok.type in ("fence", "code_block"):
            record = parse_record(tok.content, unescape=False)
            if record is not None:
                yield ConceptMapMatch(title=record.central or "Concept Map", record=record, block=j)


def iter_token_matches(tokens: List[Token]) -> Iterator[ConceptMapMatch]:
    found = 0
    for match in _headed_token_matches(tokens):
        found += 1
        yield match
    if not found:
        yield from _loose_token_matches(tokens)


def extract_concept_maps(markdown: str) -> Iterator[ConceptMapMatch]:
    """Yield (title, record) matches from generated markdown, in document order."""
    tokens = markdown_parser.parse(markdown or "")
    return iter_token_matches(tokens)


# --- rendered HTML (notes stored before diagrams were composited) ---

def _pre_of(el: Tag) -> Optional[Tag]:
    if el.name == "pre":
        return el
    return el.find("pre")


def _code_text(pre: Tag) -> str:
    code = pre.find("code")
    return (code or pre).get_text()


def _headed_html_matches(soup: BeautifulSoup) -> Iterator[ConceptMapMatch]:
    for heading in soup.find_all(_HEADING_TAG):
        title = heading_title(heading.get_text(" ", strip=True))
        if title is None:
            continue
        for sib in heading.find_next_siblings():
            if _HEADING_TAG.match(sib.name or ""):
                break
            pre = _pre_of(sib)
            if pre is None:
                continue
            record = parse_record(_code_text(pre), unescape=False)
            if record is not None:
                yield ConceptMapMatch(title=title or record.central, record=record, block=pre, heading=heading)
            break


def _loose_html_matches(soup: BeautifulSoup) -> Iterator[ConceptMapMatch]:
    for pre in soup.find_all("pre"):
        record = parse_record(_code_text(pre), unescape=False)
        if record is not None:
            yield ConceptMapMatch(title=record.central or "Concept Map", record=record, block=pre)


def iter_soup_matches(soup: BeautifulSoup) -> Iterator[ConceptMapMatch]:
    found = 0
    for match in _headed_html_matches(soup):
        found += 1
        yield match
    if not found:
        yield from _loose_html_matches(soup)


def extract_concept_maps_from_html(document: str) -> Iterator[ConceptMapMatch]:
    soup = BeautifulSoup(document or "", "html.parser")
    return iter_soup_matches(soup)
