import re
from html import escape
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .extractor import inline_text, iter_soup_matches, iter_token_matches, markdown_parser
from .renderer import render_concept_map

INLINE = "inline"
GATHERED = "gathered"

# sections that close a note; gathered diagrams go in front of the first one
TRAILING_SECTION = re.compile(
    r"<h2[^>]*>\s*(?:Check Yourself|Practice Questions|Case Study|Patient Education)", re.I
)
MAPS_HEADING_TEXT = re.compile(r"^\s*Concept\s+Maps?\s*$", re.I)


def render_section(title: str, svg: str) -> str:
    return (
        f'<section class="concept-map"><h3>{escape(title)}</h3>'
        f'<div class="concept-map-frame">\n{svg}\n</div></section>\n'
    )


def insert_diagrams(document: str, diagrams: Iterable[Tuple[str, str]]) -> str:
    """Splice (title, svg) pairs into a rendered document as one "Concept Maps" section."""
    diagrams = list(diagrams)
    if not diagrams:
        return document
    block = (
        '<section class="concept-maps"><h2>Concept Maps</h2>\n'
        + "".join(render_section(title, svg) for title, svg in diagrams)
        + "</section>\n"
    )
    m = TRAILING_SECTION.search(document)
    if m and m.start() > 0:
        return document[:m.start()] + block + document[m.start():]
    return document + block


def compose_markdown(markdown: str, layout: str = INLINE) -> str:
    """Render markdown to HTML with concept-map code blocks drawn as diagrams."""
    env: dict = {}
    tokens = markdown_parser.parse(markdown or "", env)
    matches = list(iter_token_matches(tokens))
    if not matches:
        return markdown_parser.renderer.render(tokens, markdown_parser.options, env)

    by_block = {m.block: m for m in matches}
    skip = set()
    for m in matches:
        if m.heading is not None:
            skip.update(range(m.heading, m.heading + 3))
    if layout == GATHERED:
        for i, tok in enumerate(tokens):
            if tok.type == "heading_open" and tok.tag == "h2" and MAPS_HEADING_TEXT.match(inline_text(tokens[i + 1])):
                skip.update(range(i, i + 3))

    out: List[str] = []
    chunk = []
    for i, tok in enumerate(tokens):
        if i in skip:
            continue
        if i in by_block:
            out.append(markdown_parser.renderer.render(chunk, markdown_parser.options, env))
            chunk = []
            if layout == INLINE:
                m = by_block[i]
                out.append(render_section(m.title, render_concept_map(m.record)))
            continue
        chunk.append(tok)
    out.append(markdown_parser.renderer.render(chunk, markdown_parser.options, env))
    body = "".join(out)

    if layout == GATHERED:
        return insert_diagrams(body, ((m.title, render_concept_map(m.record)) for m in matches))
    return body


def _line_starts(document: str) -> List[int]:
    return [0] + [i + 1 for i, ch in enumerate(document) if ch == "\n"]


def _source_span(document: str, line_starts: List[int], tag: Tag) -> Optional[Tuple[int, int]]:
    """(start, end) offsets of an element in the markup it was parsed from."""
    if tag.sourceline is None or tag.sourcepos is None:
        return None
    start = line_starts[tag.sourceline - 1] + tag.sourcepos
    close = re.compile(rf"</{re.escape(tag.name)}\s*>", re.I).search(document, start)
    if close is None:
        return None
    return start, close.end()


def compose_html(document: str, layout: str = INLINE) -> str:
    """Same as compose_markdown for notes that were stored as rendered HTML.

    Only the matched headings and blocks are rewritten; every other byte of the
    document comes back as it went in.
    """
    soup = BeautifulSoup(document or "", "html.parser")
    matches = list(iter_soup_matches(soup))
    if not matches:
        return document

    line_starts = _line_starts(document)
    edits: List[Tuple[int, int, str]] = []
    placed = []
    for m in matches:
        block = _source_span(document, line_starts, m.block)
        if block is None:
            continue
        svg = render_concept_map(m.record)
        edits.append((*block, render_section(m.title, svg) if layout == INLINE else ""))
        if m.heading is not None:
            heading = _source_span(document, line_starts, m.heading)
            if heading is not None:
                edits.append((*heading, ""))
        placed.append((m.title, svg))
    if layout == GATHERED:
        for h2 in soup.find_all("h2"):
            if MAPS_HEADING_TEXT.match(h2.get_text(" ", strip=True)):
                span = _source_span(document, line_starts, h2)
                if span is not None:
                    edits.append((*span, ""))

    out = document
    for start, end, text in sorted(edits, reverse=True):
        out = out[:start] + text + out[end:]
    if layout == GATHERED:
        return insert_diagrams(out, placed)
    return out
