"""Text extraction for uploaded course material.

Each format goes through its usual library and comes back as plain text
(tables as markdown tables) plus a little metadata for display.
"""
from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Dict, List, Optional


class UnsupportedDocument(ValueError):
    pass


class DocumentParseError(RuntimeError):
    pass


@dataclass
class DocumentMetadata:
    format: str
    title: str
    author: Optional[str] = None
    pages: Optional[int] = None


@dataclass
class ParsedDocument:
    text: str
    metadata: DocumentMetadata

    def to_dict(self) -> dict:
        meta = {k: v for k, v in self.metadata.__dict__.items() if v is not None}
        return {"text": self.text, "metadata": meta}


def _stem(filename: str) -> str:
    return PurePath(filename).stem


def markdown_table(rows: List[List[str]]) -> str:
    rows = [r for r in rows if any((c or "").strip() for c in r)]
    if not rows:
        return ""
    header, body = rows[0], rows[1:]
    out = ["| " + " | ".join(header) + " |", "|" + "|".join("---" for _ in header) + "|"]
    out.extend("| " + " | ".join(r) + " |" for r in body)
    return "\n".join(out) + "\n"


def parse_pdf(filename: str, data: bytes) -> ParsedDocument:
    import fitz  # PyMuPDF

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        pages = [page.get_text("text") for page in doc]
        info = doc.metadata or {}
        page_count = doc.page_count
    finally:
        doc.close()
    text = "".join(p.strip() + "\n\n" for p in pages)
    text = re.sub(r"[ \t]+\n", "\n", text)
    return ParsedDocument(
        text=text,
        metadata=DocumentMetadata(
            format="PDF",
            title=info.get("title") or _stem(filename),
            author=info.get("author") or None,
            pages=page_count,
        ),
    )


def parse_word(filename: str, data: bytes) -> ParsedDocument:
    from docx import Document

    doc = Document(io.BytesIO(data))
    parts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        parts.append(markdown_table([[cell.text.strip() for cell in row.cells] for row in table.rows]))
    author = doc.core_properties.author or None
    return ParsedDocument(
        text="\n".join(parts).strip(),
        metadata=DocumentMetadata(format="Microsoft Word", title=_stem(filename), author=author),
    )


def parse_excel(filename: str, data: bytes) -> ParsedDocument:
    from openpyxl import load_workbook

    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        chunks = []
        for ws in wb.worksheets:
            rows = [["" if v is None else str(v) for v in row] for row in ws.iter_rows(values_only=True)]
            chunks.append(f"\n=== Sheet: {ws.title} ===\n\n" + markdown_table(rows))
        sheet_count = len(wb.worksheets)
    finally:
        wb.close()
    return ParsedDocument(
        text="\n".join(chunks),
        metadata=DocumentMetadata(format="Microsoft Excel", title=_stem(filename), pages=sheet_count),
    )


def parse_powerpoint(filename: str, data: bytes) -> ParsedDocument:
    from pptx import Presentation

    prs = Presentation(io.BytesIO(data))
    text = ""
    notes: List[str] = []
    slide_count = 0
    for slide in prs.slides:
        slide_count += 1
        lines = []
        for shape in slide.shapes:
            if shape.has_text_frame:
                lines.extend(p.text for p in shape.text_frame.paragraphs if p.text.strip())
        if lines:
            text += f"\n=== Slide {slide_count} ===\n" + "\n".join(lines) + "\n"
        if slide.has_notes_slide:
            note = slide.notes_slide.notes_text_frame.text.strip() if slide.notes_slide.notes_text_frame else ""
            if note:
                notes.append(note)
    if notes:
        text += "\n\n=== Speaker Notes ===\n" + "\n".join(notes) + "\n"
    return ParsedDocument(
        text=text or "No text content found in PowerPoint file",
        metadata=DocumentMetadata(format="Microsoft PowerPoint", title=_stem(filename), pages=slide_count),
    )


def parse_csv(filename: str, data: bytes) -> ParsedDocument:
    rows = list(csv.reader(io.StringIO(data.decode("utf-8-sig", errors="replace"))))
    return ParsedDocument(
        text=markdown_table(rows),
        metadata=DocumentMetadata(format="CSV", title=_stem(filename)),
    )


def parse_html(filename: str, data: bytes) -> ParsedDocument:
    from bs4 import BeautifulSoup

    soup = BeautifulSoup(data, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    title = soup.title.get_text(strip=True) if soup.title else ""
    text = soup.get_text("\n")
    text = re.sub(r"\n\s*\n+", "\n\n", text).strip()
    return ParsedDocument(text=text, metadata=DocumentMetadata(format="HTML", title=title or _stem(filename)))


def parse_text(filename: str, data: bytes) -> ParsedDocument:
    ext = PurePath(filename).suffix.lower()
    fmt = "Markdown" if ext in (".md", ".markdown") else "Plain Text"
    return ParsedDocument(
        text=data.decode("utf-8", errors="replace"),
        metadata=DocumentMetadata(format=fmt, title=_stem(filename)),
    )


PARSERS: Dict[str, Callable[[str, bytes], ParsedDocument]] = {
    ".pdf": parse_pdf,
    ".docx": parse_word,
    ".xlsx": parse_excel,
    ".xlsm": parse_excel,
    ".pptx": parse_powerpoint,
    ".csv": parse_csv,
    ".html": parse_html,
    ".htm": parse_html,
    ".txt": parse_text,
    ".md": parse_text,
    ".markdown": parse_text,
}


def parse_document(filename: str, data: bytes) -> ParsedDocument:
    ext = PurePath(filename or "").suffix.lower()
    parser = PARSERS.get(ext)
    if parser is None:
        raise UnsupportedDocument(f"Unsupported file type: {ext or filename}")
    try:
        return parser(filename, data)
    except Exception as e:
        raise DocumentParseError(f"Failed to parse {filename}: {e}") from e


def format_for_display(parsed: ParsedDocument) -> str:
    out = ""
    m = parsed.metadata
    out += "=== Document Information ===\n"
    if m.title:
        out += f"Title: {m.title}\n"
    if m.format:
        out += f"Format: {m.format}\n"
    if m.author:
        out += f"Author: {m.author}\n"
    if m.pages:
        out += f"Pages/Sheets: {m.pages}\n"
    out += "\n=== Content ===\n\n"
    out += parsed.text
    return out
