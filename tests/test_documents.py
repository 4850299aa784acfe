import io

import pytest

from nursenotes.services.documents import (
    DocumentParseError,
    UnsupportedDocument,
    format_for_display,
    markdown_table,
    parse_document,
)


def test_markdown_table_skips_blank_rows():
    assert markdown_table([["Drug", "Dose"], ["", ""], ["Dexamethasone", "0.6 mg/kg"]]) == (
        "| Drug | Dose |\n|---|---|\n| Dexamethasone | 0.6 mg/kg |\n"
    )
    assert markdown_table([]) == ""


def test_plain_text_and_display():
    parsed = parse_document("croup-notes.txt", "Barking cough.\nStridor.".encode("utf-8"))

    assert parsed.text == "Barking cough.\nStridor."
    assert parsed.to_dict()["metadata"] == {"format": "Plain Text", "title": "croup-notes"}
    assert format_for_display(parsed) == (
        "=== Document Information ===\nTitle: croup-notes\nFormat: Plain Text\n\n"
        "=== Content ===\n\nBarking cough.\nStridor."
    )


def test_markdown_file():
    assert parse_document("lecture.MD", b"# Croup").metadata.format == "Markdown"


def test_csv():
    parsed = parse_document("vitals.csv", b"\xef\xbb\xbfVital,Value\nRR,40\n")

    assert parsed.text == "| Vital | Value |\n|---|---|\n| RR | 40 |\n"
    assert parsed.metadata.format == "CSV"


def test_html_drops_scripts_and_uses_title():
    page = b"<html><head><title>Croup Lecture</title><script>x()</script></head><body><h1>Croup</h1><p>Stridor</p></body></html>"
    parsed = parse_document("page.html", page)

    assert parsed.metadata.title == "Croup Lecture"
    assert "x()" not in parsed.text
    assert "Croup" in parsed.text and "Stridor" in parsed.text


def test_word():
    from docx import Document

    doc = Document()
    doc.core_properties.author = "S. Abdo"
    doc.add_paragraph("Croup is viral.")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text, table.cell(0, 1).text = "Drug", "Dose"
    table.cell(1, 0).text, table.cell(1, 1).text = "Dexamethasone", "0.6 mg/kg"
    buf = io.BytesIO()
    doc.save(buf)

    parsed = parse_document("week4.docx", buf.getvalue())

    assert parsed.text.startswith("Croup is viral.")
    assert "| Dexamethasone | 0.6 mg/kg |" in parsed.text
    assert parsed.metadata.author == "S. Abdo"
    assert parsed.metadata.format == "Microsoft Word"


def test_excel():
    from openpyxl import Workbook

    wb = Workbook()
    ws = wb.active
    ws.title = "Meds"
    ws.append(["Drug", "Dose"])
    ws.append(["Racemic epinephrine", "0.5 mL"])
    buf = io.BytesIO()
    wb.save(buf)

    parsed = parse_document("meds.xlsx", buf.getvalue())

    assert "=== Sheet: Meds ===" in parsed.text
    assert "| Racemic epinephrine | 0.5 mL |" in parsed.text
    assert parsed.metadata.pages == 1


def test_powerpoint_with_speaker_notes():
    from pptx import Presentation

    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Croup"
    slide.placeholders[1].text = "Seal-like barking cough"
    slide.notes_slide.notes_text_frame.text = "Ask about night-time onset"
    buf = io.BytesIO()
    prs.save(buf)

    parsed = parse_document("lecture.pptx", buf.getvalue())

    assert "=== Slide 1 ===\nCroup\nSeal-like barking cough" in parsed.text
    assert "=== Speaker Notes ===\nAsk about night-time onset" in parsed.text
    assert parsed.metadata.pages == 1


def test_pdf():
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Croup causes inspiratory stridor")
    data = doc.tobytes()
    doc.close()

    parsed = parse_document("handout.pdf", data)

    assert "Croup causes inspiratory stridor" in parsed.text
    assert parsed.metadata.pages == 1
    assert parsed.metadata.format == "PDF"


def test_unsupported_type():
    with pytest.raises(UnsupportedDocument, match="Unsupported file type: .exe"):
        parse_document("setup.exe", b"MZ")


def test_corrupt_file():
    with pytest.raises(DocumentParseError, match="Failed to parse broken.docx"):
        parse_document("broken.docx", b"not a zip")
