from datetime import datetime

from nursenotes.services.formatters import (
    display_date,
    escape_html,
    make_note_html,
    not_found_html,
    note_slug,
    render_markdown,
    slugify,
    to_frontmatter,
)

from conftest import CROUP_MARKDOWN


def test_slugify():
    assert slugify("Croup & RSV: Peds  Resp!") == "croup-rsv-peds-resp"
    assert slugify("") == ""


def test_note_slug():
    day = datetime(2026, 3, 5)
    assert note_slug("Croup Basics", day) == "2026-03-05-croup-basics"
    assert note_slug("Croup Basics", day, "redeployed") == "2026-03-05-croup-basics-redeployed"


def test_display_date():
    assert display_date(datetime(2026, 1, 9)) == "January 9, 2026"


def test_escape_html():
    assert escape_html("<a href='x'>&\"") == "&lt;a href=&#39;x&#39;&gt;&amp;&quot;"


def test_render_markdown_draws_concept_maps():
    html = render_markdown(CROUP_MARKDOWN)

    assert '<svg xmlns="http://www.w3.org/2000/svg" class="concept-map-svg"' in html
    assert "<h3>Croup</h3>" in html
    assert "<h2>Check Yourself</h2>" in html


def test_make_note_html():
    html = make_note_html(
        title="Croup <Peds>", course="NURS330", body_html="<p>body</p>",
        instructors="S. Abdo", date="March 5, 2026", badge="Redeployed (current)",
    )

    assert "<h1>Croup &lt;Peds&gt;</h1>" in html
    assert "<strong>Instructors:</strong> S. Abdo" in html
    assert "<strong>Date:</strong> March 5, 2026" in html
    assert '<span class="redeploy-badge">Redeployed (current)</span>' in html
    assert "<p>body</p>" in html


def test_make_note_html_without_badge_or_instructors():
    html = make_note_html(title="T", course="C", body_html="", date="May 1, 2026")

    assert "redeploy-badge\">" not in html
    assert "Instructors:" not in html


def test_not_found_html():
    assert "Note not found" in not_found_html("2026-03-05-x")


def test_to_frontmatter_quotes_values():
    assert to_frontmatter({"title": "Croup: basics", "module": ""}) == '---\ntitle: "Croup: basics"\nmodule: ""\n---\n'
