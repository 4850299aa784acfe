import json, re
from datetime import datetime
from html import escape
from typing import Any, Dict

from ..concept_map.compositor import compose_markdown

NOTE_STYLE = """
    :root {
      --primary: #1976d2;
      --primary-dark: #115293;
      --text-primary: #212121;
      --text-secondary: #757575;
      --background: #fafafa;
      --surface: #ffffff;
      --border: #e0e0e0;
    }
    body { font-family: 'Roboto', sans-serif; line-height: 1.6; margin: 0; background: var(--background); color: var(--text-primary); }
    .header-content { max-width: 1200px; margin: 0 auto; padding: 2rem; background: var(--surface); border-bottom: 2px solid var(--primary); }
    .meta { color: var(--text-secondary); margin-bottom: 0.5rem; }
    .redeploy-badge { display: inline-block; background: #ff9800; color: white; padding: 2px 8px; border-radius: 4px; font-size: 0.875rem; margin-left: 8px; }
    .content-wrapper { max-width: 1200px; margin: 2rem auto; padding: 2rem; background: var(--surface); border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.12); }
    h1 { color: var(--primary); }
    h2 { color: var(--primary); border-bottom: 1px solid var(--border); padding-bottom: 0.5rem; }
    h3 { color: var(--primary-dark); }
    table { width: 100%; border-collapse: collapse; margin: 1rem 0; }
    th, td { border: 1px solid var(--border); padding: 0.75rem; text-align: left; }
    th { background: var(--primary); color: white; }
    .concept-map-frame { overflow-x: auto; padding: 1rem; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); border-radius: 8px; }
    .concept-map-svg { display: block; margin: 0 auto; min-width: 1200px; }
    @media print {
      body { margin: 0; }
      .header-content, .content-wrapper { box-shadow: none; }
    }
"""

_slug_drop = re.compile(r"[^a-z0-9\s-]")


def slugify(s: str) -> str:
    s = _slug_drop.sub("", (s or "").lower()).strip()
    s = re.sub(r"\s+", "-", s)
    return re.sub(r"-+", "-", s)


def escape_html(s: str) -> str:
    return escape(str(s), quote=True).replace("&#x27;", "&#39;")


def note_slug(title: str, date: datetime | None = None, suffix: str = "") -> str:
    date = date or datetime.now()
    slug = f"{date.strftime('%Y-%m-%d')}-{slugify(title)}"
    return f"{slug}-{suffix}" if suffix else slug


def display_date(date: datetime | None = None) -> str:
    date = date or datetime.now()
    return f"{date.strftime('%B')} {date.day}, {date.year}"


def render_markdown(markdown: str) -> str:
    """Markdown -> HTML body, with concept-map JSON blocks drawn as diagrams."""
    return compose_markdown(markdown)


def make_note_html(title: str, course: str, body_html: str, instructors: str = "", date: str | None = None,
                   badge: str | None = None) -> str:
    meta = f"<strong>Course:</strong> {escape_html(course)} • "
    if instructors:
        meta += f"<strong>Instructors:</strong> {escape_html(instructors)} • "
    meta += f"<strong>Date:</strong> {escape_html(date or display_date())}"
    if badge:
        meta += f'\n      <span class="redeploy-badge">{escape_html(badge)}</span>'
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{escape_html(title)} - NurseNotes-AI</title>
  <link href="https://fonts.googleapis.com/css2?family=Roboto:wght@300;400;500;700&display=swap" rel="stylesheet">
  <style>{NOTE_STYLE}  </style>
</head>
<body>
  <div class="header-content">
    <div class="meta">
      {meta}
    </div>
    <h1>{escape_html(title)}</h1>
  </div>
  <div class="content-wrapper">
    {body_html}
  </div>
</body>
</html>"""


def not_found_html(slug: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>Note - {escape_html(slug)}</title>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <h1>Note not found</h1>
  <p>The requested note could not be found. Please generate it first.</p>
</body>
</html>"""


def to_frontmatter(meta: Dict[str, Any]) -> str:
    # values are JSON-encoded so titles with colons/quotes survive
    return "---\n" + "\n".join(
        f"{k}: {json.dumps(v, ensure_ascii=False)}" for k, v in meta.items()
    ) + "\n---\n"
