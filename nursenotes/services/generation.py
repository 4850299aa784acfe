import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..client_factory import generate_markdown
from .formatters import display_date, make_note_html, note_slug, render_markdown
from .prompt import build_user_prompt, course_title

log = logging.getLogger(__name__)


class EmptyGeneration(RuntimeError):
    pass


def generate_note(
    *,
    title: str,
    course: str,
    source: str,
    system_prompt: str,
    original_input: Dict[str, Any],
    module: str = "",
    course_name: Optional[str] = None,
    instructors: str = "",
    slug_suffix: str = "",
    badge: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Run the model over the source and package the result as a stored-note dict."""
    now = now or datetime.now()
    markdown = generate_markdown(system_prompt, build_user_prompt(source))
    if not markdown.strip():
        raise EmptyGeneration("Failed to generate notes - empty response from AI")
    log.info("generated %d chars of markdown for %r", len(markdown), title)

    html = make_note_html(
        title=title,
        course=course,
        instructors=instructors,
        date=display_date(now),
        body_html=render_markdown(markdown),
        badge=badge,
    )
    return {
        "slug": note_slug(title, now, slug_suffix),
        "title": title,
        "course": course,
        "courseTitle": course_name or course_title(course),
        "module": module or "",
        "date": now.strftime("%Y-%m-%d"),
        "markdown": markdown,
        "html": html,
        "originalInput": {**original_input, "generatedAt": datetime.now(timezone.utc).isoformat()},
    }


def classify_llm_error(e: Exception) -> tuple[int, str]:
    """(status, user-facing message) for an upstream failure."""
    msg = str(e)
    if "API key" in msg or "api_key" in msg:
        return 500, "OpenAI API key is missing or invalid. Please check your environment variables."
    if "quota" in msg or "limit" in msg:
        return 429, "OpenAI API quota exceeded. Please check your OpenAI account."
    return 500, "Failed to generate notes"
