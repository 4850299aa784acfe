"""Generate a note from a source file straight into the note store.

    python -m nursenotes.cli --source lecture.txt --course NURS310 --title "Heart Failure"
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import settings
from .services.documents import DocumentParseError, UnsupportedDocument, parse_document
from .services.generation import EmptyGeneration, generate_note
from .services.prompt import CURRENT_PROMPT_VERSION, DEFAULT_STYLE, build_system_prompt, course_instructors, course_title
from .services.store import NoteStore
from .utils.logger_setup import setup_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nursenotes", description="Generate NCLEX-style study notes from a source file.")
    p.add_argument("--source", required=True, help="lecture transcript, slides or handout (.txt, .md, .pdf, .docx, ...)")
    p.add_argument("--course", required=True, help="course id, e.g. NURS310")
    p.add_argument("--title", required=True)
    p.add_argument("--module", default="")
    p.add_argument("--instructors", default=None, help="defaults to the course's instructors")
    p.add_argument("--style", default=DEFAULT_STYLE)
    p.add_argument("--sections", nargs="*", default=None)
    p.add_argument("--notes-dir", default=None, help=f"defaults to NOTES_DIR ({settings.NOTES_DIR})")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_dir=settings.LOG_DIR, console_level=settings.LOG_LEVEL)

    src = Path(args.source)
    if not src.is_file():
        log.error("Source not found: %s", src)
        return 1
    try:
        source = parse_document(src.name, src.read_bytes()).text
    except (UnsupportedDocument, DocumentParseError) as e:
        log.error("%s", e)
        return 1
    if not settings.llm_configured:
        log.error("OPENAI_API_KEY is not set and USE_LOCAL_LLM is off")
        return 1

    instructors = args.instructors if args.instructors is not None else course_instructors(args.course)
    system_prompt = build_system_prompt(
        course=args.course,
        module=args.module,
        instructors=instructors,
        sections=args.sections,
        style=args.style,
    )
    original_input = {
        "title": args.title,
        "course": args.course,
        "courseName": course_title(args.course),
        "module": args.module,
        "instructors": instructors,
        "source": source,
        "sections": args.sections or [],
        "noteStyle": args.style,
        "systemPromptVersion": CURRENT_PROMPT_VERSION,
    }

    log.info("Generating notes for %r...", args.title)
    try:
        note = generate_note(
            title=args.title,
            course=args.course,
            source=source,
            system_prompt=system_prompt,
            original_input=original_input,
            module=args.module,
            instructors=instructors,
        )
    except EmptyGeneration as e:
        log.error("%s", e)
        return 1

    store = NoteStore(args.notes_dir or settings.NOTES_DIR)
    entry = store.save(note)
    log.info("Generated %s (%s)", entry["slug"], store.root)
    return 0


if __name__ == "__main__":
    sys.exit(main())
