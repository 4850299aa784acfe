"""File-backed note storage, organized by course and module.

Layout under the store root::

    manifest.json          {"courses": [{"id", "title", "modules": [...]}]}
    raw/<slug>.md          frontmatter + generated markdown
    html/<slug>.html       standalone rendered note
    records/<slug>.json    the full generated note, including originalInput

Writes are last-write-wins; there is no locking between processes.
"""
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.fs import ensure_dir, read_json, write_json, write_text
from .formatters import to_frontmatter
from .prompt import course_title

log = logging.getLogger(__name__)

_SAFE_SLUG = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-]*$")


class NoteNotFound(KeyError):
    pass


class NoteStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)

    @property
    def manifest_path(self) -> Path:
        return self.root / "manifest.json"

    def _path(self, kind: str, slug: str, ext: str) -> Path:
        if not _SAFE_SLUG.match(slug or ""):
            raise NoteNotFound(slug)
        return self.root / kind / f"{slug}.{ext}"

    def manifest(self) -> Dict[str, Any]:
        return read_json(self.manifest_path, default={"courses": []})

    def save(self, note: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a generated note and return its manifest entry."""
        slug = note["slug"]
        ensure_dir(self.root)
        meta = {
            "title": note.get("title", ""),
            "course": note.get("course", ""),
            "module": note.get("module", ""),
            "date": note.get("date", ""),
            "slug": slug,
        }
        write_text(self._path("raw", slug, "md"), to_frontmatter(meta) + "\n" + (note.get("markdown") or "").strip() + "\n")
        write_text(self._path("html", slug, "html"), note.get("html") or "")
        write_json(self._path("records", slug, "json"), note)

        entry = {
            "slug": slug,
            "title": meta["title"],
            "date": meta["date"],
            "path": f"/api/notes/{slug}",
            "module": meta["module"],
        }
        self._update_manifest(meta["course"], entry, note.get("courseTitle"))
        log.info("saved note %s (course=%s)", slug, meta["course"])
        return entry

    def _update_manifest(self, course_id: str, entry: Dict[str, Any], title: Optional[str] = None) -> None:
        data = self.manifest()
        course = next((c for c in data["courses"] if c["id"] == course_id), None)
        if course is None:
            course = {"id": course_id, "title": title or course_title(course_id), "modules": []}
            data["courses"].append(course)
        course["modules"] = [entry] + [m for m in course["modules"] if m["slug"] != entry["slug"]]
        # newest first
        course["modules"].sort(key=lambda m: m.get("date", ""), reverse=True)
        write_json(self.manifest_path, data)

    def get(self, slug: str) -> Dict[str, Any]:
        data = read_json(self._path("records", slug, "json"))
        if data is None:
            raise NoteNotFound(slug)
        return data

    def get_html(self, slug: str) -> str:
        p = self._path("html", slug, "html")
        if not p.exists():
            raise NoteNotFound(slug)
        return p.read_text(encoding="utf-8")

    def delete(self, slug: str) -> None:
        found = False
        for kind, ext in (("raw", "md"), ("html", "html"), ("records", "json")):
            p = self._path(kind, slug, ext)
            if p.exists():
                p.unlink()
                found = True
        data = self.manifest()
        for course in data["courses"]:
            before = len(course["modules"])
            course["modules"] = [m for m in course["modules"] if m["slug"] != slug]
            found = found or len(course["modules"]) != before
        data["courses"] = [c for c in data["courses"] if c["modules"]]
        if not found:
            raise NoteNotFound(slug)
        write_json(self.manifest_path, data)
        log.info("deleted note %s", slug)

    def export(self) -> Dict[str, Any]:
        notes: List[Dict[str, Any]] = []
        records = self.root / "records"
        if records.exists():
            for p in sorted(records.glob("*.json")):
                notes.append(read_json(p))
        return {"manifest": self.manifest(), "notes": notes}

    def import_notes(self, data: Dict[str, Any]) -> int:
        """Save every note in an export payload; returns how many were written."""
        count = 0
        for note in (data or {}).get("notes", []):
            if not isinstance(note, dict) or not note.get("slug"):
                log.warning("skipping backup entry without a slug")
                continue
            if not _SAFE_SLUG.match(str(note["slug"])):
                log.warning("skipping backup entry with unsafe slug %r", note["slug"])
                continue
            self.save(note)
            count += 1
        return count
