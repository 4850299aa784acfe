"""Fixed-layout SVG rendering of a concept map.

Every category has a hard-coded shape, position and colour. Item and
character caps keep the text inside its shape; nothing is laid out
dynamically, so the same record always renders to the same markup.
"""
from dataclasses import dataclass
from html import escape
from typing import List, Tuple

from .models import ConceptMapRecord

ELLIPSIS = "…"
CENTRAL_MAX_CHARS = 28

STAR_POINTS = "0,-40 12,-12 40,-8 20,8 24,36 0,20 -24,36 -20,8 -40,-8 -12,-12"


@dataclass(frozen=True)
class Section:
    key: str
    label: str
    x: int
    y: int
    shape: str
    label_y: int
    label_size: int
    label_fill: str
    items_x: int
    items_y: int
    line_height: int
    font_size: int
    max_items: int
    max_chars: int


def _ellipse(rx, ry, fill, stroke):
    return f'<ellipse cx="0" cy="0" rx="{rx}" ry="{ry}" fill="{fill}" stroke="{stroke}" stroke-width="2"/>'


def _rect(w, h, rx, fill, stroke):
    return (f'<rect x="{-w // 2}" y="{-h // 2}" width="{w}" height="{h}" rx="{rx}" '
            f'fill="{fill}" stroke="{stroke}" stroke-width="2"/>')


def _circle(r, fill, stroke):
    return f'<circle cx="0" cy="0" r="{r}" fill="{fill}" stroke="{stroke}" stroke-width="2"/>'


_NOTEBOOK = _rect(180, 60, 3, "#E8EAF6", "#3F51B5") + "".join(
    f'<line x1="-90" y1="{y}" x2="-70" y2="{y}" stroke="#3F51B5" stroke-width="1"/>'
    for y in (-10, 0, 10, 20)
)

SECTIONS: Tuple[Section, ...] = (
    Section("pathophysiology", "PATHOPHYSIOLOGY", 600, 150, _ellipse(120, 60, "#E8F5E9", "#4CAF50"),
            -20, 14, "#2E7D32", -95, 4, 13, 11, 3, 40),
    Section("riskFactors", "RISK FACTORS", 250, 250, _ellipse(100, 50, "#FFF3E0", "#FF9800"),
            -15, 13, "#E65100", -75, 8, 12, 10, 3, 32),
    Section("causes", "CAUSES", 950, 250, _ellipse(100, 50, "#F3E5F5", "#9C27B0"),
            -15, 13, "#6A1B9A", -75, 8, 12, 10, 3, 32),
    Section("signsSymptoms", "SIGNS & SYMPTOMS", 600, 280, _rect(200, 60, 5, "#FFE5E5", "#F44336"),
            -10, 13, "#C62828", -85, 12, 12, 10, 2, 36),
    Section("diagnostics", "DIAGNOSTICS", 200, 400, _circle(70, "#E3F2FD", "#2196F3"),
            -20, 12, "#1565C0", -55, 4, 12, 10, 2, 22),
    Section("complications", "COMPLICATIONS", 1000, 400, _circle(60, "#FFF9C4", "#FBC02D"),
            -15, 12, "#F57C00", -45, 9, 12, 10, 2, 18),
    Section("nursingInterventions", "NURSING CARE", 250, 550, _NOTEBOOK,
            -10, 12, "#283593", -65, 12, 12, 10, 2, 30),
    Section("medications", "MEDICATIONS", 600, 550, _ellipse(100, 45, "#FCE4EC", "#E91E63"),
            -15, 12, "#880E4F", -75, 9, 12, 10, 2, 30),
    Section("treatments", "TREATMENTS", 950, 550, _rect(160, 50, 5, "#E0F2F1", "#009688"),
            -5, 12, "#00695C", -65, 13, 10, 10, 2, 26),
    Section("patientEducation", "PATIENT EDUCATION", 600, 700, _rect(240, 50, 5, "#F1F8E9", "#689F38"),
            -5, 12, "#33691E", -105, 13, 10, 10, 2, 40),
)

# (x1, y1, x2, y2)
CONNECTORS: Tuple[Tuple[int, int, int, int], ...] = (
    (600, 210, 600, 360),   # pathophysiology -> central
    (330, 280, 500, 280),   # risk factors -> signs/symptoms
    (870, 280, 700, 280),   # causes -> signs/symptoms
    (560, 400, 270, 400),   # central -> diagnostics
    (640, 400, 940, 400),   # central -> complications
    (230, 460, 250, 490),   # diagnostics -> nursing
    (980, 460, 960, 495),   # complications -> treatments
    (600, 440, 600, 505),   # central -> medications
    (600, 595, 600, 675),   # medications -> patient education
    (340, 570, 480, 680),   # nursing -> patient education
    (860, 570, 720, 680),   # treatments -> patient education
)


def truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


def visible_items(record: ConceptMapRecord, section: Section) -> List[str]:
    return [truncate(item, section.max_chars) for item in record.items(section.key)[:section.max_items]]


def _render_section(record: ConceptMapRecord, s: Section) -> str:
    parts = [
        f'<g class="cm-section cm-{s.key}" transform="translate({s.x}, {s.y})">',
        s.shape,
        f'<text x="0" y="{s.label_y}" text-anchor="middle" font-size="{s.label_size}" '
        f'font-weight="bold" fill="{s.label_fill}">{escape(s.label)}</text>',
    ]
    items = visible_items(record, s)
    if items:
        parts.append(f'<text class="cm-items" font-size="{s.font_size}" fill="#333">')
        for i, item in enumerate(items):
            y = s.items_y + i * s.line_height
            parts.append(f'<tspan x="{s.items_x}" y="{y}">• {escape(item)}</tspan>')
        parts.append("</text>")
    parts.append("</g>")
    return "".join(parts)


def render_concept_map(record: ConceptMapRecord) -> str:
    central = escape(truncate(record.central, CENTRAL_MAX_CHARS))
    out = [
        '<svg xmlns="http://www.w3.org/2000/svg" class="concept-map-svg" width="1200" height="800" '
        f'viewBox="0 0 1200 800" role="img" aria-label="Concept map: {central}">',
        '<defs><marker id="cm-arrowhead" markerWidth="10" markerHeight="10" refX="9" refY="3" orient="auto">'
        '<polygon points="0 0, 10 3, 0 6" fill="#666"/></marker></defs>',
        '<rect x="0" y="0" width="1200" height="800" rx="8" fill="white"/>',
        '<g class="cm-central" transform="translate(600, 400)">'
        f'<polygon points="{STAR_POINTS}" fill="#FFD700" stroke="#FFA500" stroke-width="2"/>'
        f'<text x="0" y="4" text-anchor="middle" font-size="12" font-weight="bold" fill="#333">{central}</text>'
        '</g>',
    ]
    out.extend(_render_section(record, s) for s in SECTIONS)
    out.extend(
        f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="#666" stroke-width="2" marker-end="url(#cm-arrowhead)"/>'
        for x1, y1, x2, y2 in CONNECTORS
    )
    out.append("</svg>")
    return "\n".join(out)
