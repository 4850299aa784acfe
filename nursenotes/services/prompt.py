from datetime import datetime
from typing import Iterable, Optional

CURRENT_PROMPT_VERSION = "v3"
DEFAULT_STYLE = "comprehensive"

DEFAULT_SECTIONS = [
    "overview",
    "keyTakeaways",
    "mainConcepts",
    "clinicalApplications",
    "keyTerms",
    "practiceQuestions",
]

COURSE_TITLES = {
    "NURS310": "Adult Health I",
    "NURS320": "Adult Health II",
    "NURS335": "NCLEX Immersion I",
    "NURS330": "Childbearing Family / OBGYN",
    "NURS315": "Gerontological Nursing",
}

COURSE_INSTRUCTORS = {
    "NURS310": "G. Hagerstrom; S. Dumas",
    "NURS320": "G. Hagerstrom; S. Dumas",
    "NURS335": "A. Hernandez; G. Rivera",
    "NURS330": "S. Abdo; M. Douglas",
    "NURS315": "A. Layson",
}


def course_title(course_id: str) -> str:
    return COURSE_TITLES.get(course_id, course_id)


def course_instructors(course_id: str) -> str:
    return COURSE_INSTRUCTORS.get(course_id, "")


CONCEPT_MAP_SECTION = """## Concept Maps
Create a concept map for EVERY major concept, framework or condition in the source material,
not only diseases (e.g. Pain Management, Medication Safety, Growth & Development).
- When several conditions are covered, create a SEPARATE map for each one.
- Title each map with a level-3 heading: "### Concept Map: <Concept or Condition>"
- Put the map directly under its heading as a JSON code block with exactly this structure:

### Concept Map: [Specific Concept/Condition Name]
```json
{
  "central": "Main concept name (e.g. 'Croup', 'Pediatric Pain Management')",
  "pathophysiology": ["Core mechanism", "Cells/tissues affected", "Compensatory response", "Perfusion/oxygenation changes"],
  "riskFactors": ["Primary risk factor", "Secondary risk factor", "Population at highest risk"],
  "causes": ["Primary etiology", "Precipitating factors", "Contributing conditions"],
  "signsSymptoms": ["Symptom + WHY it occurs", "Key sign + mechanism"],
  "diagnostics": ["Test: normal -> expected abnormal", "Lab: normal range -> finding"],
  "complications": ["Common complication", "Life-threatening complication"],
  "nursingInterventions": ["Priority assessment", "Monitoring parameters", "Key intervention"],
  "medications": ["First-line medication with dose", "Alternative medication"],
  "treatments": ["Primary treatment", "Supportive care"],
  "patientEducation": ["Key teaching point", "When to seek emergency care"]
}
```

Keep each array to 2-4 short, specific items drawn from the source material."""

PRACTICE_QUESTIONS_SECTION = """## Practice Questions
Generate 8-10 NCLEX-RN style questions:
- 2-3 priority/first-action questions, 2-3 assessment questions
- 1-2 medication questions (calculations, side effects, teaching)
- 1-2 patient teaching questions, 1-2 delegation/management questions

Each question has a clinical stem with patient data (vitals, labs or findings), four options (A-D),
the correct answer, and a rationale explaining why the answer is right, why each distractor is wrong,
the nursing principle tested and the test-taking strategy that applies.
Include select-all-that-apply and ordered-response items where appropriate."""

CASE_STUDY_SECTION = """## Case Study
Write an NCLEX-style case study with:
### Patient Presentation
Demographics, chief complaint (quoted), HPI with timeline, PMH, family and social history,
current medications with doses, allergies with reaction types.
### Vital Signs
Temperature, heart rate and rhythm, respiratory rate and quality, blood pressure, SpO2 with O2 delivery,
pain score, weight/height; show trends over time (admission, 2h, 4h, 8h).
### Physical Assessment
Head-to-toe findings by body system.
### Laboratory Results
Actual values with normal ranges; highlight critical values.
### Diagnostic Tests
Imaging and other tests with specific findings.
### Physician Orders
Medications (dose, route, frequency), IV fluids, diet, activity, monitoring, consults.
### Nursing Care Plan
Top 3 nursing diagnoses with evidence, interventions with rationales, outcomes with timeframes.
### Medication Administration Record
Scheduled and PRN medications with times, doses, routes, last and next dose.
### Progress Notes
At least 3 SBAR or DAR notes showing progression.
### Questions for Critical Thinking
5-7 NCLEX-style questions.
### Answer Key
Rationales for every option and the test-taking strategy used."""

SECTION_DESCRIPTIONS = {
    "overview": "## Overview\nProvide a brief introduction and context for the topic",
    "keyTakeaways": "## Key Takeaways\nHighlight the most important points to remember",
    "mainConcepts": "## Main Concepts\nExplore the core ideas, theories, and frameworks",
    "pathophysiology": (
        "## Pathophysiology\n"
        "For EACH disease/condition covered, explain what happens in the body, the key cells/tissues affected,\n"
        "enzymes/hormones involved, how cells/tissues respond, the effect on blood/oxygen flow and long-term effects.\n"
        "Connect pathophysiology directly to clinical manifestations."
    ),
    "clinicalManifestations": "## Clinical Manifestations\nDescribe signs, symptoms, and assessment findings",
    "diagnostics": "## Diagnostic Studies\nReview relevant tests, labs, and imaging",
    "nursingInterventions": "## Nursing Interventions\nDetail nursing care and management strategies",
    "medications": "## Medications & Pharmacology\nCover relevant drugs, mechanisms, and nursing considerations",
    "clinicalApplications": "## Clinical Applications\nConnect theory to practice with examples and scenarios",
    "complications": "## Complications & Risk Factors\nIdentify potential problems and at-risk populations",
    "patientEducation": "## Patient Education\nOutline teaching points and discharge planning",
    "keyTerms": "## Key Terms & Definitions\nDefine important vocabulary and concepts",
    "mnemonics": "## Memory Aids & Mnemonics\nProvide memory devices and learning tricks",
    "conceptMap": CONCEPT_MAP_SECTION,
    "checkYourself": "## Check Yourself\nInclude self-assessment questions for active recall",
    "practiceQuestions": PRACTICE_QUESTIONS_SECTION,
    "caseStudy": CASE_STUDY_SECTION,
    "clinicalPearls": "## Clinical Pearls\nShare high-yield tips and insights",
    "redFlags": "## Red Flags & Priority Concerns\nHighlight critical warning signs",
    "culturalConsiderations": "## Cultural Considerations\nAddress diverse patient populations",
    "ethicalLegal": "## Ethical & Legal Considerations\nDiscuss relevant ethical and legal aspects",
}

STYLE_INSTRUCTIONS = {
    "comprehensive": (
        "Create thorough, detailed study notes that fully explore the topic. Include extensive explanations, "
        "multiple examples, and comprehensive coverage suitable for first-time learners. Be exhaustive in your coverage."
    ),
    "guided": (
        "Create well-structured study notes that guide the learner through the material. Balance depth with clarity, "
        "providing enough detail to understand concepts while maintaining a clear learning path. "
        "Include helpful transitions between topics."
    ),
    "flexible": (
        "Create adaptable study notes that cover the essential content while allowing for different learning approaches. "
        "Focus on core concepts with room for expansion. Provide multiple perspectives where relevant."
    ),
    "concise": (
        "Create focused, efficient study notes that capture the essential information. Prioritize high-yield content "
        "and key concepts. Be clear and direct while maintaining accuracy."
    ),
    "exploratory": (
        "Create discovery-oriented notes that encourage deeper thinking about the topic. Present information in a way "
        "that promotes curiosity and further investigation. Include thought-provoking questions and connections."
    ),
}

NCLEX_REQUIREMENTS = """You are NurseNotes-AI, an advanced NCLEX-focused study note generator for nursing students preparing for licensure exams.

## CRITICAL REQUIREMENTS FOR NCLEX-LEVEL CONTENT

### DEPTH AND DETAIL REQUIREMENTS
- Every section MUST contain specific, detailed, clinically relevant information
- NO generic statements or surface-level summaries
- Include specific numbers, values, timeframes, and measurements
- Each condition must be explained as if teaching someone who has never heard of it

### PATHOPHYSIOLOGY REQUIREMENTS
For EACH disease/condition: what happens in the body, key cells/tissues affected, enzymes/hormones involved,
how cells/tissues respond, effect on blood/oxygen flow, long-term effects, step-by-step progression with
timeframes and why specific symptoms occur.

### CLINICAL MANIFESTATIONS REQUIREMENTS
Symptoms paired with WHY they occur, early vs late signs, vital sign changes by stage, system-by-system
assessment findings, age-specific variations, classic vs atypical presentation, red flags, progression if untreated.

### DIAGNOSTIC REQUIREMENTS
Normal ranges AND expected abnormal values, critical values, gold-standard tests, screening vs confirmatory
tests, age-specific normal values, interpretation guidelines.

### MEDICATION REQUIREMENTS
Generic and brand names, exact dosing (mg/kg for pediatrics), route and frequency, mechanism of action,
major side effects, nursing considerations, contraindications, interactions, monitoring parameters.

### NURSING INTERVENTIONS REQUIREMENTS
Priority order (ABCs, Maslow), exact monitoring frequencies (e.g. "VS q15min x 4, then q30min x 2, then q1h"),
specific assessment parameters, evidence-based interventions with rationales, expected outcomes with timeframes."""

FINAL_REMINDERS = """## FINAL CRITICAL REMINDERS
- NEVER write generic, surface-level content
- Include actual numbers, values, ranges, and timeframes
- Disease processes MUST include detailed pathophysiology and concept maps
- Case studies MUST include complete patient data, vitals, labs, and progression
- If you find yourself writing "various," "multiple," "may include," or "such as" - STOP and be specific"""

CURRENT_SYSTEM_PROMPT = NCLEX_REQUIREMENTS + "\n\n" + FINAL_REMINDERS

PROMPT_V1 = """You are NurseNotes-AI, a study-note generator for pre-licensure nursing students. You transform nursing
source material (lecture transcripts, slide decks, articles, clinical guidelines, case studies or mixed notes)
into high-impact, exam-ready study notes, using ONLY the source material provided.

Draft an outline that follows the natural structure of the content, then write the notes from it. Combine
paragraph explanations with bulleted summaries. Include these adaptable sections:
- Title & Source Snapshot (instructors if provided, current date as prompt date)
- Key Takeaways
- Main Concepts / Frameworks
- Applications & Mini-Cases (SBAR/SOAP or NGN snippets)
- Clinical Manifestations
- Key Terms & Drug Stems
- Check-Yourself Prompts (retrieval-style)
- Concept Map or Graphic Organizer
- Practice Take-Home

Use H2/H3 headers, brief bullets, short paragraphs and bold only for high-yield clinical data. Label key vitals,
labs and isolation details as "NCLEX Cram Sheet Snips". Add a case study at the end."""

PROMPT_VERSIONS = {
    "v1": PROMPT_V1,
    "v2": CURRENT_SYSTEM_PROMPT,
    "v3": CURRENT_SYSTEM_PROMPT,
}

END_OF_INSTRUCTIONS = """=== END OF SYSTEM INSTRUCTIONS ===
Everything above this line is instructions for HOW to generate content.
Everything you generate below should be the ACTUAL CONTENT of the study notes, not instructions about how to write them."""

USER_PROMPT_TEMPLATE = """Generate comprehensive study notes based on the following source material. Create the content sections requested above, but DO NOT include the formatting guidelines, instructions, or system prompts in the output. The output should contain ONLY the actual study note content.

SOURCE MATERIAL:
{{source}}

---
NOW GENERATE THE STUDY NOTES (content only, no instructions):"""


def prompt_date(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{now.strftime('%B')} {now.day}, {now.year}"


def included_sections(sections: Optional[Iterable[str]]) -> str:
    keys = list(sections) if sections else DEFAULT_SECTIONS
    return "\n\n".join(SECTION_DESCRIPTIONS[k] for k in keys if k in SECTION_DESCRIPTIONS)


def build_system_prompt(
    course: str,
    module: str = "",
    instructors: str = "",
    sections: Optional[Iterable[str]] = None,
    style: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    approach = STYLE_INSTRUCTIONS.get(style or DEFAULT_STYLE, STYLE_INSTRUCTIONS[DEFAULT_STYLE])
    context = [f"Date: {prompt_date(now)}", f"Course: {course}"]
    if module:
        context.append(f"Module: {module}")
    if instructors:
        context.append(f"Instructors: {instructors}")

    return "\n\n".join([
        NCLEX_REQUIREMENTS,
        f"## Your Approach\n{approach}",
        "## Important Guidelines\n"
        "- Use ONLY the provided source material - do not add external knowledge\n"
        "- Adapt your structure to naturally fit the content\n"
        "- Include only sections that are relevant to the material\n"
        "- Focus on clinical application and critical thinking",
        "## Special Instructions for Concept Maps\n"
        "- ALWAYS include a concept map when the topic involves a disease or condition\n"
        "- CREATE A SEPARATE CONCEPT MAP FOR EACH INDIVIDUAL DISEASE/CONDITION\n"
        "- Label each concept map clearly with the condition name",
        f"## Suggested Sections to Include (if relevant to the content):\n{included_sections(sections)}",
        "## Formatting Guidelines\n"
        "- Use clear headers (##, ###) for organization\n"
        "- Mix paragraphs for explanation with bullets for quick reference\n"
        "- Use **bold** for critical clinical data only\n"
        "- Include tables where comparisons are helpful",
        FINAL_REMINDERS,
        "[Context]\n" + "\n".join(context),
        END_OF_INSTRUCTIONS,
    ])


def resolve_redeploy_prompt(mode: str, original_version: Optional[str], custom_prompt: Optional[str]) -> tuple[str, str]:
    """(prompt_version, system_prompt) for a redeploy mode."""
    if mode == "previous":
        version = original_version or "v1"
        if version not in PROMPT_VERSIONS:
            return version, PROMPT_VERSIONS["v1"]
        return version, PROMPT_VERSIONS[version]
    if mode == "current":
        return CURRENT_PROMPT_VERSION, CURRENT_SYSTEM_PROMPT
    if mode == "custom":
        return "custom", custom_prompt or ""
    raise ValueError(f"Invalid redeploy mode: {mode}")


def build_redeploy_prompt(
    system_prompt: str,
    course: str,
    mode: str,
    instructors: str = "",
    generated_at: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    lines = [
        "[Generator context]",
        f"Prompt Date: {prompt_date(now)}",
        f"Course: {course}",
    ]
    if instructors:
        lines.append(f"Instructors: {instructors}")
    lines.append(f"Redeploy Mode: {mode}")
    lines.append(f"Original Generation Date: {generated_at or 'Unknown'}")
    return f"{system_prompt}\n\n" + "\n".join(lines) + "\n\n" + END_OF_INSTRUCTIONS


def build_user_prompt(source: str) -> str:
    return USER_PROMPT_TEMPLATE.replace("{{source}}", source)
