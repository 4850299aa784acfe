from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# category keys, in the order the model is asked to emit them
CATEGORY_KEYS = (
    "pathophysiology",
    "riskFactors",
    "causes",
    "signsSymptoms",
    "diagnostics",
    "complications",
    "nursingInterventions",
    "medications",
    "treatments",
    "patientEducation",
)

_ATTR_BY_KEY = {
    "pathophysiology": "pathophysiology",
    "riskFactors": "risk_factors",
    "causes": "causes",
    "signsSymptoms": "signs_symptoms",
    "diagnostics": "diagnostics",
    "complications": "complications",
    "nursingInterventions": "nursing_interventions",
    "medications": "medications",
    "treatments": "treatments",
    "patientEducation": "patient_education",
}


class ConceptMapRecord(BaseModel):
    """One concept-map JSON object pulled out of generated notes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    central: str
    pathophysiology: List[str] = Field(default_factory=list)
    risk_factors: List[str] = Field(default_factory=list, alias="riskFactors")
    causes: List[str] = Field(default_factory=list)
    signs_symptoms: List[str] = Field(default_factory=list, alias="signsSymptoms")
    diagnostics: List[str] = Field(default_factory=list)
    complications: List[str] = Field(default_factory=list)
    nursing_interventions: List[str] = Field(default_factory=list, alias="nursingInterventions")
    medications: List[str] = Field(default_factory=list)
    treatments: List[str] = Field(default_factory=list)
    patient_education: List[str] = Field(default_factory=list, alias="patientEducation")

    @field_validator(
        "pathophysiology", "risk_factors", "causes", "signs_symptoms", "diagnostics",
        "complications", "nursing_interventions", "medications", "treatments",
        "patient_education",
        mode="before",
    )
    @classmethod
    def empty_when_null(cls, v):
        return [] if v is None else v

    def items(self, key: str) -> List[str]:
        """Items for a JSON category key such as ``riskFactors``."""
        return list(getattr(self, _ATTR_BY_KEY[key]))

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass
class ConceptMapMatch:
    """A record found in a document plus where it came from.

    ``heading`` / ``block`` are token indices for markdown sources and
    BeautifulSoup tags for HTML sources. ``heading`` is None for blocks found
    by the whole-document fallback scan.
    """

    title: str
    record: ConceptMapRecord
    block: Any
    heading: Optional[Any] = None
