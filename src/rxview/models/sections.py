"""The label section table.

One ordered table drives section assembly, title lookup in both directions and
the per-field guidance sent with the section-enhancement schema. Order in the
table is display order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType


class SectionKey(StrEnum):
    """Prose fields of a drug label, as named in the label data."""
    INDICATIONS_AND_USAGE = "indicationsAndUsage"
    DOSAGE_AND_ADMINISTRATION = "dosageAndAdministration"
    DOSAGE_FORMS_AND_STRENGTHS = "dosageFormsAndStrengths"
    WARNINGS_AND_PRECAUTIONS = "warningsAndPrecautions"
    ADVERSE_REACTIONS = "adverseReactions"
    CLINICAL_PHARMACOLOGY = "clinicalPharmacology"
    CLINICAL_STUDIES = "clinicalStudies"
    HOW_SUPPLIED = "howSupplied"
    USE_IN_SPECIFIC_POPULATIONS = "useInSpecificPopulations"
    DESCRIPTION = "description"
    NONCLINICAL_TOXICOLOGY = "nonclinicalToxicology"
    INSTRUCTIONS_FOR_USE = "instructionsForUse"

    @property
    def spec(self) -> SectionSpec:
        return _BY_KEY[self]

    @property
    def display_title(self) -> str:
        return _BY_KEY[self].title

    @classmethod
    def from_title(cls, title: str) -> SectionKey | None:
        """Reverse lookup: display title to field key."""
        return _BY_TITLE.get(title)


class SectionCategory(StrEnum):
    """Grouping used by clients to organize sections."""
    USAGE = "usage"
    SAFETY = "safety"
    CLINICAL = "clinical"
    ADMINISTRATION = "administration"
    WARNINGS = "warnings"
    INTERACTIONS = "interactions"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class SectionSpec:
    key: SectionKey
    title: str
    category: SectionCategory
    important: bool
    guidance: str


K, C = SectionKey, SectionCategory

SECTION_TABLE: tuple[SectionSpec, ...] = (
    SectionSpec(
        K.INDICATIONS_AND_USAGE, "Indications and Usage", C.USAGE, True,
        "Enhance the indications and usage section to be more accessible to patients. Explain what "
        "conditions this medication treats and why doctors prescribe it. Use simple language to describe "
        "the condition, as well as therapeutic uses while maintaining medical accuracy.",
    ),
    SectionSpec(
        K.DOSAGE_AND_ADMINISTRATION, "Dosage and Administration", C.ADMINISTRATION, True,
        "Rewrite the dosage and administration information to be more patient-friendly. Explain how the "
        "medication should be taken, when to take it, and any important administration instructions. "
        "Clarify medical terms and provide context for dosing schedules.",
    ),
    SectionSpec(
        K.DOSAGE_FORMS_AND_STRENGTHS, "Dosage Forms and Strengths", C.ADMINISTRATION, False,
        "Simplify the dosage forms and strengths section for patient understanding. Explain what forms "
        "the medication comes in (tablets, capsules, liquid, etc.) and what the different strengths mean "
        "in practical terms.",
    ),
    SectionSpec(
        K.WARNINGS_AND_PRECAUTIONS, "Warnings and Precautions", C.WARNINGS, True,
        "Enhance the warnings and precautions section to be more understandable while maintaining "
        "urgency. Explain potential risks, when to contact a doctor, and important safety information in "
        "clear, accessible language.",
    ),
    SectionSpec(
        K.ADVERSE_REACTIONS, "Adverse Reactions", C.SAFETY, True,
        "Rewrite the adverse reactions section to be more patient-friendly. Explain what side effects "
        "patients might experience, categorize them by severity or frequency when possible, and clarify "
        "medical terminology.",
    ),
    SectionSpec(
        K.CLINICAL_PHARMACOLOGY, "Clinical Pharmacology", C.CLINICAL, False,
        "Simplify the clinical pharmacology section for patient comprehension. Explain how the medication "
        "works in the body, its mechanism of action, and absorption/elimination in understandable terms.",
    ),
    SectionSpec(
        K.CLINICAL_STUDIES, "Clinical Studies", C.CLINICAL, False,
        "Enhance the clinical studies section to be more accessible. Explain what research has been done "
        "to test the medication's effectiveness, what the studies showed, and what this means for "
        "patients in simple terms.",
    ),
    SectionSpec(
        K.HOW_SUPPLIED, "How Supplied/Storage and Handling", C.OTHER, False,
        "Rewrite the how supplied section to be more patient-friendly. Explain how the medication is "
        "packaged, what patients can expect when they receive their prescription, and any storage "
        "instructions in clear language.",
    ),
    SectionSpec(
        K.USE_IN_SPECIFIC_POPULATIONS, "Use in Specific Populations", C.SAFETY, False,
        "Simplify the use in specific populations section for better understanding. Explain how the "
        "medication affects different groups (pregnant women, elderly, children, etc.) and any special "
        "considerations in accessible language.",
    ),
    SectionSpec(
        K.DESCRIPTION, "Description", C.OTHER, False,
        "Enhance the description section to be more patient-friendly. Explain what the medication "
        "contains, its chemical properties, and physical characteristics in understandable terms while "
        "maintaining accuracy.",
    ),
    SectionSpec(
        K.NONCLINICAL_TOXICOLOGY, "Nonclinical Toxicology", C.CLINICAL, False,
        "Rewrite the nonclinical toxicology section to be more accessible. Explain what safety testing "
        "has been done in laboratory studies and what this means for patient safety in simple, clear "
        "language.",
    ),
    SectionSpec(
        K.INSTRUCTIONS_FOR_USE, "Instructions for Use", C.ADMINISTRATION, False,
        "Enhance the instructions for use section to be more patient-friendly. Provide clear, "
        "step-by-step guidance on how to properly use the medication, explaining any special devices or "
        "techniques required.",
    ),
)

del K, C

_BY_KEY: MappingProxyType[SectionKey, SectionSpec] = MappingProxyType({s.key: s for s in SECTION_TABLE})
_BY_TITLE: MappingProxyType[str, SectionKey] = MappingProxyType({s.title: s.key for s in SECTION_TABLE})

assert len(_BY_KEY) == len(SectionKey) == len(_BY_TITLE), "section table out of sync with SectionKey"
