# =============================================================================
# lib/text_fields.py - Multi-Section Text Columns
# =============================================================================
# professional_profiles stores work experience and education as single text
# columns, with sections separated by unusual tokens so that free text
# with ordinary line breaks stays intact.
#
# Work experience: the first section is the summary, the rest are entries.
# Education: every section is an entry.
# =============================================================================

from dataclasses import dataclass, field

WORK_EXPERIENCE_SEPARATOR = "|||WORK_EXP_SEPARATOR|||"
EDUCATION_SEPARATOR = "|||EDU_SEPARATOR|||"


@dataclass
class WorkExperience:
    """Parsed work_experience column."""
    summary: str = ""
    sections: list[str] = field(default_factory=list)


def parse_work_experience(text: str | None) -> WorkExperience:
    if not text:
        return WorkExperience()
    parts = text.split(WORK_EXPERIENCE_SEPARATOR)
    return WorkExperience(summary=parts[0], sections=parts[1:])


def parse_education(text: str | None) -> list[str]:
    if not text:
        return []
    return text.split(EDUCATION_SEPARATOR)

