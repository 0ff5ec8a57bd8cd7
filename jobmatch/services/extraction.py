"""
Heuristic field extraction from normalized resume text
"""
import re
from enum import Enum
from typing import List, Optional

from jobmatch.models.matcher_settings import DEFAULT_SETTINGS, MatcherSettings
from jobmatch.models.schemas import ContactInfo, EducationEntry, ExperienceEntry, ExtractedFields
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)


class _ExperienceState(Enum):
    NO_ENTRY = "no_entry"
    ENTRY_OPEN = "entry_open"


def is_entry_start(line: str) -> bool:
    """A job line looks like "Engineer @ Acme" or "Engineer at Acme"."""
    return "@" in line or "at" in line.lower().split()


class _ExperienceScanner:
    """Two-state machine that folds experience-section lines into entries."""

    def __init__(self):
        self.state = _ExperienceState.NO_ENTRY
        self.entries: List[ExperienceEntry] = []
        self._title = ""
        self._company = ""
        self._duration = ""
        self._description: List[str] = []

    def feed(self, line: str) -> None:
        if not line:
            return
        if is_entry_start(line):
            self._flush()
            self._open(line)
        elif self.state is _ExperienceState.ENTRY_OPEN:
            if not self._company:
                self._company = line
            elif not self._duration:
                self._duration = line
            else:
                self._description.append(line)

    def finish(self) -> List[ExperienceEntry]:
        self._flush()
        return self.entries

    def _open(self, title: str) -> None:
        self.state = _ExperienceState.ENTRY_OPEN
        self._title = title
        self._company = ""
        self._duration = ""
        self._description = []

    def _flush(self) -> None:
        if self.state is _ExperienceState.ENTRY_OPEN and self._title:
            self.entries.append(ExperienceEntry(
                title=self._title,
                company=self._company,
                duration=self._duration,
                description=" ".join(self._description),
            ))
        self.state = _ExperienceState.NO_ENTRY


class FieldExtractor:
    """Derives structured resume fields from normalized text.

    Absent fields come back as empty defaults; extraction never raises for
    missing content.
    """

    def __init__(self, settings: Optional[MatcherSettings] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._section_pattern = re.compile(
            "|".join(re.escape(d) for d in self.settings.experience_delimiters),
            re.IGNORECASE,
        )

    @property
    def confidence(self) -> float:
        return self.settings.confidence

    def extract_skills(self, text: str) -> List[str]:
        lower_text = text.lower()
        return [skill for skill in self.settings.skill_vocabulary if skill.lower() in lower_text]

    def extract_education(self, text: str) -> List[EducationEntry]:
        lines = text.split("\n")
        education = []
        for i, line in enumerate(lines):
            lowered = line.lower()
            if any(trigger in lowered for trigger in self.settings.education_triggers):
                education.append(EducationEntry(
                    degree=line.strip(),
                    institution=lines[i + 1].strip() if i + 1 < len(lines) else "",
                    year=lines[i + 2].strip() if i + 2 < len(lines) else "",
                ))
        return education

    def extract_experience(self, text: str) -> List[ExperienceEntry]:
        sections = self._section_pattern.split(text, maxsplit=1)
        if len(sections) < 2:
            return []

        scanner = _ExperienceScanner()
        for line in sections[1].split("\n"):
            scanner.feed(line.strip())
        return scanner.finish()

    def extract_contact(self, text: str) -> ContactInfo:
        # Contact details are not detected yet
        return ContactInfo()

    def extract_summary(self, text: str) -> str:
        return text[:self.settings.summary_length]

    def extract(self, text: str) -> ExtractedFields:
        fields = ExtractedFields(
            skills=self.extract_skills(text),
            education=self.extract_education(text),
            experience=self.extract_experience(text),
            contact=self.extract_contact(text),
            summary=self.extract_summary(text),
        )
        logger.debug(
            f"Extracted {len(fields.skills)} skills, {len(fields.education)} education "
            f"and {len(fields.experience)} experience entries"
        )
        return fields
