"""
Matcher Settings for resume extraction and scoring
"""
from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_SKILL_VOCABULARY: Tuple[str, ...] = (
    "JavaScript", "Python", "Java", "React", "Node.js", "MongoDB", "SQL",
    "AWS", "Docker", "Kubernetes", "Git", "TypeScript", "Angular", "Vue.js",
    "Express.js", "Django", "Flask", "Spring Boot", "PostgreSQL", "MySQL",
    "Redis", "Elasticsearch", "GraphQL", "REST API", "Microservices",
    "Machine Learning", "Data Science", "DevOps", "CI/CD", "Agile",
)

DEFAULT_EDUCATION_TRIGGERS: Tuple[str, ...] = (
    "bachelor", "master", "phd", "university", "college", "degree",
)

DEFAULT_EXPERIENCE_DELIMITERS: Tuple[str, ...] = (
    "experience", "work", "employment",
)


class MatcherSettings(BaseModel):
    """Immutable configuration injected into the field extractor and match scorer"""

    model_config = ConfigDict(frozen=True)

    skill_vocabulary: Tuple[str, ...] = Field(
        default=DEFAULT_SKILL_VOCABULARY,
        description="Ordered controlled vocabulary of canonical skill names"
    )
    education_triggers: Tuple[str, ...] = Field(
        default=DEFAULT_EDUCATION_TRIGGERS,
        description="Lowercase substrings that mark a line as an education entry"
    )
    experience_delimiters: Tuple[str, ...] = Field(
        default=DEFAULT_EXPERIENCE_DELIMITERS,
        description="Words whose first occurrence opens the experience section"
    )
    summary_length: int = Field(default=500, ge=0, description="Number of leading characters kept as summary")
    confidence: float = Field(default=0.8, ge=0.0, le=1.0, description="Fixed extraction confidence")
    skill_weight: float = Field(default=0.7, ge=0.0, le=1.0, description="Weight of the skill match ratio")
    text_weight: float = Field(default=0.3, ge=0.0, le=1.0, description="Weight of the text similarity ratio")

    @field_validator('skill_vocabulary')
    @classmethod
    def dedupe_vocabulary(cls, v):
        seen = set()
        unique = []
        for skill in v:
            key = skill.strip().lower()
            if key and key not in seen:
                seen.add(key)
                unique.append(skill.strip())
        return tuple(unique)

    @field_validator('education_triggers', 'experience_delimiters')
    @classmethod
    def lowercase_markers(cls, v):
        markers = tuple(m.strip().lower() for m in v if m.strip())
        if not markers:
            raise ValueError('At least one marker is required')
        return markers

    @model_validator(mode='after')
    def validate_total_weights(self):
        total = self.skill_weight + self.text_weight
        if abs(total - 1.0) > 0.01:  # Allow small floating point errors
            raise ValueError('Scoring weights must sum to 1.0')
        return self


DEFAULT_SETTINGS = MatcherSettings()
