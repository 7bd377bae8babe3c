"""
Pydantic schemas for data crossing the process boundary.

Defines data models for both collaborators:
- PortfolioData: the read-only portfolio snapshot fetched once per session
- AIResponse: one answer from the AI collaborator
"""

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Portfolio
# =============================================================================


class PersonalInfo(BaseModel):
    """Contact block of the portfolio owner."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: str = ""
    phone: str = ""
    email: str = ""
    linkedin: str = ""
    github: str = ""
    resume_url: str | None = Field(default=None, alias="resumeUrl")

    @property
    def handle(self) -> str:
        """Lower-case first name, used for the fake home directory and hostname."""
        first = self.name.split()[0] if self.name.split() else "guest"
        return first.lower()


class ExperienceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: str
    role: str
    period: str
    location: str = ""
    highlights: list[str] = Field(default_factory=list)


class ProjectEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    tech: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class Education(BaseModel):
    model_config = ConfigDict(frozen=True)

    degree: str
    institution: str
    location: str = ""
    period: str = ""


class PortfolioData(BaseModel):
    """
    Immutable portfolio snapshot.

    Skills keep the category order of the source document; every list keeps
    the order it was published in.
    """

    model_config = ConfigDict(frozen=True)

    personal: PersonalInfo
    summary: str
    skills: dict[str, list[str]] = Field(default_factory=dict)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    education: Education
    certifications: list[str] = Field(default_factory=list)


# =============================================================================
# AI collaborator
# =============================================================================


class AIResponse(BaseModel):
    """
    Answer returned by the AI collaborator.

    A rate-limited answer uses the same shape: its message explains the limit
    and `remaining` is usually 0.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    equivalent_cmd: str | None = Field(default="", alias="equivalentCmd")
    open_url: str | None = Field(default=None, alias="openUrl")
    remaining: int | None = Field(default=None, ge=0)
