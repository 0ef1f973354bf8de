from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


SECTION_KEYS: tuple[str, ...] = (
    "overview",
    "products",
    "market",
    "financial",
    "customers",
    "marketing",
    "online",
    "news",
    "challenges",
    "valueProposition",
)


# --- Requests ---


class ResearchRequest(BaseModel):
    # camelCase keys only
    company_name: str | None = Field(default=None, alias="companyName")
    project_domain: str | None = Field(default=None, alias="projectDomain")


# --- Report ---


class SourceRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    title: str = ""

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source url must not be blank")
        return value


class ContentBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtitle: str = ""
    text: str
    sources: tuple[SourceRef, ...] = ()

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("content block text must not be blank")
        return value


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: tuple[ContentBlock, ...] = Field(min_length=1)


class SectionSet(BaseModel):
    """The ten fixed report sections."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    overview: Section
    products: Section
    market: Section
    financial: Section
    customers: Section
    marketing: Section
    online: Section
    news: Section
    challenges: Section
    value_proposition: Section = Field(alias="valueProposition")


class ResearchRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    company_name: str = Field(alias="companyName")
    project_domain: str = Field(alias="projectDomain")
    generated_at: datetime = Field(alias="generatedAt")
    sections: SectionSet


# --- Responses ---


class ResearchStartResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    research_id: str = Field(alias="researchId")


class ErrorResponse(BaseModel):
    error: str
