"""Pydantic models describing the portfolio API payloads."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _iso_date(value: object) -> object:
    # the API serialises dates as full ISO timestamps
    if isinstance(value, str) and value:
        return value[:10]
    if value == "":
        return None
    return value


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class ErrorPayload(ApiModel):
    message: str | list[str] | None = None
    error: str | None = None
    status_code: int | None = None

    @property
    def detail(self) -> str | None:
        if isinstance(self.message, list):
            return "; ".join(self.message) or None
        return self.message or None


# --- auth -----------------------------------------------------------------


class AdminPayload(ApiModel):
    id: str
    email: str
    name: str
    avatar_url: str | None = None


class AuthPayload(ApiModel):
    access_token: str
    admin: AdminPayload


class LoginRequest(ApiModel):
    email: str
    password: str


# --- hero / about -----------------------------------------------------------


class HeroStatPayload(ApiModel):
    label: str
    value: str


class HeroPayload(ApiModel):
    id: str
    initials: str
    full_name: str
    title: str
    location: str
    profile_image: str | None = None
    gradient_from: str = "#6366f1"
    gradient_to: str = "#ec4899"
    stats: list[HeroStatPayload] = Field(default_factory=list)


class HeroWrite(ApiModel):
    initials: str
    full_name: str
    title: str
    location: str
    profile_image: str | None
    gradient_from: str
    gradient_to: str
    stats: list[HeroStatPayload]


class AboutParagraphPayload(ApiModel):
    id: str
    text: str
    order: int = 0


class AboutPayload(ApiModel):
    id: str
    content: list[AboutParagraphPayload] = Field(default_factory=list)


class AboutWrite(ApiModel):
    content: list[AboutParagraphPayload]


# --- skills -----------------------------------------------------------------


class SkillPayload(ApiModel):
    id: str
    name: str
    order: int = 0
    category_id: str


class SkillCategoryPayload(ApiModel):
    id: str
    name: str
    order: int = 0
    skills: list[SkillPayload] = Field(default_factory=list)


class CategoryWrite(ApiModel):
    name: str


class SkillCreate(ApiModel):
    category_id: str
    name: str


class SkillUpdate(ApiModel):
    name: str


# --- projects / experience --------------------------------------------------


class ProjectPayload(ApiModel):
    id: str
    title: str
    description: str
    details: str | None = None
    image_url: str | None = None
    live_url: str | None = None
    github_url: str | None = None
    tech_stack: list[str] = Field(default_factory=list)
    featured: bool = False
    order: int = 0
    is_visible: bool = True


class ProjectWrite(ApiModel):
    title: str
    description: str
    details: str | None
    image_url: str | None
    live_url: str | None
    github_url: str | None
    tech_stack: list[str]
    featured: bool
    is_visible: bool


class ExperiencePayload(ApiModel):
    id: str
    job_title: str
    company: str
    location: str
    start_date: date
    end_date: date | None = None
    description: str = ""
    order: int = 0
    is_visible: bool = True

    _normalize_dates = field_validator("start_date", "end_date", mode="before")(_iso_date)


class ExperienceWrite(ApiModel):
    job_title: str
    company: str
    location: str
    start_date: date
    end_date: date | None
    description: str
    is_visible: bool


class ReorderItem(ApiModel):
    id: str


class ReorderRequest(ApiModel):
    items: list[ReorderItem]


# --- settings / inbox -------------------------------------------------------


class SiteSettingsPayload(ApiModel):
    id: str
    site_title: str
    site_tagline: str | None = None
    favicon: str | None = None
    og_image: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    portfolio_url: str | None = None
    footer_text: str = ""


class SiteSettingsWrite(ApiModel):
    site_title: str
    site_tagline: str | None
    github_url: str | None
    linkedin_url: str | None
    twitter_url: str | None
    portfolio_url: str | None
    footer_text: str


class ContactSettingsPayload(ApiModel):
    id: str
    heading: str
    description: str = ""
    email: str
    button_text: str = "Send Message"
    show_subject_field: bool = True
    require_subject: bool = False


class ContactSettingsWrite(ApiModel):
    heading: str
    description: str
    email: str
    button_text: str
    show_subject_field: bool
    require_subject: bool


class ContactMessagePayload(ApiModel):
    id: str
    name: str
    email: str
    subject: str | None = None
    message: str
    is_read: bool = False
    created_at: datetime | None = None


class UnreadCountPayload(ApiModel):
    count: int


class ContactSubmissionWrite(ApiModel):
    name: str
    email: str
    subject: str | None
    message: str
