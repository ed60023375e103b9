"""Portfolio content sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from portfolio_cms.domain.model.base import OrderedItem

if TYPE_CHECKING:
    from datetime import date

    from portfolio_cms.domain.model.base import EntityKey


@dataclass(frozen=True, kw_only=True)
class AboutParagraph(OrderedItem):
    text: str = ""

    @property
    def is_incomplete(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True, kw_only=True)
class About:
    id: EntityKey
    paragraphs: tuple[AboutParagraph, ...] = ()


@dataclass(frozen=True, kw_only=True)
class HeroStat(OrderedItem):
    """Headline figure shown under the hero; ids never leave the client."""

    label: str = ""
    value: str = ""

    @property
    def is_incomplete(self) -> bool:
        return not (self.label.strip() and self.value.strip())


@dataclass(frozen=True, kw_only=True)
class Hero:
    id: EntityKey
    initials: str
    full_name: str
    title: str
    location: str
    profile_image: str | None = None
    gradient_from: str = "#6366f1"
    gradient_to: str = "#ec4899"
    stats: tuple[HeroStat, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SkillCategory(OrderedItem):
    name: str


@dataclass(frozen=True, kw_only=True)
class Skill(OrderedItem):
    name: str
    category_id: EntityKey


@dataclass(frozen=True, kw_only=True)
class Project(OrderedItem):
    title: str
    description: str
    details: str | None = None
    image_url: str | None = None
    live_url: str | None = None
    github_url: str | None = None
    tech_stack: tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False
    is_visible: bool = True

    @property
    def is_incomplete(self) -> bool:
        return not (self.title.strip() and self.description.strip())


@dataclass(frozen=True, kw_only=True)
class Experience(OrderedItem):
    job_title: str
    company: str
    location: str
    start_date: date
    end_date: date | None = None
    description: str = ""
    is_visible: bool = True

    @property
    def is_current_job(self) -> bool:
        return self.end_date is None

    @property
    def is_incomplete(self) -> bool:
        return not self.description.strip()
