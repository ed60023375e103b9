"""Site-wide settings and the contact inbox."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from portfolio_cms.domain.model.base import EntityKey


@dataclass(frozen=True, kw_only=True)
class SiteSettings:
    id: EntityKey
    site_title: str
    site_tagline: str | None = None
    favicon: str | None = None
    og_image: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    portfolio_url: str | None = None
    footer_text: str = ""


@dataclass(frozen=True, kw_only=True)
class ContactSettings:
    id: EntityKey
    heading: str
    description: str
    email: str
    button_text: str = "Send Message"
    show_subject_field: bool = True
    require_subject: bool = False


@dataclass(frozen=True, kw_only=True)
class ContactMessage:
    id: EntityKey
    name: str
    email: str
    message: str
    subject: str | None = None
    is_read: bool = False
    created_at: datetime | None = None
