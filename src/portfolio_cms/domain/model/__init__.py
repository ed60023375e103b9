"""Domain model package exports."""

from __future__ import annotations

from .base import Direction, EntityKey, OrderedEntity, OrderedItem, new_client_id
from .content import (
    About,
    AboutParagraph,
    Experience,
    Hero,
    HeroStat,
    Project,
    Skill,
    SkillCategory,
)
from .settings import ContactMessage, ContactSettings, SiteSettings
from .user import Admin

__all__ = [
    "About",
    "AboutParagraph",
    "Admin",
    "ContactMessage",
    "ContactSettings",
    "Direction",
    "EntityKey",
    "Experience",
    "Hero",
    "HeroStat",
    "OrderedEntity",
    "OrderedItem",
    "Project",
    "SiteSettings",
    "Skill",
    "SkillCategory",
    "new_client_id",
]
