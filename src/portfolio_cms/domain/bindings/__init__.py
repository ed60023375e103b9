"""Resource-specific editors wired onto the generic controllers."""

from __future__ import annotations

from .about import ABOUT_PARAGRAPH_MAX_LENGTH, AboutEditor
from .experience import ExperienceBinding, ExperienceDraft
from .hero import MAX_HERO_STATS, HeroDraft, HeroEditor
from .projects import ProjectDraft, ProjectsBinding, TechStack
from .settings import (
    ContactSubmission,
    MessagesInbox,
    SettingsEditor,
    contact_settings_editor,
    prepare_submission,
    site_settings_editor,
)
from .skills import CategoryDraft, SkillDraft, SkillsBinding

__all__ = [
    "ABOUT_PARAGRAPH_MAX_LENGTH",
    "MAX_HERO_STATS",
    "AboutEditor",
    "CategoryDraft",
    "ContactSubmission",
    "ExperienceBinding",
    "ExperienceDraft",
    "HeroDraft",
    "HeroEditor",
    "MessagesInbox",
    "ProjectDraft",
    "ProjectsBinding",
    "SettingsEditor",
    "SkillDraft",
    "SkillsBinding",
    "TechStack",
    "contact_settings_editor",
    "prepare_submission",
    "site_settings_editor",
]
