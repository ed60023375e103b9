"""Translate API payloads into domain entities and drafts into request bodies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from portfolio_cms.domain.model import (
    About,
    AboutParagraph,
    Admin,
    ContactMessage,
    ContactSettings,
    Experience,
    Hero,
    HeroStat,
    Project,
    SiteSettings,
    Skill,
    SkillCategory,
    new_client_id,
)

from .schema import (
    AboutParagraphPayload,
    AboutWrite,
    CategoryWrite,
    ContactSettingsWrite,
    ContactSubmissionWrite,
    ExperienceWrite,
    HeroStatPayload,
    HeroWrite,
    ProjectWrite,
    SiteSettingsWrite,
    SkillCreate,
    SkillUpdate,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from portfolio_cms.domain.bindings import (
        CategoryDraft,
        ContactSubmission,
        ExperienceDraft,
        HeroDraft,
        ProjectDraft,
        SkillDraft,
    )

    from .schema import (
        AboutPayload,
        AdminPayload,
        ContactMessagePayload,
        ContactSettingsPayload,
        ExperiencePayload,
        HeroPayload,
        ProjectPayload,
        SiteSettingsPayload,
        SkillCategoryPayload,
        SkillPayload,
    )


# --- payload -> domain ------------------------------------------------------


def to_admin(payload: AdminPayload) -> Admin:
    return Admin(
        id=payload.id, email=payload.email, name=payload.name, avatar_url=payload.avatar_url
    )


def to_hero(payload: HeroPayload) -> Hero:
    # stats carry no id on the wire; give them local ones so they can be edited
    stats = tuple(
        HeroStat(id=new_client_id(), order=index, label=stat.label, value=stat.value)
        for index, stat in enumerate(payload.stats)
    )
    return Hero(
        id=payload.id,
        initials=payload.initials,
        full_name=payload.full_name,
        title=payload.title,
        location=payload.location,
        profile_image=payload.profile_image,
        gradient_from=payload.gradient_from,
        gradient_to=payload.gradient_to,
        stats=stats,
    )


def to_about(payload: AboutPayload) -> About:
    paragraphs = tuple(
        AboutParagraph(id=paragraph.id, order=paragraph.order, text=paragraph.text)
        for paragraph in payload.content
    )
    return About(id=payload.id, paragraphs=paragraphs)


def to_category(payload: SkillCategoryPayload) -> SkillCategory:
    return SkillCategory(id=payload.id, order=payload.order, name=payload.name)


def to_skill(payload: SkillPayload) -> Skill:
    return Skill(
        id=payload.id, order=payload.order, name=payload.name, category_id=payload.category_id
    )


def flatten_skills(categories: Iterable[SkillCategoryPayload]) -> list[Skill]:
    return [to_skill(skill) for category in categories for skill in category.skills]


def to_project(payload: ProjectPayload) -> Project:
    return Project(
        id=payload.id,
        order=payload.order,
        title=payload.title,
        description=payload.description,
        details=payload.details,
        image_url=payload.image_url,
        live_url=payload.live_url,
        github_url=payload.github_url,
        tech_stack=tuple(payload.tech_stack),
        featured=payload.featured,
        is_visible=payload.is_visible,
    )


def to_experience(payload: ExperiencePayload) -> Experience:
    return Experience(
        id=payload.id,
        order=payload.order,
        job_title=payload.job_title,
        company=payload.company,
        location=payload.location,
        start_date=payload.start_date,
        end_date=payload.end_date,
        description=payload.description,
        is_visible=payload.is_visible,
    )


def to_site_settings(payload: SiteSettingsPayload) -> SiteSettings:
    return SiteSettings(
        id=payload.id,
        site_title=payload.site_title,
        site_tagline=payload.site_tagline,
        favicon=payload.favicon,
        og_image=payload.og_image,
        github_url=payload.github_url,
        linkedin_url=payload.linkedin_url,
        twitter_url=payload.twitter_url,
        portfolio_url=payload.portfolio_url,
        footer_text=payload.footer_text,
    )


def to_contact_settings(payload: ContactSettingsPayload) -> ContactSettings:
    return ContactSettings(
        id=payload.id,
        heading=payload.heading,
        description=payload.description,
        email=payload.email,
        button_text=payload.button_text,
        show_subject_field=payload.show_subject_field,
        require_subject=payload.require_subject,
    )


def to_message(payload: ContactMessagePayload) -> ContactMessage:
    return ContactMessage(
        id=payload.id,
        name=payload.name,
        email=payload.email,
        message=payload.message,
        subject=payload.subject,
        is_read=payload.is_read,
        created_at=payload.created_at,
    )


# --- domain -> request body -------------------------------------------------


def hero_write(draft: HeroDraft) -> HeroWrite:
    stats = sorted(draft.stats, key=lambda stat: stat.order)
    return HeroWrite(
        initials=draft.initials,
        full_name=draft.full_name,
        title=draft.title,
        location=draft.location,
        profile_image=draft.profile_image,
        gradient_from=draft.gradient_from,
        gradient_to=draft.gradient_to,
        stats=[HeroStatPayload(label=stat.label, value=stat.value) for stat in stats],
    )


def about_write(paragraphs: Iterable[AboutParagraph]) -> AboutWrite:
    ordered = sorted(paragraphs, key=lambda paragraph: paragraph.order)
    return AboutWrite(
        content=[
            AboutParagraphPayload(id=paragraph.id, text=paragraph.text, order=index)
            for index, paragraph in enumerate(ordered)
        ]
    )


def category_write(draft: CategoryDraft) -> CategoryWrite:
    return CategoryWrite(name=draft.name)


def skill_create(draft: SkillDraft) -> SkillCreate:
    return SkillCreate(category_id=draft.category_id, name=draft.name)


def skill_update(draft: SkillDraft) -> SkillUpdate:
    return SkillUpdate(name=draft.name)


def project_write(draft: ProjectDraft) -> ProjectWrite:
    return ProjectWrite(
        title=draft.title,
        description=draft.description,
        details=draft.details,
        image_url=draft.image_url,
        live_url=draft.live_url,
        github_url=draft.github_url,
        tech_stack=list(draft.tech_stack),
        featured=draft.featured,
        is_visible=draft.is_visible,
    )


def experience_write(draft: ExperienceDraft) -> ExperienceWrite:
    if draft.start_date is None:
        raise ValueError("Experience drafts need a start date before sending")
    return ExperienceWrite(
        job_title=draft.job_title,
        company=draft.company,
        location=draft.location,
        start_date=draft.start_date,
        end_date=None if draft.is_current_job else draft.end_date,
        description=draft.description,
        is_visible=draft.is_visible,
    )


def site_settings_write(settings: SiteSettings) -> SiteSettingsWrite:
    return SiteSettingsWrite(
        site_title=settings.site_title,
        site_tagline=settings.site_tagline,
        github_url=settings.github_url,
        linkedin_url=settings.linkedin_url,
        twitter_url=settings.twitter_url,
        portfolio_url=settings.portfolio_url,
        footer_text=settings.footer_text,
    )


def contact_settings_write(settings: ContactSettings) -> ContactSettingsWrite:
    return ContactSettingsWrite(
        heading=settings.heading,
        description=settings.description,
        email=settings.email,
        button_text=settings.button_text,
        show_subject_field=settings.show_subject_field,
        require_subject=settings.require_subject,
    )


def submission_write(submission: ContactSubmission) -> ContactSubmissionWrite:
    return ContactSubmissionWrite(
        name=submission.name,
        email=submission.email,
        subject=submission.subject,
        message=submission.message,
    )
