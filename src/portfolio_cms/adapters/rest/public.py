"""Anonymous, cached reads of the public portfolio plus contact-form submission."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.config import ApiConfig, get_public_site_config
from portfolio_cms.domain.bindings.settings import prepare_submission
from portfolio_cms.domain.errors import FetchError, MutationError
from portfolio_cms.domain.ports.remote_store import RemoteStoreError
from portfolio_cms.domain.preview import (
    PreviewProjector,
    featured_first,
    is_visible,
    project_about,
    project_skills,
)
from portfolio_cms.domain.session import AuthSession

from . import translator
from .client import PortfolioApiClient, default_client_factory
from .schema import (
    AboutPayload,
    ContactSettingsPayload,
    ExperiencePayload,
    HeroPayload,
    ProjectPayload,
    SiteSettingsPayload,
    SkillCategoryPayload,
)
from .stores import many, one, read_nested_skills

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from portfolio_cms.adapters.http_resilience import ResilientClient
    from portfolio_cms.config import PublicSiteConfig, ResilienceConfig
    from portfolio_cms.domain.bindings.settings import ContactSubmission
    from portfolio_cms.domain.model import (
        ContactSettings,
        Experience,
        Hero,
        Project,
        SiteSettings,
    )
    from portfolio_cms.domain.preview import AboutPreview, SkillGroup, SortedView

log = getLogger(__name__)

PUBLIC_PROJECTS: PreviewProjector[Project] = PreviewProjector(
    sort_key=featured_first, include=is_visible, empty_message="No projects yet."
)
PUBLIC_EXPERIENCE: PreviewProjector[Experience] = PreviewProjector(
    include=is_visible, empty_message="No experience yet."
)

_read_hero = one(HeroPayload, translator.to_hero)
_read_about = one(AboutPayload, translator.to_about)
_read_categories = many(SkillCategoryPayload, translator.to_category)
_read_projects = many(ProjectPayload, translator.to_project)
_read_experience = many(ExperiencePayload, translator.to_experience)
_read_site = one(SiteSettingsPayload, translator.to_site_settings)
_read_contact = one(ContactSettingsPayload, translator.to_contact_settings)


@dataclass(frozen=True, slots=True)
class PublicSite:
    """Everything the public page renders, already sorted and filtered."""

    hero: Hero
    about: AboutPreview
    skills: tuple[SkillGroup, ...]
    projects: SortedView[Project]
    experience: SortedView[Experience]
    site: SiteSettings
    contact: ContactSettings


def _submission_error(exc: RemoteStoreError) -> str:
    status = exc.status
    if status == 429:
        return "Too many messages sent. Please wait before trying again."
    if status == 400:
        return exc.detail or "Invalid input. Please check your fields."
    if status is not None and status >= 500:
        return "Server error. Please try again later."
    return "Failed to send message. Please check your connection and try again."


class PublicSiteReader:
    def __init__(
        self,
        *,
        config: PublicSiteConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = default_client_factory,
    ) -> None:
        site_config = config or get_public_site_config()
        self._client = PortfolioApiClient(
            config=ApiConfig(
                base_url=site_config.base_url, token=None, resilience=site_config.resilience
            ),
            session=AuthSession(),
            client_factory=client_factory,
        )

    async def __aenter__(self) -> PublicSiteReader:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self) -> PublicSite:
        client = self._client
        try:
            hero, about, skills, projects, experience, site, contact = await asyncio.gather(
                client.get("/hero"),
                client.get("/about"),
                client.get("/skills"),
                client.get("/projects"),
                client.get("/experience"),
                client.get("/settings/site"),
                client.get("/settings/contact"),
            )
            hero_entity = _read_hero(hero)
            categories = _read_categories(skills)
            site_page = PublicSite(
                hero=hero_entity,
                about=project_about(_read_about(about).paragraphs, hero_entity.stats),
                skills=project_skills(categories, read_nested_skills(skills)),
                projects=PUBLIC_PROJECTS.project(_read_projects(projects)),
                experience=PUBLIC_EXPERIENCE.project(_read_experience(experience)),
                site=_read_site(site),
                contact=_read_contact(contact),
            )
        except RemoteStoreError as exc:
            log.warning("Loading the public site failed: %s", exc.message)
            raise FetchError(exc.detail or "Failed to load the portfolio") from exc
        return site_page

    async def contact_settings(self) -> ContactSettings:
        try:
            return _read_contact(await self._client.get("/settings/contact"))
        except RemoteStoreError as exc:
            raise FetchError(exc.detail or "Failed to load contact settings") from exc

    async def submit_contact(
        self,
        submission: ContactSubmission,
        settings: ContactSettings | None = None,
    ) -> None:
        """Validate and post a contact-form message."""
        prepared = prepare_submission(submission, settings)
        try:
            await self._client.post(
                "/settings/messages", json=translator.submission_write(prepared).to_wire()
            )
        except RemoteStoreError as exc:
            message = _submission_error(exc)
            log.warning("Contact submission failed: %s", exc.message)
            raise MutationError(message, action="create", status=exc.status) from exc
        log.info("Contact message from %s sent", prepared.email)
