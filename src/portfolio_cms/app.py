"""Application wiring: REST adapters plugged into the domain editors."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from portfolio_cms.adapters.notifier import LoggingNotifier
from portfolio_cms.adapters.rest import (
    AuthService,
    PortfolioApiClient,
    PublicSiteReader,
    RestInboxStore,
    about_store,
    category_store,
    contact_settings_store,
    experience_store,
    hero_store,
    project_store,
    site_settings_store,
    skill_store,
)
from portfolio_cms.adapters.rest.client import default_client_factory
from portfolio_cms.domain.bindings import (
    AboutEditor,
    ExperienceBinding,
    HeroEditor,
    MessagesInbox,
    ProjectsBinding,
    SettingsEditor,
    SkillsBinding,
    contact_settings_editor,
    site_settings_editor,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from portfolio_cms.adapters.http_resilience import ResilientClient
    from portfolio_cms.config import ApiConfig, PublicSiteConfig, ResilienceConfig
    from portfolio_cms.domain.model import ContactSettings, SiteSettings
    from portfolio_cms.domain.ports import ConfirmAction, Notifier
    from portfolio_cms.domain.preview import AboutPreview
    from portfolio_cms.domain.reconciliation import ReconciliationPolicy
    from portfolio_cms.domain.session import AuthSession

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

log = getLogger(__name__)


@dataclass(slots=True)
class AdminConsole:
    """Every editable section of the portfolio, sharing one API client and session."""

    client: PortfolioApiClient
    auth: AuthService
    hero: HeroEditor
    about: AboutEditor
    skills: SkillsBinding
    projects: ProjectsBinding
    experience: ExperienceBinding
    site_settings: SettingsEditor[SiteSettings]
    contact_settings: SettingsEditor[ContactSettings]
    inbox: MessagesInbox

    async def __aenter__(self) -> AdminConsole:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def about_preview(self) -> AboutPreview:
        """About paragraphs next to the hero stats; the stats are only read."""
        return self.about.preview(self.hero.stats.items)

    def dispose(self) -> None:
        self.hero.dispose()
        self.about.dispose()
        self.skills.dispose()
        self.projects.dispose()
        self.experience.dispose()
        self.site_settings.dispose()
        self.contact_settings.dispose()

    async def aclose(self) -> None:
        self.dispose()
        await self.client.aclose()


def build_admin_console(
    *,
    confirm: ConfirmAction,
    config: ApiConfig | None = None,
    session: AuthSession | None = None,
    notifier: Notifier | None = None,
    policy: ReconciliationPolicy | None = None,
    client_factory: ClientFactory = default_client_factory,
) -> AdminConsole:
    client = PortfolioApiClient(config=config, session=session, client_factory=client_factory)
    effective_notifier = notifier or LoggingNotifier()
    log.debug("Building admin console for %s", client.config.base_url)
    return AdminConsole(
        client=client,
        auth=AuthService(client),
        hero=HeroEditor(store=hero_store(client), notifier=effective_notifier),
        about=AboutEditor(store=about_store(client), notifier=effective_notifier),
        skills=SkillsBinding(
            category_store=category_store(client),
            skill_store=skill_store(client),
            notifier=effective_notifier,
            confirm=confirm,
            policy=policy,
        ),
        projects=ProjectsBinding(
            store=project_store(client),
            notifier=effective_notifier,
            confirm=confirm,
            policy=policy,
        ),
        experience=ExperienceBinding(
            store=experience_store(client),
            notifier=effective_notifier,
            confirm=confirm,
            policy=policy,
        ),
        site_settings=site_settings_editor(
            store=site_settings_store(client), notifier=effective_notifier
        ),
        contact_settings=contact_settings_editor(
            store=contact_settings_store(client), notifier=effective_notifier
        ),
        inbox=MessagesInbox(
            store=RestInboxStore(client), notifier=effective_notifier, confirm=confirm
        ),
    )


def build_public_reader(
    *,
    config: PublicSiteConfig | None = None,
    client_factory: ClientFactory = default_client_factory,
) -> PublicSiteReader:
    return PublicSiteReader(config=config, client_factory=client_factory)
