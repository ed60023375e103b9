"""REST-backed implementations of the collection, document and inbox ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from . import translator
from .client import parse_model, parse_models
from .schema import (
    AboutPayload,
    ContactMessagePayload,
    ContactSettingsPayload,
    ExperiencePayload,
    HeroPayload,
    ProjectPayload,
    ReorderItem,
    ReorderRequest,
    SiteSettingsPayload,
    SkillCategoryPayload,
    SkillPayload,
    UnreadCountPayload,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from pydantic import BaseModel

    from portfolio_cms.domain.bindings import (
        CategoryDraft,
        ExperienceDraft,
        HeroDraft,
        ProjectDraft,
        SkillDraft,
    )
    from portfolio_cms.domain.model import (
        About,
        AboutParagraph,
        ContactMessage,
        ContactSettings,
        EntityKey,
        Experience,
        Hero,
        Project,
        SiteSettings,
        Skill,
        SkillCategory,
    )

    from .client import PortfolioApiClient
    from .schema import ApiModel

type Reader[T] = Callable[[object], T]


def one[M: BaseModel, T](model: type[M], translate: Callable[[M], T]) -> Reader[T]:
    def read(payload: object) -> T:
        return translate(parse_model(model, payload))

    return read


def many[M: BaseModel, T](model: type[M], translate: Callable[[M], T]) -> Reader[list[T]]:
    def read(payload: object) -> list[T]:
        return [translate(item) for item in parse_models(model, payload)]

    return read


@dataclass(frozen=True, slots=True)
class CollectionEndpoints:
    """Paths for one collection; ``{id}`` and ``{scope}`` are filled per call."""

    list_path: str
    item_path: str
    reorder_path: str
    create_path: str | None = None
    list_params: Mapping[str, str] | None = None
    toggle_paths: Mapping[str, str] = field(default_factory=dict)


class RestCollectionStore[TEntity, TDraft]:
    def __init__(
        self,
        *,
        client: PortfolioApiClient,
        endpoints: CollectionEndpoints,
        read_all: Reader[list[TEntity]],
        read_one: Reader[TEntity],
        write_create: Callable[[TDraft], ApiModel],
        write_update: Callable[[TDraft], ApiModel] | None = None,
    ) -> None:
        self._client = client
        self._endpoints = endpoints
        self._read_all = read_all
        self._read_one = read_one
        self._write_create = write_create
        self._write_update = write_update or write_create

    async def fetch_all(self) -> list[TEntity]:
        payload = await self._client.get(
            self._endpoints.list_path, params=self._endpoints.list_params
        )
        return self._read_all(payload)

    async def create(self, draft: TDraft) -> TEntity:
        path = self._endpoints.create_path or self._endpoints.list_path
        payload = await self._client.post(path, json=self._write_create(draft).to_wire())
        return self._read_one(payload)

    async def update(self, key: EntityKey, patch: TDraft) -> TEntity:
        payload = await self._client.put(
            self._endpoints.item_path.format(id=key), json=self._write_update(patch).to_wire()
        )
        return self._read_one(payload)

    async def delete(self, key: EntityKey) -> None:
        await self._client.delete(self._endpoints.item_path.format(id=key))

    async def reorder_batch(
        self,
        ordered_ids: Sequence[EntityKey],
        *,
        scope: EntityKey | None = None,
    ) -> None:
        template = self._endpoints.reorder_path
        if "{scope}" in template and scope is None:
            raise ValueError(f"{template} needs a scope id")
        body = ReorderRequest(items=[ReorderItem(id=key) for key in ordered_ids])
        # a failed reorder is reconciled by reloading, never replayed
        await self._client.put(template.format(scope=scope), json=body.to_wire(), retry=False)

    async def toggle_flag(self, key: EntityKey, flag: str) -> TEntity:
        template = self._endpoints.toggle_paths.get(flag)
        if template is None:
            raise ValueError(f"{self._endpoints.list_path} has no toggle for {flag!r}")
        # replaying a toggle would flip the flag back
        payload = await self._client.put(template.format(id=key), retry=False)
        return self._read_one(payload)


class RestDocumentStore[TDocument, TDraft]:
    def __init__(
        self,
        *,
        client: PortfolioApiClient,
        path: str,
        read: Reader[TDocument],
        write: Callable[[TDraft], ApiModel],
    ) -> None:
        self._client = client
        self._path = path
        self._read = read
        self._write = write

    async def fetch(self) -> TDocument:
        return self._read(await self._client.get(self._path))

    async def replace(self, draft: TDraft) -> TDocument:
        payload = await self._client.put(self._path, json=self._write(draft).to_wire())
        return self._read(payload)


class RestInboxStore:
    BASE_PATH = "/settings/messages"

    def __init__(self, client: PortfolioApiClient) -> None:
        self._client = client
        self._read_all = many(ContactMessagePayload, translator.to_message)

    async def fetch_messages(self) -> list[ContactMessage]:
        return self._read_all(await self._client.get(self.BASE_PATH))

    async def unread_count(self) -> int:
        payload = await self._client.get(f"{self.BASE_PATH}/unread-count")
        return parse_model(UnreadCountPayload, payload).count

    async def mark_read(self, key: EntityKey) -> None:
        await self._client.put(f"{self.BASE_PATH}/{key}/read")

    async def mark_all_read(self) -> None:
        await self._client.put(f"{self.BASE_PATH}/mark-all-read")

    async def delete(self, key: EntityKey) -> None:
        await self._client.delete(f"{self.BASE_PATH}/{key}")


# --- per-resource wiring ----------------------------------------------------

ADMIN_LIST_PARAMS = {"all": "true"}


def project_store(client: PortfolioApiClient) -> RestCollectionStore[Project, ProjectDraft]:
    return RestCollectionStore(
        client=client,
        endpoints=CollectionEndpoints(
            list_path="/projects",
            item_path="/projects/{id}",
            reorder_path="/projects/reorder",
            list_params=ADMIN_LIST_PARAMS,
            toggle_paths={
                "is_visible": "/projects/{id}/toggle-visibility",
                "featured": "/projects/{id}/toggle-featured",
            },
        ),
        read_all=many(ProjectPayload, translator.to_project),
        read_one=one(ProjectPayload, translator.to_project),
        write_create=translator.project_write,
    )


def experience_store(
    client: PortfolioApiClient,
) -> RestCollectionStore[Experience, ExperienceDraft]:
    return RestCollectionStore(
        client=client,
        endpoints=CollectionEndpoints(
            list_path="/experience",
            item_path="/experience/{id}",
            reorder_path="/experience/reorder",
            list_params=ADMIN_LIST_PARAMS,
            toggle_paths={"is_visible": "/experience/{id}/toggle-visibility"},
        ),
        read_all=many(ExperiencePayload, translator.to_experience),
        read_one=one(ExperiencePayload, translator.to_experience),
        write_create=translator.experience_write,
    )


def category_store(
    client: PortfolioApiClient,
) -> RestCollectionStore[SkillCategory, CategoryDraft]:
    return RestCollectionStore(
        client=client,
        endpoints=CollectionEndpoints(
            list_path="/skills",
            create_path="/skills/categories",
            item_path="/skills/categories/{id}",
            reorder_path="/skills/categories/reorder",
        ),
        read_all=many(SkillCategoryPayload, translator.to_category),
        read_one=one(SkillCategoryPayload, translator.to_category),
        write_create=translator.category_write,
    )


def read_nested_skills(payload: object) -> list[Skill]:
    return translator.flatten_skills(parse_models(SkillCategoryPayload, payload))


def skill_store(client: PortfolioApiClient) -> RestCollectionStore[Skill, SkillDraft]:
    return RestCollectionStore(
        client=client,
        endpoints=CollectionEndpoints(
            list_path="/skills",
            item_path="/skills/{id}",
            reorder_path="/skills/categories/{scope}/reorder",
        ),
        read_all=read_nested_skills,
        read_one=one(SkillPayload, translator.to_skill),
        write_create=translator.skill_create,
        write_update=translator.skill_update,
    )


def hero_store(client: PortfolioApiClient) -> RestDocumentStore[Hero, HeroDraft]:
    return RestDocumentStore(
        client=client,
        path="/hero",
        read=one(HeroPayload, translator.to_hero),
        write=translator.hero_write,
    )


def about_store(
    client: PortfolioApiClient,
) -> RestDocumentStore[About, tuple[AboutParagraph, ...]]:
    return RestDocumentStore(
        client=client,
        path="/about",
        read=one(AboutPayload, translator.to_about),
        write=translator.about_write,
    )


def site_settings_store(
    client: PortfolioApiClient,
) -> RestDocumentStore[SiteSettings, SiteSettings]:
    return RestDocumentStore(
        client=client,
        path="/settings/site",
        read=one(SiteSettingsPayload, translator.to_site_settings),
        write=translator.site_settings_write,
    )


def contact_settings_store(
    client: PortfolioApiClient,
) -> RestDocumentStore[ContactSettings, ContactSettings]:
    return RestDocumentStore(
        client=client,
        path="/settings/contact",
        read=one(ContactSettingsPayload, translator.to_contact_settings),
        write=translator.contact_settings_write,
    )

