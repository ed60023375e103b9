"""Portfolio projects, including their tech-stack tags."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from portfolio_cms.domain.bindings.base import CollectionBinding
from portfolio_cms.domain.collection import OrderedCollectionController, ResourceLabels
from portfolio_cms.domain.model import Project
from portfolio_cms.domain.preview import PROJECTS
from portfolio_cms.domain.validation import FieldChecks, blank_to_none

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from portfolio_cms.domain.model import EntityKey
    from portfolio_cms.domain.ports import CollectionStore, ConfirmAction, Notifier
    from portfolio_cms.domain.reconciliation import ReconciliationPolicy

PROJECT_LABELS = ResourceLabels("project", "projects")


class TechStack:
    """Ordered set of free-text tags; matching is exact and case-sensitive."""

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags: list[str] = []
        for tag in tags:
            self.add(tag)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    def add(self, tag: str) -> bool:
        """Append ``tag``; False for blanks and exact duplicates."""
        cleaned = tag.strip()
        if not cleaned or cleaned in self._tags:
            return False
        self._tags.append(cleaned)
        return True

    def remove(self, tag: str) -> bool:
        if tag not in self._tags:
            return False
        self._tags.remove(tag)
        return True

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)


@dataclass(frozen=True, kw_only=True)
class ProjectDraft:
    title: str
    description: str
    details: str | None = None
    image_url: str | None = None
    live_url: str | None = None
    github_url: str | None = None
    tech_stack: tuple[str, ...] = field(default_factory=tuple)
    featured: bool = False
    is_visible: bool = True

    @classmethod
    def from_entity(cls, project: Project) -> ProjectDraft:
        return cls(
            title=project.title,
            description=project.description,
            details=project.details,
            image_url=project.image_url,
            live_url=project.live_url,
            github_url=project.github_url,
            tech_stack=project.tech_stack,
            featured=project.featured,
            is_visible=project.is_visible,
        )

    def normalized(self) -> ProjectDraft:
        return replace(
            self,
            title=self.title.strip(),
            description=self.description.strip(),
            details=blank_to_none(self.details),
            image_url=blank_to_none(self.image_url),
            live_url=blank_to_none(self.live_url),
            github_url=blank_to_none(self.github_url),
            tech_stack=TechStack(self.tech_stack).tags,
        )


def check_project(draft: ProjectDraft) -> None:
    checks = FieldChecks()
    checks.length("title", draft.title, label="Title", min_length=2, max_length=100)
    checks.length(
        "description",
        draft.description,
        label="Description",
        min_length=10,
        max_length=500,
    )
    checks.length("details", draft.details, label="Details", max_length=500)
    checks.url("image_url", draft.image_url, label="Image URL")
    checks.url("live_url", draft.live_url, label="Live URL")
    checks.url("github_url", draft.github_url, label="GitHub URL")
    checks.raise_if_any()


def _describe_visibility(project: Project) -> str:
    return "Project visible" if project.is_visible else "Project hidden"


def _describe_featured(project: Project) -> str:
    return "Project featured" if project.featured else "Project unfeatured"


class ProjectsBinding(CollectionBinding[Project, ProjectDraft]):
    def __init__(
        self,
        *,
        store: CollectionStore[Project, ProjectDraft],
        notifier: Notifier,
        confirm: ConfirmAction,
        policy: ReconciliationPolicy | None = None,
    ) -> None:
        super().__init__(
            OrderedCollectionController(
                store=store,
                notifier=notifier,
                confirm=confirm,
                labels=PROJECT_LABELS,
                policy=policy,
            ),
            PROJECTS,
        )

    def validate(self, draft: ProjectDraft) -> ProjectDraft:
        normalized = draft.normalized()
        check_project(normalized)
        return normalized

    async def toggle_visibility(self, key: EntityKey) -> Project | None:
        return await self.controller.toggle(key, "is_visible", describe=_describe_visibility)

    async def toggle_featured(self, key: EntityKey) -> Project | None:
        return await self.controller.toggle(key, "featured", describe=_describe_featured)
