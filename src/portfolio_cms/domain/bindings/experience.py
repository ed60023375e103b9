"""Work experience entries."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from portfolio_cms.domain.bindings.base import CollectionBinding
from portfolio_cms.domain.collection import OrderedCollectionController, ResourceLabels
from portfolio_cms.domain.model import Experience
from portfolio_cms.domain.preview import EXPERIENCE
from portfolio_cms.domain.validation import FieldChecks

if TYPE_CHECKING:
    from datetime import date

    from portfolio_cms.domain.model import EntityKey
    from portfolio_cms.domain.ports import CollectionStore, ConfirmAction, Notifier
    from portfolio_cms.domain.reconciliation import ReconciliationPolicy

EXPERIENCE_LABELS = ResourceLabels("experience", "experience entries")


@dataclass(frozen=True, kw_only=True)
class ExperienceDraft:
    job_title: str
    company: str
    location: str
    start_date: date | None
    end_date: date | None = None
    is_current_job: bool = False
    description: str = ""
    is_visible: bool = True

    @classmethod
    def from_entity(cls, experience: Experience) -> ExperienceDraft:
        return cls(
            job_title=experience.job_title,
            company=experience.company,
            location=experience.location,
            start_date=experience.start_date,
            end_date=experience.end_date,
            is_current_job=experience.is_current_job,
            description=experience.description,
            is_visible=experience.is_visible,
        )

    def normalized(self) -> ExperienceDraft:
        """Trim text; a current job never carries an end date."""
        return replace(
            self,
            job_title=self.job_title.strip(),
            company=self.company.strip(),
            location=self.location.strip(),
            description=self.description.strip(),
            end_date=None if self.is_current_job else self.end_date,
        )


def check_experience(draft: ExperienceDraft) -> None:
    checks = FieldChecks()
    checks.length("job_title", draft.job_title, label="Job title", min_length=2, max_length=100)
    checks.length("company", draft.company, label="Company", min_length=2, max_length=100)
    checks.length("location", draft.location, label="Location", min_length=2, max_length=100)
    checks.required("start_date", draft.start_date, label="Start date")
    checks.length(
        "description",
        draft.description,
        label="Description",
        min_length=10,
        max_length=1000,
    )
    checks.raise_if_any()


def _describe_visibility(experience: Experience) -> str:
    return "Experience visible" if experience.is_visible else "Experience hidden"


class ExperienceBinding(CollectionBinding[Experience, ExperienceDraft]):
    def __init__(
        self,
        *,
        store: CollectionStore[Experience, ExperienceDraft],
        notifier: Notifier,
        confirm: ConfirmAction,
        policy: ReconciliationPolicy | None = None,
    ) -> None:
        super().__init__(
            OrderedCollectionController(
                store=store,
                notifier=notifier,
                confirm=confirm,
                labels=EXPERIENCE_LABELS,
                policy=policy,
            ),
            EXPERIENCE,
        )

    def validate(self, draft: ExperienceDraft) -> ExperienceDraft:
        normalized = draft.normalized()
        check_experience(normalized)
        return normalized

    async def toggle_visibility(self, key: EntityKey) -> Experience | None:
        return await self.controller.toggle(key, "is_visible", describe=_describe_visibility)
