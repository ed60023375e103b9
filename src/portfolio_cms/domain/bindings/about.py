"""About section: an ordered list of paragraphs saved in one PUT."""

from __future__ import annotations

from typing import TYPE_CHECKING

from portfolio_cms.domain.document import DocumentController
from portfolio_cms.domain.draft import OrderedDraft
from portfolio_cms.domain.model import AboutParagraph, new_client_id
from portfolio_cms.domain.preview import project_about
from portfolio_cms.domain.validation import FieldChecks

if TYPE_CHECKING:
    from collections.abc import Iterable

    from portfolio_cms.domain.model import About, Direction, EntityKey, HeroStat
    from portfolio_cms.domain.ports import DocumentStore, Notifier
    from portfolio_cms.domain.preview import AboutPreview

ABOUT_PARAGRAPH_MAX_LENGTH = 2000

type ParagraphList = tuple[AboutParagraph, ...]


def new_paragraph(order: int) -> AboutParagraph:
    return AboutParagraph(id=new_client_id(), order=order)


def check_paragraphs(paragraphs: Iterable[AboutParagraph]) -> None:
    checks = FieldChecks()
    for position, paragraph in enumerate(paragraphs, start=1):
        checks.length(
            f"paragraph_{position}",
            paragraph.text,
            label=f"Paragraph {position}",
            min_length=1,
            max_length=ABOUT_PARAGRAPH_MAX_LENGTH,
        )
    checks.raise_if_any()


class AboutEditor:
    """Local paragraph draft plus the load/save round trip for the section.

    At least one paragraph always exists; removing the last one is refused
    without touching the network.
    """

    def __init__(self, *, store: DocumentStore[About, ParagraphList], notifier: Notifier) -> None:
        self.document: DocumentController[About, ParagraphList] = DocumentController(
            store=store, notifier=notifier, section="about section"
        )
        self.paragraphs: OrderedDraft[AboutParagraph] = OrderedDraft(
            factory=new_paragraph, min_items=1
        )

    @property
    def is_saving(self) -> bool:
        return self.document.is_saving

    async def load(self) -> About | None:
        about = await self.document.load()
        if not self.document.disposed:
            self.paragraphs.reset(about.paragraphs if about is not None else ())
        return about

    def add_paragraph(self) -> AboutParagraph | None:
        return self.paragraphs.add()

    def edit_paragraph(self, key: EntityKey, text: str) -> AboutParagraph:
        return self.paragraphs.edit(key, text=text)

    def remove_paragraph(self, key: EntityKey) -> bool:
        return self.paragraphs.remove(key)

    def move_paragraph(self, index: int, direction: Direction) -> bool:
        return self.paragraphs.move(index, direction)

    async def save(self) -> About | None:
        paragraphs = self.paragraphs.items
        check_paragraphs(paragraphs)
        about = await self.document.save(paragraphs)
        if about is not None and not self.document.disposed:
            self.paragraphs.reset(about.paragraphs)
        return about

    def preview(self, stats: Iterable[HeroStat] = ()) -> AboutPreview:
        return project_about(self.paragraphs.items, stats)

    def dispose(self) -> None:
        self.document.dispose()
