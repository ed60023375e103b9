from __future__ import annotations

import asyncio

import pytest

from portfolio_cms.domain.bindings import ABOUT_PARAGRAPH_MAX_LENGTH, AboutEditor
from portfolio_cms.domain.errors import ValidationError
from portfolio_cms.domain.model import About, AboutParagraph, Direction
from tests.support.builders import about_from_paragraphs, make_paragraphs, make_stats
from tests.support.fakes import FakeDocumentStore, RecordingNotifier

type Paragraphs = tuple[AboutParagraph, ...]


def _editor(
    notifier: RecordingNotifier, *texts: str
) -> tuple[AboutEditor, FakeDocumentStore[About, Paragraphs]]:
    store: FakeDocumentStore[About, Paragraphs] = FakeDocumentStore(
        About(id="about", paragraphs=make_paragraphs(*texts)), build=about_from_paragraphs
    )
    return AboutEditor(store=store, notifier=notifier), store


def test_removing_the_last_paragraph_is_rejected_locally(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "Only paragraph")
    asyncio.run(editor.load())

    assert editor.remove_paragraph("p0") is False
    assert len(editor.paragraphs) == 1
    assert store.names() == ["fetch"]


def test_empty_section_starts_with_one_blank_paragraph(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier)

    asyncio.run(editor.load())

    assert len(editor.paragraphs) == 1
    assert editor.preview().paragraphs.entries[0].incomplete


def test_save_puts_the_whole_ordered_array(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "First", "Second")

    async def scenario() -> About:
        await editor.load()
        added = editor.add_paragraph()
        assert added is not None
        editor.edit_paragraph(added.id, "Third")
        editor.move_paragraph(2, Direction.UP)
        return await editor.save()

    saved = asyncio.run(scenario())

    sent = store.calls[-1][1]
    assert isinstance(sent, tuple)
    assert [paragraph.text for paragraph in sent] == ["First", "Third", "Second"]
    assert [paragraph.text for paragraph in saved.paragraphs] == ["First", "Third", "Second"]
    assert not editor.paragraphs.dirty
    assert notifier.successes == ["About section updated"]


def test_blank_paragraph_blocks_save(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "First")

    async def scenario() -> None:
        await editor.load()
        editor.add_paragraph()
        with pytest.raises(ValidationError) as exc:
            await editor.save()
        assert exc.value.field_errors == {"paragraph_2": "Paragraph 2 is required"}

    asyncio.run(scenario())

    assert store.count("replace") == 0


def test_overlong_paragraph_blocks_save(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "x" * (ABOUT_PARAGRAPH_MAX_LENGTH + 1))

    async def scenario() -> None:
        await editor.load()
        with pytest.raises(ValidationError):
            await editor.save()

    asyncio.run(scenario())

    assert store.count("replace") == 0


def test_preview_shows_hero_stats_alongside(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier, "First")
    asyncio.run(editor.load())
    stats = make_stats(3)

    preview = editor.preview(stats)

    assert len(preview.paragraphs) == 1
    assert [stat.id for stat in preview.stats.entities] == ["s0", "s1", "s2"]


def test_load_after_dispose_leaves_the_draft_alone(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "First")
    emitted: list[Paragraphs] = []
    editor.paragraphs.subscribe(emitted.append)

    editor.dispose()
    asyncio.run(editor.load())

    assert store.names() == ["fetch"]
    assert editor.paragraphs.items == ()
    assert emitted == []


def test_save_finishing_after_dispose_keeps_the_edited_draft(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier, "First", "Second")
    emitted: list[Paragraphs] = []

    async def scenario() -> About | None:
        await editor.load()
        editor.edit_paragraph("p0", "Changed")
        editor.paragraphs.subscribe(emitted.append)
        gate = store.hold("replace")
        task = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        editor.dispose()
        gate.set()
        return await task

    asyncio.run(scenario())

    assert store.count("replace") == 1
    assert editor.paragraphs.dirty
    assert [paragraph.text for paragraph in editor.paragraphs.items] == ["Changed", "Second"]
    assert emitted == []
    assert notifier.successes == []
