from __future__ import annotations

import asyncio

import pytest

from portfolio_cms.domain.bindings import MAX_HERO_STATS, HeroDraft, HeroEditor
from portfolio_cms.domain.errors import PortfolioError, ValidationError
from portfolio_cms.domain.model import Direction, Hero
from tests.support.builders import hero_from_draft, make_hero, make_stats
from tests.support.fakes import FakeDocumentStore, RecordingNotifier


def _editor(
    notifier: RecordingNotifier, *, stats: int = 2
) -> tuple[HeroEditor, FakeDocumentStore[Hero, HeroDraft]]:
    store: FakeDocumentStore[Hero, HeroDraft] = FakeDocumentStore(
        make_hero(stats=make_stats(stats)), build=hero_from_draft
    )
    return HeroEditor(store=store, notifier=notifier), store


def test_add_stat_is_a_no_op_at_six(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier, stats=MAX_HERO_STATS)
    asyncio.run(editor.load())

    assert editor.add_stat() is None
    assert len(editor.stats) == MAX_HERO_STATS


def test_incomplete_stat_blocks_save(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier)

    async def scenario() -> None:
        await editor.load()
        editor.add_stat()
        with pytest.raises(ValidationError) as exc:
            await editor.save()
        assert set(exc.value.field_errors) == {"stat_3_value", "stat_3_label"}

    asyncio.run(scenario())

    assert store.count("replace") == 0


def test_save_sends_fields_and_stats_in_one_put(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier)

    async def scenario() -> Hero:
        await editor.load()
        editor.edit(title="  Staff Engineer  ", profile_image="   ")
        added = editor.add_stat()
        assert added is not None
        editor.edit_stat(added.id, label=" Talks ", value="12")
        editor.move_stat(2, Direction.UP)
        return await editor.save()

    hero = asyncio.run(scenario())

    assert store.count("replace") == 1
    sent = store.calls[-1][1]
    assert isinstance(sent, HeroDraft)
    assert sent.title == "Staff Engineer"
    assert sent.profile_image is None
    assert [stat.label for stat in sent.stats] == ["Label 0", "Talks", "Label 1"]
    assert [stat.label for stat in hero.stats] == ["Label 0", "Talks", "Label 1"]
    assert not editor.stats.dirty
    assert notifier.successes == ["Hero section updated"]


def test_invalid_scalar_fields_are_reported_per_field(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier)

    async def scenario() -> None:
        await editor.load()
        editor.edit(initials="TOOLONG", gradient_from="blue", profile_image="not a url")
        with pytest.raises(ValidationError) as exc:
            await editor.save()
        assert set(exc.value.field_errors) == {"initials", "gradient_from", "profile_image"}

    asyncio.run(scenario())

    assert store.count("replace") == 0


def test_edit_requires_a_loaded_section(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier)

    with pytest.raises(PortfolioError):
        editor.edit(title="x")
    with pytest.raises(PortfolioError):
        editor.draft()


def test_stats_are_not_edited_through_scalar_fields(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier)
    asyncio.run(editor.load())

    with pytest.raises(ValueError, match="stats draft"):
        editor.edit(stats=())


def test_preview_stats_follow_the_draft(notifier: RecordingNotifier) -> None:
    editor, _ = _editor(notifier, stats=3)
    asyncio.run(editor.load())

    editor.remove_stat(editor.stats.items[0].id)

    assert [entry.entity.label for entry in editor.preview_stats()] == ["Label 1", "Label 2"]


def test_load_after_dispose_leaves_the_draft_alone(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier)

    editor.dispose()
    asyncio.run(editor.load())

    assert store.names() == ["fetch"]
    assert editor.fields is None
    assert editor.stats.items == ()


def test_save_finishing_after_dispose_keeps_the_edited_draft(notifier: RecordingNotifier) -> None:
    editor, store = _editor(notifier)
    emitted: list[object] = []

    async def scenario() -> Hero | None:
        await editor.load()
        editor.edit(title="Principal Engineer")
        added = editor.add_stat()
        assert added is not None
        editor.edit_stat(added.id, label="Talks", value="12")
        editor.stats.subscribe(emitted.append)
        gate = store.hold("replace")
        task = asyncio.create_task(editor.save())
        await asyncio.sleep(0)
        editor.dispose()
        gate.set()
        return await task

    asyncio.run(scenario())

    assert store.count("replace") == 1
    assert editor.stats.dirty
    assert len(editor.stats.items) == 3
    assert editor.fields is not None
    assert editor.fields.title == "Principal Engineer"
    assert emitted == []
    assert notifier.successes == []
