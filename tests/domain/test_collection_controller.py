from __future__ import annotations

import asyncio
from operator import attrgetter
from typing import TYPE_CHECKING

import pytest

from portfolio_cms.domain.bindings import ProjectDraft, SkillDraft
from portfolio_cms.domain.collection import OrderedCollectionController, ResourceLabels
from portfolio_cms.domain.errors import (
    FetchError,
    InvalidOrderError,
    MutationError,
    ReorderFailed,
    UnknownEntityError,
)
from portfolio_cms.domain.model import Direction, Project, Skill
from portfolio_cms.domain.ordering import ids_of, is_dense
from portfolio_cms.domain.state import Failed, Idle, Loading, Saving
from tests.support.builders import (
    make_project,
    make_skill,
    project_from_draft,
    skill_from_draft,
)
from tests.support.fakes import FakeCollectionStore, RecordingNotifier, ScriptedConfirm

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

LABELS = ResourceLabels("project", "projects")

type ProjectStore = FakeCollectionStore[Project, ProjectDraft]
type ProjectController = OrderedCollectionController[Project, ProjectDraft]


def _store(*keys: str) -> ProjectStore:
    return FakeCollectionStore(
        [make_project(key, order) for order, key in enumerate(keys)], build=project_from_draft
    )


def _controller(
    store: ProjectStore,
    notifier: RecordingNotifier,
    confirm: ScriptedConfirm,
    *,
    min_items: int = 0,
) -> ProjectController:
    return OrderedCollectionController(
        store=store, notifier=notifier, confirm=confirm, labels=LABELS, min_items=min_items
    )


def _draft(title: str = "New project") -> ProjectDraft:
    return ProjectDraft(title=title, description="Something worth showing")


def _layout(entities: Iterable[Project | Skill]) -> list[tuple[str, int]]:
    return [(entity.id, entity.order) for entity in sorted(entities, key=attrgetter("order"))]


# --- load -------------------------------------------------------------------


def test_load_replaces_local_state_sorted_by_order(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store: ProjectStore = FakeCollectionStore(
        [make_project("b", 1), make_project("c", 2), make_project("a", 0)]
    )
    controller = _controller(store, notifier, confirm)
    snapshots: list[tuple[Project, ...]] = []
    controller.subscribe(snapshots.append)

    loaded = asyncio.run(controller.load())

    assert ids_of(loaded) == ["a", "b", "c"]
    assert ids_of(snapshots[-1]) == ["a", "b", "c"]
    assert controller.state == Idle()


def test_load_failure_raises_fetch_error_and_keeps_items(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("fetch_all", status=503)
        with pytest.raises(FetchError) as exc:
            await controller.load()
        assert exc.value.message == "Failed to load projects"

    asyncio.run(scenario())

    assert ids_of(controller.items) == ["a", "b"]
    assert controller.state == Failed("Failed to load projects")
    assert notifier.errors == ["Failed to load projects"]


def test_state_is_loading_while_fetch_is_pending(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        gate = store.hold("fetch_all")
        task = asyncio.create_task(controller.load())
        await asyncio.sleep(0)
        assert controller.state == Loading()
        assert controller.is_loading
        gate.set()
        await task

    asyncio.run(scenario())

    assert controller.state == Idle()


# --- create / update / toggle -----------------------------------------------


def test_create_appends_only_after_confirmation(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> Project:
        await controller.load()
        gate = store.hold("create")
        task = asyncio.create_task(controller.create(_draft()))
        await asyncio.sleep(0)
        assert ids_of(controller.items) == ["a"]
        assert controller.is_saving
        assert controller.state == Saving()
        gate.set()
        return await task

    created = asyncio.run(scenario())

    assert created.order == 1
    assert ids_of(controller.items) == ["a", created.id]
    assert notifier.successes == ["Project created"]
    assert not controller.is_saving


def test_create_failure_leaves_state_unchanged(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("create", status=400, detail="title must be unique")
        with pytest.raises(MutationError) as exc:
            await controller.create(_draft())
        assert exc.value.action == "create"
        assert exc.value.status == 400

    asyncio.run(scenario())

    assert ids_of(controller.items) == ["a"]
    assert notifier.errors == ["title must be unique"]
    assert controller.error == "title must be unique"


def test_create_keeps_scope_dense_when_server_order_has_a_gap(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> Project | None:
        await controller.load()
        await controller.delete("b")
        # another session added a row this controller never loaded
        store.entities.append(make_project("elsewhere", 2))
        return await controller.create(_draft())

    created = asyncio.run(scenario())

    assert created is not None
    assert store.entities[-1].order == 3
    assert created.order == 2
    assert _layout(controller.items) == [("a", 0), ("c", 1), (created.id, 2)]
    assert is_dense(controller.items)


def test_update_replaces_entity_in_place(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        await controller.update("a", _draft("Renamed"))

    asyncio.run(scenario())

    assert [project.title for project in controller.items] == ["Renamed", "Project b"]
    assert _layout(controller.items) == [("a", 0), ("b", 1)]
    assert notifier.successes == ["Project updated"]


def test_update_failure_keeps_previous_value(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("update")
        with pytest.raises(MutationError):
            await controller.update("a", _draft("Renamed"))

    asyncio.run(scenario())

    assert controller.get("a").title == "Project a"
    assert notifier.errors == ["Failed to update project"]


def test_update_unknown_id_is_rejected_locally(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        with pytest.raises(UnknownEntityError):
            await controller.update("missing", _draft())

    asyncio.run(scenario())

    assert store.count("update") == 0


def test_toggle_flips_flag_and_describes_result(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> Project:
        await controller.load()
        return await controller.toggle(
            "a", "featured", describe=lambda project: f"featured={project.featured}"
        )

    toggled = asyncio.run(scenario())

    assert toggled.featured
    assert controller.get("a").featured
    assert notifier.successes == ["featured=True"]


def test_updates_for_the_same_entity_are_serialized(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        gate = store.hold("update")
        first = asyncio.create_task(controller.update("a", _draft("First")))
        second = asyncio.create_task(controller.update("a", _draft("Second")))
        other = asyncio.create_task(controller.toggle("b", "is_visible"))
        await asyncio.sleep(0)
        # the second update waits for the first; other entities are not blocked
        assert store.names().count("update") == 1
        assert store.count("toggle_flag") == 1
        gate.set()
        await asyncio.gather(first, second, other)

    asyncio.run(scenario())

    assert store.count("update") == 2
    assert controller.get("a").title == "Second"


# --- delete -----------------------------------------------------------------


def test_delete_requires_confirmation(notifier: RecordingNotifier) -> None:
    store = _store("a", "b")
    declining = ScriptedConfirm(answer=False)
    controller = _controller(store, notifier, declining)

    async def scenario() -> bool:
        await controller.load()
        return await controller.delete("a")

    assert asyncio.run(scenario()) is False
    assert declining.prompts == ["Delete this project? This cannot be undone."]
    assert store.count("delete") == 0
    assert ids_of(controller.items) == ["a", "b"]


def test_delete_removes_and_keeps_order_dense(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> bool:
        await controller.load()
        return await controller.delete("b")

    assert asyncio.run(scenario()) is True
    assert _layout(controller.items) == [("a", 0), ("c", 1)]
    assert notifier.successes == ["Project deleted"]


def test_delete_failure_leaves_state_unchanged(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("delete", status=500)
        with pytest.raises(MutationError) as exc:
            await controller.delete("a")
        assert exc.value.action == "delete"

    asyncio.run(scenario())

    assert ids_of(controller.items) == ["a", "b"]
    assert notifier.errors == ["Failed to delete project"]


def test_delete_below_minimum_is_a_local_no_op(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("only")
    controller = _controller(store, notifier, confirm, min_items=1)

    async def scenario() -> bool:
        await controller.load()
        return await controller.delete("only")

    assert asyncio.run(scenario()) is False
    assert confirm.prompts == []
    assert store.count("delete") == 0
    assert len(controller.items) == 1


# --- move / reorder ---------------------------------------------------------


def test_move_at_boundaries_is_a_no_op(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)
    asyncio.run(controller.load())
    before = controller.items

    assert controller.move(0, Direction.UP) is None
    assert controller.move(2, Direction.DOWN) is None
    assert asyncio.run(controller.shift(0, Direction.UP)) is False

    assert controller.items == before
    assert store.names() == ["fetch_all"]


def test_move_is_local_and_synchronous(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)
    asyncio.run(controller.load())

    ordered_ids = controller.move(0, Direction.DOWN)

    assert ordered_ids == ["b", "a", "c"]
    assert _layout(controller.items) == [("b", 0), ("a", 1), ("c", 2)]
    assert store.names() == ["fetch_all"]


def test_reorder_applies_before_the_request_resolves(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        gate = store.hold("reorder_batch")
        task = asyncio.create_task(controller.reorder(["c", "a", "b"]))
        await asyncio.sleep(0)
        assert _layout(controller.items) == [("c", 0), ("a", 1), ("b", 2)]
        assert controller.is_saving
        gate.set()
        await task

    asyncio.run(scenario())

    assert _layout(controller.items) == [("c", 0), ("a", 1), ("b", 2)]
    assert store.calls[-1] == ("reorder_batch", (("c", "a", "b"), None))
    assert notifier.errors == []


def test_back_to_back_reorders_build_on_latest_local_state(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        gate = store.hold("reorder_batch")
        first = asyncio.create_task(controller.shift(2, Direction.UP))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.shift(1, Direction.UP))
        await asyncio.sleep(0)
        assert _layout(controller.items) == [("c", 0), ("a", 1), ("b", 2)]
        gate.set()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    sent = [payload for name, payload in store.calls if name == "reorder_batch"]
    assert sent == [(("a", "c", "b"), None), (("c", "a", "b"), None)]
    assert is_dense(controller.items)
    assert _layout(store.entities) == [("c", 0), ("a", 1), ("b", 2)]


def test_failed_reorder_reloads_server_order(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("reorder_batch", status=500)
        with pytest.raises(ReorderFailed) as exc:
            await controller.reorder(["c", "b", "a"])
        assert exc.value.reloaded is True

    asyncio.run(scenario())

    assert _layout(controller.items) == [("a", 0), ("b", 1), ("c", 2)]
    assert store.count("fetch_all") == 2
    assert notifier.errors == ["Failed to reorder projects"]
    assert controller.state == Failed("Failed to reorder projects")


def test_failed_reorder_reports_when_reload_also_fails(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("reorder_batch", detail="order conflict")
        store.fail("fetch_all")
        with pytest.raises(ReorderFailed) as exc:
            await controller.reorder(["b", "a"])
        assert exc.value.reloaded is False

    asyncio.run(scenario())

    assert notifier.errors == ["Failed to load projects", "order conflict"]


def test_reorder_to_identical_sequence_is_idempotent(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b", "c")
    controller = _controller(store, notifier, confirm)
    snapshots: list[tuple[Project, ...]] = []

    async def scenario() -> None:
        await controller.load()
        controller.subscribe(snapshots.append)
        before = controller.items
        await controller.reorder(ids_of(before))
        assert controller.items == before

    asyncio.run(scenario())

    assert snapshots == []
    assert notifier.errors == []


def test_invalid_reorder_never_reaches_the_store(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        with pytest.raises(InvalidOrderError):
            await controller.reorder(["a", "zzz"])

    asyncio.run(scenario())

    assert store.count("reorder_batch") == 0
    assert _layout(controller.items) == [("a", 0), ("b", 1)]


# --- scoped collections -----------------------------------------------------


def _skills_controller(
    store: FakeCollectionStore[Skill, SkillDraft],
    notifier: RecordingNotifier,
    confirm: ScriptedConfirm,
) -> OrderedCollectionController[Skill, SkillDraft]:
    return OrderedCollectionController(
        store=store,
        notifier=notifier,
        confirm=confirm,
        labels=ResourceLabels("skill", "skills"),
        scope_of=attrgetter("category_id"),
    )


def test_scoped_reorder_only_touches_its_scope(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store: FakeCollectionStore[Skill, SkillDraft] = FakeCollectionStore(
        [
            make_skill("A", 0, "c1"),
            make_skill("X", 0, "c2"),
            make_skill("B", 1, "c1"),
            make_skill("Y", 1, "c2"),
            make_skill("C", 2, "c1"),
        ],
        build=skill_from_draft,
        scope_of=attrgetter("category_id"),
    )
    controller = _skills_controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        gate = store.hold("reorder_batch")
        task = asyncio.create_task(controller.reorder(["C", "A", "B"], scope="c1"))
        await asyncio.sleep(0)
        assert _layout(controller.in_scope("c1")) == [("C", 0), ("A", 1), ("B", 2)]
        assert _layout(controller.in_scope("c2")) == [("X", 0), ("Y", 1)]
        gate.set()
        await task

    asyncio.run(scenario())

    assert store.calls[-1] == ("reorder_batch", (("C", "A", "B"), "c1"))


def test_scoped_reorder_failure_restores_dense_server_order(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store: FakeCollectionStore[Skill, SkillDraft] = FakeCollectionStore(
        [make_skill("A", 0, "c1"), make_skill("B", 1, "c1"), make_skill("C", 2, "c1")],
        build=skill_from_draft,
        scope_of=attrgetter("category_id"),
    )
    controller = _skills_controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        store.fail("reorder_batch")
        with pytest.raises(ReorderFailed):
            await controller.reorder(["C", "A", "B"], scope="c1")

    asyncio.run(scenario())

    assert _layout(controller.in_scope("c1")) == [("A", 0), ("B", 1), ("C", 2)]
    assert is_dense(controller.in_scope("c1"))


def test_forget_where_drops_and_renumbers_each_scope(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store: FakeCollectionStore[Skill, SkillDraft] = FakeCollectionStore(
        [make_skill("A", 0, "c1"), make_skill("B", 1, "c1"), make_skill("X", 0, "c2")],
    )
    controller = _skills_controller(store, notifier, confirm)
    asyncio.run(controller.load())

    dropped = controller.forget_where(lambda skill: skill.id == "A")

    assert dropped == 1
    assert _layout(controller.in_scope("c1")) == [("B", 0)]
    assert _layout(controller.in_scope("c2")) == [("X", 0)]
    assert store.count("delete") == 0


# --- disposal ---------------------------------------------------------------


def test_results_after_dispose_are_discarded(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)
    snapshots: list[tuple[Project, ...]] = []
    controller.subscribe(snapshots.append)

    async def scenario() -> None:
        gate = store.hold("fetch_all")
        task = asyncio.create_task(controller.load())
        await asyncio.sleep(0)
        controller.dispose()
        gate.set()
        await task

    asyncio.run(scenario())

    assert controller.disposed
    assert controller.items == ()
    assert snapshots == []


def test_failures_after_dispose_do_not_raise_or_notify(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)

    async def scenario() -> None:
        await controller.load()
        gate = store.hold("reorder_batch")
        store.fail("reorder_batch")
        task = asyncio.create_task(controller.reorder(["b", "a"]))
        await asyncio.sleep(0)
        controller.dispose()
        gate.set()
        await task

    asyncio.run(scenario())

    assert notifier.errors == []
    assert store.count("fetch_all") == 1


@pytest.mark.parametrize("operation", ["create", "update", "toggle_flag", "delete"])
def test_mutation_failures_after_dispose_are_dropped(
    operation: str, notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)
    calls: dict[str, Callable[[], Awaitable[object]]] = {
        "create": lambda: controller.create(_draft()),
        "update": lambda: controller.update("a", _draft("Renamed")),
        "toggle_flag": lambda: controller.toggle("a", "featured"),
        "delete": lambda: controller.delete("a"),
    }

    async def scenario() -> object:
        await controller.load()
        gate = store.hold(operation)
        store.fail(operation)
        task = asyncio.create_task(calls[operation]())
        await asyncio.sleep(0)
        controller.dispose()
        gate.set()
        return await task

    result = asyncio.run(scenario())

    assert result is None or result is False
    assert notifier.errors == []
    assert controller.error is None
    assert ids_of(controller.items) == ["a", "b"]


def test_unsubscribe_stops_notifications(
    notifier: RecordingNotifier, confirm: ScriptedConfirm
) -> None:
    store = _store("a", "b")
    controller = _controller(store, notifier, confirm)
    snapshots: list[tuple[Project, ...]] = []
    unsubscribe = controller.subscribe(snapshots.append)

    asyncio.run(controller.load())
    unsubscribe()
    controller.move(0, Direction.DOWN)

    assert len(snapshots) == 1
