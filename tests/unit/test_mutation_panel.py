"""Unit tests for the DetailMutationPanel."""

import asyncio

import pytest

from schoolboard.application.interfaces import Notifier
from schoolboard.application.services import CollectionStore, DetailMutationPanel
from schoolboard.domain.entities import PublicationStatus, Test
from schoolboard.domain.exceptions import (
    ApiError,
    InvalidStatusTransitionError,
    ServerError,
)
from schoolboard.infrastructure.sources import FixtureCollectionSource


class RecordingNotifier(Notifier):
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class ScriptedSource(FixtureCollectionSource[Test]):
    """Fixture source that records calls and can fail or block on demand."""

    def __init__(self, records):
        super().__init__(Test, records)
        self.update_calls: list[tuple[str, dict, str | None]] = []
        self.delete_calls: list[str] = []
        self.fail_with: ApiError | None = None
        self.gate: asyncio.Event | None = None

    async def update(self, record_id, fields, *, changes_description=None):
        self.update_calls.append((record_id, dict(fields), changes_description))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return await super().update(record_id, fields, changes_description=changes_description)

    async def delete(self, record_id):
        self.delete_calls.append(record_id)
        if self.fail_with is not None:
            raise self.fail_with
        await super().delete(record_id)


def _records() -> list[Test]:
    return [
        Test(id="t1", title="Algebra Test", status=PublicationStatus.DRAFT),
        Test(id="t2", title="Geometry Test", status=PublicationStatus.PUBLISHED),
    ]


@pytest.fixture
def source() -> ScriptedSource:
    return ScriptedSource(_records())


@pytest.fixture
def store() -> CollectionStore[Test]:
    store = CollectionStore(Test)
    store.replace_all(_records())
    return store


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def panel(source, store, notifier) -> DetailMutationPanel[Test]:
    return DetailMutationPanel(source, store, notifier)


@pytest.mark.asyncio
async def test_update_status_patches_store_and_notifies(panel, source, store, notifier):
    changed = await panel.update_status("t1", "published")

    assert changed is True
    assert store.get("t1").status is PublicationStatus.PUBLISHED
    assert not store.is_pending("t1")
    assert source.update_calls == [
        ("t1", {"status": PublicationStatus.PUBLISHED}, "Status changed to published")
    ]
    assert notifier.successes == ["Status updated to published"]


@pytest.mark.asyncio
async def test_update_to_same_status_is_a_no_op(panel, source, notifier):
    changed = await panel.update_status("t2", PublicationStatus.PUBLISHED)

    assert changed is False
    assert source.update_calls == []
    assert notifier.successes == [] and notifier.errors == []


@pytest.mark.asyncio
async def test_unknown_status_is_rejected(panel):
    with pytest.raises(InvalidStatusTransitionError):
        await panel.update_status("t1", "deleted")


@pytest.mark.asyncio
async def test_second_update_on_same_id_while_in_flight_is_ignored(panel, source):
    source.gate = asyncio.Event()
    first = asyncio.create_task(panel.update_status("t1", "published"))
    await asyncio.sleep(0)
    assert panel.is_in_flight("t1")

    second = await panel.update_status("t1", "archived")
    source.gate.set()

    assert second is False
    assert await first is True
    assert len(source.update_calls) == 1


@pytest.mark.asyncio
async def test_updates_on_different_ids_run_concurrently(panel, source, store):
    source.gate = asyncio.Event()
    first = asyncio.create_task(panel.update_status("t1", "published"))
    second = asyncio.create_task(panel.update_status("t2", "archived"))
    await asyncio.sleep(0)
    source.gate.set()

    assert await asyncio.gather(first, second) == [True, True]
    assert store.get("t1").status is PublicationStatus.PUBLISHED
    assert store.get("t2").status is PublicationStatus.ARCHIVED


@pytest.mark.asyncio
async def test_failed_update_rolls_back(panel, source, store, notifier):
    source.fail_with = ServerError(400, "Invalid status transition")

    changed = await panel.update_status("t1", "archived")

    assert changed is False
    assert store.get("t1").status is PublicationStatus.DRAFT
    assert not store.is_pending("t1")
    assert notifier.errors == ["Invalid status transition"]
    assert not panel.is_in_flight("t1")


@pytest.mark.asyncio
async def test_save_round_trip(panel, source):
    patch = {"title": "Algebra Final", "total_marks": 80}
    assert await panel.save("t1", patch) is True

    refetched = await source.get("t1")
    assert refetched.title == "Algebra Final"
    assert refetched.total_marks == 80


@pytest.mark.asyncio
async def test_save_rejects_read_only_fields(panel):
    with pytest.raises(ValueError):
        await panel.save("t1", {"id": "other"})


@pytest.mark.asyncio
async def test_select_uses_store_record(panel):
    record = await panel.select("t2")
    assert record.title == "Geometry Test"
    assert panel.detail is record


@pytest.mark.asyncio
async def test_create_adds_record_at_top(source, store, notifier):
    added = []
    panel = DetailMutationPanel(source, store, notifier, on_added=added.append)

    record = await panel.create({"title": "Trigonometry Test"})

    assert store.records[0].id == record.id
    assert added == [record]
    assert notifier.successes == ['Test "Trigonometry Test" created']


@pytest.mark.asyncio
async def test_delete_requires_confirmation(panel, source, store, notifier):
    panel.request_delete("t1")
    panel.cancel_delete()
    assert await panel.confirm_delete() is False
    assert source.delete_calls == []

    await panel.select("t1")
    panel.request_delete("t1")
    assert await panel.confirm_delete() is True

    assert "t1" not in store
    assert panel.pending_delete_id is None
    assert panel.selected_id is None
    assert notifier.successes == ['Test "Algebra Test" deleted successfully.']


@pytest.mark.asyncio
async def test_failed_delete_keeps_record(panel, source, store, notifier):
    source.fail_with = ServerError(500, "locked")

    panel.request_delete("t2")
    deleted = await panel.confirm_delete()

    assert deleted is False
    assert "t2" in store
    assert panel.pending_delete_id == "t2"
    assert any("locked" in message for message in notifier.errors)


@pytest.mark.asyncio
async def test_closed_panel_drops_late_results(panel, source, notifier):
    source.gate = asyncio.Event()
    pending = asyncio.create_task(panel.update_status("t1", "published"))
    await asyncio.sleep(0)
    panel.close()
    source.gate.set()
    await pending

    assert notifier.successes == []


# ── Records changed behind the panel's back ──


@pytest.fixture
def shared_source() -> FixtureCollectionSource[Test]:
    return FixtureCollectionSource(Test, _records())


@pytest.mark.asyncio
async def test_update_of_record_deleted_elsewhere_rolls_back(shared_source, store, notifier):
    panel = DetailMutationPanel(shared_source, store, notifier)
    await shared_source.delete("t1")

    changed = await panel.update_status("t1", "published")

    assert changed is False
    assert store.get("t1").status is PublicationStatus.DRAFT
    assert not store.is_pending("t1")
    assert not panel.is_in_flight("t1")
    assert notifier.errors == ["Test with id 't1' not found"]


@pytest.mark.asyncio
async def test_delete_of_record_deleted_elsewhere_is_reported(shared_source, store, notifier):
    panel = DetailMutationPanel(shared_source, store, notifier)
    await shared_source.delete("t2")

    panel.request_delete("t2")
    deleted = await panel.confirm_delete()

    assert deleted is False
    assert "t2" in store
    assert panel.pending_delete_id == "t2"
    assert notifier.errors == ["Test with id 't2' not found"]


@pytest.mark.asyncio
async def test_create_with_clashing_id_is_reported(shared_source, store, notifier):
    panel = DetailMutationPanel(shared_source, store, notifier)

    created = await panel.create({"id": "t1", "title": "Copy of Algebra"})

    assert created is None
    assert len(store) == 2
    assert notifier.errors == ["Test with id='t1' already exists"]
    assert notifier.successes == []
