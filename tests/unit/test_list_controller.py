"""Unit tests for the ListController in client- and server-side modes."""

import asyncio

import pytest

from schoolboard.application.interfaces import CollectionSource, Notifier
from schoolboard.application.schemas import ListQuery, Page
from schoolboard.application.services import ListController, derive_view
from schoolboard.domain.entities import PublicationStatus, Test
from schoolboard.domain.exceptions import ApiError, NetworkError, ServerError
from schoolboard.infrastructure.sources import FixtureCollectionSource


class RecordingNotifier(Notifier):
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeServerSource(CollectionSource[Test]):
    """Server-side source: answers each query like the backend listing would."""

    entity_type = Test

    def __init__(self, records: list[Test]):
        self._records = list(records)
        self.queries: list[ListQuery] = []
        self.cache_flags: list[bool] = []
        self.fail_with: ApiError | None = None
        self.gates: list[asyncio.Event] = []

    @property
    def filters_server_side(self) -> bool:
        return True

    async def load(self, query: ListQuery, *, use_cache: bool = True) -> Page[Test]:
        self.queries.append(query)
        self.cache_flags.append(use_cache)
        if self.gates:
            await self.gates.pop(0).wait()
        if self.fail_with is not None:
            raise self.fail_with
        selected = derive_view(
            self._records, query.filters, query.search, query.sort_by, query.sort_order
        )
        if query.fetch_all:
            return Page(docs=selected, total_docs=len(selected), limit=max(1, len(selected)))
        start = (query.page - 1) * query.limit
        return Page(
            docs=selected[start : start + query.limit],
            total_docs=len(selected),
            limit=query.limit,
            page=query.page,
        )

    async def get(self, record_id):
        return next(r for r in self._records if r.id == record_id)

    async def create(self, data):
        record = Test(id=f"new{len(self._records)}", **data)
        self._records.insert(0, record)
        return record

    async def update(self, record_id, fields, *, changes_description=None):
        return None

    async def delete(self, record_id):
        self._records = [r for r in self._records if r.id != record_id]


def _tests(count: int) -> list[Test]:
    return [
        Test(
            id=f"t{i:02d}",
            title=f"{'Math' if i % 2 else 'Physics'} test {i:02d}",
            status=PublicationStatus.PUBLISHED if i % 3 == 0 else PublicationStatus.DRAFT,
        )
        for i in range(1, count + 1)
    ]


# ── Client-side mode ──


@pytest.fixture
def client_controller() -> ListController[Test]:
    source = FixtureCollectionSource(Test, _tests(25))
    return ListController(source, RecordingNotifier(), page_size=10, sort_by="title", sort_order="asc")


@pytest.mark.asyncio
async def test_client_side_paging(client_controller: ListController[Test]):
    assert await client_controller.load() is True

    assert len(client_controller.visible()) == 10
    assert client_controller.pagination.total_pages == 3

    assert await client_controller.go_to_page(3) is True
    assert len(client_controller.visible()) == 5

    assert await client_controller.go_to_page(4) is False
    assert client_controller.pagination.current_page == 3


@pytest.mark.asyncio
async def test_filter_change_resets_page(client_controller: ListController[Test]):
    await client_controller.load()
    await client_controller.go_to_page(2)

    await client_controller.set_search("math")

    assert client_controller.pagination.current_page == 1
    visible = client_controller.visible()
    assert visible and all("math" in r.title.lower() for r in visible)
    assert client_controller.pagination.total_count == 13


@pytest.mark.asyncio
async def test_client_side_filter_and_search(client_controller: ListController[Test]):
    await client_controller.load()
    await client_controller.set_filter("status", "published")
    await client_controller.set_search("physics")

    view = client_controller.view()
    assert [r.id for r in view] == ["t06", "t12", "t18", "t24"]
    assert client_controller.active_filter_count == 2

    await client_controller.reset_filters()
    assert len(client_controller.view()) == 25


# ── Server-side mode ──


@pytest.fixture
def server_source() -> FakeServerSource:
    return FakeServerSource(_tests(25))


@pytest.fixture
def server_controller(server_source) -> ListController[Test]:
    return ListController(server_source, RecordingNotifier(), page_size=10)


@pytest.mark.asyncio
async def test_server_side_changes_reissue_the_query(server_controller, server_source):
    await server_controller.load()
    await server_controller.go_to_page(2)
    await server_controller.set_filter("status", PublicationStatus.PUBLISHED)

    assert [q.page for q in server_source.queries] == [1, 2, 1]
    assert server_source.queries[-1].filters == {"status": "published"}
    assert server_controller.pagination.total_count == 8
    assert len(server_controller.visible()) == 8


@pytest.mark.asyncio
async def test_server_side_sort_and_search_go_to_the_source(server_controller, server_source):
    await server_controller.set_sort("title", "asc")
    await server_controller.set_search("  math ")

    last = server_source.queries[-1]
    assert (last.sort_by, last.sort_order, last.search) == ("title", "asc", "math")


@pytest.mark.asyncio
async def test_load_error_clears_store(server_controller, server_source):
    await server_controller.load()
    server_source.fail_with = ServerError(503, "Service unavailable")

    assert await server_controller.load() is False

    assert len(server_controller.store) == 0
    assert server_controller.error == "Service unavailable"
    assert server_controller.pagination.total_count == 0
    assert server_controller.loading is False


@pytest.mark.asyncio
async def test_retry_bypasses_cache(server_controller, server_source):
    server_source.fail_with = NetworkError("offline")
    await server_controller.load()
    server_source.fail_with = None

    assert await server_controller.retry() is True
    assert server_source.cache_flags == [True, False]
    assert server_controller.error is None


@pytest.mark.asyncio
async def test_stale_response_is_dropped(server_controller, server_source):
    slow = asyncio.Event()
    server_source.gates = [slow]
    first = asyncio.create_task(server_controller.load())
    await asyncio.sleep(0)

    await server_controller.set_filter("status", "published")
    slow.set()

    assert await first is False
    assert all(r.status is PublicationStatus.PUBLISHED for r in server_controller.store)


@pytest.mark.asyncio
async def test_response_after_close_is_dropped(server_controller, server_source):
    gate = asyncio.Event()
    server_source.gates = [gate]
    pending = asyncio.create_task(server_controller.load())
    await asyncio.sleep(0)

    server_controller.close()
    gate.set()

    assert await pending is False
    assert len(server_controller.store) == 0


@pytest.mark.asyncio
async def test_fetch_all_pages_locally(server_controller, server_source):
    await server_controller.fetch_all()

    assert server_controller.fetching_all is True
    assert server_source.queries[-1].fetch_all is True
    assert len(server_controller.store) == 25
    assert len(server_controller.visible()) == 10

    assert await server_controller.go_to_page(3) is True
    assert len(server_controller.visible()) == 5
    assert len(server_source.queries) == 1


@pytest.mark.asyncio
async def test_delete_adjusts_server_total(server_controller):
    await server_controller.load()
    server_controller.panel.request_delete("t01")
    await server_controller.panel.confirm_delete()

    assert server_controller.pagination.total_count == 24


@pytest.mark.asyncio
async def test_fetch_paged_returns_to_server_pagination(server_controller, server_source):
    await server_controller.fetch_all()
    await server_controller.fetch_paged()

    assert server_controller.fetching_all is False
    assert server_source.queries[-1].fetch_all is False
    assert len(server_controller.store) == 10


@pytest.mark.asyncio
async def test_deleting_last_row_of_last_page_reloads_previous_page():
    source = FakeServerSource(_tests(11))
    controller = ListController(source, RecordingNotifier(), page_size=10)
    await controller.load()
    await controller.go_to_page(2)
    assert [r.id for r in controller.visible()] == ["t11"]

    controller.panel.request_delete("t11")
    assert await controller.panel.confirm_delete() is True

    assert controller.pagination.current_page == 1
    assert controller.pagination.total_pages == 1
    assert len(controller.visible()) == 10
    assert source.queries[-1].page == 1
    assert len(source.queries) == 3


@pytest.mark.asyncio
async def test_create_reloads_the_server_page(server_controller, server_source):
    await server_controller.load()

    created = await server_controller.panel.create({"title": "Statistics test"})

    assert created is not None
    assert len(server_source.queries) == 2
    assert len(server_controller.visible()) == 10
    assert server_controller.pagination.total_count == 26
    assert server_controller.store.records[0].id == created.id


@pytest.mark.asyncio
async def test_views_sharing_a_fixture_source_survive_a_remote_delete():
    shared = FixtureCollectionSource(Test, _tests(3))
    notifier = RecordingNotifier()
    view_a = ListController(shared, notifier, page_size=10)
    view_b = ListController(shared, notifier, page_size=10)
    await view_a.load()
    await view_b.load()

    view_b.panel.request_delete("t01")
    assert await view_b.panel.confirm_delete() is True

    assert await view_a.panel.update_status("t01", PublicationStatus.PUBLISHED) is False
    assert view_a.store.get("t01").status is PublicationStatus.DRAFT
    assert not view_a.store.is_pending("t01")
    assert notifier.errors == ["Test with id 't01' not found"]
