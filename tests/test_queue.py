"""Tests for the in-memory job queue and content source."""

from conftest import make_item

from publishing_sync.content_source import InMemoryContentSource
from publishing_sync.jobs.models import JobKind, SyncJob
from publishing_sync.models import Organisation


def _job(kind=JobKind.GONE, queue_name="publishing_api", path="/government/x"):
    return SyncJob(kind=kind, queue_name=queue_name, base_path=path)


class TestInMemoryJobQueue:
    def test_enqueue_keeps_order(self, queue):
        queue.enqueue("publishing_api", _job(path="/government/a"))
        queue.enqueue("publishing_api", _job(path="/government/b"))

        assert [j.base_path for j in queue.jobs()] == [
            "/government/a",
            "/government/b",
        ]
        assert len(queue) == 2

    def test_enqueue_records_target_queue(self, queue):
        queue.enqueue("scheduled", _job(queue_name="publishing_api"))

        [job] = queue.jobs()
        assert job.queue_name == "scheduled"

    def test_filters(self, queue):
        queue.enqueue("a", _job(JobKind.GONE, "a"))
        queue.enqueue("b", _job(JobKind.UNSCHEDULE, "b"))

        assert len(queue.jobs(kind=JobKind.GONE)) == 1
        assert len(queue.jobs(queue_name="b")) == 1
        assert queue.jobs(kind=JobKind.GONE, queue_name="b") == []

    def test_drain_empties_queue(self, queue):
        queue.enqueue("a", _job())

        drained = queue.drain()

        assert len(drained) == 1
        assert len(queue) == 0
        assert queue.drain() == []

    def test_clear(self, queue):
        queue.enqueue("a", _job())
        queue.clear()
        assert queue.jobs() == []


class TestJobArgs:
    def test_publish_args(self):
        job = SyncJob(
            kind=JobKind.PUBLISH,
            queue_name="q",
            entity_class="ContentItem",
            entity_id=4,
            update_type="major",
            locale="fr",
        )
        assert job.args == ("ContentItem", 4, "major", "fr")
        assert job.describe() == "publish(ContentItem, 4, major, fr)"

    def test_coming_soon_args(self):
        job = SyncJob(
            kind=JobKind.COMING_SOON,
            queue_name="q",
            entity_class="ContentItem",
            entity_id=4,
            locale="en",
        )
        assert job.args == (4, "en")

    def test_unschedule_args(self):
        assert _job(JobKind.UNSCHEDULE).args == ("/government/x",)


class TestInMemoryContentSource:
    def test_find_by_class_name_and_id(self):
        item = make_item()
        organisation = Organisation(id=item.id, slug="dfe", content_id="x")
        source = InMemoryContentSource([item, organisation])

        assert source.find("ContentItem", item.id) is item
        assert source.find("Organisation", item.id) is organisation

    def test_missing_returns_none(self):
        assert InMemoryContentSource().find("ContentItem", 1) is None

    def test_remove(self):
        item = make_item()
        source = InMemoryContentSource([item])

        source.remove(item)
        source.remove(item)

        assert source.find("ContentItem", item.id) is None
