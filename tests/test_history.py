import json
import tempfile
import unittest
from pathlib import Path

from video_aggregator.history import JsonDocumentStore, SearchHistory, TTLCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestTTLCache(unittest.TestCase):

    def test_expires_after_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl=5, clock=clock)
        self.assertIsNone(cache.get())

        cache.set(["a"])
        clock.now += 4.9
        self.assertEqual(cache.get(), ["a"])
        clock.now += 0.1
        self.assertIsNone(cache.get())

    def test_invalidate(self):
        cache = TTLCache(ttl=60)
        cache.set(["a"])
        cache.invalidate()
        self.assertIsNone(cache.get())


class TestSearchHistory(unittest.IsolatedAsyncioTestCase):

    def memory_history(self, max_entries=3, clock=None):
        cache = TTLCache(ttl=5, clock=clock or FakeClock())
        return SearchHistory(JsonDocumentStore(path=None), max_entries=max_entries, cache=cache)

    async def test_cap_and_most_recent_first(self):
        history = self.memory_history(max_entries=3)
        for query in ["q1", "q2", "q3", "q4"]:
            await history.record(query)

        self.assertEqual(await history.recent(), [{"query": "q4"}, {"query": "q3"}, {"query": "q2"}])

    async def test_repeat_query_moves_to_front(self):
        history = self.memory_history(max_entries=3)
        for query in ["q1", "q2", "q3", "q2"]:
            await history.record(query)

        self.assertEqual(await history.recent(), [{"query": "q2"}, {"query": "q3"}, {"query": "q1"}])

    async def test_record_is_visible_to_next_read(self):
        history = self.memory_history()
        self.assertEqual(await history.recent(), [])
        await history.record("cats")
        self.assertEqual(await history.recent(), [{"query": "cats"}])

    async def test_reads_are_cached_until_ttl(self):
        clock = FakeClock()
        history = self.memory_history(clock=clock)
        await history.record("cats")

        await history.store.save([{"query": "changed elsewhere"}])
        self.assertEqual(await history.recent(), [{"query": "cats"}])

        clock.now += 5
        self.assertEqual(await history.recent(), [{"query": "changed elsewhere"}])

    async def test_recent_returns_copies(self):
        history = self.memory_history()
        await history.record("cats")
        entries = await history.recent()
        entries[0]["query"] = "mutated"
        self.assertEqual(await history.recent(), [{"query": "cats"}])


class TestJsonDocumentStore(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "recent.json"

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def test_persists_single_document(self):
        await SearchHistory(JsonDocumentStore(self.path)).record("first")
        await SearchHistory(JsonDocumentStore(self.path)).record("second")

        document = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(document, {"searches": [{"query": "second"}, {"query": "first"}]})

        reader = SearchHistory(JsonDocumentStore(self.path))
        self.assertEqual(await reader.recent(), [{"query": "second"}, {"query": "first"}])

    async def test_missing_file_is_empty(self):
        self.assertEqual(await JsonDocumentStore(self.path).load(), [])

    async def test_corrupt_file_is_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(await JsonDocumentStore(self.path).load(), [])

    async def test_malformed_entries_are_skipped(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(
            json.dumps({"searches": [{"query": "ok"}, {"nope": 1}, "bare", {"query": ""}]}),
            encoding="utf-8",
        )
        history = SearchHistory(JsonDocumentStore(self.path))
        self.assertEqual(await history.recent(), [{"query": "ok"}])


if __name__ == '__main__':
    unittest.main()
