import unittest

from video_aggregator.sorting import (
    UnknownSortError,
    check_sort,
    duration_to_seconds,
    paginate,
    sort_videos,
    timestamp_from_id,
)
from video_aggregator.validation import ValidationError

from .stubs import make_record


class TestDurations(unittest.TestCase):

    def test_duration_to_seconds(self):
        self.assertEqual(duration_to_seconds("1:02:03"), 3723)
        self.assertEqual(duration_to_seconds("10:00"), 600)
        self.assertEqual(duration_to_seconds("45"), 45)
        self.assertEqual(duration_to_seconds("abc"), 0)
        self.assertEqual(duration_to_seconds(""), 0)
        self.assertEqual(duration_to_seconds(None), 0)

    def test_timestamp_from_id(self):
        self.assertEqual(timestamp_from_id("jpdmv-1700000000000-3"), 1700000000000)
        self.assertEqual(timestamp_from_id("no-stamp-here"), 0)


class TestSortVideos(unittest.TestCase):

    def setUp(self):
        self.videos = [
            make_record("https://a.example/v/1", title="beta", duration="2:00", id="x-1700000000002-0", source="b"),
            make_record("https://a.example/v/2", title="Alpha", duration="10:00", id="x-1700000000001-0", source="a"),
            make_record("https://a.example/v/3", title="gamma", duration="", id="x-1700000000003-0", source="c"),
        ]

    def titles(self, videos):
        return [v.title for v in videos]

    def test_default_keeps_order(self):
        self.assertEqual(self.titles(sort_videos(self.videos)), ["beta", "Alpha", "gamma"])

    def test_duration(self):
        self.assertEqual(self.titles(sort_videos(self.videos, "duration-desc")), ["Alpha", "beta", "gamma"])
        self.assertEqual(self.titles(sort_videos(self.videos, "duration-asc")), ["gamma", "beta", "Alpha"])

    def test_title_is_case_insensitive(self):
        self.assertEqual(self.titles(sort_videos(self.videos, "title-asc")), ["Alpha", "beta", "gamma"])

    def test_date(self):
        self.assertEqual(self.titles(sort_videos(self.videos, "date-desc")), ["gamma", "beta", "Alpha"])

    def test_source(self):
        self.assertEqual(self.titles(sort_videos(self.videos, "source-asc")), ["Alpha", "beta", "gamma"])

    def test_unknown_sort(self):
        with self.assertRaises(UnknownSortError):
            sort_videos(self.videos, "random")
        with self.assertRaises(ValidationError):
            check_sort("views-desc")


class TestPaginate(unittest.TestCase):

    def test_pages(self):
        items = list(range(25))
        page, info = paginate(items, 3, 10)
        self.assertEqual(page, [20, 21, 22, 23, 24])
        self.assertEqual(info, {"page": 3, "perPage": 10, "totalPages": 3, "totalResults": 25})

    def test_page_past_the_end_is_empty(self):
        page, info = paginate(list(range(5)), 4, 10)
        self.assertEqual(page, [])
        self.assertEqual(info["totalPages"], 1)

    def test_invalid_page(self):
        with self.assertRaises(ValidationError):
            paginate([], 0)
        with self.assertRaises(ValidationError):
            paginate([], 1, 0)


if __name__ == '__main__':
    unittest.main()
