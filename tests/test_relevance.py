import unittest

from video_aggregator.relevance import (
    character_overlap,
    is_relevant,
    is_relevant_with_id,
    required_matches,
)


class TestIsRelevant(unittest.TestCase):

    def test_single_token_is_substring_match(self):
        self.assertTrue(is_relevant("Big Cat Compilation", "cat"))
        self.assertTrue(is_relevant("Concatenate", "cat"))
        self.assertFalse(is_relevant("Dog park", "cat"))

    def test_strict_needs_half_of_tokens(self):
        query = "red blue green"
        self.assertTrue(is_relevant("Red and blue car", query, strict_mode=True))
        self.assertFalse(is_relevant("Red car video", query, strict_mode=True))

    def test_relaxed_needs_a_third_of_tokens(self):
        query = "red blue green"
        self.assertTrue(is_relevant("Red car video", query, strict_mode=False))
        self.assertFalse(is_relevant("Yellow car video", query, strict_mode=False))

    def test_case_insensitive(self):
        self.assertTrue(is_relevant("BTS Live Stage", "bts live"))

    def test_empty_inputs(self):
        self.assertFalse(is_relevant("", "cat"))
        self.assertFalse(is_relevant("cat", ""))
        self.assertFalse(is_relevant("cat", "   "))

    def test_required_matches(self):
        self.assertEqual(required_matches(2, True), 1)
        self.assertEqual(required_matches(3, True), 2)
        self.assertEqual(required_matches(4, True), 2)
        self.assertEqual(required_matches(3, False), 1)
        self.assertEqual(required_matches(4, False), 2)
        self.assertEqual(required_matches(6, False), 2)


class TestIsRelevantWithId(unittest.TestCase):

    def test_query_in_title(self):
        self.assertTrue(is_relevant_with_id("[ABCD-123] Summer photo book", "summer"))

    def test_query_in_code_prefix(self):
        self.assertTrue(is_relevant_with_id("[ABCD-123] Summer photo book", "abcd"))
        self.assertTrue(is_relevant_with_id("[ABCD-123] Summer photo book", "BCD"))

    def test_strict_rejects_partial_characters(self):
        self.assertFalse(is_relevant_with_id("xyz abc", "abcq", strict_mode=True))

    def test_relaxed_accepts_half_the_characters(self):
        self.assertTrue(is_relevant_with_id("xyz abc", "abcq", strict_mode=False))
        self.assertTrue(is_relevant_with_id("防弾少年団 MV", "少年団体", strict_mode=False))

    def test_relaxed_rejects_unrelated(self):
        self.assertFalse(is_relevant_with_id("hello world", "zzz", strict_mode=False))

    def test_character_overlap_ignores_whitespace(self):
        self.assertEqual(character_overlap("abc", "a b z"), (2, 3))


if __name__ == '__main__':
    unittest.main()
