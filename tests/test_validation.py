import unittest

from video_aggregator.validation import ValidationError, validate_query


class TestValidateQuery(unittest.TestCase):

    def test_trims(self):
        self.assertEqual(validate_query("  防弾少年団  "), "防弾少年団")

    def test_rejects_missing_or_empty(self):
        for query in [None, "", "   ", 42]:
            with self.assertRaises(ValidationError):
                validate_query(query)

    def test_rejects_long_queries(self):
        self.assertEqual(len(validate_query("a" * 200)), 200)
        with self.assertRaises(ValidationError):
            validate_query("a" * 201)

    def test_rejects_markup(self):
        for query in ["<script>alert(1)</script>", "javascript:void(0)", "x onload=run()", "eval(1)"]:
            with self.assertRaises(ValidationError):
                validate_query(query)


if __name__ == '__main__':
    unittest.main()
