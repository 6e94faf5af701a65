"""
Tests for archive path resolution and replacement lookup.
"""

import unittest

from zip_rewriter.utils import (
    clean_reference,
    is_relative_reference,
    lookup_replacement,
    resolve,
    safe_member_path,
)


class TestResolve(unittest.TestCase):
    def test_simple_relative_path(self):
        self.assertEqual(resolve("package/test.css", "./test.woff"), "package/test.woff")

    def test_parent_directory(self):
        self.assertEqual(
            resolve("package/css/test.css", "../fonts/test.woff"),
            "package/fonts/test.woff",
        )

    def test_path_with_space(self):
        self.assertEqual(resolve("test.htm", "Basic Book.css"), "Basic Book.css")

    def test_encoded_space_and_query_string(self):
        self.assertEqual(
            resolve("package/css/test.css", "../fonts/test%20this.woff?iefix"),
            "package/fonts/test this.woff",
        )

    def test_fragment_stripped(self):
        self.assertEqual(resolve("a/index.html", "page.html#intro"), "a/page.html")

    def test_root_relative(self):
        self.assertEqual(resolve("a/b/index.html", "/img/logo.png"), "img/logo.png")

    def test_popping_past_root_is_noop(self):
        self.assertEqual(resolve("a.css", "../../../fonts/x.woff"), "fonts/x.woff")

    def test_dot_segments_in_the_middle(self):
        self.assertEqual(resolve("a/b/c.html", "./d/../../e/./f.png"), "a/e/f.png")

    def test_empty_reference(self):
        self.assertEqual(resolve("a/b.html", ""), "a")

    def test_fragment_only_reference(self):
        self.assertEqual(resolve("a/b.html", "#top"), "a")

    def test_absolute_urls_not_resolved(self):
        for ref in (
            "http://example.com/a.png",
            "https://example.com/a.png",
            "mailto:someone@example.com",
            "data:image/png;base64,AAAA",
            "//cdn.example.com/lib.js",
        ):
            with self.subTest(ref=ref):
                self.assertIsNone(resolve("a/b.html", ref))

    def test_result_has_no_dot_segments(self):
        cases = [
            ("x/y/z.css", "../../../../a/./b/../c.png"),
            ("doc.html", "./././x.png"),
            ("", ".."),
            ("a/b/", "../c"),
        ]
        for base, ref in cases:
            with self.subTest(base=base, ref=ref):
                segments = resolve(base, ref).split("/")
                self.assertNotIn(".", segments)
                self.assertNotIn("..", segments)

    def test_non_string_raises(self):
        with self.assertRaises(TypeError):
            resolve(None, "a.png")
        with self.assertRaises(TypeError):
            resolve("a.html", None)


class TestSafeMemberPath(unittest.TestCase):
    def test_name_kept_literally(self):
        self.assertEqual(safe_member_path("docs/file#1.html"), "docs/file#1.html")
        self.assertEqual(safe_member_path("img/a%20b.png?x"), "img/a%20b.png?x")

    def test_escaping_segments_collapsed(self):
        self.assertEqual(safe_member_path("../../etc/passwd"), "etc/passwd")
        self.assertEqual(safe_member_path("/abs//./x/../y.txt"), "abs/y.txt")
        self.assertEqual(safe_member_path("a\\..\\..\\b.txt"), "b.txt")

    def test_nothing_left(self):
        self.assertEqual(safe_member_path("./.."), "")


class TestIsRelativeReference(unittest.TestCase):
    def test_relative(self):
        self.assertTrue(is_relative_reference("../img/a.png"))
        self.assertTrue(is_relative_reference("/img/a.png"))
        self.assertTrue(is_relative_reference("a b.png"))

    def test_not_relative(self):
        for ref in ("", "   ", "#top", "//host/x", "http://x", "javascript:void(0)"):
            with self.subTest(ref=ref):
                self.assertFalse(is_relative_reference(ref))


class TestCleanReference(unittest.TestCase):
    def test_strips_query_and_decodes(self):
        self.assertEqual(
            clean_reference("../fonts/test%20this.woff?iefix"), "../fonts/test this.woff"
        )

    def test_fragment_before_query(self):
        self.assertEqual(clean_reference("a.svg#icon?x"), "a.svg")


class TestLookupReplacement(unittest.TestCase):
    def test_raw_key_wins(self):
        mapping = {"x.png": "raw", "dir/x.png": "resolved"}
        self.assertEqual(lookup_replacement("x.png", mapping, "dir/doc.html"), "raw")

    def test_cleaned_key(self):
        mapping = {"../fonts/test this.woff": "T"}
        self.assertEqual(lookup_replacement("../fonts/test%20this.woff?v=1", mapping), "T")

    def test_resolved_key(self):
        mapping = {"package/fonts/a.woff": "T"}
        self.assertEqual(
            lookup_replacement("../fonts/a.woff", mapping, "package/css/a.css"), "T"
        )

    def test_missing(self):
        self.assertIsNone(lookup_replacement("a.png", {"b.png": "T"}))

    def test_absolute_url_never_looked_up(self):
        mapping = {"http://example.com/a.png": "T"}
        self.assertIsNone(lookup_replacement("http://example.com/a.png", mapping))


if __name__ == "__main__":
    unittest.main()
