"""
Tests for CSS url() reference extraction and rewriting.
"""

import unittest

from zip_rewriter.rewrite.css import extract_css_references, rewrite_css_references


class TestCssExtraction(unittest.TestCase):
    def test_double_quotes(self):
        self.assertEqual(extract_css_references('url("./test.woff")'), ["./test.woff"])

    def test_parent_directory(self):
        self.assertEqual(
            extract_css_references('url("../fonts/test.woff")'), ["../fonts/test.woff"]
        )

    def test_query_string_kept(self):
        self.assertEqual(
            extract_css_references('url("../fonts/test.woff?iefix")'),
            ["../fonts/test.woff?iefix"],
        )

    def test_space_inside_quotes(self):
        self.assertEqual(
            extract_css_references('url("../fonts/test this.woff")'),
            ["../fonts/test this.woff"],
        )

    def test_encoded_space_kept_raw(self):
        self.assertEqual(
            extract_css_references('url("../fonts/test%20this.woff?iefix")'),
            ["../fonts/test%20this.woff?iefix"],
        )

    def test_single_quotes(self):
        self.assertEqual(
            extract_css_references("url('../fonts/test.woff')"), ["../fonts/test.woff"]
        )

    def test_no_quotes(self):
        self.assertEqual(
            extract_css_references("url(../fonts/test.woff?iefix)"),
            ["../fonts/test.woff?iefix"],
        )

    def test_whitespace_and_case(self):
        self.assertEqual(extract_css_references("URL(  'a.png'  )"), ["a.png"])

    def test_order_and_duplicates(self):
        css = (
            "a { background: url(a.png); }\n"
            "b { background: url('b.png'); }\n"
            "c { background: url(\"a.png\"); }"
        )
        self.assertEqual(extract_css_references(css), ["a.png", "b.png", "a.png"])

    def test_absolute_and_data_urls_skipped(self):
        css = (
            "a { background: url(http://example.com/a.png); }"
            "b { background: url('//cdn.example.com/b.png'); }"
            "c { background: url(data:image/png;base64,AAAA); }"
            "d { background: url(local.png); }"
        )
        self.assertEqual(extract_css_references(css), ["local.png"])

    def test_malformed_is_ignored(self):
        self.assertEqual(extract_css_references("url(flob a dob dib dob)"), [])
        self.assertEqual(extract_css_references('url("unterminated.png)'), [])
        self.assertEqual(extract_css_references("url(missing-paren.png"), [])
        self.assertEqual(extract_css_references('url("")'), [])

    def test_function_name_must_be_url(self):
        self.assertEqual(extract_css_references("a { b: myurl(x.png); c: x-url(y.png); }"), [])
        self.assertEqual(
            extract_css_references("a{background:url(x.png)},b{c:(url(y.png))}"),
            ["x.png", "y.png"],
        )

    def test_idempotent(self):
        css = "x { src: url(a.woff) format('woff'), url('b.ttf'); }"
        self.assertEqual(extract_css_references(css), extract_css_references(css))

    def test_non_string_raises(self):
        with self.assertRaises(TypeError):
            extract_css_references(None)


class TestCssRewrite(unittest.TestCase):
    def test_simple_relative_path(self):
        self.assertEqual(
            rewrite_css_references('url("./test.woff")', {"./test.woff": "different"}, "x.css"),
            'url("different")',
        )

    def test_space(self):
        mapping = {"../fonts/test this.woff": "different"}
        self.assertEqual(
            rewrite_css_references('url("../fonts/test this.woff")', mapping),
            'url("different")',
        )

    def test_encoded_space(self):
        mapping = {"../fonts/test this.woff": "different"}
        self.assertEqual(
            rewrite_css_references('url("../fonts/test%20this.woff")', mapping),
            'url("different")',
        )

    def test_single_quotes_preserved(self):
        mapping = {"../fonts/test.woff": "different"}
        self.assertEqual(
            rewrite_css_references("url('../fonts/test.woff')", mapping), "url('different')"
        )

    def test_no_quotes_preserved(self):
        mapping = {"../fonts/test.woff": "different"}
        self.assertEqual(
            rewrite_css_references("url(../fonts/test.woff)", mapping), "url(different)"
        )

    def test_query_string_dropped(self):
        mapping = {"../fonts/test.woff": "different"}
        self.assertEqual(
            rewrite_css_references("url(../fonts/test.woff?iefix)", mapping), "url(different)"
        )

    def test_resolved_key(self):
        mapping = {"package/fonts/a.woff": "T"}
        self.assertEqual(
            rewrite_css_references("url(../fonts/a.woff)", mapping, "package/css/main.css"),
            "url(T)",
        )

    def test_unregistered_path_unchanged(self):
        mapping = {"../../../../audio/test.mp3": "different"}
        css = "url(../../../../fonts/test.woff)"
        self.assertEqual(rewrite_css_references(css, mapping, "x.css"), css)

    def test_invalid_path_unchanged(self):
        mapping = {"package/audio/test.mp3": "different"}
        css = "url(flob a dob dib dob)"
        self.assertEqual(rewrite_css_references(css, mapping), css)

    def test_unmatched_occurrence_keeps_quoting_and_query(self):
        css = "a { background: url( 'a.png?v=2' ); } b { background: url(b.png); }"
        result = rewrite_css_references(css, {"b.png": "B"})
        self.assertEqual(
            result, "a { background: url( 'a.png?v=2' ); } b { background: url(B); }"
        )

    def test_empty_map_is_identity(self):
        css = "@font-face { src: url('a.woff') format('woff'); }\nbody { color: red; }"
        self.assertEqual(rewrite_css_references(css, {}, "x.css"), css)

    def test_unsafe_token_is_quoted(self):
        self.assertEqual(rewrite_css_references("url(a.png)", {"a.png": "b c.png"}), 'url("b c.png")')

    def test_quote_in_token_escaped(self):
        self.assertEqual(rewrite_css_references('url("a.png")', {"a.png": 'b"c'}), 'url("b\\"c")')

    def test_replacement_not_rescanned(self):
        mapping = {"a.png": "b.png", "b.png": "c.png"}
        self.assertEqual(rewrite_css_references('url("a.png")', mapping), 'url("b.png")')

    def test_idempotent(self):
        mapping = {"./test.woff": "different"}
        once = rewrite_css_references('x { src: url("./test.woff"); }', mapping)
        self.assertEqual(rewrite_css_references(once, mapping), once)

    def test_lookalike_function_unchanged(self):
        css = "a { b: myurl(x.png); } c { d: url(x.png); }"
        self.assertEqual(
            rewrite_css_references(css, {"x.png": "T"}),
            "a { b: myurl(x.png); } c { d: url(T); }",
        )

    def test_absolute_url_never_rewritten(self):
        css = "url(http://example.com/a.png)"
        self.assertEqual(rewrite_css_references(css, {"http://example.com/a.png": "T"}), css)


if __name__ == "__main__":
    unittest.main()
