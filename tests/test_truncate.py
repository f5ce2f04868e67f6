"""Tests for the truncation driver."""

import time
import unittest
from contextlib import redirect_stdout
from io import StringIO

from htmlsnip import TruncateOptions, Truncator, html_substring, truncate


class TestPlainText(unittest.TestCase):
    def test_short_text_is_unchanged(self):
        assert truncate("Hello world", 100) == "Hello world"

    def test_cut_at_word_boundary(self):
        assert truncate("Hello world", 5) == "Hello"

    def test_word_is_broken_by_default(self):
        assert truncate("Hello world", 3) == "Hel"
        assert truncate("Hello world", 8) == "Hello wo"

    def test_result_is_prefix_of_plain_text(self):
        text = "The quick brown fox, jumps over the lazy dog."
        for length in range(len(text) + 3):
            assert truncate(text, length) == text[:length]

    def test_empty_source(self):
        assert truncate("", 5) == ""
        assert truncate(None, 5) == ""

    def test_zero_length(self):
        assert truncate("Hello", 0) == ""
        assert truncate("<img src=a>Hi", 0) == ""

    def test_alias(self):
        assert html_substring is truncate


class TestBreakWords(unittest.TestCase):
    def test_whole_word_dropped_when_it_does_not_fit(self):
        assert truncate("Hello world", 8, break_words=False) == "Hello"

    def test_word_that_fits_exactly(self):
        assert truncate("one two three", 7, break_words=False) == "one two"

    def test_first_word_too_long(self):
        assert truncate("Hello", 3, break_words=False) == ""

    def test_uncased_script_breaks_at_every_character(self):
        assert truncate("日本語のテキスト", 3, break_words=False) == "日本語"

    def test_options_object(self):
        options = TruncateOptions(break_words=False)
        assert truncate("Hello world", 8, options) == "Hello"


class TestMarkup(unittest.TestCase):
    def test_closing_tag_kept(self):
        assert truncate("<p>Hello world</p>", 5) == "<p>Hello</p>"

    def test_open_tags_closed_in_reverse_order(self):
        source = "<div><p>Hello <b>world</b></p></div>"
        assert truncate(source, 8) == "<div><p>Hello <b>wo</b></p></div>"

    def test_unclosed_tags_are_closed(self):
        assert truncate("<div><em>Hello world", 5) == "<div><em>Hello</em></div>"

    def test_elements_without_shown_content_are_dropped(self):
        assert truncate("<p>Hello</p><p>World</p>", 5) == "<p>Hello</p>"
        assert truncate("<p>Hi</p><div><span>there</span></div>", 2) == "<p>Hi</p>"

    def test_queued_tag_not_written_before_text(self):
        assert truncate("Hello <b>world</b>", 5) == "Hello"

    def test_optional_closing_element(self):
        assert truncate("<ul><li>One<li>Two</ul>", 3) == "<ul><li>One</ul>"

    def test_void_element_written_at_end(self):
        assert truncate("Hello<br>world", 5) == "Hello<br>"

    def test_void_element_without_text(self):
        assert truncate("<img src=x>Hello", 3, break_words=False) == "<img src=x>"

    def test_self_closed_element_not_closed(self):
        assert truncate("<p><span/>text more</p>", 4) == "<p><span/>text</p>"
        assert truncate("<p>a<br/>b</p>", 5) == "<p>a<br/>b</p>"

    def test_tag_names_keep_their_case(self):
        assert truncate("<P>Hi<BR>there</P>", 4) == "<P>Hi<BR>th</P>"

    def test_attributes_are_copied_verbatim(self):
        source = '<a href="/x" class=link>Click here</a>'
        assert truncate(source, 5) == '<a href="/x" class=link>Click</a>'

    def test_closing_tag_drops_unclosed_children(self):
        assert truncate("<div><b>x</div>", 10) == "<div><b>x</div>"

    def test_closing_tag_for_void_element_is_copied(self):
        assert truncate("a</br>b", 10) == "a</br>b"

    def test_closing_tag_whitespace(self):
        assert truncate("<p>Hi</p >", 10) == "<p>Hi</p>"


class TestLiteralMarkupCharacters(unittest.TestCase):
    def test_lone_less_than(self):
        assert truncate("a < b", 10) == "a < b"
        assert truncate("a < b", 3) == "a <"

    def test_unterminated_tag(self):
        assert truncate("x<y", 10) == "x<y"

    def test_doctype_is_text(self):
        assert truncate("<!DOCTYPE html>", 100) == "<!DOCTYPE html>"

    def test_unterminated_closing_tag(self):
        assert truncate("ab</p", 10) == "ab</p"

    def test_many_unterminated_constructs_scan_in_linear_time(self):
        sources = ["<a" * 20000, "<!--" * 10000, "</a" * 10000, "<a" * 20000 + ">x"]
        for source in sources:
            start = time.perf_counter()
            assert truncate(source, 10**6) == source
            assert time.perf_counter() - start < 5


class TestEntities(unittest.TestCase):
    def test_entity_counts_as_one(self):
        assert truncate("A&amp;B", 2) == "A&amp;"
        assert truncate("Tom &amp; Jerry", 5) == "Tom &amp;"

    def test_entity_never_split(self):
        assert truncate("Tom &amp; Jerry", 4) == "Tom "

    def test_numeric_entity(self):
        assert truncate("&#169; 2024", 1) == "&#169;"

    def test_letter_entity_continues_word(self):
        assert truncate("caf&eacute; au lait", 4, break_words=False) == "caf&eacute;"
        assert truncate("caf&eacute; au lait", 3, break_words=False) == ""

    def test_ampersand_without_semicolon(self):
        assert truncate("AT&T rocks", 4) == "AT&T"
        assert truncate("a &b", 10) == "a &b"

    def test_entity_inside_tag_is_written_after_tag(self):
        assert truncate("<b>&amp;</b>", 5) == "<b>&amp;</b>"

    def test_numeric_reference_with_huge_digit_run(self):
        source = "a&#" + "9" * 5000 + ";b"
        assert truncate(source, 10) == source
        reference = "&#x" + "f" * 5000 + ";"
        assert truncate(reference + " b", 1) == reference


class TestComments(unittest.TestCase):
    def test_comment_copied(self):
        assert truncate("<p>a<!--note-->b</p>", 10) == "<p>a<!--note-->b</p>"

    def test_comment_body_counts_toward_length(self):
        assert truncate("<p>a<!--note-->b</p>", 3) == "<p>a<!--no--></p>"

    def test_comment_not_cut_without_break_words(self):
        assert truncate("<p>a<!--note-->b</p>", 3, break_words=False) == "<p>a</p>"

    def test_empty_comment(self):
        assert truncate("a<!---->b", 5) == "a<!---->b"

    def test_unterminated_comment_is_text(self):
        assert truncate("a<!-- b", 10) == "a<!-- b"


class TestSuffix(unittest.TestCase):
    def test_suffix_after_cut(self):
        assert truncate("Hello world", 5, "...") == "Hello..."

    def test_no_suffix_without_cut(self):
        assert truncate("Hello", 5, "...") == "Hello"
        assert truncate("<p>Hello</p>", 5, "...") == "<p>Hello</p>"
        assert truncate("", 0, "...") == ""

    def test_suffix_when_cut_mid_word(self):
        assert truncate("Hello", 3, "...") == "Hel..."

    def test_suffix_at_tag_boundary(self):
        assert truncate("<p>Hello</p><p>World</p>", 5, "...") == "<p>Hello</p>..."

    def test_suffix_after_closing_tags(self):
        assert truncate("<p>Hello world</p>", 7, "...") == "<p>Hello w</p>..."

    def test_suffix_inside_tags(self):
        result = truncate("<p>Hello world</p>", 7, "...", break_words=False, enclose_suffix_in_tags=True)
        assert result == "<p>Hello...</p>"

    def test_enclosed_suffix_at_explicit_closing_tag(self):
        source = "<div><p>Hello <b>world</b></p></div>"
        options = TruncateOptions(suffix="…", enclose_suffix_in_tags=True)
        assert truncate(source, 8, options) == "<div><p>Hello <b>wo…</b></p></div>"

    def test_enclosed_suffix_before_synthesized_closing_tags(self):
        options = TruncateOptions(suffix="...", enclose_suffix_in_tags=True)
        assert truncate("<div><em>Hello world", 5, options) == "<div><em>Hello...</em></div>"

    def test_enclosed_suffix_at_tag_boundary(self):
        options = TruncateOptions(suffix="...", enclose_suffix_in_tags=True)
        assert truncate("<p>Hello</p><p>World</p>", 5, options) == "<p>Hello...</p>"
        assert truncate("<p>Hello</p>", 5, options) == "<p>Hello</p>"

    def test_suffix_appears_once(self):
        source = "<div><p>Hello <b>world</b> again</p></div>"
        options = TruncateOptions(suffix="[more]", enclose_suffix_in_tags=True)
        assert truncate(source, 8, options).count("[more]") == 1
        assert truncate(source, 8, "[more]").count("[more]") == 1

    def test_suffix_after_cut_comment(self):
        assert truncate("a<!--note-->", 3, "...") == "a<!--no-->..."
        assert truncate("a<!--no-->", 3, "...") == "a<!--no-->"

    def test_trailing_whitespace_is_not_cut_content(self):
        assert truncate("<p>Hello</p>\n", 5, "...") == "<p>Hello</p>"
        assert truncate("Hello ", 5, "...") == "Hello"
        assert truncate("<p>Hello</p>\n<p>World</p>", 5, "...") == "<p>Hello</p>..."

    def test_zero_length_whitespace_source(self):
        assert truncate(" \n ", 0, "...") == ""

    def test_zero_length_with_suffix(self):
        assert truncate("Hello", 0, "...") == "..."

    def test_callable_suffix_called_once(self):
        calls = []

        def suffix():
            calls.append(1)
            return " (more)"

        assert truncate("<b>Hello world</b>", 5, suffix=suffix) == "<b>Hello</b> (more)"
        assert calls == [1]

    def test_callable_suffix_not_called_without_cut(self):
        calls = []

        def suffix():
            calls.append(1)
            return "..."

        assert truncate("Hello", 10, suffix=suffix) == "Hello"
        assert calls == []

    def test_callable_suffix_must_return_string(self):
        with self.assertRaises(TypeError):
            truncate("Hello world", 5, suffix=lambda: 3)


class TestCodePoints(unittest.TestCase):
    def test_astral_characters_count_once(self):
        assert truncate("\U0001f600\U0001f601\U0001f602", 2) == "\U0001f600\U0001f601"

    def test_modifier_sequences_count_per_code_point(self):
        assert truncate("\U0001f44d\U0001f3fdok", 1) == "\U0001f44d"


class TestTruncator(unittest.TestCase):
    def test_run_only_once(self):
        truncator = Truncator("Hello", 3)
        assert truncator.run() == "Hel"
        with self.assertRaises(RuntimeError):
            truncator.run()

    def test_invalid_length(self):
        with self.assertRaises(ValueError):
            truncate("Hello", -1)
        with self.assertRaises(TypeError):
            truncate("Hello", True)
        with self.assertRaises(TypeError):
            truncate("Hello", 2.5)

    def test_invalid_source(self):
        with self.assertRaises(TypeError):
            truncate(b"Hello", 3)

    def test_debug_trace(self):
        out = StringIO()
        with redirect_stdout(out):
            result = truncate("<p>Hello world</p>", 5, debug=True)
        assert result == "<p>Hello</p>"
        trace = out.getvalue()
        assert "queued" in trace
        assert "flushed 'Hello'" in trace

    def test_no_output_without_debug(self):
        out = StringIO()
        with redirect_stdout(out):
            truncate("<p>Hello world</p>", 5, "...")
        assert out.getvalue() == ""


if __name__ == "__main__":
    unittest.main()
