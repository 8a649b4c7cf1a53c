import unittest

from bs4 import BeautifulSoup

from trac_digest.changesets.normalizer import (
    clean_name_list,
    collapse_blank_lines,
    extract_props_clause,
    readd_code_markers,
    strip_fixes_and_see,
)


class TestStripFixesAndSee(unittest.TestCase):
    def test_strips_fixes_line(self) -> None:
        text = "Correct the spacing.\nFixes #123."
        self.assertEqual(strip_fixes_and_see(text), "Correct the spacing.")

    def test_strips_fixes_after_comma(self) -> None:
        text = "Correct the spacing, fixes #123 and #124.\nSecond line."
        self.assertEqual(strip_fixes_and_see(text), "Correct the spacing,\nSecond line.")

    def test_strips_see_line(self) -> None:
        text = "Add a filter.\nSee #456."
        self.assertEqual(strip_fixes_and_see(text), "Add a filter.")

    def test_strips_only_first_of_each(self) -> None:
        text = "Tweak.\nFixes #1.\nFixes #2.\nSee #3.\nSee #4."
        self.assertEqual(strip_fixes_and_see(text), "Tweak.\nFixes #2.\nSee #4.")

    def test_case_insensitive(self) -> None:
        self.assertEqual(strip_fixes_and_see("Tweak.\nFIXES #1.\nsee #2."), "Tweak.")

    def test_no_clause_is_untouched(self) -> None:
        self.assertEqual(strip_fixes_and_see("Nothing to remove."), "Nothing to remove.")

    def test_see_must_start_a_line(self) -> None:
        text = "As you can see, this works."
        self.assertEqual(strip_fixes_and_see(text), text)


class TestExtractPropsClause(unittest.TestCase):
    def test_extracts_clause(self) -> None:
        remaining, raw = extract_props_clause("Fixed the thing.\nProps jane, john for testing, bob.")
        self.assertEqual(remaining, "Fixed the thing.")
        self.assertEqual(raw, " jane, john for testing, bob")

    def test_no_clause(self) -> None:
        remaining, raw = extract_props_clause("Fixed the thing.")
        self.assertEqual(remaining, "Fixed the thing.")
        self.assertIsNone(raw)

    def test_keeps_following_lines(self) -> None:
        remaining, raw = extract_props_clause("Fix.\nprops: jane.\nMore text.")
        self.assertEqual(remaining, "Fix.\nMore text.")
        self.assertEqual(raw, " jane")

    def test_clause_stops_at_first_period(self) -> None:
        remaining, raw = extract_props_clause("Tidy.\nProps bob. See #12.")
        self.assertEqual(remaining, "Tidy. See #12.")
        self.assertEqual(clean_name_list(raw), ["bob"])

    def test_marker_must_start_a_line(self) -> None:
        remaining, raw = extract_props_clause("Props to everyone.")
        self.assertIsNone(raw)
        self.assertEqual(remaining, "Props to everyone.")


class TestCleanNameList(unittest.TestCase):
    def test_documented_example(self) -> None:
        _, raw = extract_props_clause("Fixed the thing.\nProps jane, john for testing, bob.")
        self.assertEqual(clean_name_list(raw), ["jane", "john", "bob"])

    def test_drops_trailing_period(self) -> None:
        self.assertEqual(clean_name_list(" jane."), ["jane"])

    def test_for_phrase_ending_in_period(self) -> None:
        self.assertEqual(clean_name_list(" jane, bob for the initial patch."), ["jane", "bob"])

    def test_whitespace_separates_names(self) -> None:
        self.assertEqual(clean_name_list(" jane  bob,carol"), ["jane", "bob", "carol"])

    def test_empty_segment(self) -> None:
        self.assertEqual(clean_name_list(" . "), [])

    def test_names_containing_for_are_kept(self) -> None:
        self.assertEqual(clean_name_list(" fortune, bob"), ["fortune", "bob"])


class TestCollapseBlankLines(unittest.TestCase):
    def test_collapses_runs(self) -> None:
        self.assertEqual(collapse_blank_lines("a\n\n\n\nb\n\n\nc"), "a\n\nb\n\nc")

    def test_keeps_single_blank_line(self) -> None:
        self.assertEqual(collapse_blank_lines("a\n\nb"), "a\n\nb")

    def test_idempotent(self) -> None:
        for text in ["a\n\n\n\n\nb", "x\n\n\ny\n\n\n\n", "plain", ""]:
            with self.subTest(text=text):
                once = collapse_blank_lines(text)
                self.assertEqual(collapse_blank_lines(once), once)


class TestReaddCodeMarkers(unittest.TestCase):
    def test_wraps_tt_and_code(self) -> None:
        fragment = BeautifulSoup("<p>Use <tt>wp_foo()</tt> and <code>$bar</code>.</p>", "html.parser")
        self.assertEqual(readd_code_markers(fragment).get_text(), "Use `wp_foo()` and `$bar`.")

    def test_no_code_elements(self) -> None:
        fragment = BeautifulSoup("<p>Plain <em>text</em>.</p>", "html.parser")
        self.assertEqual(readd_code_markers(fragment).get_text(), "Plain text.")


if __name__ == "__main__":
    unittest.main()
