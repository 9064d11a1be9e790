"""Unit tests for filter engine module.

Tests for filter_by_categories and filter_by_patterns including
deduplication, per-category bookkeeping, missing definitions, invalid
patterns and the result's JSON shape.
"""

import sys
import unittest
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(src_path))

from propscout.classifier.engine import filter_by_categories, filter_by_patterns, filter_urls
from propscout.classifier.matcher import AuxiliaryRules, CategoryMatcher
from propscout.core.models import (
    CategoryMatch,
    DescriptiveCategory,
    FilterResult,
    PatternCategory,
    URLTypeAnalysis,
)


LISTING_URLS = [
    "https://realty.example/homes/ny/101",
    "https://realty.example/homes/ny/102",
    "https://realty.example/search?city=ny",
    "https://realty.example/search?city=sf",
    "https://realty.example/about",
    "https://realty.example/homes/sf/201",
]


class TestFilterByCategories(unittest.TestCase):
    """Test suite for examples-membership filtering."""

    def test_examples_scenario(self):
        """Test matched URLs, per-category list and stats for one category."""
        urls = ["https://a/x", "https://a/y", "https://a/z"]
        analysis = {"url_categories": {
            "LISTINGS": {"type": "listings", "examples": ["https://a/x", "https://a/y"]},
        }}

        result = filter_by_categories(urls, ["LISTINGS"], analysis)

        self.assertEqual(result.filtered_urls, ("https://a/x", "https://a/y"))
        self.assertEqual(result.category_matches["LISTINGS"].urls, ("https://a/x", "https://a/y"))
        self.assertEqual(result.stats.total_urls, 3)
        self.assertEqual(result.stats.filtered_urls, 2)

    def test_accepts_typed_analysis(self):
        """Test that a URLTypeAnalysis works like the raw mapping."""
        analysis = URLTypeAnalysis(url_categories={
            "DATA_PAGES": DescriptiveCategory(type="listings", examples=(LISTING_URLS[0],)),
        })

        result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], analysis)

        self.assertEqual(result.filtered_urls, (LISTING_URLS[0],))

    def test_unknown_category_is_empty(self):
        """Test that a selected name missing from the analysis has no matches."""
        analysis = {"url_categories": {}}

        result = filter_by_categories(LISTING_URLS, ["GHOST"], analysis)

        self.assertEqual(result.category_matches["GHOST"], CategoryMatch())
        self.assertEqual(result.stats.filtered_urls, 0)

    def test_missing_url_categories_key(self):
        """Test that an analysis without categories yields empty matches."""
        result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], {})
        self.assertEqual(result.category_matches["DATA_PAGES"].urls, ())

    def test_malformed_category_skipped(self):
        """Test that a definition that is not an object is skipped without raising."""
        analysis = {"url_categories": {
            "BAD": ["https://realty.example/about"],
            "GOOD": {"type": "y", "examples": ["https://realty.example/about"]},
        }}

        with self.assertLogs("propscout.classifier.engine", level="WARNING"):
            result = filter_by_categories(LISTING_URLS, ["BAD", "GOOD"], analysis)

        self.assertEqual(result.category_matches["BAD"].urls, ())
        self.assertEqual(result.category_matches["GOOD"].urls, ("https://realty.example/about",))

    def test_non_string_type_keeps_examples(self):
        """Test that a category with a non-string type still matches its examples."""
        analysis = {"url_categories": {
            "DATA_PAGES": {"type": None, "examples": [LISTING_URLS[0]]},
        }}

        with self.assertLogs("propscout.core.models", level="WARNING"):
            result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], analysis)

        self.assertEqual(result.category_matches["DATA_PAGES"].urls, (LISTING_URLS[0],))
        self.assertEqual(result.filtered_urls, (LISTING_URLS[0],))

    def test_non_string_example_dropped(self):
        """Test that one bad example is dropped and the rest still match."""
        analysis = {"url_categories": {
            "DATA_PAGES": {"examples": [LISTING_URLS[1], None]},
        }}

        with self.assertLogs("propscout.core.models", level="WARNING") as logs:
            result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], analysis)

        self.assertEqual(result.category_matches["DATA_PAGES"].urls, (LISTING_URLS[1],))
        self.assertEqual(len(logs.output), 1)
        self.assertIn("None", logs.output[0])

    def test_non_list_examples_treated_as_empty(self):
        """Test that a string in place of the examples list matches nothing."""
        analysis = {"url_categories": {
            "BAD": {"type": "x", "examples": "https://realty.example/about"},
        }}

        with self.assertLogs("propscout.core.models", level="WARNING"):
            result = filter_by_categories(LISTING_URLS, ["BAD"], analysis)

        self.assertEqual(result.category_matches["BAD"].urls, ())

    def test_non_string_url_with_indicator_rules(self):
        """Test that a non-string URL does not break indicator rules."""
        analysis = {"url_categories": {"DATA_PAGES": {"type": "t", "examples": []}}}
        matcher = CategoryMatcher(auxiliary_rules={
            "DATA_PAGES": AuxiliaryRules(indicators=["x"]),
        })

        result = filter_by_categories(
            [None, "https://a/x"], ["DATA_PAGES"], analysis, matcher=matcher
        )

        self.assertEqual(result.filtered_urls, ("https://a/x",))
        self.assertEqual(result.stats.total_urls, 2)

    def test_url_in_examples_but_not_discovered(self):
        """Test that only discovered URLs can appear in the result."""
        analysis = {"url_categories": {
            "DATA_PAGES": {"type": "t", "examples": ["https://elsewhere.example/1"]},
        }}
        result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], analysis)
        self.assertEqual(result.filtered_urls, ())

    def test_auxiliary_rules_through_matcher(self):
        """Test that a configured matcher extends examples matching."""
        analysis = {"url_categories": {
            "DATA_PAGES": {"type": "t", "examples": [LISTING_URLS[0]]},
        }}
        matcher = CategoryMatcher(auxiliary_rules={
            "DATA_PAGES": AuxiliaryRules(path_patterns=["/homes/*"]),
        })

        result = filter_by_categories(LISTING_URLS, ["DATA_PAGES"], analysis, matcher=matcher)

        self.assertEqual(result.filtered_urls, (
            "https://realty.example/homes/ny/101",
            "https://realty.example/homes/ny/102",
            "https://realty.example/homes/sf/201",
        ))


class TestFilterByPatterns(unittest.TestCase):
    """Test suite for regex filtering."""

    def test_regex_scenario(self):
        """Test that only URLs matching the pattern are kept."""
        urls = ["https://a/p/1", "https://a/p/2", "https://a/about"]

        result = filter_by_patterns(urls, ["LISTINGS"], {"LISTINGS": {"regex": r"/p/\d+$"}})

        self.assertEqual(result.filtered_urls, ("https://a/p/1", "https://a/p/2"))
        self.assertEqual(result.stats.filtered_urls, 2)

    def test_named_group_pattern(self):
        """Test that generated patterns with named groups compile and match."""
        urls = ["https://a/p/12", "https://a/p/x"]

        result = filter_by_patterns(urls, ["LISTINGS"], {"LISTINGS": {"regex": r"/p/(?<id>\d+)$"}})

        self.assertEqual(result.filtered_urls, ("https://a/p/12",))

    def test_missing_pattern(self):
        """Test that a selected category without a pattern is present and empty."""
        patterns = {"CAT_A": PatternCategory(regex="homes")}

        result = filter_by_patterns(LISTING_URLS, ["CAT_A", "CAT_B"], patterns)

        self.assertIn("CAT_B", result.category_matches)
        self.assertEqual(result.category_matches["CAT_B"].urls, ())
        self.assertEqual(len(result.category_matches["CAT_A"].urls), 3)

    def test_invalid_regex(self):
        """Test that an invalid pattern yields no matches and no exception."""
        with self.assertLogs("propscout.classifier.matcher", level="WARNING"):
            result = filter_by_patterns(LISTING_URLS, ["CAT_A"], {"CAT_A": {"regex": "(unclosed"}})

        self.assertEqual(result.category_matches["CAT_A"].urls, ())
        self.assertEqual(result.filtered_urls, ())
        self.assertEqual(result.stats.filtered_urls, 0)

    def test_invalid_regex_isolated(self):
        """Test that a bad pattern does not change results for other categories."""
        good = {"GOOD": {"regex": r"search\?"}}
        mixed = {"BAD": {"regex": "[oops"}, **good}

        alone = filter_by_patterns(LISTING_URLS, ["GOOD"], good)
        with self.assertLogs("propscout.classifier.matcher", level="WARNING"):
            together = filter_by_patterns(LISTING_URLS, ["BAD", "GOOD"], mixed)

        self.assertEqual(together.category_matches["GOOD"], alone.category_matches["GOOD"])
        self.assertEqual(together.filtered_urls, alone.filtered_urls)

    def test_malformed_pattern_entry_skipped(self):
        """Test that a pattern entry without a string regex is skipped."""
        with self.assertLogs("propscout.classifier.engine", level="WARNING"):
            result = filter_by_patterns(LISTING_URLS, ["X"], {"X": {"regex": 12}})
        self.assertEqual(result.category_matches["X"].urls, ())

    def test_malformed_url_tolerated(self):
        """Test that non-URL strings are simply tested like any other string."""
        urls = ["::not a url::", "https://a/p/1"]
        result = filter_by_patterns(urls, ["P"], {"P": {"regex": "p/1"}})
        self.assertEqual(result.filtered_urls, ("https://a/p/1",))
        self.assertEqual(result.stats.total_urls, 2)


class TestMixedAndProperties(unittest.TestCase):
    """Test suite for engine-wide invariants."""

    def test_overlapping_categories(self):
        """Test that a URL in two categories is listed under both but once overall."""
        definitions = {
            "CAT_A": DescriptiveCategory(type="a", examples=("https://a/1",)),
            "CAT_B": PatternCategory(regex=r"a/1"),
        }

        result = filter_urls(["https://a/1"], ["CAT_A", "CAT_B"], definitions)

        self.assertEqual(result.category_matches["CAT_A"].urls, ("https://a/1",))
        self.assertEqual(result.category_matches["CAT_B"].urls, ("https://a/1",))
        self.assertEqual(result.filtered_urls, ("https://a/1",))
        self.assertEqual(result.stats.filtered_urls, 1)

    def test_zero_selected(self):
        """Test that no selection yields an empty result with the raw total."""
        result = filter_by_patterns(LISTING_URLS, [], {"X": {"regex": "."}})

        self.assertEqual(result.filtered_urls, ())
        self.assertEqual(dict(result.category_matches), {})
        self.assertEqual(result.stats.total_urls, len(LISTING_URLS))
        self.assertEqual(result.stats.filtered_urls, 0)

    def test_total_counts_duplicates(self):
        """Test that duplicate inputs count toward total but dedup in filtered."""
        urls = ["https://a/1", "https://a/1", "https://a/2"]

        result = filter_by_patterns(urls, ["ALL"], {"ALL": {"regex": "a/"}})

        self.assertEqual(result.stats.total_urls, 3)
        self.assertEqual(result.category_matches["ALL"].urls, ("https://a/1", "https://a/1", "https://a/2"))
        self.assertEqual(result.filtered_urls, ("https://a/1", "https://a/2"))
        self.assertEqual(result.stats.filtered_urls, 2)

    def test_first_matched_order(self):
        """Test that filtered_urls follows category order, then URL order."""
        patterns = {
            "SEARCH": {"regex": "search"},
            "HOMES": {"regex": "homes"},
        }

        result = filter_by_patterns(LISTING_URLS, ["SEARCH", "HOMES"], patterns)

        self.assertEqual(result.filtered_urls, (
            "https://realty.example/search?city=ny",
            "https://realty.example/search?city=sf",
            "https://realty.example/homes/ny/101",
            "https://realty.example/homes/ny/102",
            "https://realty.example/homes/sf/201",
        ))

    def test_every_selected_name_present(self):
        """Test that category_matches has exactly the selected names."""
        selected = ["HOMES", "NOPE", "SEARCH"]
        result = filter_by_patterns(
            LISTING_URLS, selected, {"HOMES": {"regex": "homes"}, "SEARCH": {"regex": "search"}}
        )
        self.assertEqual(list(result.category_matches), selected)

    def test_repeated_selected_name(self):
        """Test that a name selected twice is processed once."""
        result = filter_by_patterns(LISTING_URLS, ["HOMES", "HOMES"], {"HOMES": {"regex": "homes"}})
        self.assertEqual(len(result.category_matches["HOMES"].urls), 3)

    def test_idempotent(self):
        """Test that identical inputs give identical results."""
        patterns = {"HOMES": {"regex": "homes"}, "SEARCH": {"regex": "search"}}
        first = filter_by_patterns(LISTING_URLS, ["HOMES", "SEARCH"], patterns)
        second = filter_by_patterns(LISTING_URLS, ["HOMES", "SEARCH"], patterns)

        self.assertEqual(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_monotonic(self):
        """Test that selecting one more category never removes URLs."""
        patterns = {"HOMES": {"regex": "/ny/"}, "SEARCH": {"regex": "search"}}
        smaller = filter_by_patterns(LISTING_URLS, ["HOMES"], patterns)
        larger = filter_by_patterns(LISTING_URLS, ["HOMES", "SEARCH"], patterns)

        self.assertTrue(set(smaller.filtered_urls) <= set(larger.filtered_urls))

    def test_result_is_read_only(self):
        """Test that the result cannot be modified after construction."""
        result = filter_by_patterns(LISTING_URLS, ["HOMES"], {"HOMES": {"regex": "homes"}})

        with self.assertRaises(TypeError):
            result.category_matches["OTHER"] = CategoryMatch()
        with self.assertRaises(AttributeError):
            result.filtered_urls.append("https://x")

    def test_to_dict_shape(self):
        """Test the JSON-compatible output shape."""
        result = filter_by_patterns(
            ["https://a/p/1", "https://a/about"], ["P", "Q"], {"P": {"regex": "/p/"}}
        )

        self.assertEqual(result.to_dict(), {
            "filteredUrls": ["https://a/p/1"],
            "categoryMatches": {"P": {"urls": ["https://a/p/1"]}, "Q": {"urls": []}},
            "stats": {"totalUrls": 2, "filteredUrls": 1},
        })
        self.assertEqual(FilterResult.from_dict(result.to_dict()), result)


if __name__ == "__main__":
    unittest.main()
