"""URL parsing, category matching, and filtering.

This package turns discovered URLs plus user-selected categories into a
scrape target set:
- URLParser: Parse URLs into structured parts without raising
- CategoryMatcher: Decide whether one URL belongs to one category
- filter_by_categories / filter_by_patterns: Build a FilterResult
- build_url_tree: Arrange discovered URLs by path
"""

from propscout.classifier.normalizer import URLParser, ParsedURL, Unparseable
from propscout.classifier.matcher import CategoryMatcher, AuxiliaryRules
from propscout.classifier.engine import filter_urls, filter_by_categories, filter_by_patterns
from propscout.classifier.sampling import (
    select_test_urls,
    display_samples,
    collect_category_examples,
)
from propscout.classifier.tree import URLNode, build_url_tree

__all__ = [
    "URLParser",
    "ParsedURL",
    "Unparseable",
    "CategoryMatcher",
    "AuxiliaryRules",
    "filter_urls",
    "filter_by_categories",
    "filter_by_patterns",
    "select_test_urls",
    "display_samples",
    "collect_category_examples",
    "URLNode",
    "build_url_tree",
]
