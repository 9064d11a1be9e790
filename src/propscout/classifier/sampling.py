"""Selection helpers for stages that consume a filter result."""

from dataclasses import dataclass
from typing import Sequence

from propscout.core.constants import DEFAULTS
from propscout.core.exceptions import NoCategoryExamplesError, NoMatchingURLsError
from propscout.core.models import URLTypeAnalysis


@dataclass(frozen=True)
class SamplePreview:
    """Leading URLs to show plus how many were left out."""
    urls: tuple[str, ...]
    remaining: int


def select_test_urls(urls: Sequence[str], limit: int = DEFAULTS["test_limit"]) -> list[str]:
    """Pick the batch of URLs for a test extraction run.

    Args:
        urls: Deduplicated matched URLs (``FilterResult.filtered_urls``)
        limit: Maximum number of URLs in the batch

    Returns:
        The first ``limit`` URLs

    Raises:
        ValueError: If limit is smaller than 1
        NoMatchingURLsError: If there are no URLs to test
    """
    if limit < 1:
        raise ValueError(f"Test limit must be at least 1, got {limit}")

    if not urls:
        raise NoMatchingURLsError(
            "No URLs found to test - select different URL categories"
        )

    return list(urls[:limit])


def display_samples(
    urls: Sequence[str],
    max_count: int = DEFAULTS["display_samples"],
) -> SamplePreview:
    shown = tuple(urls[:max(max_count, 0)])
    return SamplePreview(urls=shown, remaining=len(urls) - len(shown))


def collect_category_examples(
    selected_categories: Sequence[str],
    analysis: URLTypeAnalysis,
) -> dict[str, list[str]]:
    """Gather example URLs of the selected categories.

    The result is the input expected by the external pattern generator.
    Selected names without a definition are left out; a defined category
    with no examples is sent with an empty list.

    Raises:
        NoCategoryExamplesError: If no selected category is defined
    """
    examples: dict[str, list[str]] = {}
    for name in selected_categories:
        category = analysis.url_categories.get(name)
        if category is not None:
            examples[name] = list(category.examples)

    if not examples:
        raise NoCategoryExamplesError("No valid categories with examples found")

    return examples
