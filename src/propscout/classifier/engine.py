"""Filter engine: partition discovered URLs by selected categories.

Every selected category name appears in the result, even when it has no
definition or no matches. A URL matching several categories is listed
under each of them but only once in the deduplicated ``filtered_urls``.
The engine is a pure function of its inputs: working state is local to
each call and nothing is raised for unknown categories, bad patterns or
malformed URLs.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from propscout.classifier.matcher import CategoryMatcher
from propscout.core.exceptions import InvalidInputError
from propscout.core.models import (
    CategoryDefinition,
    CategoryMatch,
    DescriptiveCategory,
    FilterResult,
    FilterStats,
    PatternCategory,
    URLTypeAnalysis,
)


logger = logging.getLogger(__name__)

AnalysisInput = Union[URLTypeAnalysis, Mapping[str, Any]]
PatternsInput = Mapping[str, Union[PatternCategory, Mapping[str, Any]]]


def filter_urls(
    urls: Sequence[str],
    selected_categories: Sequence[str],
    definitions: Mapping[str, CategoryDefinition],
    *,
    matcher: Optional[CategoryMatcher] = None,
) -> FilterResult:
    """Filter URLs against already-typed category definitions.

    Args:
        urls: All discovered URLs, in discovery order
        selected_categories: Category names chosen by the user
        definitions: Category definitions by name (may omit selected names)
        matcher: CategoryMatcher to use (creates default if None)

    Returns:
        FilterResult with per-category matches and the deduplicated union
    """
    matcher = matcher or CategoryMatcher()

    # dict keys double as an insertion-ordered set
    matched_urls: dict[str, None] = {}
    category_urls: dict[str, list[str]] = {name: [] for name in selected_categories}

    for name in category_urls:
        category = definitions.get(name)
        if category is None:
            logger.debug(f"No definition for selected category '{name}', skipping")
            continue

        bucket = category_urls[name]
        for url in urls:
            if matcher.match(url, category, name).matches:
                bucket.append(url)
                matched_urls[url] = None

    result = FilterResult(
        filtered_urls=tuple(matched_urls),
        category_matches={
            name: CategoryMatch(urls=tuple(bucket))
            for name, bucket in category_urls.items()
        },
        stats=FilterStats(total_urls=len(urls), filtered_urls=len(matched_urls)),
    )

    logger.info(
        f"Filter complete: {result.stats.filtered_urls}/{result.stats.total_urls} URLs "
        f"matched across {len(category_urls)} categories"
    )
    return result


def filter_by_categories(
    urls: Sequence[str],
    selected_categories: Sequence[str],
    analysis: AnalysisInput,
    *,
    matcher: Optional[CategoryMatcher] = None,
) -> FilterResult:
    """Filter URLs by exact membership in each category's examples.

    Args:
        urls: All discovered URLs
        selected_categories: Category names chosen by the user
        analysis: URLTypeAnalysis or ``{"url_categories": {...}}`` mapping
        matcher: CategoryMatcher to use (creates default if None)

    Returns:
        FilterResult in examples-membership mode
    """
    if isinstance(analysis, URLTypeAnalysis):
        categories: Mapping[str, Any] = analysis.url_categories
    else:
        categories = analysis.get("url_categories") or {}

    definitions: dict[str, CategoryDefinition] = {}
    for name in selected_categories:
        if name not in categories:
            continue
        category = _coerce_descriptive(name, categories[name])
        if category is not None:
            definitions[name] = category

    return filter_urls(urls, selected_categories, definitions, matcher=matcher)


def filter_by_patterns(
    urls: Sequence[str],
    selected_categories: Sequence[str],
    patterns: PatternsInput,
    *,
    matcher: Optional[CategoryMatcher] = None,
) -> FilterResult:
    """Filter URLs using generated regex patterns.

    Args:
        urls: All discovered URLs
        selected_categories: Category names chosen by the user
        patterns: PatternCategory or ``{"regex": ...}`` by category name;
            may cover only a subset of the selection
        matcher: CategoryMatcher to use (creates default if None)

    Returns:
        FilterResult in regex mode
    """
    definitions: dict[str, CategoryDefinition] = {}
    for name in selected_categories:
        if name not in patterns:
            continue
        pattern = _coerce_pattern(name, patterns[name])
        if pattern is not None:
            definitions[name] = pattern

    return filter_urls(urls, selected_categories, definitions, matcher=matcher)


def _coerce_descriptive(name: str, value: Any) -> Optional[DescriptiveCategory]:
    if isinstance(value, DescriptiveCategory):
        return value
    try:
        return DescriptiveCategory.coerce(name, value)
    except InvalidInputError as e:
        logger.warning(f"Ignoring malformed category definition: {e}")
        return None


def _coerce_pattern(name: str, value: Any) -> Optional[PatternCategory]:
    if isinstance(value, PatternCategory):
        return value
    try:
        return PatternCategory.from_dict(name, value)
    except InvalidInputError as e:
        logger.warning(f"Ignoring malformed pattern definition: {e}")
        return None
