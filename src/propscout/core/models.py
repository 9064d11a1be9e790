"""Core data models for PropScout.

This module defines the data structures exchanged with the external
collaborators (URL mapping, URL analysis, generated patterns) and the
value types produced by the filter engine.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Union

from propscout.core.constants import CategoryKind, MatchMethod
from propscout.core.exceptions import InvalidInputError


logger = logging.getLogger(__name__)


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _require_str_list(value: Any, what: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise InvalidInputError(f"{what} must be a list")
    for item in value:
        if not isinstance(item, str):
            raise InvalidInputError(f"{what} must contain only strings")
    return tuple(value)


# ============================================================================
# Category Definitions
# ============================================================================

@dataclass(frozen=True)
class DescriptiveCategory:
    """Category produced by the external classifier.

    Matched by exact membership of a URL in ``examples``.
    """
    type: str
    examples: tuple[str, ...] = ()

    kind: ClassVar[CategoryKind] = CategoryKind.DESCRIPTIVE

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "DescriptiveCategory":
        data = _require_mapping(data, f"Category '{name}'")
        description = data.get("type", "")
        if not isinstance(description, str):
            raise InvalidInputError(f"Category '{name}': 'type' must be a string")
        examples = _require_str_list(data.get("examples", []), f"Category '{name}': 'examples'")
        return cls(type=description, examples=examples)

    @classmethod
    def coerce(cls, name: str, data: Any) -> "DescriptiveCategory":
        """Build a category keeping whatever is usable for matching.

        A non-string ``type`` becomes ``""`` and non-string entries are dropped
        from ``examples`` one by one, each logged at WARNING.

        Raises:
            InvalidInputError: If data is not a mapping
        """
        data = _require_mapping(data, f"Category '{name}'")

        description = data.get("type", "")
        if not isinstance(description, str):
            logger.warning(f"Category '{name}': ignoring non-string 'type' {description!r}")
            description = ""

        raw_examples = data.get("examples") or []
        if not isinstance(raw_examples, (list, tuple)):
            logger.warning(f"Category '{name}': 'examples' is not a list, treating as empty")
            raw_examples = []

        examples = []
        for example in raw_examples:
            if isinstance(example, str):
                examples.append(example)
            else:
                logger.warning(f"Category '{name}': dropping non-string example {example!r}")

        return cls(type=description, examples=tuple(examples))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "examples": list(self.examples)}


@dataclass(frozen=True)
class PatternCategory:
    """Category produced by the external pattern generator.

    Matched by a case-insensitive regex search over the whole URL.
    """
    regex: str

    kind: ClassVar[CategoryKind] = CategoryKind.PATTERN

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "PatternCategory":
        data = _require_mapping(data, f"Pattern '{name}'")
        regex = data.get("regex")
        if not isinstance(regex, str):
            raise InvalidInputError(f"Pattern '{name}': 'regex' must be a string")
        return cls(regex=regex)

    def to_dict(self) -> dict[str, Any]:
        return {"regex": self.regex}


CategoryDefinition = Union[DescriptiveCategory, PatternCategory]


# ============================================================================
# Collaborator Documents
# ============================================================================

@dataclass(frozen=True)
class URLMapping:
    """Output of the URL discovery collaborator."""
    links: tuple[str, ...]
    count: int
    base_url: str

    @classmethod
    def from_dict(cls, data: Any) -> "URLMapping":
        data = _require_mapping(data, "URL mapping")
        links = _require_str_list(data.get("links", []), "'links'")
        count = data.get("count", len(links))
        if not isinstance(count, int) or isinstance(count, bool):
            raise InvalidInputError("'count' must be an integer")
        base_url = data.get("base_url", "")
        if not isinstance(base_url, str):
            raise InvalidInputError("'base_url' must be a string")
        return cls(links=links, count=count, base_url=base_url)


@dataclass(frozen=True)
class URLTypeAnalysis:
    """Output of the categorization collaborator."""
    url_categories: Mapping[str, DescriptiveCategory] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "url_categories", MappingProxyType(dict(self.url_categories))
        )

    @classmethod
    def from_dict(cls, data: Any, *, lenient: bool = False) -> "URLTypeAnalysis":
        """Read the ``{"url_categories": {...}}`` document.

        With ``lenient``, each category keeps its usable fields instead of
        failing on the first bad one (see ``DescriptiveCategory.coerce``).
        """
        data = _require_mapping(data, "URL analysis")
        if "url_categories" not in data:
            raise InvalidInputError("Missing 'url_categories' in URL analysis")
        raw = _require_mapping(data["url_categories"], "'url_categories'")
        return cls(url_categories={
            name: (DescriptiveCategory.coerce if lenient else DescriptiveCategory.from_dict)(name, info)
            for name, info in raw.items()
        })

    def to_dict(self) -> dict[str, Any]:
        return {
            "url_categories": {
                name: category.to_dict()
                for name, category in self.url_categories.items()
            }
        }


def parse_patterns(data: Any) -> dict[str, PatternCategory]:
    """Read the pattern generator's ``{name: {"regex": ...}}`` mapping."""
    data = _require_mapping(data, "Patterns")
    return {
        name: PatternCategory.from_dict(name, entry)
        for name, entry in data.items()
    }


# ============================================================================
# Match and Filter Results
# ============================================================================

@dataclass(frozen=True)
class MatchResult:
    """Outcome of testing one URL against one category."""
    matches: bool
    matched_by: tuple[MatchMethod, ...] = ()

    def __post_init__(self) -> None:
        if self.matches != bool(self.matched_by):
            raise ValueError("matched_by must be non-empty exactly when matches is true")

    @classmethod
    def matched(cls, *methods: MatchMethod) -> "MatchResult":
        return cls(matches=True, matched_by=tuple(methods))

    @classmethod
    def unmatched(cls) -> "MatchResult":
        return cls(matches=False)

    @classmethod
    def from_methods(cls, methods: list[MatchMethod]) -> "MatchResult":
        return cls.matched(*methods) if methods else cls.unmatched()


@dataclass(frozen=True)
class CategoryMatch:
    """URLs that matched one category, in input order."""
    urls: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {"urls": list(self.urls)}


@dataclass(frozen=True)
class FilterStats:
    total_urls: int
    filtered_urls: int


@dataclass(frozen=True)
class FilterResult:
    """Partition of discovered URLs by selected categories.

    ``filtered_urls`` is the deduplicated union in first-matched order;
    ``category_matches`` has one entry per selected category name.
    """
    filtered_urls: tuple[str, ...]
    category_matches: Mapping[str, CategoryMatch]
    stats: FilterStats

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "category_matches", MappingProxyType(dict(self.category_matches))
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-compatible shape consumed downstream."""
        return {
            "filteredUrls": list(self.filtered_urls),
            "categoryMatches": {
                name: match.to_dict()
                for name, match in self.category_matches.items()
            },
            "stats": {
                "totalUrls": self.stats.total_urls,
                "filteredUrls": self.stats.filtered_urls,
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "FilterResult":
        data = _require_mapping(data, "Filter result")
        try:
            filtered = _require_str_list(data["filteredUrls"], "'filteredUrls'")
            raw_matches = _require_mapping(data["categoryMatches"], "'categoryMatches'")
            stats = _require_mapping(data["stats"], "'stats'")
            category_matches = {
                name: CategoryMatch(urls=_require_str_list(
                    _require_mapping(entry, f"Match '{name}'")["urls"],
                    f"Match '{name}': 'urls'",
                ))
                for name, entry in raw_matches.items()
            }
            return cls(
                filtered_urls=filtered,
                category_matches=category_matches,
                stats=FilterStats(
                    total_urls=int(stats["totalUrls"]),
                    filtered_urls=int(stats["filteredUrls"]),
                ),
            )
        except KeyError as e:
            raise InvalidInputError(f"Missing field {e} in filter result") from e
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid filter result: {e}") from e
