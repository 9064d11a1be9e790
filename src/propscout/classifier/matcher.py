"""Category matching for discovered URLs.

This module decides whether a single URL belongs to a single category and
reports which rules fired. Descriptive categories match by exact example
membership (plus optional auxiliary path/keyword rules); pattern
categories match by a case-insensitive regex search over the whole URL.

Regex sources come from an external generator and are not trusted: a
pattern that fails to compile or evaluate is logged and treated as no
match for that category only.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from propscout.classifier.normalizer import ParsedURL, URLParser
from propscout.core.constants import CategoryKind, MatchMethod
from propscout.core.models import (
    CategoryDefinition,
    DescriptiveCategory,
    MatchResult,
    PatternCategory,
)


logger = logging.getLogger(__name__)

# Named group syntax of generated (JavaScript flavoured) patterns, not preceded
# by an escaping backslash.
_JS_NAMED_GROUP = re.compile(r"(?<!\\)((?:\\\\)*)\(\?<([A-Za-z_]\w*)>")
_JS_BACKREFERENCE = re.compile(r"(?<!\\)((?:\\\\)*)\\k<([A-Za-z_]\w*)>")


def translate_pattern(pattern: str) -> str:
    """Rewrite ``(?<name>...)`` groups and ``\\k<name>`` references to Python syntax.

    Lookbehind assertions (``(?<=``, ``(?<!``) are left untouched.
    """
    pattern = _JS_NAMED_GROUP.sub(r"\1(?P<\2>", pattern)
    return _JS_BACKREFERENCE.sub(r"\1(?P=\2)", pattern)


@dataclass
class AuxiliaryRules:
    """Extra rules checked for a descriptive category besides its examples.

    Path patterns are prefixes of the URL path where ``*`` matches any run
    of characters. Indicators are keywords searched anywhere in the URL.
    Both are case-insensitive.
    """
    path_patterns: list[str] = field(default_factory=list)
    indicators: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.path_patterns or self.indicators)


class CategoryMatcher:
    """Match URLs against category definitions.

    A matcher caches compiled regexes, including the fact that a pattern is
    invalid, so each bad pattern is reported once per matcher.
    """

    def __init__(
        self,
        *,
        parser: Optional[URLParser] = None,
        auxiliary_rules: Optional[Mapping[str, AuxiliaryRules]] = None,
    ):
        """Initialize CategoryMatcher.

        Args:
            parser: URLParser instance (creates default if None)
            auxiliary_rules: Auxiliary rules keyed by category name
        """
        self.parser = parser or URLParser()
        self.auxiliary_rules = dict(auxiliary_rules or {})
        self._compiled: dict[str, Optional[re.Pattern[str]]] = {}

    # ------------------------------------------------------------------
    # Single-rule tests
    # ------------------------------------------------------------------

    def match_by_examples(self, url: str, examples: Sequence[str]) -> bool:
        """Check if URL is one of the examples (exact string equality)."""
        if not examples:
            return False
        return url in examples

    def match_by_regex(self, url: str, patterns: Sequence[str]) -> bool:
        """Check if any pattern is found in the URL.

        Args:
            url: URL to test
            patterns: Regex sources, searched case-insensitively

        Returns:
            True if at least one valid pattern matches, False otherwise
        """
        if not patterns:
            return False

        for pattern in patterns:
            compiled = self.compile(pattern)
            if compiled is None:
                continue
            try:
                if compiled.search(url):
                    return True
            except (TypeError, RecursionError) as e:
                logger.warning(f"Regex pattern {pattern!r} failed on {url!r}: {e}")

        return False

    def match_by_path(self, url: str, path_patterns: Sequence[str]) -> bool:
        """Check if the URL path starts with any wildcard pattern.

        Args:
            url: URL to test
            path_patterns: Path prefixes such as ``/homes/*/details``

        Returns:
            True if a pattern matches, False otherwise (including for
            unparseable URLs)
        """
        if not path_patterns:
            return False

        outcome = self.parser.parse(url)
        if not isinstance(outcome, ParsedURL):
            logger.debug(f"Skipping path rules for unparseable URL {url!r}: {outcome.reason}")
            return False

        for pattern in path_patterns:
            regex = "^" + re.escape(pattern).replace(r"\*", ".*")
            if re.match(regex, outcome.path, re.IGNORECASE):
                return True

        return False

    def match_by_indicators(self, url: str, indicators: Sequence[str]) -> bool:
        """Check if the URL contains any keyword indicator."""
        if not indicators or not isinstance(url, str):
            return False

        url_lower = url.lower()
        return any(indicator.lower() in url_lower for indicator in indicators)

    # ------------------------------------------------------------------
    # Category tests
    # ------------------------------------------------------------------

    def match_category(
        self,
        url: str,
        category: DescriptiveCategory,
        name: Optional[str] = None,
    ) -> MatchResult:
        """Match a URL against a descriptive category.

        Args:
            url: URL to test
            category: Category with example URLs
            name: Category name, used to look up auxiliary rules

        Returns:
            MatchResult naming every rule that fired
        """
        methods: list[MatchMethod] = []

        if self.match_by_examples(url, category.examples):
            methods.append(MatchMethod.EXAMPLES)

        rules = self.auxiliary_rules.get(name) if name is not None else None
        if rules:
            if self.match_by_path(url, rules.path_patterns):
                methods.append(MatchMethod.PATH)
            if self.match_by_indicators(url, rules.indicators):
                methods.append(MatchMethod.INDICATORS)

        return MatchResult.from_methods(methods)

    def match_pattern(self, url: str, pattern: PatternCategory) -> MatchResult:
        """Match a URL against a generated regex pattern."""
        if self.match_by_regex(url, [pattern.regex]):
            return MatchResult.matched(MatchMethod.REGEX)
        return MatchResult.unmatched()

    def match(
        self,
        url: str,
        category: CategoryDefinition,
        name: Optional[str] = None,
    ) -> MatchResult:
        """Match a URL against either category representation.

        Raises:
            TypeError: If category is not a known definition type
        """
        if category.kind is CategoryKind.DESCRIPTIVE:
            return self.match_category(url, category, name)
        if category.kind is CategoryKind.PATTERN:
            return self.match_pattern(url, category)
        raise TypeError(f"Unsupported category definition: {category!r}")

    def compile(self, pattern: str) -> Optional[re.Pattern[str]]:
        """Compile a regex source, returning None if it is invalid."""
        if not isinstance(pattern, str):
            logger.warning(f"Ignoring non-string regex pattern: {pattern!r}")
            return None

        if pattern in self._compiled:
            return self._compiled[pattern]

        try:
            compiled: Optional[re.Pattern[str]] = re.compile(
                translate_pattern(pattern), re.IGNORECASE
            )
        except (re.error, RecursionError, OverflowError) as e:
            logger.warning(f"Invalid regex pattern {pattern!r}: {e}")
            compiled = None

        self._compiled[pattern] = compiled
        return compiled
