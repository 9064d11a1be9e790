"""Constants used throughout PropScout.

This module contains enums, default values, and static configurations
to ensure consistency across the application.
"""

from enum import Enum


class CategoryKind(Enum):
    """Representation a category definition is supplied in."""
    DESCRIPTIVE = "descriptive"
    PATTERN = "pattern"


class MatchMethod(str, Enum):
    """Rules that can cause a URL to match a category."""
    EXAMPLES = "examples"
    REGEX = "regex"
    PATH = "path"
    INDICATORS = "indicators"


# Application-wide defaults
DEFAULTS = {
    "test_limit": 5,
    "display_samples": 5,
}
