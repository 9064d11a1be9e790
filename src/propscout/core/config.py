"""Configuration loader for PropScout.

This module loads the YAML matching configuration: test-run defaults and
optional auxiliary rules per category name.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from propscout.classifier.matcher import AuxiliaryRules, CategoryMatcher
from propscout.core.constants import DEFAULTS
from propscout.core.exceptions import ConfigError


@dataclass
class MatchingConfig:
    """Settings for filtering and test-run selection."""
    test_limit: int = DEFAULTS["test_limit"]
    display_samples: int = DEFAULTS["display_samples"]
    auxiliary_rules: dict[str, AuxiliaryRules] = field(default_factory=dict)

    def create_matcher(self) -> CategoryMatcher:
        return CategoryMatcher(auxiliary_rules=self.auxiliary_rules)


# ============================================================================
# Configuration Paths
# ============================================================================

def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to configs directory (./configs relative to project root)
    """
    # Get project root (3 levels up from this file: core/ -> propscout/ -> src/ -> root)
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / "configs"


# ============================================================================
# Matching Configuration Loader
# ============================================================================

def load_matching_config(config_file: Path | str | None = None) -> MatchingConfig:
    """Load matching configuration from YAML file.

    Args:
        config_file: Path to YAML file. If None, loads matching.yaml from the
            config directory, falling back to defaults when it is absent

    Returns:
        MatchingConfig with validated settings

    Raises:
        ConfigError: If an explicit file is missing, YAML parsing fails or
            a setting has the wrong type
    """
    if config_file is None:
        config_path = get_config_dir() / "matching.yaml"
        if not config_path.exists():
            return MatchingConfig()
    else:
        config_path = Path(config_file)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if not data:
        return MatchingConfig()

    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping")

    matching = data.get("matching") or {}
    if not isinstance(matching, dict):
        raise ConfigError("'matching' must be a mapping")

    test_limit = _positive_int(matching, "test_limit")
    display_samples = _positive_int(matching, "display_samples")

    return MatchingConfig(
        test_limit=test_limit,
        display_samples=display_samples,
        auxiliary_rules=_load_auxiliary_rules(data.get("auxiliary_rules") or {}),
    )


def _positive_int(section: dict[str, Any], key: str) -> int:
    value = section.get(key, DEFAULTS[key])
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ConfigError(f"'matching.{key}' must be a positive integer")
    return value


def _load_auxiliary_rules(data: Any) -> dict[str, AuxiliaryRules]:
    if not isinstance(data, dict):
        raise ConfigError("'auxiliary_rules' must be a mapping")

    rules: dict[str, AuxiliaryRules] = {}

    for name, config in data.items():
        if not isinstance(config, dict):
            raise ConfigError(f"Invalid auxiliary rules for category '{name}'")

        path_patterns = config.get("path_patterns", [])
        indicators = config.get("indicators", [])

        for key, value in (("path_patterns", path_patterns), ("indicators", indicators)):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{key}' for category '{name}' must be a list of strings")

        rules[name] = AuxiliaryRules(path_patterns=path_patterns, indicators=indicators)

    return rules
