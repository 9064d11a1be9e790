"""JSON documents exchanged with external collaborators.

Readers for the URL mapping, URL analysis and generated patterns, and a
writer for filter results.
"""

import json
from pathlib import Path
from typing import Any

from propscout.core.exceptions import ExportError, InputFileError
from propscout.core.models import (
    FilterResult,
    PatternCategory,
    URLMapping,
    URLTypeAnalysis,
    parse_patterns,
)


def _read_json(path: Path | str, what: str) -> Any:
    path = Path(path)

    if not path.exists():
        raise InputFileError(f"{what} file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InputFileError(f"Failed to parse {what.lower()} JSON: {e}") from e
    except OSError as e:
        raise InputFileError(f"Failed to read {what.lower()} file: {e}") from e


def load_url_mapping(path: Path | str) -> URLMapping:
    """Load discovered links.

    A bare JSON list of URLs is accepted as well as the
    ``{"links", "count", "base_url"}`` object.

    Raises:
        InputFileError: If the file cannot be read or parsed
        InvalidInputError: If the document has the wrong shape
    """
    data = _read_json(path, "URL mapping")
    if isinstance(data, list):
        data = {"links": data}
    return URLMapping.from_dict(data)


def load_url_analysis(path: Path | str, *, lenient: bool = False) -> URLTypeAnalysis:
    """Load the categorization collaborator's ``url_categories`` document.

    With ``lenient``, badly typed fields of a category are dropped with a
    warning instead of rejecting the whole document.
    """
    return URLTypeAnalysis.from_dict(_read_json(path, "URL analysis"), lenient=lenient)


def load_patterns(path: Path | str) -> dict[str, PatternCategory]:
    """Load generated patterns keyed by category name.

    The document may be the bare mapping or wrapped as ``{"patterns": ...}``
    the way the pattern generation endpoint returns it.
    """
    data = _read_json(path, "Patterns")
    if isinstance(data, dict) and isinstance(data.get("patterns"), dict):
        data = data["patterns"]
    return parse_patterns(data)


def export_filter_result(result: FilterResult, output_path: Path | str) -> None:
    """Write a filter result as indented JSON.

    Raises:
        ExportError: If the file cannot be written
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ExportError(f"Failed to export filter result: {e}") from e


def load_filter_result(path: Path | str) -> FilterResult:
    return FilterResult.from_dict(_read_json(path, "Filter result"))
