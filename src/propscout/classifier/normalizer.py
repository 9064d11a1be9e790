"""URL parsing and validation for matching and tree building.

This module turns a URL string into a structured view (origin, path
segments, query, fragment). Parsing never raises: malformed input yields
an explicit ``Unparseable`` marker which callers treat as "does not match"
rather than as an error.
"""

from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit


@dataclass(frozen=True)
class ParsedURL:
    """Structured view of an absolute URL."""
    url: str                                # Original string, untouched
    scheme: str
    host: str
    port: Optional[int]
    origin: str
    path: str
    segments: tuple[str, ...]               # Non-empty path segments
    query: str
    fragment: str

    @property
    def parsed(self) -> bool:
        return True


@dataclass(frozen=True)
class Unparseable:
    """Marker returned for URLs that cannot be parsed."""
    url: object
    reason: str

    @property
    def parsed(self) -> bool:
        return False


ParseOutcome = Union[ParsedURL, Unparseable]


class URLParser:
    """Parse and validate absolute URLs.

    Parsing rules:
    1. Input must be a non-empty string
    2. Scheme and network location are both required
    3. Port, when present, must be a valid number
    4. Origin lowercases scheme and host and drops default ports
    """

    DEFAULT_PORTS = {
        'http': 80,
        'https': 443,
    }

    def parse(self, url: object) -> ParseOutcome:
        """Parse a single URL.

        Args:
            url: URL to parse

        Returns:
            ParsedURL on success, Unparseable otherwise
        """
        if not url or not isinstance(url, str):
            return Unparseable(url=url, reason="empty or non-string URL")

        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as e:
            return Unparseable(url=url, reason=str(e))

        if not parts.scheme or not parts.netloc:
            return Unparseable(url=url, reason="missing scheme or host")

        host = (parts.hostname or "").lower()
        if not host:
            return Unparseable(url=url, reason="missing host")

        scheme = parts.scheme.lower()
        return ParsedURL(
            url=url,
            scheme=scheme,
            host=host,
            port=port,
            origin=self._build_origin(scheme, host, port),
            path=parts.path or "/",
            segments=tuple(segment for segment in parts.path.split("/") if segment),
            query=parts.query,
            fragment=parts.fragment,
        )

    def parse_batch(self, urls: list[str]) -> list[ParsedURL]:
        """Parse a batch of URLs.

        Args:
            urls: List of URLs to parse

        Returns:
            List of parsed URLs (unparseable URLs are skipped)
        """
        parsed = []
        for url in urls:
            outcome = self.parse(url)
            if isinstance(outcome, ParsedURL):
                parsed.append(outcome)
        return parsed

    def is_valid(self, url: object) -> bool:
        return isinstance(self.parse(url), ParsedURL)

    def get_domain(self, url: str) -> Optional[str]:
        """Extract domain from URL.

        Args:
            url: URL to process

        Returns:
            Domain name (host without port) or None if invalid
        """
        outcome = self.parse(url)
        if isinstance(outcome, ParsedURL):
            return outcome.host
        return None

    def _build_origin(self, scheme: str, host: str, port: Optional[int]) -> str:
        if ":" in host:
            # IPv6 literal
            host = f"[{host}]"
        if port is None or port == self.DEFAULT_PORTS.get(scheme):
            return f"{scheme}://{host}"
        return f"{scheme}://{host}:{port}"
