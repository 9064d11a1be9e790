"""Hierarchical view of discovered URLs.

Builds a path tree from a flat list of links: one node per cumulative path,
plus a leaf for any query string or fragment. Nodes are tagged with the
category whose examples contain the link. Only the data structure lives
here; presentation is left to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Sequence

from propscout.classifier.normalizer import ParsedURL, URLParser
from propscout.core.models import DescriptiveCategory


logger = logging.getLogger(__name__)


@dataclass
class URLNode:
    """Node in the URL tree."""
    name: str
    full_url: str
    path: str
    depth: int
    category: Optional[str] = None
    children: list["URLNode"] = field(default_factory=list)

    def iter_nodes(self) -> Iterator["URLNode"]:
        """Walk this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def find(self, path: str) -> Optional["URLNode"]:
        for node in self.iter_nodes():
            if node.path == path:
                return node
        return None


def category_for_url(
    url: str,
    url_categories: Mapping[str, DescriptiveCategory],
) -> Optional[str]:
    """Return the first category whose examples contain the URL."""
    for name, category in url_categories.items():
        if url in category.examples:
            return name
    return None


def build_url_tree(
    links: Sequence[str],
    base_url: str,
    url_categories: Optional[Mapping[str, DescriptiveCategory]] = None,
    *,
    selected_categories: Optional[Sequence[str]] = None,
    only_selected: bool = False,
    parser: Optional[URLParser] = None,
) -> URLNode:
    """Build a path tree from discovered links.

    Args:
        links: Discovered URLs
        base_url: Site root; its host names the root node
        url_categories: Descriptive categories used to tag nodes
        selected_categories: Category names chosen by the user
        only_selected: Keep only links tagged with a selected category
        parser: URLParser instance (creates default if None)

    Returns:
        Root URLNode with children sorted by name
    """
    parser = parser or URLParser()
    url_categories = url_categories or {}
    selected = set(selected_categories or [])

    base = parser.parse(base_url)
    root = URLNode(
        name=base.host if isinstance(base, ParsedURL) else base_url,
        full_url=base_url,
        path="",
        depth=0,
    )

    if only_selected and selected:
        links = [
            link for link in links
            if category_for_url(link, url_categories) in selected
        ]

    nodes: dict[str, URLNode] = {"": root}

    for link in links:
        outcome = parser.parse(link)
        if not isinstance(outcome, ParsedURL):
            logger.warning(f"Skipping invalid URL {link!r}: {outcome.reason}")
            continue

        category = category_for_url(link, url_categories)
        current_path = ""
        current = root

        for index, segment in enumerate(outcome.segments):
            current_path = f"{current_path}/{segment}" if current_path else segment
            node = nodes.get(current_path)
            if node is None:
                node = URLNode(
                    name=segment,
                    full_url=f"{outcome.origin}/{current_path}",
                    path=current_path,
                    depth=index + 1,
                    category=category,
                )
                nodes[current_path] = node
                current.children.append(node)
            current = node

        if outcome.query or outcome.fragment:
            suffix = ""
            if outcome.query:
                suffix += f"?{outcome.query}"
            if outcome.fragment:
                suffix += f"#{outcome.fragment}"
            current.children.append(URLNode(
                name=suffix,
                full_url=link,
                path=f"{current_path}{suffix}",
                depth=current.depth + 1,
                category=category,
            ))

    _sort_children(root)
    return root


def _sort_children(node: URLNode) -> None:
    node.children.sort(key=lambda child: child.name)
    for child in node.children:
        _sort_children(child)
