"""
Queryable page tree and element lookup.

The transcript grabber never talks to a browser directly. It sees the page as
a tree of nodes it can query, read styles from and mutate in a few limited
ways (remove a node, set an inline style, click). ``browser.py`` provides the
Selenium implementation; the tests use an in-memory one.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from tube2tldr.config import PageSelectors
from tube2tldr.errors import AmbiguousUIStateError, InvalidInputError


class PageNode(Protocol):
    """A single element of the rendered page."""

    @property
    def tag(self) -> str: ...

    @property
    def parent(self) -> Optional["PageNode"]: ...

    @property
    def children(self) -> List["PageNode"]: ...

    def text(self) -> str: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    def computed_style(self, prop: str) -> str: ...

    def find_all(self, tag: str, class_name: Optional[str] = None) -> List["PageNode"]: ...

    def set_style(self, prop: str, value: str) -> None: ...

    def remove(self) -> None: ...

    def click(self) -> None: ...


class PageTree(Protocol):
    """The whole rendered page."""

    @property
    def url(self) -> str: ...

    def find_by_tag(self, tag: str, class_name: Optional[str] = None) -> List[PageNode]: ...

    def find_by_id(self, element_id: str) -> Optional[PageNode]: ...


# ----------------------------
# Visibility
# ----------------------------

def _is_hidden_by_style(node: PageNode) -> bool:
    if (node.computed_style("display") or "").strip() == "none":
        return True
    if (node.computed_style("visibility") or "").strip() == "hidden":
        return True
    opacity = (node.computed_style("opacity") or "").strip()
    if opacity:
        try:
            return float(opacity) == 0.0
        except ValueError:
            return False
    return False


def is_visible(node: Optional[PageNode]) -> bool:
    """
    True if neither the node nor any of its ancestors is hidden through
    display, visibility or opacity. Not cached, the page changes under us.
    """
    if node is None:
        return False

    current: Optional[PageNode] = node
    while current is not None:
        if _is_hidden_by_style(current):
            return False
        current = current.parent
    return True


# ----------------------------
# Lookup
# ----------------------------

def find_all_by_tag_and_text(page: PageTree, tag: str, text: str) -> List[PageNode]:
    """
    Find all visible elements of a tag whose trimmed text is exactly ``text``.

    Returns an empty list when nothing matches.
    """
    if not isinstance(tag, str) or not tag:
        raise InvalidInputError("tag cannot be empty")
    if not isinstance(text, str) or not text:
        raise InvalidInputError("text cannot be empty")

    return [
        node
        for node in page.find_by_tag(tag)
        if node.text().strip() == text and is_visible(node)
    ]


def find_unique_button_by_aria_label(page: PageTree, label: str) -> Optional[PageNode]:
    """
    Find the single visible button whose aria-label equals ``label``.

    Returns None when there is no such button. Two or more visible matches
    raise AmbiguousUIStateError; we never guess which one to click.
    """
    if not isinstance(label, str) or not label:
        raise InvalidInputError("label cannot be empty")

    matches = [
        button
        for button in page.find_by_tag("button")
        if button.get_attribute("aria-label") == label and is_visible(button)
    ]

    if len(matches) > 1:
        raise AmbiguousUIStateError(
            f"{len(matches)} visible buttons match the aria-label {label!r}"
        )
    return matches[0] if matches else None


def has_descendant_with_aria_label(node: PageNode, label: str) -> bool:
    """Depth-first search for a descendant whose lowercased aria-label is ``label``."""
    aria_label = node.get_attribute("aria-label")
    if aria_label and aria_label.lower() == label:
        return True
    return any(has_descendant_with_aria_label(child, label) for child in node.children)


class ElementLocator:
    """Looks up the transcript related controls of a page."""

    def __init__(self, page: PageTree, selectors: Optional[PageSelectors] = None):
        self.page = page
        self.selectors = selectors or PageSelectors()

    def find_transcript_trigger(self) -> Optional[PageNode]:
        return find_unique_button_by_aria_label(self.page, self.selectors.transcript_button_label)

    def find_chat_container(self) -> Optional[PageNode]:
        return self.page.find_by_id(self.selectors.chat_container_id)

    def find_expand_buttons(self) -> List[PageNode]:
        return find_all_by_tag_and_text(
            self.page, self.selectors.expand_button_tag, self.selectors.expand_button_text
        )

    def find_transcript_panels(self) -> List[PageNode]:
        """Engagement panels that hold a "show transcript" control somewhere below them."""
        label = self.selectors.transcript_button_label.lower()
        return [
            panel
            for panel in self.page.find_by_tag(self.selectors.engagement_panel_tag)
            if has_descendant_with_aria_label(panel, label)
        ]
