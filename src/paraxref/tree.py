"""Thin adapter around a BeautifulSoup document holding the rendered HTML.

Registry entries never keep a reference to a ``Tag``. Instead a node is given a
``data-xref-node`` attribute and the string handle is resolved back through the tree.
The handle survives serialising the tree and parsing it again, which is what happens
when the page comes back from the typesetter.
"""

from __future__ import annotations

import itertools
import pathlib
from typing import List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag

NODE_HANDLE_ATTR = "data-xref-node"
DOCUMENT_HANDLE = "#document"

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


class RenderedTree:
    def __init__(self, soup: BeautifulSoup, content_root_id: str = "output"):
        self.soup = soup
        self.content_root_id = content_root_id
        existing = [n.get(NODE_HANDLE_ATTR, "") for n in soup.find_all(attrs={NODE_HANDLE_ATTR: True})]
        start = max([int(h[1:]) for h in existing if h[1:].isdigit()], default=0) + 1
        self._handle_counter = itertools.count(start)

    @classmethod
    def from_html(cls, html: str, content_root_id: str = "output") -> RenderedTree:
        return cls(BeautifulSoup(html, "html.parser"), content_root_id=content_root_id)

    @classmethod
    def from_file(cls, path: Union[str, pathlib.Path], content_root_id: str = "output") -> RenderedTree:
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_html(f.read(), content_root_id=content_root_id)

    def to_html(self) -> str:
        return str(self.soup)

    def get_by_id(self, node_id: str) -> Optional[Tag]:
        if not node_id:
            return None
        return self.soup.find(attrs={"id": node_id})

    def has_id(self, node_id: str) -> bool:
        return self.get_by_id(node_id) is not None

    def content_root(self) -> Optional[Tag]:
        return self.get_by_id(self.content_root_id)

    def document_root(self) -> Tag:
        body = self.soup.find("body")
        return body if body is not None else self.soup

    def ensure_content_root(self) -> Tag:
        """Wrap the document content in ``<div id="<content_root_id>">`` unless it already exists."""
        root = self.content_root()
        if root is not None:
            return root
        container = self.document_root()
        root = self.soup.new_tag("div", attrs={"id": self.content_root_id})
        for child in list(container.contents):
            root.append(child.extract())
        container.append(root)
        return root

    def search_root(self) -> Tag:
        """The content root if the page has one, else the document root."""
        root = self.content_root()
        return root if root is not None else self.document_root()

    def reference_links(self) -> List[Tag]:
        return self.soup.select("a[data-reference-type]")

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def new_tag(self, name: str, attrs: dict) -> Tag:
        return self.soup.new_tag(name, attrs=attrs)

    def handle_for(self, node: Tag) -> str:
        """Return a stable string handle for ``node``, tagging it on first use."""
        if node is self.soup:
            return DOCUMENT_HANDLE
        handle = node.get(NODE_HANDLE_ATTR)
        if not handle:
            handle = f"n{next(self._handle_counter)}"
            node[NODE_HANDLE_ATTR] = handle
        return handle

    def node_for(self, handle: str) -> Optional[Tag]:
        if handle == DOCUMENT_HANDLE:
            return self.soup
        return self.soup.find(attrs={NODE_HANDLE_ATTR: handle})


def node_text(node: Tag) -> str:
    return node.get_text().strip()


def link_target_id(link: Tag) -> str:
    href = link.get("href") or ""
    return href[1:] if href.startswith("#") else ""


def closest(node: Tag, names) -> Optional[Tag]:
    """Return ``node`` or its nearest ancestor whose tag name is in ``names``."""
    if isinstance(names, str):
        names = [names]
    if node.name in names:
        return node
    return node.find_parent(names)


def preceding_text_node(node: Tag) -> Optional[NavigableString]:
    """The nearest previous sibling that is plain text, skipping elements and comments."""
    for sibling in node.previous_siblings:
        if type(sibling) is NavigableString:
            return sibling
    return None


def describe(node: Tag) -> str:
    """Short ``tag.class`` description of a node used in reports."""
    if node is None:
        return "unknown"
    classes = node.get("class") or []
    return ".".join([node.name or "document"] + list(classes))
