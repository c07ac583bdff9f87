"""Read the human-visible number (``3``, ``2.1``) of a rendered target back out of the tree.

The extractor is an ordered list of pattern strategies. Each strategy gets the node, the label
type and the tree and returns a number string or None. The first hit wins.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from bs4 import Tag

from .common import LabelType
from .config import ResolverConfig, logger
from .tree import HEADING_TAGS, RenderedTree, closest, node_text

NUMBER = r"(\d+(?:\.\d+)*)"

NUMBERED_WORDS = (
    "Example|Theorem|Lemma|Corollary|Definition|Proposition|Exercise|Figure|Table|Remark|Note|"
    "Problem|Solution|Algorithm|Axiom|Conjecture"
)

RE_WORD_NUMBER = re.compile(rf"(?:{NUMBERED_WORDS})\s+{NUMBER}", re.IGNORECASE)
# Same as above, but allows markup between the word and the number, e.g. <strong>Theorem</strong> <span>3</span>
RE_MARKUP_WORD_NUMBER = re.compile(rf"(?:{NUMBERED_WORDS})\s*(?:</?[a-z][^>]*>\s*)*{NUMBER}", re.IGNORECASE)
RE_HEADING_NUMBER = re.compile(rf"^{NUMBER}\s+")
RE_HEADING_PREFIX = re.compile(rf"^{NUMBER}\s")
RE_LIST_NUMBER = re.compile(rf"^{NUMBER}\.\s+\w")
RE_PAREN_NUMBER = re.compile(rf"\({NUMBER}\)")
RE_TABLE_CAPTION = re.compile(rf"Table\s+{NUMBER}[\s:.]")
RE_FIGURE_CAPTION = re.compile(rf"Figure\s+{NUMBER}")

NumberStrategy = Callable[[Tag, LabelType, RenderedTree, ResolverConfig], Optional[str]]


def _search(pattern: re.Pattern, text: str) -> Optional[str]:
    m = pattern.search(text)
    return m.group(1) if m else None


def _word_number(node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig) -> Optional[str]:
    return _search(RE_WORD_NUMBER, node_text(node))


def _markup_word_number(
    node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig
) -> Optional[str]:
    return _search(RE_MARKUP_WORD_NUMBER, node.decode_contents())


def _heading_number(node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig) -> Optional[str]:
    return _search(RE_HEADING_NUMBER, node_text(node))


def _list_number(node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig) -> Optional[str]:
    return _search(RE_LIST_NUMBER, node_text(node))


def _equation_number(node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig) -> Optional[str]:
    if label_type != LabelType.EQUATION:
        return None
    number = _search(RE_PAREN_NUMBER, node_text(node))
    if number is not None:
        return number
    tag = node.select_one(config.typeset_tag_selector)
    if tag is not None:
        return _search(re.compile(NUMBER), node_text(tag))
    return None


def _caption_number(node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig) -> Optional[str]:
    if label_type == LabelType.TABLE:
        table = closest(node, "table") or node.find("table")
        if table is None:
            return None
        caption = table.find("caption")
        if caption is not None:
            number = _search(RE_TABLE_CAPTION, node_text(caption) + " ")
            if number is not None:
                return number
        if table.parent is not None:
            number = _search(RE_TABLE_CAPTION, node_text(table.parent) + " ")
            if number is not None:
                return number
        return _position_number(table, "table", tree)

    if label_type == LabelType.FIGURE:
        figure = closest(node, "figure") or node.find("figure")
        if figure is None:
            return None
        caption = figure.find("figcaption")
        if caption is not None:
            number = _search(RE_FIGURE_CAPTION, node_text(caption))
            if number is not None:
                return number
        return _position_number(figure, "figure", tree)
    return None


def _position_number(node: Tag, name: str, tree: RenderedTree) -> Optional[str]:
    for index, candidate in enumerate(tree.soup.find_all(name)):
        if candidate is node:
            return str(index + 1)
    return None


NUMBER_STRATEGIES: List[NumberStrategy] = [
    _word_number,
    _markup_word_number,
    _heading_number,
    _list_number,
    _equation_number,
    _caption_number,
]


def _is_anchor(node: Tag) -> bool:
    return node.name == "span" and (node.has_attr("data-original-label") or len(node_text(node)) < 5)


def extract_number(
    node: Tag, label_type: LabelType, tree: RenderedTree, config: ResolverConfig = None
) -> Optional[str]:
    """Return the number displayed for ``node`` or None if no pattern applies.

    An (empty) anchor element is redirected to its parent first. If that parent is a heading,
    only a leading section number is accepted.
    """
    if node is None:
        return None
    config = config if config is not None else ResolverConfig()

    if _is_anchor(node) and node.parent is not None:
        node = node.parent
        if node.name in HEADING_TAGS:
            return _search(RE_HEADING_PREFIX, node_text(node))

    for strategy in NUMBER_STRATEGIES:
        number = strategy(node, label_type, tree, config)
        if number is not None:
            logger.debug(f"Number {number} read from <{node.name}> by {strategy.__name__}")
            return number
    return None
