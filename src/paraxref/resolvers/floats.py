from __future__ import annotations

import re
from typing import List, Optional

from bs4 import Tag

from ..common import LabelType
from ..config import KeywordRule
from ..context import ResolutionContext
from ..tree import node_text
from .base import Resolver, rule_for

# label type -> (element name, caption element name)
FLOAT_ELEMENTS = {
    LabelType.FIGURE: ("figure", "figcaption"),
    LabelType.TABLE: ("table", "caption"),
}


def _nodes(label_type: LabelType, ctx: ResolutionContext) -> List[Tag]:
    name, _ = FLOAT_ELEMENTS[label_type]
    return ctx.tree.soup.find_all(name)


def _rule(label: str, label_type: LabelType, ctx: ResolutionContext) -> Optional[KeywordRule]:
    rules = ctx.config.figure_rules if label_type == LabelType.FIGURE else ctx.config.table_rules
    return rule_for(label, rules)


def _words(text: str) -> str:
    return " ".join(re.findall(r"\w+", text.lower()))


def _keyword_rule(label: str, label_type: LabelType, ctx: ResolutionContext):
    rule = _rule(label, label_type, ctx)
    if rule is None:
        return None
    for node in _nodes(label_type, ctx):
        if rule.matches(node_text(node)):
            return node
    return None


def _rule_position(label: str, label_type: LabelType, ctx: ResolutionContext):
    rule = _rule(label, label_type, ctx)
    nodes = _nodes(label_type, ctx)
    if rule is None or rule.fallback_index is None or not nodes:
        return None
    return nodes[rule.fallback_index] if rule.fallback_index < len(nodes) else nodes[0]


def _source_caption(label: str, label_type: LabelType, ctx: ResolutionContext):
    source_label = ctx.label(label)
    if source_label is None or not source_label.caption:
        return None
    caption = _words(source_label.caption)
    if not caption:
        return None
    _, caption_name = FLOAT_ELEMENTS[label_type]
    for node in _nodes(label_type, ctx):
        rendered = node.find(caption_name)
        if rendered is not None and caption in _words(node_text(rendered)):
            return node
    return None


def _source_position(label: str, label_type: LabelType, ctx: ResolutionContext):
    if ctx.label(label) is None:
        return None
    ordinal = ctx.analysis.ordinal(label)
    nodes = _nodes(label_type, ctx)
    if ordinal is not None and ordinal < len(nodes):
        return nodes[ordinal]
    return None


def _first_node(label: str, label_type: LabelType, ctx: ResolutionContext):
    nodes = _nodes(label_type, ctx)
    return nodes[0] if nodes else None


RESOLVER = Resolver(
    "float",
    [_keyword_rule, _rule_position, _source_caption, _source_position, _first_node],
)
