"""Locate display equations.

Strategies, strongest first: the typesetter's own anchor, an id inside a display node, the
curated keyword table, the equation body taken from the source, the equation number counted
in the source. The last resort hands out display nodes round-robin. That fallback is a guess
and is logged as such.
"""

from __future__ import annotations

import re
from typing import List

from bs4 import Tag

from ..common import LabelType, strip_label_prefix
from ..config import logger
from ..context import ResolutionContext
from ..numbers import RE_PAREN_NUMBER
from ..tree import node_text
from .base import Match, Resolver, rule_for


def display_nodes(ctx: ResolutionContext) -> List[Tag]:
    for selector in ctx.config.equation_selectors:
        nodes = ctx.tree.select(selector)
        if nodes:
            return nodes
    return []


def normalise_math(text: str) -> str:
    text = re.sub(r"\\[A-Za-z]+", "", text)
    return re.sub(r"[^0-9A-Za-z=+\-<>]", "", text)


def _typesetting_anchor(label: str, label_type: LabelType, ctx: ResolutionContext):
    lookup = ctx.capabilities.anchor_lookup
    if lookup is None:
        return None
    found = lookup.find_equation(label)
    if found is None:
        return None
    return Match(found.node, "typesetting_anchor", found.number)


def _inner_anchor(label: str, label_type: LabelType, ctx: ResolutionContext):
    bare = strip_label_prefix(label).lower()
    if len(bare) < 2:
        return None
    for node in display_nodes(ctx):
        for inner in node.find_all(id=True):
            if inner.has_attr("data-original-label"):
                continue
            if bare in inner["id"].lower():
                return node
    return None


def _keyword_rule(label: str, label_type: LabelType, ctx: ResolutionContext):
    rule = rule_for(label, ctx.config.equation_rules)
    if rule is None:
        return None
    for node in display_nodes(ctx):
        if rule.matches(node_text(node)):
            return node
    return None


def _source_fingerprint(label: str, label_type: LabelType, ctx: ResolutionContext):
    source_label = ctx.label(label)
    if source_label is None or not source_label.fingerprint:
        return None
    needle = normalise_math(source_label.fingerprint)
    if len(needle) < 3:
        return None
    for node in display_nodes(ctx):
        if needle in normalise_math(node_text(node)):
            return node
    return None


def _source_number(label: str, label_type: LabelType, ctx: ResolutionContext):
    number = ctx.analysis.equation_numbers.get(label)
    if number is None:
        return None
    for node in display_nodes(ctx):
        m = RE_PAREN_NUMBER.search(node_text(node))
        if m and m.group(1) == str(number):
            return Match(node, "source_number", str(number))
    return None


def _round_robin(label: str, label_type: LabelType, ctx: ResolutionContext):
    nodes = display_nodes(ctx)
    if not nodes:
        return None
    index = ctx.equation_counter % len(nodes)
    ctx.equation_counter += 1
    logger.warning(f'Guessing display equation #{index + 1} for "{label}" (round-robin, low confidence)')
    return nodes[index]


RESOLVER = Resolver(
    "equation",
    [_typesetting_anchor, _inner_anchor, _keyword_rule, _source_fingerprint, _source_number, _round_robin],
)
