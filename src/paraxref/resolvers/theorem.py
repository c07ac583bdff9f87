"""Locate theorem-like blocks (theorem, definition, lemma, corollary, proposition).

Pandoc renders these environments as ``<div class="theorem">`` and friends. All blocks are
grouped by family and every label of a family is mapped to one block, first through the
curated keyword rules, then through words shared with the source body, then by position.
The mapping is computed once per build.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

from bs4 import Tag

from ..common import THEOREM_CLASSES, LabelType
from ..config import logger
from ..context import ResolutionContext
from ..tree import node_text
from .base import Resolver, significant_words

FAMILY_CLASSES: Dict[str, LabelType] = {
    "definition": LabelType.DEFINITION,
    "theorem": LabelType.THEOREM,
    "lemma": LabelType.LEMMA,
    "corollary": LabelType.COROLLARY,
    "proposition": LabelType.PROPOSITION,
}

STRUCTURAL_SELECTOR = ", ".join(f".{name}" for name in THEOREM_CLASSES)


def family_of(node: Tag) -> Optional[LabelType]:
    classes = node.get("class") or []
    for name, family in FAMILY_CLASSES.items():
        if name in classes:
            return family
    return None


def assign_missing_ids(nodes: List[Tag], ctx: ResolutionContext) -> None:
    """Give every structural block an id, e.g. ``content-thm-3`` for the third block."""
    for index, node in enumerate(nodes):
        if node.get("id"):
            continue
        classes = node.get("class") or []
        stem = next((THEOREM_CLASSES[c] for c in classes if c in THEOREM_CLASSES), "theorem")
        node_id = f"{ctx.config.id_prefix}{stem}-{index + 1}"
        if not ctx.tree.has_id(node_id):
            node["id"] = node_id


def _map_by_rules(members: List[Tag], labels: List[str], mappings: Dict[str, Tag], ctx: ResolutionContext):
    for node in members:
        text = node_text(node)
        for rule in ctx.config.theorem_rules:
            candidates = [lbl for lbl in rule.labels if lbl in labels and lbl not in mappings]
            if candidates and rule.matches(text):
                for lbl in candidates:
                    mappings[lbl] = node
                break


def _map_by_fingerprint(members: List[Tag], labels: List[str], mappings: Dict[str, Tag], ctx: ResolutionContext):
    claimed = {id(node) for node in mappings.values()}
    for lbl in labels:
        source_label = ctx.label(lbl)
        if lbl in mappings or source_label is None or not source_label.fingerprint:
            continue
        keywords = significant_words(source_label.fingerprint)
        best, best_score = None, 0
        for node in members:
            if id(node) in claimed:
                continue
            score = len(keywords & significant_words(node_text(node)))
            if score > best_score:
                best, best_score = node, score
        if best is not None:
            mappings[lbl] = best
            claimed.add(id(best))


def _map_by_position(members: List[Tag], labels: List[str], mappings: Dict[str, Tag]):
    for ordinal, lbl in enumerate(labels):
        if lbl not in mappings and ordinal < len(members):
            mappings[lbl] = members[ordinal]


def theorem_mappings(ctx: ResolutionContext) -> Dict[str, Tag]:
    if ctx.theorem_mappings is not None:
        return ctx.theorem_mappings

    nodes = ctx.tree.select(STRUCTURAL_SELECTOR)
    assign_missing_ids(nodes, ctx)

    groups: Dict[LabelType, List[Tag]] = defaultdict(list)
    for node in nodes:
        family = family_of(node)
        if family is not None:
            groups[family].append(node)

    mappings: Dict[str, Tag] = dict()
    for family, members in groups.items():
        labels = ctx.known_labels(family)
        _map_by_rules(members, labels, mappings, ctx)
        _map_by_fingerprint(members, labels, mappings, ctx)
        _map_by_position(members, labels, mappings)
        logger.debug(f"{family.value}: {len(members)} blocks, {len(labels)} labels")

    ctx.theorem_mappings = mappings
    return mappings


def _direct_id(label: str, label_type: LabelType, ctx: ResolutionContext):
    for node_id in (f"{ctx.config.id_prefix}{label}", label):
        node = ctx.tree.get_by_id(node_id)
        if node is not None and not node.has_attr("data-original-label"):
            return node
    return None


def _family_mapping(label: str, label_type: LabelType, ctx: ResolutionContext):
    return theorem_mappings(ctx).get(label)


def _family_word(label: str, label_type: LabelType, ctx: ResolutionContext):
    word = label_type.value
    for node in ctx.tree.search_root().find_all(["p", "div", "section"]):
        if node.find("a", attrs={"data-reference": label}) is not None:
            continue
        if word in node_text(node).lower():
            return node
    return None


RESOLVER = Resolver("theorem", [_direct_id, _family_mapping, _family_word])
