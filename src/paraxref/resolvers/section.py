from __future__ import annotations

from ..common import LabelType
from ..context import ResolutionContext
from ..tree import HEADING_TAGS, node_text
from .base import Resolver, label_tokens, rule_for


def _heading_keywords(label: str, label_type: LabelType, ctx: ResolutionContext):
    headings = [h for h in ctx.tree.soup.find_all(HEADING_TAGS) if h.get("id")]
    rule = rule_for(label, ctx.config.section_rules)
    if rule is not None:
        for heading in headings:
            if rule.matches(node_text(heading)):
                return heading

    tokens = label_tokens(label)
    if not tokens:
        return None
    for heading in headings:
        text = node_text(heading).lower()
        if all(tok in text for tok in tokens):
            return heading
    return None


def _static_table(label: str, label_type: LabelType, ctx: ResolutionContext):
    node_id = ctx.config.section_ids.get(label)
    return ctx.tree.get_by_id(node_id) if node_id else None


def _direct_id(label: str, label_type: LabelType, ctx: ResolutionContext):
    for node_id in (f"{ctx.config.id_prefix}{label}", label):
        node = ctx.tree.get_by_id(node_id)
        if node is not None and not node.has_attr("data-original-label"):
            return node
    return None


def _first_content_heading(label: str, label_type: LabelType, ctx: ResolutionContext):
    for node in ctx.tree.select("h1[id], h2[id], h3[id], section[id]"):
        if node["id"].startswith(ctx.config.id_prefix):
            return node
    return None


def _first_heading(label: str, label_type: LabelType, ctx: ResolutionContext):
    root = ctx.tree.content_root()
    return root.find(HEADING_TAGS) if root is not None else None


RESOLVER = Resolver(
    "section",
    [_heading_keywords, _static_table, _direct_id, _first_content_heading, _first_heading],
)
