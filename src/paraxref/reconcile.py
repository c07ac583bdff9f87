"""Second chance for equation links once the typesetter has produced its own anchors.

Equations are typeset after the first resolution pass. Only then do the ``mjx-eqn:<label>``
anchors exist, so the caller triggers this pass once per "typesetting complete" signal. It
touches nothing but links whose target is still missing and does not retry.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from typing import List

from bs4 import Tag

from .anchors import inject_anchor
from .common import LabelType
from .config import logger
from .context import ResolutionContext
from .duplicates import scan_duplicates
from .numbers import extract_number
from .rewriter import RE_PLACEHOLDER, link_label, rewrite_link
from .tree import link_target_id, node_text
from .typesetting import MathJaxAnchorLookup, TypesettingAnchorLookup

FIXED_BY = "reconciliation"


@dataclass
class ReconciliationReport:
    checked: int = 0
    fixed: int = 0
    still_broken: int = 0
    fixed_labels: List[str] = field(default_factory=list)
    still_broken_labels: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _broken_links(ctx: ResolutionContext) -> "OrderedDict[str, List[Tag]]":
    groups: "OrderedDict[str, List[Tag]]" = OrderedDict()
    for link in ctx.tree.reference_links():
        target_id = link_target_id(link)
        if target_id and not ctx.tree.has_id(target_id):
            groups.setdefault(target_id, []).append(link)
    return groups


def _needs_text(link: Tag, label: str) -> bool:
    text = node_text(link)
    return bool(RE_PLACEHOLDER.match(text)) or label in text


def reconcile_equation_links(ctx: ResolutionContext, lookup: TypesettingAnchorLookup = None) -> ReconciliationReport:
    if lookup is None:
        lookup = ctx.capabilities.anchor_lookup
    if lookup is None:
        lookup = MathJaxAnchorLookup(ctx.tree, ctx.config.typesetting_anchor_prefix)

    report = ReconciliationReport()
    for target_id, links in _broken_links(ctx).items():
        label = link_label(links[0], ctx.config.id_prefix)
        report.checked += 1
        try:
            found = lookup.find_equation(label)
            if found is None:
                report.still_broken += 1
                report.still_broken_labels.append(label)
                continue

            number = found.number or extract_number(found.node, LabelType.EQUATION, ctx.tree, ctx.config)
            accessible_name = f"Equation {number}" if number else None
            inject_anchor(
                ctx.tree,
                found.node,
                target_id,
                label,
                LabelType.EQUATION,
                fixed_by=FIXED_BY,
                aria_label=accessible_name,
            )
            ctx.registry.register(label, LabelType.EQUATION, ctx.tree.handle_for(found.node), number, target_id)
            scan_duplicates(ctx.registry)

            for link in links:
                if _needs_text(link, label):
                    rewrite_link(link, ctx)
                if accessible_name:
                    link["aria-label"] = accessible_name
        except Exception as e:
            logger.error(f'Reconciliation of "{label}" failed: {e}')
            report.still_broken += 1
            report.still_broken_labels.append(label)
            continue

        report.fixed += 1
        report.fixed_labels.append(label)

    logger.info(
        f"Reconciliation: {report.checked} checked, {report.fixed} fixed, {report.still_broken} still broken"
    )
    return report
