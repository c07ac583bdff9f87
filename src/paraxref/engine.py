"""Resolve every reference link of a rendered document.

For each ``a[data-reference-type]`` whose target does not exist the engine picks the label type,
asks the resolver of that type for a target node, injects an anchor there, reads the displayed
number and records the result in the build's registry. Link texts are rewritten once all links
have been processed.

Example:
    >>> tree = RenderedTree.from_html(html)
    >>> resolver = CrossRefResolver()
    >>> summary = resolver.resolve(tree, source=latex_source)
    >>> summary.fixed, summary.failed
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from bs4 import Tag

from .anchors import inject_anchor
from .common import LabelType
from .config import ResolverConfig, logger
from .context import ResolutionContext, determine_label_type
from .diagnostics import (
    LinkVerificationReport,
    RegistryStatus,
    SystemCheck,
    registry_status,
    system_check,
    verify_links,
)
from .duplicates import scan_duplicates
from .labels import LabelExtractor, SourceAnalysis
from .numbers import extract_number
from .reconcile import ReconciliationReport, reconcile_equation_links
from .resolvers import resolve_target
from .rewriter import (
    AccessibilityReport,
    RewriteReport,
    enhance_link_accessibility,
    link_label,
    replace_reference_text,
)
from .tree import RenderedTree, link_target_id
from .typesetting import Capabilities, MathJaxAnchorLookup, TypesettingAnchorLookup


@dataclass
class LinkResult:
    index: int
    target_id: str
    original_ref: Optional[str]
    success: bool = False
    reason: str = "unknown"
    label_type: Optional[str] = None
    strategy: Optional[str] = None
    number: Optional[str] = None


@dataclass
class ResolutionSummary:
    processed: int = 0
    fixed: int = 0
    failed: int = 0
    details: List[LinkResult] = field(default_factory=list)
    label_replacement: RewriteReport = field(default_factory=RewriteReport)
    accessibility: AccessibilityReport = field(default_factory=AccessibilityReport)
    duplicate_labels: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def anchors_created(self) -> int:
        return sum(1 for d in self.details if d.success and d.reason == "anchor created")

    def to_dict(self) -> dict:
        return asdict(self)


class CrossRefResolver:
    def __init__(self, config: ResolverConfig = None, capabilities: Capabilities = None):
        self.config = config if config is not None else ResolverConfig()
        self.capabilities = capabilities if capabilities is not None else Capabilities()
        self.context: Optional[ResolutionContext] = None

    def begin_build(self, tree: RenderedTree, source: str = None) -> ResolutionContext:
        """Start a new document build with an empty registry."""
        analysis = LabelExtractor(self.config).extract(source) if source else SourceAnalysis()
        self.context = ResolutionContext(
            tree=tree, config=self.config, capabilities=self.capabilities, analysis=analysis
        )
        return self.context

    def resolve(self, tree: RenderedTree, source: str = None) -> ResolutionSummary:
        return self.fix_links(self.begin_build(tree, source))

    def _require_context(self) -> ResolutionContext:
        if self.context is None:
            raise RuntimeError("No build in progress, call begin_build() or resolve() first")
        return self.context

    def fix_links(self, ctx: ResolutionContext = None) -> ResolutionSummary:
        ctx = ctx if ctx is not None else self._require_context()
        start = time.perf_counter()
        ctx.equation_counter = 0
        ctx.theorem_mappings = None

        links = ctx.tree.reference_links()
        ctx.referenced_labels = list(dict.fromkeys(link_label(link, ctx.config.id_prefix) for link in links))
        summary = ResolutionSummary(processed=len(links))
        logger.info(f"Processing {len(links)} cross-reference links")

        reporter = ctx.capabilities.status_reporter
        if reporter is not None:
            reporter.set_loading(f"Linking cross-references ({len(links)} found)...", 0)

        for index, link in enumerate(links, start=1):
            try:
                result = self._fix_link(link, index, ctx)
            except Exception as e:
                logger.error(f'Link {index} ({link.get("data-reference")}): {e}')
                result = LinkResult(index, link_target_id(link), link.get("data-reference"), reason=f"error: {e}")
            summary.details.append(result)
            if result.success:
                summary.fixed += 1
            else:
                summary.failed += 1
            if reporter is not None and index % ctx.config.progress_interval == 0:
                reporter.set_loading(f"Linking cross-references ({index}/{len(links)})", int(index / len(links) * 100))

        duplicates = scan_duplicates(ctx.registry)
        summary.duplicate_labels = sorted(label for labels in duplicates.values() for label in labels)
        if summary.duplicate_labels:
            logger.warning(f"Duplicate targets, showing label names for: {summary.duplicate_labels}")

        summary.label_replacement = replace_reference_text(ctx)
        summary.accessibility = enhance_link_accessibility(ctx.tree)
        summary.duration = time.perf_counter() - start
        if reporter is not None:
            reporter.set_loading("Cross-references linked", 100)

        logger.info(f"Results: {summary.fixed} fixed, {summary.failed} failed, {summary.processed} total")
        return summary

    def _fix_link(self, link: Tag, index: int, ctx: ResolutionContext) -> LinkResult:
        target_id = link_target_id(link)
        label = link_label(link, ctx.config.id_prefix)
        result = LinkResult(index, target_id, label)

        if not target_id:
            result.reason = "no target ID"
            return result
        if ctx.tree.has_id(target_id):
            result.success = True
            result.reason = "target already exists"
            return result

        label_type = determine_label_type(label, link, ctx)
        result.label_type = label_type.value
        if ctx.config.skip_anchor_creation and label_type != LabelType.EQUATION:
            result.reason = "anchor creation skipped"
            return result

        match = resolve_target(label, label_type, ctx)
        if match is None:
            result.reason = f"no {label_type.value} target found"
            return result

        inject_anchor(ctx.tree, match.node, target_id, label, label_type)
        number = match.number or extract_number(match.node, label_type, ctx.tree, ctx.config)
        ctx.registry.register(label, label_type, ctx.tree.handle_for(match.node), number, target_id)
        scan_duplicates(ctx.registry)

        result.success = True
        result.reason = "anchor created"
        result.strategy = match.strategy
        result.number = number
        return result

    def typesetting_complete(
        self, tree: RenderedTree = None, lookup: TypesettingAnchorLookup = None
    ) -> ReconciliationReport:
        """Run the reconciliation pass once, after the typesetter signalled completion.

        Args:
            tree: The typeset page, if it was re-parsed. Defaults to the tree of the current build.
            lookup: Anchor lookup to use instead of the configured capability
        """
        ctx = self._require_context()
        if tree is not None:
            ctx.use_tree(tree)
            if lookup is None:
                lookup = MathJaxAnchorLookup(tree, ctx.config.typesetting_anchor_prefix)
        return reconcile_equation_links(ctx, lookup)

    def verify(self) -> LinkVerificationReport:
        return verify_links(self._require_context().tree)

    def registry_status(self) -> RegistryStatus:
        return registry_status(self.context.registry if self.context is not None else None)

    def system_check(self) -> SystemCheck:
        ctx = self._require_context()
        return system_check(ctx.tree, ctx.registry)
