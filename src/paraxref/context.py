from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import Tag

from .common import LabelType, classify_by_prefix
from .config import ResolverConfig, logger
from .labels import Label, SourceAnalysis
from .registry import ReferenceRegistry
from .tree import RenderedTree
from .typesetting import Capabilities

REFERENCE_TYPE_HINTS = {"eqref": LabelType.EQUATION}


@dataclass
class ResolutionContext:
    """Everything one document build needs while resolving links.

    A context is created per build and never shared between builds. ``reset`` empties it
    for a rebuild of the same tree.

    Attributes:
        tree: The rendered document being fixed
        config: Resolver settings
        capabilities: Optional collaborators (status reporter, typesetting anchor lookup)
        analysis: Labels and references found in the source, empty when no source was given
        registry: Label -> entry map filled while resolving
        referenced_labels: Labels used by reference links, in document order
        equation_counter: Position of the round-robin equation fallback
        theorem_mappings: Cached label -> node map of theorem-like blocks
    """

    tree: RenderedTree
    config: ResolverConfig = field(default_factory=ResolverConfig)
    capabilities: Capabilities = field(default_factory=Capabilities)
    analysis: SourceAnalysis = field(default_factory=SourceAnalysis)
    registry: ReferenceRegistry = field(default_factory=ReferenceRegistry)
    referenced_labels: List[str] = field(default_factory=list)
    equation_counter: int = 0
    theorem_mappings: Optional[Dict[str, Tag]] = None

    def reset(self) -> None:
        self.registry.clear()
        self.referenced_labels = []
        self.equation_counter = 0
        self.theorem_mappings = None

    def use_tree(self, tree: RenderedTree) -> None:
        """Continue the build on a re-parsed tree, e.g. the page returned by the typesetter."""
        self.tree = tree
        self.theorem_mappings = None

    def label(self, name: str) -> Optional[Label]:
        return self.analysis.labels.get(name)

    def label_type(self, name: str) -> LabelType:
        label = self.label(name)
        return label.label_type if label is not None else classify_by_prefix(name)

    def known_labels(self, label_type: LabelType) -> List[str]:
        """Labels of one type, source declarations first, then labels only seen in links."""
        names = [label.name for label in self.analysis.labels_of_type(label_type)]
        for name in self.referenced_labels:
            if name not in names and self.label_type(name) == label_type:
                names.append(name)
        return names

    def ordinal(self, name: str, label_type: LabelType) -> Optional[int]:
        names = self.known_labels(label_type)
        return names.index(name) if name in names else None


def determine_label_type(label: str, link: Tag, ctx: ResolutionContext) -> LabelType:
    """Label type of a link, from the first source that knows it.

    Name prefix, then the source declaration, then the link's own reference type. A label the
    typesetter has anchored is always an equation. A failing anchor lookup is logged and the
    heuristic type kept.
    """
    label_type = classify_by_prefix(label)
    if label_type == LabelType.GENERIC:
        source_label = ctx.label(label)
        if source_label is not None:
            label_type = source_label.label_type
        else:
            label_type = REFERENCE_TYPE_HINTS.get(link.get("data-reference-type"), LabelType.GENERIC)

    lookup = ctx.capabilities.anchor_lookup
    if label_type == LabelType.EQUATION or lookup is None:
        return label_type
    try:
        anchored = lookup.find_equation(label) is not None
    except Exception as e:
        logger.warning(f'Typesetting anchor lookup failed for "{label}": {e}')
        return label_type
    if anchored:
        logger.debug(f'Typesetting anchor found for "{label}", treating it as an equation')
        label_type = LabelType.EQUATION
    return label_type
