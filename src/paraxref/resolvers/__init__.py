from typing import Optional

from ..common import THEOREM_FAMILY, LabelType
from ..context import ResolutionContext
from . import equation, floats, generic, section, theorem
from .base import Match, Resolver

RESOLVERS = {
    LabelType.SECTION: section.RESOLVER,
    LabelType.EQUATION: equation.RESOLVER,
    LabelType.FIGURE: floats.RESOLVER,
    LabelType.TABLE: floats.RESOLVER,
    **{family: theorem.RESOLVER for family in THEOREM_FAMILY},
}


def resolver_for(label_type: LabelType) -> Resolver:
    return RESOLVERS.get(label_type, generic.RESOLVER)


def resolve_target(label: str, label_type: LabelType, ctx: ResolutionContext) -> Optional[Match]:
    return resolver_for(label_type).resolve(label, label_type, ctx)


__all__ = ["Match", "Resolver", "RESOLVERS", "resolver_for", "resolve_target"]
