from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Union

from bs4 import Tag

from ..common import LabelType, strip_label_prefix
from ..config import KeywordRule, logger
from ..context import ResolutionContext


@dataclass
class Match:
    """A rendered node found for a label.

    Attributes:
        node: The target node
        strategy: Name of the strategy that found it
        number: Number reported by the strategy itself (only authoritative sources set it)
    """

    node: Tag
    strategy: str
    number: Optional[str] = None


StrategyResult = Union[Tag, Match, None]
Strategy = Callable[[str, LabelType, ResolutionContext], StrategyResult]

STOP_WORDS = {
    "also",
    "assume",
    "every",
    "from",
    "given",
    "have",
    "holds",
    "into",
    "let",
    "such",
    "that",
    "then",
    "there",
    "this",
    "where",
    "which",
    "with",
}


class Resolver:
    """Try an ordered list of strategies until one finds a node.

    A failing strategy is logged and skipped. ``resolve`` itself never raises.
    """

    def __init__(self, name: str, strategies: Sequence[Strategy]):
        self.name = name
        self.strategies = list(strategies)

    def __repr__(self):
        names = ", ".join(s.__name__ for s in self.strategies)
        return f"Resolver({self.name}: {names})"

    def resolve(self, label: str, label_type: LabelType, ctx: ResolutionContext) -> Optional[Match]:
        for strategy in self.strategies:
            try:
                result = strategy(label, label_type, ctx)
            except Exception as e:
                logger.warning(f'{self.name} strategy {strategy.__name__} failed for "{label}": {e}')
                continue
            if result is None:
                continue
            match = result if isinstance(result, Match) else Match(result, strategy.__name__.lstrip("_"))
            logger.debug(f'"{label}" -> <{match.node.name} id="{match.node.get("id", "")}"> via {match.strategy}')
            return match

        logger.warning(f'No {self.name} target found for "{label}"')
        return None


def rule_for(label: str, rules: List[KeywordRule]) -> Optional[KeywordRule]:
    for rule in rules:
        if label in rule.labels:
            return rule
    return None


def label_tokens(label: str) -> List[str]:
    """Words of a label name without its type prefix, e.g. 'sec:numerical-examples' -> ['numerical', 'examples']."""
    return [tok for tok in re.split(r"[-_:.\s]+", strip_label_prefix(label).lower()) if len(tok) >= 3]


def significant_words(text: str) -> Set[str]:
    words = set(re.findall(r"[a-z]{4,}", text.lower()))
    return words - STOP_WORDS
