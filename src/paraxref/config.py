from __future__ import annotations

import logging
import pathlib
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidConfigError

logger = logging.getLogger("paraxref")


class KeywordRule(BaseModel):
    """Map one or more labels to rendered content containing given keywords.

    Attributes:
        labels: Labels (aliases) the rule applies to, e.g. ``["sec:intro", "sec:introduction"]``
        keywords: Case-insensitive substrings searched for in the node text
        match_all: If True every keyword must be present, otherwise any of them
        fallback_index: Position (0-based, document order) used when no node matches the keywords
    """

    model_config = ConfigDict(frozen=True)

    labels: List[str]
    keywords: List[str]
    match_all: bool = False
    fallback_index: Optional[int] = None

    def matches(self, text: str) -> bool:
        text = text.lower()
        hits = [kw.lower() in text for kw in self.keywords]
        return all(hits) if self.match_all else any(hits)


def _default_section_rules() -> List[KeywordRule]:
    return [
        KeywordRule(labels=["sec:intro", "sec:introduction"], keywords=["introduction"]),
        KeywordRule(labels=["sec:background"], keywords=["background"]),
        KeywordRule(labels=["sec:main"], keywords=["main", "result"], match_all=True),
        KeywordRule(labels=["sec:foundations"], keywords=["foundation"]),
        KeywordRule(labels=["sec:numerical"], keywords=["numerical"]),
        KeywordRule(labels=["sec:advanced"], keywords=["advanced"]),
        KeywordRule(labels=["sec:generalised", "sec:generalized"], keywords=["generalised", "generalized"]),
        KeywordRule(labels=["sec:applications"], keywords=["application"]),
        KeywordRule(labels=["sec:conclusion"], keywords=["conclusion"]),
    ]


def _default_section_ids() -> Dict[str, str]:
    return {
        "sec:intro": "content-introduction",
        "sec:background": "content-background",
        "sec:main": "content-main-results",
        "sec:foundations": "content-mathematical-foundations",
        "sec:numerical": "content-numerical-examples",
        "sec:advanced": "content-advanced-topics",
        "sec:generalised": "content-generalised-theory",
        "sec:applications": "content-applications",
        "sec:conclusion": "content-conclusion",
    }


def _default_equation_rules() -> List[KeywordRule]:
    return [
        KeywordRule(labels=["eq:einstein"], keywords=["E = mc", "mass-energy"]),
        KeywordRule(labels=["eq:system", "eq:initial"], keywords=["partial", "nabla", "heat", "diffusion"]),
        KeywordRule(labels=["eq:bound"], keywords=["inequality", "leq", "L \\|"]),
        KeywordRule(labels=["eq:optimisation", "eq:optimization"], keywords=["min_", "subject to"]),
    ]


def _default_figure_rules() -> List[KeywordRule]:
    return [
        KeywordRule(labels=["fig:convergence"], keywords=["convergence", "rate"], fallback_index=0),
        KeywordRule(labels=["fig:error"], keywords=["error", "analysis"], fallback_index=1),
    ]


def _default_table_rules() -> List[KeywordRule]:
    return [
        KeywordRule(labels=["tab:results"], keywords=["algorithm", "error", "comparison"], fallback_index=0),
        KeywordRule(labels=["tab:spaces"], keywords=["space", "euclidean", "applicability"], fallback_index=1),
    ]


def _default_theorem_rules() -> List[KeywordRule]:
    # Order matters: the first matching rule claims the node.
    return [
        KeywordRule(labels=["def:metric"], keywords=["metric space"]),
        KeywordRule(labels=["def:continuous"], keywords=["continuous"]),
        KeywordRule(labels=["thm:fundamental"], keywords=["uniformly continuous"]),
        KeywordRule(labels=["thm:extended"], keywords=["banach space", "arbitrary"]),
        KeywordRule(labels=["thm:main"], keywords=["inequality"]),
    ]


class ResolverConfig(BaseModel):
    """Settings of one cross-reference resolution build.

    The defaults follow the markup produced by ``pandoc --id-prefix=content-`` wrapped in a
    ``<div id="output">`` and typeset by MathJax 3 (CHTML output).
    """

    model_config = ConfigDict(frozen=False, extra="forbid")

    id_prefix: str = "content-"
    content_root_id: str = "output"
    typesetting_anchor_prefix: str = "mjx-eqn:"
    equation_selectors: List[str] = Field(
        default_factory=lambda: ['mjx-container[display="true"]', "span.math.display"]
    )
    typeset_tag_selector: str = ".mjx-tag"

    context_before: int = 500
    context_after: int = 200
    min_paragraph_length: int = 30
    progress_interval: int = 5
    skip_anchor_creation: bool = False

    section_rules: List[KeywordRule] = Field(default_factory=_default_section_rules)
    section_ids: Dict[str, str] = Field(default_factory=_default_section_ids)
    equation_rules: List[KeywordRule] = Field(default_factory=_default_equation_rules)
    figure_rules: List[KeywordRule] = Field(default_factory=_default_figure_rules)
    table_rules: List[KeywordRule] = Field(default_factory=_default_table_rules)
    theorem_rules: List[KeywordRule] = Field(default_factory=_default_theorem_rules)

    @classmethod
    def from_file(cls, path) -> "ResolverConfig":
        """Load a config from a JSON file. Keys not present keep their defaults."""
        path = pathlib.Path(path)
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise InvalidConfigError(f"Unable to load resolver config from '{path}': {e}") from e
