"""Extract label declarations, their types and local context from LaTeX source.

Only the pieces needed to resolve cross-references are read: ``\\label{...}``
declarations, the environment a label sits in, reference commands and the numbered
math environments. Anything else in the source is left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .common import LabelType, classify_by_prefix
from .config import ResolverConfig, logger

RE_LABEL = re.compile(r"\\label\{([^}]+)\}")
RE_REFERENCE = re.compile(r"\\(ref|eqref|pageref|autoref|cref|Cref)\{([^}]+)\}")
RE_SECTIONING = re.compile(r"\\(?:part|chapter|section|subsection|subsubsection|paragraph)\*?\s*[\[{]")
RE_BEGIN = re.compile(r"\\begin\{([A-Za-z]+)(\*?)\}")
RE_DISPLAY_OPEN = re.compile(r"\\\[")
RE_CAPTION = re.compile(r"\\caption(?:\[[^\]]*\])?\{")

# Used to clean text before taking a fingerprint
RE_LATEX_COMMAND = re.compile(r"\\\w+(\[[^\]]*\])?(\{[^}]*\})?")
RE_INLINE_MATH = re.compile(r"\$[^$]*\$")

MATH_ENVIRONMENTS = ("equation", "align", "gather", "multline", "eqnarray", "alignat", "flalign", "split")

ENVIRONMENT_TYPES: Dict[str, LabelType] = {
    **{env: LabelType.EQUATION for env in MATH_ENVIRONMENTS},
    "figure": LabelType.FIGURE,
    "table": LabelType.TABLE,
    "theorem": LabelType.THEOREM,
    "definition": LabelType.DEFINITION,
    "lemma": LabelType.LEMMA,
    "corollary": LabelType.COROLLARY,
    "proposition": LabelType.PROPOSITION,
    "example": LabelType.EXAMPLE,
}

# Environments whose body text is used as a fingerprint
PROSE_ENVIRONMENTS = (
    "example",
    "theorem",
    "lemma",
    "corollary",
    "definition",
    "proposition",
    "proof",
    "remark",
    "exercise",
)

# Numbered math environments. The flag tells whether every ``\\`` row gets its own number.
NUMBERED_ENVIRONMENTS: Dict[str, bool] = {
    "equation": False,
    "align": True,
    "gather": True,
    "multline": False,
    "alignat": True,
    "flalign": True,
}


@dataclass(frozen=True)
class Label:
    """A ``\\label{...}`` declaration found in the source.

    Attributes:
        name: The label as written, e.g. "thm:main"
        label_type: Type decided by the classification cascade
        position: Character offset of the declaration
        line_no: 1-based line number of the declaration
        context: Raw source window around the declaration
        environment: Name of the environment the label sits in (if any)
        fingerprint: Short text identifying the labelled content (theorem body words,
            equation body or float caption)
        caption: Caption text for figures and tables
    """

    name: str
    label_type: LabelType
    position: int
    line_no: int
    context: str = ""
    environment: Optional[str] = None
    fingerprint: Optional[str] = None
    caption: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.label_type.value,
            "position": self.position,
            "line_no": self.line_no,
            "environment": self.environment,
            "fingerprint": self.fingerprint,
            "caption": self.caption,
        }


@dataclass(frozen=True)
class Reference:
    name: str
    command: str
    position: int
    line_no: int


@dataclass
class SourceAnalysis:
    labels: Dict[str, Label] = field(default_factory=dict)
    references: List[Reference] = field(default_factory=list)
    equation_numbers: Dict[str, int] = field(default_factory=dict)

    @property
    def orphaned_references(self) -> List[Reference]:
        """References whose label is never declared in the source."""
        return [ref for ref in self.references if ref.name not in self.labels]

    def labels_of_type(self, label_type: LabelType) -> List[Label]:
        return [label for label in self.labels.values() if label.label_type == label_type]

    def ordinal(self, label_name: str) -> Optional[int]:
        """0-based position of a label among the labels of the same type, in source order."""
        label = self.labels.get(label_name)
        if label is None:
            return None
        names = [lbl.name for lbl in self.labels_of_type(label.label_type)]
        return names.index(label_name)

    def validate(self) -> dict:
        type_counts: Dict[str, int] = {}
        for label in self.labels.values():
            type_counts[label.label_type.value] = type_counts.get(label.label_type.value, 0) + 1
        return {
            "total_labels": len(self.labels),
            "total_references": len(self.references),
            "orphaned_references": sorted({ref.name for ref in self.orphaned_references}),
            "numbered_equations": len(self.equation_numbers),
            "types": type_counts,
        }


def _line_no(source: str, position: int) -> int:
    return source.count("\n", 0, position) + 1


def _read_braced(source: str, start: int) -> str:
    """Return the text of a brace group whose opening brace sits just before ``start``."""
    depth = 1
    pos = start
    while pos < len(source):
        char = source[pos]
        if char == "{" and source[pos - 1] != "\\":
            depth += 1
        elif char == "}" and source[pos - 1] != "\\":
            depth -= 1
            if depth == 0:
                return source[start:pos]
        pos += 1
    return source[start:]


def clean_text(text: str) -> str:
    """Strip labels, commands and inline math from LaTeX and normalise whitespace."""
    text = RE_LABEL.sub("", text)
    text = RE_LATEX_COMMAND.sub("", text)
    text = RE_INLINE_MATH.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def math_regions(source: str) -> List[Tuple[int, int]]:
    """Return (start, end) offsets of display math environments and ``\\[ ... \\]`` blocks."""
    names = "|".join(MATH_ENVIRONMENTS)
    re_open = re.compile(rf"\\begin\{{({names})\*?\}}|\\\[")
    re_close = re.compile(rf"\\end\{{({names})\*?\}}|\\\]")
    events = [(m.start(), 1, m.end()) for m in re_open.finditer(source)]
    events += [(m.start(), -1, m.end()) for m in re_close.finditer(source)]
    events.sort()

    regions = []
    depth = 0
    start = 0
    for pos, step, end in events:
        if step > 0:
            if depth == 0:
                start = pos
            depth += 1
        elif depth > 0:
            depth -= 1
            if depth == 0:
                regions.append((start, end))
    return regions


def in_regions(position: int, regions: List[Tuple[int, int]]) -> bool:
    return any(start <= position < end for start, end in regions)


class LabelExtractor:
    """Find all labels in a LaTeX source and classify them.

    Example:
        >>> analysis = LabelExtractor().extract(r"\\section{Intro}\\label{sec:intro}")
        >>> analysis.labels["sec:intro"].label_type
        <LabelType.SECTION: 'section'>
    """

    def __init__(self, config: ResolverConfig = None):
        self.config = config if config is not None else ResolverConfig()

    def extract(self, source: str) -> SourceAnalysis:
        analysis = SourceAnalysis()
        if not source:
            return analysis

        for match in RE_LABEL.finditer(source):
            name = match.group(1).strip()
            if name in analysis.labels:
                logger.warning(f'Label "{name}" is declared more than once, keeping the first declaration')
                continue
            analysis.labels[name] = self._build_label(source, name, match.start(), match.end())

        analysis.references = self._extract_references(source)
        analysis.equation_numbers = self._equation_numbers(source, analysis.labels)

        logger.debug(
            f"Extracted {len(analysis.labels)} labels and {len(analysis.references)} references "
            f"({len(analysis.orphaned_references)} orphaned)"
        )
        return analysis

    def _build_label(self, source: str, name: str, start: int, end: int) -> Label:
        before = source[max(0, start - self.config.context_before) : start]
        context = before + source[start : end + self.config.context_after]

        env_name, env_body_start = self._enclosing_marker(before)
        label_type = classify_by_prefix(name)
        if label_type == LabelType.GENERIC:
            label_type = self._classify_by_marker(env_name)

        fingerprint = None
        caption = None
        environment = env_name if env_name not in (None, "section", "display") else None
        if env_name is not None and env_body_start is not None:
            body_start = start - len(before) + env_body_start
            body = self._environment_body(source, env_name, body_start)
            fingerprint = self._fingerprint(env_name, body)
            if env_name in ("figure", "table"):
                caption = self._caption(body)

        return Label(
            name=name,
            label_type=label_type,
            position=start,
            line_no=_line_no(source, start),
            context=context,
            environment=environment,
            fingerprint=fingerprint,
            caption=caption,
        )

    @staticmethod
    def _enclosing_marker(before: str) -> Tuple[Optional[str], Optional[int]]:
        """Find the nearest structural marker preceding a label that is still open at the label.

        Returns:
            The marker name ("section", "display" for ``\\[`` or an environment name) and the
            offset in ``before`` where its body starts.
        """
        candidates = []
        for m in RE_SECTIONING.finditer(before):
            candidates.append((m.start(), "section", m.end()))
        for m in RE_DISPLAY_OPEN.finditer(before):
            if "\\]" not in before[m.end() :]:
                candidates.append((m.start(), "display", m.end()))
        for m in RE_BEGIN.finditer(before):
            env = m.group(1)
            if env not in ENVIRONMENT_TYPES and env not in PROSE_ENVIRONMENTS:
                continue
            if re.search(rf"\\end\{{{env}\*?\}}", before[m.end() :]):
                continue
            candidates.append((m.start(), env, m.end()))

        if not candidates:
            return None, None
        _, name, body_start = max(candidates)
        return name, body_start

    @staticmethod
    def _classify_by_marker(marker: Optional[str]) -> LabelType:
        if marker == "section":
            return LabelType.SECTION
        if marker == "display":
            return LabelType.EQUATION
        return ENVIRONMENT_TYPES.get(marker, LabelType.GENERIC)

    def _environment_body(self, source: str, env_name: str, body_start: int) -> str:
        if env_name == "display":
            end = source.find("\\]", body_start)
        elif env_name == "section":
            end = body_start + self.config.context_after
        else:
            m = re.compile(rf"\\end\{{{env_name}\*?\}}").search(source, body_start)
            end = m.start() if m else -1
        if end < 0:
            end = body_start + self.config.context_after
        return source[body_start:end]

    @staticmethod
    def _fingerprint(env_name: str, body: str) -> Optional[str]:
        if env_name in PROSE_ENVIRONMENTS:
            words = clean_text(body).split(" ")[:10]
            fingerprint = " ".join(words)
            return fingerprint if len(fingerprint) > 15 else None
        if env_name in MATH_ENVIRONMENTS or env_name == "display":
            math = RE_LABEL.sub("", body).strip()
            return math or None
        return None

    @staticmethod
    def _caption(body: str) -> Optional[str]:
        m = RE_CAPTION.search(body)
        if m is None:
            return None
        caption = clean_text(_read_braced(body, m.end()))
        return caption or None

    @staticmethod
    def _extract_references(source: str) -> List[Reference]:
        references = []
        for m in RE_REFERENCE.finditer(source):
            for name in m.group(2).split(","):
                name = name.strip()
                if name:
                    references.append(Reference(name, m.group(1), m.start(), _line_no(source, m.start())))
        return references

    @staticmethod
    def _equation_numbers(source: str, labels: Dict[str, Label]) -> Dict[str, int]:
        """Number equation labels the way LaTeX numbers unstarred display environments.

        Multi-line environments (align, gather, ...) advance the counter for every ``\\\\`` row.
        """
        names = "|".join(NUMBERED_ENVIRONMENTS)
        events = []
        for m in re.finditer(rf"\\begin\{{({names})\}}", source):
            events.append((m.start(), "begin", m.group(1)))
        for m in re.finditer(rf"\\end\{{({names})\}}", source):
            events.append((m.start(), "end", m.group(1)))
        for m in RE_LABEL.finditer(source):
            label = labels.get(m.group(1).strip())
            if label is not None and label.label_type == LabelType.EQUATION:
                events.append((m.start(), "label", label.name))
        for m in re.finditer(r"\\\\", source):
            events.append((m.start(), "row", None))
        events.sort(key=lambda e: e[0])

        numbers: Dict[str, int] = {}
        current = 0
        environment = None
        for _, kind, value in events:
            if kind == "begin":
                environment = value
                current += 1
            elif kind == "end":
                environment = None
            elif kind == "row" and environment is not None and NUMBERED_ENVIRONMENTS[environment]:
                current += 1
            elif kind == "label" and environment is not None and value not in numbers:
                numbers[value] = current
        return numbers
