from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LabelType(str, Enum):
    SECTION = "section"
    EQUATION = "equation"
    FIGURE = "figure"
    TABLE = "table"
    THEOREM = "theorem"
    DEFINITION = "definition"
    LEMMA = "lemma"
    COROLLARY = "corollary"
    PROPOSITION = "proposition"
    EXAMPLE = "example"
    GENERIC = "generic"

    @property
    def type_word(self) -> Optional[str]:
        """The capitalised word shown in front of a number, e.g. 'Theorem'."""
        if self is LabelType.GENERIC:
            return None
        return self.value.capitalize()


THEOREM_FAMILY = (
    LabelType.THEOREM,
    LabelType.DEFINITION,
    LabelType.LEMMA,
    LabelType.COROLLARY,
    LabelType.PROPOSITION,
)

# Checked in order, first match wins
LABEL_PREFIXES: List[Tuple[str, LabelType]] = [
    ("sec:", LabelType.SECTION),
    ("eq:", LabelType.EQUATION),
    ("fig:", LabelType.FIGURE),
    ("tab:", LabelType.TABLE),
    ("tbl:", LabelType.TABLE),
    ("thm:", LabelType.THEOREM),
    ("def:", LabelType.DEFINITION),
    ("lem:", LabelType.LEMMA),
    ("cor:", LabelType.COROLLARY),
    ("prop:", LabelType.PROPOSITION),
    ("ex:", LabelType.EXAMPLE),
]

RE_LABEL_PREFIX = re.compile(r"^(eq|thm|def|lem|cor|prop|fig|tab|tbl|ex|sec):")

# Words recognised in prose next to a reference link. Plural forms come first so that
# "Theorems" is not matched as "Theorem" + "s".
PROSE_TYPE_WORDS = [
    "Theorems",
    "Theorem",
    "Lemmas",
    "Lemma",
    "Corollaries",
    "Corollary",
    "Propositions",
    "Proposition",
    "Definitions",
    "Definition",
    "Examples",
    "Example",
    "Exercises",
    "Exercise",
    "Remarks",
    "Remark",
    "Figures",
    "Figure",
    "Tables",
    "Table",
    "Sections",
    "Section",
    "Chapters",
    "Chapter",
    "Equations",
    "Equation",
    "Properties",
    "Property",
]

# Environment / class names of theorem-like blocks and the short id stem used when a
# rendered block has no id of its own.
THEOREM_CLASSES: Dict[str, str] = {
    "theorem": "thm",
    "definition": "def",
    "lemma": "lem",
    "corollary": "cor",
    "proposition": "prop",
    "example": "example",
    "remark": "remark",
    "proof": "proof",
}


def classify_by_prefix(label: str) -> LabelType:
    for prefix, label_type in LABEL_PREFIXES:
        if label.startswith(prefix):
            return label_type
    return LabelType.GENERIC


def strip_label_prefix(label: str) -> str:
    """Return the bare label name, e.g. 'thm:main' -> 'main'."""
    return RE_LABEL_PREFIX.sub("", label)
