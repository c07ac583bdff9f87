"""Optional collaborators of the resolver.

Both are nullable. Every call site checks for None and falls back to heuristics.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Protocol

from bs4 import Tag

from .config import logger
from .tree import RenderedTree, node_text

RE_DISPLAYED_NUMBER = re.compile(r"^\((\d+(?:\.\d+)*)\)")


@dataclass
class EquationAnchor:
    """An equation located through the typesetter's own anchors.

    Attributes:
        node: The display container of the equation
        number: Number shown by the typesetter, if it could be read
    """

    node: Tag
    number: Optional[str] = None


class TypesettingAnchorLookup(Protocol):
    def find_equation(self, label: str) -> Optional[EquationAnchor]: ...


class StatusReporter(Protocol):
    def set_loading(self, message: str, progress: int) -> None: ...


class MathJaxAnchorLookup:
    """Find equations through the ``mjx-eqn:<label>`` ids MathJax 3 puts on tagged equations."""

    def __init__(self, tree: RenderedTree, prefix: str = "mjx-eqn:", container: str = "mjx-container"):
        self.tree = tree
        self.prefix = prefix
        self.container = container

    def _candidate_ids(self, label: str):
        yield f"{self.prefix}{label}"
        if label.startswith("eq:"):
            yield f"{self.prefix}{label[3:]}"
        else:
            yield f"{self.prefix}eq:{label}"

    def find_equation(self, label: str) -> Optional[EquationAnchor]:
        for anchor_id in self._candidate_ids(label):
            anchor = self.tree.get_by_id(anchor_id)
            if anchor is None:
                continue
            container = anchor if anchor.name == self.container else anchor.find_parent(self.container)
            if container is None:
                logger.debug(f'Typesetting anchor "{anchor_id}" is not inside a {self.container}')
                continue
            m = RE_DISPLAYED_NUMBER.match(node_text(container)) or RE_DISPLAYED_NUMBER.match(node_text(anchor))
            return EquationAnchor(container, m.group(1) if m else None)
        return None


class LoggingStatusReporter:
    def set_loading(self, message: str, progress: int) -> None:
        logger.info(f"[{progress:3d}%] {message}")


@dataclass
class Capabilities:
    status_reporter: Optional[StatusReporter] = None
    anchor_lookup: Optional[TypesettingAnchorLookup] = None
