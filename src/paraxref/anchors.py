from __future__ import annotations

from typing import Optional

from bs4 import Tag

from .common import LabelType
from .config import logger
from .exceptions import DuplicateAnchorError
from .tree import RenderedTree

ANCHOR_STYLE = "visibility: hidden; position: absolute; height: 0; width: 0"


def inject_anchor(
    tree: RenderedTree,
    node: Tag,
    anchor_id: str,
    label: str,
    label_type: LabelType,
    fixed_by: Optional[str] = None,
    aria_label: Optional[str] = None,
) -> Tag:
    """Insert an invisible, zero-size anchor element at ``node``.

    The anchor becomes the first child of the target so scrolling lands at its top, or the only
    child when the target is empty. Existing content is never replaced.

    Args:
        tree: The rendered document
        node: Target node returned by a resolver
        anchor_id: Id links point at (the link href without '#')
        label: The label the anchor stands for
        label_type: Resolved label type
        fixed_by: Name of the pass that created the anchor, stored as ``data-fixed-by``
        aria_label: Accessible name, defaults to "Target for reference <label>"

    Returns:
        The inserted anchor element

    Raises:
        DuplicateAnchorError: An element with ``anchor_id`` already exists
    """
    if tree.has_id(anchor_id):
        raise DuplicateAnchorError(anchor_id)

    attrs = {
        "id": anchor_id,
        "data-original-label": label,
        "data-label-type": label_type.value,
        "aria-label": aria_label or f"Target for reference {label}",
        "role": "mark",
        "style": ANCHOR_STYLE,
    }
    if fixed_by is not None:
        attrs["data-fixed-by"] = fixed_by
    anchor = tree.new_tag("span", attrs)

    if node.contents:
        node.insert(0, anchor)
    else:
        node.append(anchor)
    logger.debug(f'Anchor "{anchor_id}" inserted in <{node.name}>')
    return anchor
