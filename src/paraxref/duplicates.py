from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Tuple

from .common import strip_label_prefix
from .config import logger
from .registry import ReferenceRegistry


def scan_duplicates(registry: ReferenceRegistry) -> Dict[Tuple[str, str], List[str]]:
    """Flag registry entries whose (owner, number) pair is shared by another label.

    Two different labels resolving to the same rendered node with the same number means at
    least one of them landed on the wrong target, and showing the number would make both
    links read the same. Every label in such a group is marked unreliable so the link text
    falls back to the bare label name. Entries without a number are never grouped.

    The flags are recomputed from scratch on every call.

    Returns:
        The colliding groups keyed by (owner, number)
    """
    groups: Dict[Tuple[str, str], List[str]] = defaultdict(list)
    for entry in registry:
        if entry.number and entry.owner:
            groups[(entry.owner, entry.number)].append(entry.label)

    duplicates = {key: labels for key, labels in groups.items() if len(labels) > 1}
    flagged = {label for labels in duplicates.values() for label in labels}
    for entry in registry:
        entry.unreliable = entry.label in flagged

    for (owner, number), labels in duplicates.items():
        logger.debug(f"Labels {labels} share node {owner} and number {number}, showing label names instead")
    return duplicates


def display_name(registry: ReferenceRegistry, label: str) -> str:
    """Name shown in place of the number for a label flagged unreliable.

    Usually the label without its type prefix. When another label of the same group strips to
    the same name ("sec:intro" and "intro", "tab:x" and "tbl:x") the full label is shown so the
    link texts still differ.
    """
    bare = strip_label_prefix(label)
    entry = registry.get(label)
    if entry is None or not entry.number or not entry.owner:
        return bare
    for other in registry:
        if other.label == label or (other.owner, other.number) != (entry.owner, entry.number):
            continue
        if strip_label_prefix(other.label) == bare:
            return label
    return bare
