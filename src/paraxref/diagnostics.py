"""Read-only reports about a resolved document. Nothing in here mutates the tree or raises."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from .config import logger
from .registry import ReferenceRegistry
from .rewriter import RE_PLACEHOLDER
from .tree import RenderedTree, describe, link_target_id, node_text

REGISTRY_COLUMNS = ["label", "type", "owner", "number", "anchor_id", "created_at", "unreliable", "element"]


@dataclass
class LinkCheck:
    index: int
    link_text: str
    original_ref: Optional[str]
    target_id: str
    working: bool


@dataclass
class LinkVerificationReport:
    total: int = 0
    working: int = 0
    broken: int = 0
    details: List[LinkCheck] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RegistryStatus:
    registry_initialised: bool = False
    total_entries: int = 0
    complete_entries: int = 0
    incomplete_entries: int = 0
    completion_rate: str = "0%"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RegistryReport:
    """Registry contents grouped to spot mis-resolved labels.

    Attributes:
        status: Entry counts
        by_owner: Nodes ("tag.class[handle]") holding more than one label
        by_number: Numbers shared by more than one label ("NO_NUMBER" for missing numbers)
        type_distribution: Entry count per label type
        frame: One row per registry entry
    """

    status: RegistryStatus
    by_owner: Dict[str, List[str]] = field(default_factory=dict)
    by_number: Dict[str, List[str]] = field(default_factory=dict)
    type_distribution: Dict[str, int] = field(default_factory=dict)
    frame: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=REGISTRY_COLUMNS))


@dataclass
class SystemCheck:
    success: bool
    total_links: int
    fixed_links: int
    placeholder_links: List[str]
    success_rate: str
    links: LinkVerificationReport
    status: RegistryStatus
    type_distribution: Dict[str, int]

    def to_dict(self) -> dict:
        return asdict(self)


def verify_links(tree: RenderedTree) -> LinkVerificationReport:
    """Check that every reference link points at an element that exists."""
    report = LinkVerificationReport()
    for index, link in enumerate(tree.reference_links(), start=1):
        target_id = link_target_id(link)
        working = bool(target_id) and tree.has_id(target_id)
        report.details.append(LinkCheck(index, node_text(link), link.get("data-reference"), target_id, working))
        if working:
            report.working += 1
        else:
            report.broken += 1
    report.total = len(report.details)
    return report


def _rate(part: int, total: int) -> str:
    return f"{part / total * 100:.1f}%" if total else "0%"


def registry_status(registry: Optional[ReferenceRegistry]) -> RegistryStatus:
    if registry is None:
        return RegistryStatus()
    total = len(registry)
    complete = sum(1 for entry in registry if entry.is_complete)
    return RegistryStatus(
        registry_initialised=True,
        total_entries=total,
        complete_entries=complete,
        incomplete_entries=total - complete,
        completion_rate=_rate(complete, total),
    )


def registry_frame(registry: Optional[ReferenceRegistry], tree: RenderedTree = None) -> pd.DataFrame:
    if registry is None or len(registry) == 0:
        return pd.DataFrame(columns=REGISTRY_COLUMNS)
    rows = []
    for entry in registry:
        row = entry.to_dict()
        node = tree.node_for(entry.owner) if tree is not None and entry.owner else None
        row["element"] = f"{describe(node)}[{entry.owner}]" if node is not None else f"unknown[{entry.owner}]"
        rows.append(row)
    return pd.DataFrame(rows, columns=REGISTRY_COLUMNS)


def _shared_groups(df: pd.DataFrame, column: str) -> Dict[str, List[str]]:
    groups = df.groupby(column, sort=True)["label"].apply(list)
    return {str(key): labels for key, labels in groups.items() if len(labels) > 1}


def registry_report(registry: Optional[ReferenceRegistry], tree: RenderedTree = None) -> RegistryReport:
    df = registry_frame(registry, tree)
    report = RegistryReport(status=registry_status(registry), frame=df)
    if df.empty:
        return report

    df = df.assign(number=df["number"].fillna("NO_NUMBER"))
    report.by_owner = _shared_groups(df, "element")
    report.by_number = _shared_groups(df, "number")
    report.type_distribution = {str(k): int(v) for k, v in df["type"].value_counts().items()}
    return report


def log_registry_report(report: RegistryReport) -> None:
    status = report.status
    logger.info("=" * 60)
    logger.info("CROSS-REFERENCE REGISTRY")
    logger.info("=" * 60)
    logger.info(f"Total entries: {status.total_entries}")
    logger.info(f"Complete: {status.complete_entries}")
    logger.info(f"Incomplete: {status.incomplete_entries}")
    logger.info(f"Completion rate: {status.completion_rate}")
    for element, labels in report.by_owner.items():
        logger.info(f"  {element}: {len(labels)} labels {labels}")
    for number, labels in report.by_number.items():
        logger.info(f"  number {number}: {labels}")
    for label_type, count in report.type_distribution.items():
        logger.info(f"  {label_type}: {count}")


def system_check(tree: RenderedTree, registry: Optional[ReferenceRegistry]) -> SystemCheck:
    """Combine link verification, registry status and remaining placeholders in one report."""
    links = tree.reference_links()
    placeholders = [
        link.get("data-reference") or node_text(link) for link in links if RE_PLACEHOLDER.match(node_text(link))
    ]
    fixed = len(links) - len(placeholders)
    report = registry_report(registry, tree)

    check = SystemCheck(
        success=not placeholders,
        total_links=len(links),
        fixed_links=fixed,
        placeholder_links=placeholders,
        success_rate=_rate(fixed, len(links)),
        links=verify_links(tree),
        status=report.status,
        type_distribution=report.type_distribution,
    )
    if check.success:
        logger.info(f"All {check.total_links} reference links fixed")
    else:
        logger.warning(f"Partial success: {check.success_rate}, {len(placeholders)} links still show placeholders")
    return check
