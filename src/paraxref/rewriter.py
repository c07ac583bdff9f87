"""Turn ``[thm:main]`` placeholders into ``Theorem 6`` and make link names self-describing.

Two passes run after the links are resolved:

* ``replace_reference_text`` rewrites placeholder text from the registry and removes a type
  word the prose already carries in front of the link ("Theorem Theorem 6").
* ``enhance_link_accessibility`` moves a type word that stays in the prose *into* the link,
  so "see Theorem <a>6</a>" becomes "see <a>Theorem 6</a>" and screen readers announce the
  whole phrase.

Both are idempotent.

``eqref`` links to numbered equations read "(3)" rather than "Equation 3", the way LaTeX
renders ``\\eqref``. This is deliberate.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from bs4 import NavigableString, Tag

from .common import PROSE_TYPE_WORDS, LabelType
from .config import logger
from .context import ResolutionContext, determine_label_type
from .duplicates import display_name
from .numbers import extract_number
from .tree import RenderedTree, link_target_id, node_text, preceding_text_node

RE_PLACEHOLDER = re.compile(r"^\[.+\]$")


@dataclass
class RewriteDetail:
    index: int
    original_ref: Optional[str]
    target_id: str
    old_text: str
    new_text: str
    success: bool = False
    reason: str = "unknown"


@dataclass
class RewriteReport:
    processed: int = 0
    replaced: int = 0
    failed: int = 0
    details: List[RewriteDetail] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AccessibilityDetail:
    index: int
    original_ref: Optional[str]
    old_text: str
    new_text: str
    action: str


@dataclass
class AccessibilityReport:
    processed: int = 0
    enhanced: int = 0
    skipped: int = 0
    details: List[AccessibilityDetail] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def compose_display_text(label_type: LabelType, value: str, reference_type: Optional[str] = None) -> str:
    """Build the visible link text, e.g. 'Theorem 6'. ``eqref`` links to numbered equations read '(3)'."""
    if reference_type == "eqref" and label_type == LabelType.EQUATION and value[:1].isdigit():
        return f"({value})"
    word = label_type.type_word
    return f"{word} {value}" if word else value


def _remove_trailing_word(link: Tag, word: str) -> bool:
    text_node = preceding_text_node(link)
    if text_node is None:
        return False
    pattern = re.compile(rf"\b{re.escape(word)}\s*$", re.IGNORECASE)
    text = str(text_node)
    new_text = pattern.sub("", text)
    if new_text == text:
        return False
    text_node.replace_with(NavigableString(new_text))
    return True


def link_label(link: Tag, id_prefix: str) -> str:
    label = link.get("data-reference")
    if label:
        return label
    target_id = link_target_id(link)
    return target_id[len(id_prefix) :] if target_id.startswith(id_prefix) else target_id


def rewrite_link(link: Tag, ctx: ResolutionContext, index: int = 0) -> RewriteDetail:
    """Replace the text of one link from what is known about its label.

    The number comes from the registry. Labels missing from the registry are read live from
    the target with the type the link itself implies. Labels flagged unreliable, or without a
    number, show the label name.
    """
    target_id = link_target_id(link)
    label = link_label(link, ctx.config.id_prefix)
    current = node_text(link)
    detail = RewriteDetail(index, label, target_id, current, current)

    if not target_id:
        detail.reason = "no target ID"
        return detail
    target = ctx.tree.get_by_id(target_id)
    if target is None:
        detail.reason = "target not found"
        return detail

    entry = ctx.registry.get(label)
    if entry is not None:
        label_type = entry.label_type
        number = None if entry.unreliable else entry.number
    else:
        label_type = determine_label_type(label, link, ctx)
        number = extract_number(target, label_type, ctx.tree, ctx.config)

    value = number or display_name(ctx.registry, label)
    new_text = compose_display_text(label_type, value, link.get("data-reference-type"))
    link.string = new_text
    word = label_type.type_word
    if word and new_text.startswith(word):
        _remove_trailing_word(link, word)

    detail.new_text = new_text
    detail.success = True
    detail.reason = "replaced successfully"
    return detail


def replace_reference_text(ctx: ResolutionContext) -> RewriteReport:
    links = ctx.tree.reference_links()
    report = RewriteReport(processed=len(links))
    for index, link in enumerate(links, start=1):
        current = node_text(link)
        if not RE_PLACEHOLDER.match(current):
            detail = RewriteDetail(index, link.get("data-reference"), link_target_id(link), current, current)
            detail.success = True
            detail.reason = "not bracket format"
            report.details.append(detail)
            continue

        detail = rewrite_link(link, ctx, index)
        if detail.success:
            report.replaced += 1
        else:
            report.failed += 1
            logger.debug(f'Link {index}: "{current}" not replaced ({detail.reason})')
        report.details.append(detail)

    logger.info(f"Label replacement complete: {report.replaced} replaced, {report.failed} failed")
    return report


def _contains_type_word(text: str) -> bool:
    text = text.lower()
    return any(word.lower() in text for word in PROSE_TYPE_WORDS)


def enhance_link_accessibility(tree: RenderedTree) -> AccessibilityReport:
    links = tree.reference_links()
    report = AccessibilityReport(processed=len(links))

    for index, link in enumerate(links, start=1):
        text = node_text(link)
        detail = AccessibilityDetail(index, link.get("data-reference"), text, text, "")

        if link.get("data-reference-type") == "eqref":
            detail.action = "skipped (eqref)"
        elif RE_PLACEHOLDER.match(text):
            detail.action = "skipped (unresolved)"
        elif _contains_type_word(text):
            detail.action = "skipped (already accessible)"
        else:
            text_node = preceding_text_node(link)
            matched = None
            if text_node is not None:
                for word in PROSE_TYPE_WORDS:
                    if re.search(rf"\b{word}\s*$", str(text_node), re.IGNORECASE):
                        matched = word
                        break
            if text_node is None:
                detail.action = "skipped (no preceding text)"
            elif matched is None:
                detail.action = "skipped (no preceding type word)"
            else:
                _remove_trailing_word(link, matched)
                detail.new_text = f"{matched} {text}"
                link.string = detail.new_text
                detail.action = "enhanced"

        if detail.action == "enhanced":
            report.enhanced += 1
        else:
            report.skipped += 1
        report.details.append(detail)

    logger.info(f"Accessibility enhancement complete: {report.enhanced} enhanced, {report.skipped} skipped")
    return report
