from __future__ import annotations

import re

from bs4 import Tag

from ..common import LabelType
from ..config import logger
from ..context import ResolutionContext
from ..tree import node_text
from .base import Resolver

RE_CODE_TOKEN = re.compile(r"^[A-Z]+\d+")
RE_CENTERED = re.compile(r"text-align\s*:\s*center", re.IGNORECASE)


def _is_title_block(node: Tag) -> bool:
    if node.find_parent("h1") is not None:
        return True
    for candidate in [node] + list(node.parents):
        if not isinstance(candidate, Tag):
            continue
        classes = candidate.get("class") or []
        if "title" in classes or "center" in classes:
            return True
        if RE_CENTERED.search(candidate.get("style") or ""):
            return True
    return False


def _long_paragraph(label: str, label_type: LabelType, ctx: ResolutionContext):
    for p in ctx.tree.search_root().find_all("p"):
        text = node_text(p)
        if len(text) <= ctx.config.min_paragraph_length or RE_CODE_TOKEN.match(text):
            continue
        if not _is_title_block(p):
            return p
    return None


def _long_div(label: str, label_type: LabelType, ctx: ResolutionContext):
    for div in ctx.tree.search_root().find_all("div"):
        if "title" in (div.get("class") or []) or div.find(class_="title") is not None:
            continue
        if len(node_text(div)) > ctx.config.min_paragraph_length:
            return div
    return None


def _subheading(label: str, label_type: LabelType, ctx: ResolutionContext):
    return ctx.tree.search_root().find(["h2", "h3", "h4"])


def _content_block(label: str, label_type: LabelType, ctx: ResolutionContext):
    return ctx.tree.search_root().find(["ul", "ol", "table", "figure", "section"])


def _content_root(label: str, label_type: LabelType, ctx: ResolutionContext):
    root = ctx.tree.content_root()
    if root is not None:
        logger.warning(f'Anchoring "{label}" on the content root')
    return root


def _document_root(label: str, label_type: LabelType, ctx: ResolutionContext):
    logger.warning(f'Anchoring "{label}" on the document root')
    return ctx.tree.document_root()


RESOLVER = Resolver(
    "generic",
    [_long_paragraph, _long_div, _subheading, _content_block, _content_root, _document_root],
)
