from __future__ import annotations

import pathlib
import shutil
from typing import Optional

from .config import ResolverConfig, logger
from .engine import CrossRefResolver, ResolutionSummary
from .io.html.exporter import HTMLExporter
from .pandoc_helper import convert_latex_to_html
from .preprocess import inject_hypertargets
from .reconcile import ReconciliationReport
from .tree import RenderedTree
from .typesetting import Capabilities, MathJaxAnchorLookup


class XrefDocument:
    """A LaTeX document taken through conversion and cross-reference resolution.

    :param source_file: The LaTeX source
    :param work_dir: Build directory, defaults to 'temp/<source name>'
    :param config: Resolver settings
    :param capabilities: Optional collaborators handed to the resolver
    :param preprocess: Inject ``\\hypertarget`` anchors into the source before conversion
    :param clean_build_dir: Remove the build directory before building
    """

    def __init__(
        self,
        source_file,
        work_dir=None,
        config: ResolverConfig = None,
        capabilities: Capabilities = None,
        preprocess: bool = False,
        clean_build_dir: bool = True,
    ):
        self.source_file = pathlib.Path(source_file).resolve().absolute()
        self.name = self.source_file.stem
        if work_dir is None:
            work_dir = pathlib.Path("temp") / self.name
        self.work_dir = pathlib.Path(work_dir).resolve().absolute()
        if self.work_dir == self.source_file.parent or self.work_dir in self.source_file.parents:
            raise ValueError(f"work_dir '{self.work_dir}' cannot contain the source file '{self.source_file}'")

        self.config = config if config is not None else ResolverConfig()
        self.resolver = CrossRefResolver(self.config, capabilities)
        self.preprocess = preprocess
        self.clean_build_dir = clean_build_dir
        self.tree: Optional[RenderedTree] = None
        self.summary: Optional[ResolutionSummary] = None

    def read_source(self) -> str:
        with open(self.source_file, "r", encoding="utf-8") as f:
            return f.read()

    def convert(self, source: str) -> str:
        if self.preprocess:
            source = inject_hypertargets(source)
        return convert_latex_to_html(source, id_prefix=self.config.id_prefix)

    def build(self, rendered_html: str = None) -> ResolutionSummary:
        """Convert the source (unless ``rendered_html`` is given) and resolve all reference links."""
        if self.clean_build_dir and self.work_dir.exists():
            shutil.rmtree(self.work_dir)
        self.work_dir.mkdir(parents=True, exist_ok=True)

        source = self.read_source()
        if rendered_html is None:
            rendered_html = self.convert(source)
            with open(self.work_dir / f"{self.name}.pandoc.html", "w", encoding="utf-8") as f:
                f.write(rendered_html)

        self.tree = RenderedTree.from_html(rendered_html, content_root_id=self.config.content_root_id)
        self.tree.ensure_content_root()
        self.summary = self.resolver.resolve(self.tree, source)
        logger.info(f'Built "{self.name}": {self.summary.fixed}/{self.summary.processed} links resolved')
        return self.summary

    def typesetting_complete(self, typeset_html: str = None) -> ReconciliationReport:
        """Reconcile equation links once the page has been typeset.

        Args:
            typeset_html: The typeset page. When omitted the current tree is checked again.
        """
        if typeset_html is not None:
            self.tree = RenderedTree.from_html(typeset_html, content_root_id=self.config.content_root_id)
        lookup = MathJaxAnchorLookup(self.tree, self.config.typesetting_anchor_prefix)
        return self.resolver.typesetting_complete(self.tree, lookup)

    def export(self, dest_file=None) -> pathlib.Path:
        if self.tree is None:
            raise ValueError("Nothing to export, call build() first")
        if dest_file is None:
            dest_file = self.work_dir / "dist" / f"{self.name}.html"
        return HTMLExporter(self).export(dest_file)
