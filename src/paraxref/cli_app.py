import json
import logging
import pathlib
from typing import Optional

import typer

from paraxref.config import ResolverConfig
from paraxref.diagnostics import verify_links
from paraxref.document import XrefDocument
from paraxref.engine import CrossRefResolver
from paraxref.tree import RenderedTree
from paraxref.typesetting import Capabilities, LoggingStatusReporter, MathJaxAnchorLookup

app = typer.Typer()


def _setup_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s: %(message)s")


def _load_config(config: Optional[str]) -> ResolverConfig:
    return ResolverConfig.from_file(config) if config else ResolverConfig()


@app.command("resolve")
def resolve(
    rendered_html: str,
    source: Optional[str] = None,
    output: Optional[str] = None,
    config: Optional[str] = None,
    verbose: bool = False,
):
    """Resolve the reference links of an already rendered HTML page."""
    _setup_logging(verbose)
    cfg = _load_config(config)
    tree = RenderedTree.from_file(rendered_html, content_root_id=cfg.content_root_id)
    capabilities = Capabilities(
        status_reporter=LoggingStatusReporter() if verbose else None,
        anchor_lookup=MathJaxAnchorLookup(tree, cfg.typesetting_anchor_prefix),
    )
    source_text = pathlib.Path(source).read_text(encoding="utf-8") if source else None

    summary = CrossRefResolver(cfg, capabilities).resolve(tree, source_text)

    dest = pathlib.Path(output) if output else pathlib.Path(rendered_html)
    dest.write_text(tree.to_html(), encoding="utf-8")
    summary_dict = summary.to_dict()
    summary_dict.pop("details")
    typer.echo(json.dumps(summary_dict, indent=2, default=str))


@app.command("verify")
def verify(rendered_html: str):
    """Report working and broken reference links. Exits with code 1 if any link is broken."""
    tree = RenderedTree.from_file(rendered_html)
    report = verify_links(tree)
    typer.echo(json.dumps(report.to_dict(), indent=2))
    if report.broken:
        raise typer.Exit(code=1)


@app.command("build")
def build(
    source_file: str,
    work_dir: str = "temp",
    output: Optional[str] = None,
    preprocess: bool = False,
    config: Optional[str] = None,
    verbose: bool = False,
):
    """Convert a LaTeX file with pandoc, resolve its cross-references and export HTML."""
    _setup_logging(verbose)
    doc = XrefDocument(
        source_file,
        work_dir=pathlib.Path(work_dir) / pathlib.Path(source_file).stem,
        config=_load_config(config),
        preprocess=preprocess,
    )
    summary = doc.build()
    dest = doc.export(output)
    typer.echo(f"{summary.fixed}/{summary.processed} links resolved, written to {dest}")


if __name__ == "__main__":
    app()
