from paraxref.config import ResolverConfig
from paraxref.context import ResolutionContext
from paraxref.labels import LabelExtractor
from paraxref.tree import RenderedTree


def ref_link(label: str, ref_type: str = "ref", prefix: str = "content-") -> str:
    """HTML of a pandoc reference link with placeholder text."""
    return f'<a href="#{prefix}{label}" data-reference-type="{ref_type}" data-reference="{label}">[{label}]</a>'


def make_context(html: str, source: str = None, config: ResolverConfig = None, **kwargs) -> ResolutionContext:
    config = config if config is not None else ResolverConfig()
    tree = RenderedTree.from_html(html)
    analysis = LabelExtractor(config).extract(source)
    ctx = ResolutionContext(tree=tree, config=config, analysis=analysis, **kwargs)
    ctx.referenced_labels = list(dict.fromkeys(link.get("data-reference") for link in tree.reference_links()))
    return ctx
