from common import make_context, ref_link

from paraxref.common import LabelType
from paraxref.resolvers import resolve_target


def _figures(*captions):
    figures = [f'<figure><img src="f{i}.png"/><figcaption>{c}</figcaption></figure>' for i, c in enumerate(captions)]
    return f'<div id="output">{"".join(figures)}</div>'


def test_keyword_rule():
    ctx = make_context(_figures("Error analysis of the scheme", "Convergence rate of the method"))
    match = resolve_target("fig:convergence", LabelType.FIGURE, ctx)
    assert match.strategy == "keyword_rule"
    assert match.node is ctx.tree.select("figure")[1]


def test_rule_position_when_no_keyword_matches():
    ctx = make_context(_figures("A", "B"))
    match = resolve_target("fig:error", LabelType.FIGURE, ctx)
    assert match.strategy == "rule_position"
    assert match.node is ctx.tree.select("figure")[1]


def test_rule_position_out_of_range_uses_first():
    ctx = make_context(_figures("A"))
    match = resolve_target("fig:error", LabelType.FIGURE, ctx)
    assert match.node is ctx.tree.select("figure")[0]


def test_source_caption():
    source = r"""
\begin{figure}
\includegraphics{beam.png}
\caption{Stress distribution in the beam}\label{fig:stress}
\end{figure}
"""
    ctx = make_context(_figures("Displacement field", "Stress distribution in the beam."), source)
    match = resolve_target("fig:stress", LabelType.FIGURE, ctx)
    assert match.strategy == "source_caption"
    assert match.node is ctx.tree.select("figure")[1]


def test_source_position():
    source = r"""
\begin{figure}\caption{Alpha}\label{fig:a}\end{figure}
\begin{figure}\caption{Beta}\label{fig:b}\end{figure}
"""
    ctx = make_context(_figures("One", "Two"), source)
    match = resolve_target("fig:b", LabelType.FIGURE, ctx)
    assert match.strategy == "source_position"
    assert match.node is ctx.tree.select("figure")[1]


def test_first_figure_fallback():
    ctx = make_context(_figures("One", "Two") + ref_link("fig:unknown"))
    match = resolve_target("fig:unknown", LabelType.FIGURE, ctx)
    assert match.strategy == "first_node"
    assert match.node is ctx.tree.select("figure")[0]


def test_table_keyword_rule():
    html = """
    <div id="output">
    <table><caption>Vector spaces</caption><tr><td>1</td></tr></table>
    <table><caption>Comparison of algorithms</caption><tr><td>2</td></tr></table>
    </div>
    """
    ctx = make_context(html)
    match = resolve_target("tab:results", LabelType.TABLE, ctx)
    assert match.node is ctx.tree.select("table")[1]


def test_no_floats():
    ctx = make_context("<p>Nothing to see.</p>")
    assert resolve_target("fig:convergence", LabelType.FIGURE, ctx) is None
    assert resolve_target("tab:results", LabelType.TABLE, ctx) is None
