from common import make_context, ref_link

from paraxref.common import LabelType
from paraxref.resolvers import resolve_target

SECTIONS = """
<div id="output">
<h1 class="title">Report</h1>
<h2 id="content-introduction">1 Introduction</h2>
<p>Text.</p>
<h2 id="content-numerical-examples">2 Numerical Examples</h2>
<h2 id="content-main-results">3 Main Results</h2>
</div>
"""


def test_configured_keywords():
    ctx = make_context(SECTIONS)
    match = resolve_target("sec:main", LabelType.SECTION, ctx)
    assert match.node["id"] == "content-main-results"
    assert match.strategy == "heading_keywords"


def test_label_name_tokens():
    ctx = make_context(SECTIONS)
    match = resolve_target("sec:numerical-examples", LabelType.SECTION, ctx)
    assert match.node["id"] == "content-numerical-examples"


def test_static_table():
    html = '<div id="output"><section id="content-background"><p>B</p></section><h2 id="content-x">1 X</h2></div>'
    ctx = make_context(html)
    match = resolve_target("sec:background", LabelType.SECTION, ctx)
    assert match.node["id"] == "content-background"
    assert match.strategy == "static_table"


def test_direct_id_without_prefix():
    html = '<div id="output"><h2 id="content-a">1 A</h2><section id="sec:zeta"><p>Z</p></section></div>'
    ctx = make_context(html)
    match = resolve_target("sec:zeta", LabelType.SECTION, ctx)
    assert match.node["id"] == "sec:zeta"


def test_first_content_heading_fallback():
    ctx = make_context(SECTIONS + ref_link("sec:unknown"))
    match = resolve_target("sec:unknown", LabelType.SECTION, ctx)
    assert match.node["id"] == "content-introduction"
    assert match.strategy == "first_content_heading"


def test_first_heading_in_content_root():
    html = '<div id="output"><h2>Untitled</h2></div>'
    ctx = make_context(html)
    match = resolve_target("sec:unknown", LabelType.SECTION, ctx)
    assert match.node.name == "h2"


def test_not_found():
    ctx = make_context("<p>No headings at all</p>")
    assert resolve_target("sec:unknown", LabelType.SECTION, ctx) is None
