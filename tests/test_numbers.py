from paraxref.common import LabelType
from paraxref.numbers import extract_number
from paraxref.tree import RenderedTree


def _first(html: str, selector: str):
    tree = RenderedTree.from_html(html)
    return tree, tree.select(selector)[0]


def test_word_number():
    tree, node = _first('<div class="theorem"><p><strong>Theorem 3.2</strong>. Statement.</p></div>', "div")
    assert extract_number(node, LabelType.THEOREM, tree) == "3.2"


def test_markup_between_word_and_number():
    tree, node = _first('<div class="lemma"><p><strong>Lemma</strong><span>4</span> Statement.</p></div>', "div")
    assert extract_number(node, LabelType.LEMMA, tree) == "4"


def test_heading_number():
    tree, node = _first('<h2 id="content-intro">1.2 Introduction</h2>', "h2")
    assert extract_number(node, LabelType.SECTION, tree) == "1.2"


def test_list_number():
    tree, node = _first("<li>7. Second step</li>", "li")
    assert extract_number(node, LabelType.GENERIC, tree) == "7"


def test_parenthesised_number_only_for_equations():
    html = '<mjx-container display="true"><mjx-math>x=1</mjx-math><mjx-labels>(12)</mjx-labels></mjx-container>'
    tree, node = _first(html, "mjx-container")
    assert extract_number(node, LabelType.EQUATION, tree) == "12"
    assert extract_number(node, LabelType.GENERIC, tree) is None


def test_typeset_tag_number():
    html = '<mjx-container display="true"><span class="mjx-tag">5</span><mjx-math>y</mjx-math></mjx-container>'
    tree, node = _first(html, "mjx-container")
    assert extract_number(node, LabelType.EQUATION, tree) == "5"


def test_table_caption_number():
    tree, node = _first("<table><caption>Table 2: Results</caption></table>", "table")
    assert extract_number(node, LabelType.TABLE, tree) == "2"


def test_figure_position_fallback():
    html = "<figure><figcaption>First</figcaption></figure><figure><figcaption>Second</figcaption></figure>"
    tree = RenderedTree.from_html(html)
    second = tree.select("figure")[1]
    assert extract_number(second, LabelType.FIGURE, tree) == "2"


def test_anchor_redirects_to_parent():
    html = (
        '<h3 id="content-x">2.4 Methods<span id="content-sec:methods" data-original-label="sec:methods"></span></h3>'
    )
    tree = RenderedTree.from_html(html)
    anchor = tree.get_by_id("content-sec:methods")
    assert extract_number(anchor, LabelType.SECTION, tree) == "2.4"


def test_anchor_in_unnumbered_heading():
    html = '<h2>Methods<span id="a" data-original-label="sec:methods"></span></h2>'
    tree = RenderedTree.from_html(html)
    assert extract_number(tree.get_by_id("a"), LabelType.SECTION, tree) is None


def test_no_number():
    tree, node = _first("<p>Plain text without any numbering in it.</p>", "p")
    assert extract_number(node, LabelType.GENERIC, tree) is None
    assert extract_number(None, LabelType.GENERIC, tree) is None
