import pytest

from paraxref.anchors import inject_anchor
from paraxref.common import LabelType
from paraxref.exceptions import DuplicateAnchorError
from paraxref.tree import RenderedTree


def test_anchor_is_first_child():
    tree = RenderedTree.from_html('<div class="theorem"><p>Theorem 1. Statement.</p></div>')
    node = tree.select("div.theorem")[0]

    anchor = inject_anchor(tree, node, "content-thm:main", "thm:main", LabelType.THEOREM)

    assert node.contents[0] is anchor
    assert anchor["data-original-label"] == "thm:main"
    assert anchor["data-label-type"] == "theorem"
    assert anchor["aria-label"] == "Target for reference thm:main"
    assert anchor["role"] == "mark"
    assert "visibility: hidden" in anchor["style"]
    assert not anchor.has_attr("data-fixed-by")
    assert node.get_text() == "Theorem 1. Statement.", "Existing content must be kept"


def test_anchor_in_empty_node():
    tree = RenderedTree.from_html("<div></div>")
    node = tree.select("div")[0]
    anchor = inject_anchor(tree, node, "content-x", "x", LabelType.GENERIC, fixed_by="reconciliation", aria_label="X")
    assert node.contents == [anchor]
    assert anchor["data-fixed-by"] == "reconciliation"
    assert anchor["aria-label"] == "X"


def test_existing_id_raises():
    tree = RenderedTree.from_html('<h2 id="content-sec:a">1 A</h2><p>P</p>')
    with pytest.raises(DuplicateAnchorError) as excinfo:
        inject_anchor(tree, tree.select("p")[0], "content-sec:a", "sec:a", LabelType.SECTION)
    assert excinfo.value.anchor_id == "content-sec:a"
    assert len(tree.select("span")) == 0
