from common import ref_link

from paraxref import CrossRefResolver
from paraxref.diagnostics import registry_frame
from paraxref.tree import RenderedTree
from paraxref.typesetting import EquationAnchor

BEFORE_TYPESETTING = (
    '<div id="output">'
    '<h2 id="content-introduction">1 Introduction</h2>'
    f'<p>See Section {ref_link("sec:intro")}. The wave equation is Equation {ref_link("eq:wave")}, '
    f'and {ref_link("eq:missing")} is not typeset.</p>'
    "</div>"
)

TYPESET_EQUATION = (
    '<mjx-container class="MathJax" jax="CHTML" display="true"><mjx-math>utt=c2Δu</mjx-math>'
    '<mjx-labels><mjx-mtd id="mjx-eqn:eq:wave"><mjx-mtext>(4)</mjx-mtext></mjx-mtd></mjx-labels></mjx-container>'
)


def _typeset(tree: RenderedTree) -> RenderedTree:
    """Serialise the tree and parse it again with the typeset equation appended, as a browser would."""
    html = tree.to_html().replace("</div>", TYPESET_EQUATION + "</div>")
    return RenderedTree.from_html(html)


def test_equation_links_fixed_after_typesetting():
    tree = RenderedTree.from_html(BEFORE_TYPESETTING)
    resolver = CrossRefResolver()
    summary = resolver.resolve(tree)
    assert [d.reason for d in summary.details] == [
        "anchor created",
        "no equation target found",
        "no equation target found",
    ]

    typeset = _typeset(tree)
    report = resolver.typesetting_complete(typeset)

    assert report.checked == 2
    assert report.fixed_labels == ["eq:wave"]
    assert report.still_broken_labels == ["eq:missing"]

    anchor = typeset.get_by_id("content-eq:wave")
    assert anchor["data-fixed-by"] == "reconciliation"
    assert anchor["aria-label"] == "Equation 4"
    assert anchor.parent.name == "mjx-container"

    link = typeset.reference_links()[1]
    assert link.get_text() == "Equation 4"
    assert link["aria-label"] == "Equation 4"
    assert "Equation Equation" not in typeset.select("p")[0].get_text()
    assert resolver.context.registry.get("eq:wave").number == "4"


def test_registry_survives_reparse():
    tree = RenderedTree.from_html(BEFORE_TYPESETTING)
    resolver = CrossRefResolver()
    resolver.resolve(tree)

    typeset = _typeset(tree)
    resolver.typesetting_complete(typeset)

    frame = registry_frame(resolver.context.registry, typeset)
    elements = dict(zip(frame["label"], frame["element"]))
    assert elements["sec:intro"].startswith("h2[")
    assert elements["eq:wave"].startswith("mjx-container")


def test_nothing_broken():
    tree = RenderedTree.from_html('<div id="output"><h2 id="content-sec:a">1 A</h2></div>' + ref_link("sec:a"))
    resolver = CrossRefResolver()
    resolver.resolve(tree)
    report = resolver.typesetting_complete()
    assert report.checked == 0
    assert report.fixed == 0


class StaticLookup:
    def __init__(self, node, number):
        self.node = node
        self.number = number

    def find_equation(self, label):
        return EquationAnchor(self.node, self.number) if label == "eq:wave" else None


def test_explicit_lookup():
    tree = RenderedTree.from_html(BEFORE_TYPESETTING)
    resolver = CrossRefResolver()
    resolver.resolve(tree)
    target = tree.select("p")[0]

    report = resolver.typesetting_complete(lookup=StaticLookup(target, "7"))

    assert report.fixed_labels == ["eq:wave"]
    assert tree.reference_links()[1].get_text() == "Equation 7"


class FailingLookup:
    def find_equation(self, label):
        raise ValueError("lookup exploded")


def test_failing_lookup_counts_as_broken():
    tree = RenderedTree.from_html(BEFORE_TYPESETTING)
    resolver = CrossRefResolver()
    resolver.resolve(tree)
    report = resolver.typesetting_complete(lookup=FailingLookup())
    assert report.fixed == 0
    assert report.still_broken == 2
