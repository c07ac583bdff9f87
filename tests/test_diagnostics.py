from paraxref import CrossRefResolver
from paraxref.diagnostics import log_registry_report, registry_report, system_check, verify_links
from paraxref.tree import RenderedTree


def test_verify_before_resolution(rendered_tree):
    report = verify_links(rendered_tree)
    assert report.total == 11
    assert report.working == 0
    assert report.working + report.broken == report.total
    assert report.details[0].original_ref == "sec:main"
    assert report.details[0].link_text == "[sec:main]"


def test_system_check_before_and_after(rendered_tree, source_text):
    before = system_check(rendered_tree, None)
    assert not before.success
    assert before.success_rate == "0.0%"
    assert before.placeholder_links[0] == "sec:main"
    assert before.status.total_entries == 0

    resolver = CrossRefResolver()
    resolver.resolve(rendered_tree, source=source_text)
    after = resolver.system_check()

    assert after.success
    assert after.fixed_links == after.total_links == 11
    assert after.success_rate == "100.0%"
    assert after.placeholder_links == []
    assert after.links.broken == 0
    assert after.status.completion_rate == "100.0%"
    assert after.type_distribution["theorem"] == 2


def test_report_of_resolved_document(rendered_tree, source_text, caplog):
    resolver = CrossRefResolver()
    resolver.resolve(rendered_tree, source=source_text)
    report = registry_report(resolver.context.registry, rendered_tree)

    assert report.by_owner == {}
    assert len(report.frame) == 10
    assert set(report.frame["label"]) >= {"thm:main", "eq:heat", "tab:results"}

    with caplog.at_level("INFO", logger="paraxref"):
        log_registry_report(report)
    assert "Completion rate: 100.0%" in caplog.text


def test_system_check_empty_document():
    check = system_check(RenderedTree.from_html("<p>No links</p>"), None)
    assert check.success
    assert check.total_links == 0
    assert check.success_rate == "0%"
