import json

import pytest

from paraxref.config import KeywordRule, ResolverConfig
from paraxref.exceptions import InvalidConfigError


def test_keyword_rule_matching():
    any_rule = KeywordRule(labels=["fig:a"], keywords=["error", "analysis"])
    all_rule = KeywordRule(labels=["sec:main"], keywords=["main", "result"], match_all=True)

    assert any_rule.matches("ERROR plot")
    assert not any_rule.matches("convergence")
    assert all_rule.matches("3 Main Results")
    assert not all_rule.matches("Main ideas")


def test_from_file(tmp_path):
    config_file = tmp_path / "xref.json"
    config_file.write_text(
        json.dumps(
            {
                "id_prefix": "doc-",
                "progress_interval": 2,
                "figure_rules": [{"labels": ["fig:mesh"], "keywords": ["mesh"], "fallback_index": 0}],
            }
        )
    )
    config = ResolverConfig.from_file(config_file)

    assert config.id_prefix == "doc-"
    assert config.progress_interval == 2
    assert [rule.labels for rule in config.figure_rules] == [["fig:mesh"]]
    assert config.content_root_id == "output", "Keys not given keep their defaults"
    assert len(config.section_rules) == 9


@pytest.mark.parametrize("content", ["{not json", '{"unknown_key": 1}', '{"progress_interval": "often"}'])
def test_invalid_file(tmp_path, content):
    config_file = tmp_path / "xref.json"
    config_file.write_text(content)
    with pytest.raises(InvalidConfigError):
        ResolverConfig.from_file(config_file)


def test_missing_file(tmp_path):
    with pytest.raises(InvalidConfigError):
        ResolverConfig.from_file(tmp_path / "missing.json")
