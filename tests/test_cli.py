import json
import shutil

from typer.testing import CliRunner

from paraxref.cli_app import app

runner = CliRunner()


def test_verify_reports_broken_links(doc_dir):
    result = runner.invoke(app, ["verify", str(doc_dir / "rendered.html")])
    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert report["broken"] == 11


def test_resolve_then_verify(doc_dir, tmp_path):
    rendered = tmp_path / "rendered.html"
    shutil.copy(doc_dir / "rendered.html", rendered)
    output = tmp_path / "resolved.html"

    result = runner.invoke(
        app, ["resolve", str(rendered), "--source", str(doc_dir / "main.tex"), "--output", str(output)]
    )
    assert result.exit_code == 0, result.output
    summary = json.loads(result.stdout)
    assert summary["fixed"] == 11
    assert "details" not in summary
    assert "[thm:main]" in rendered.read_text(encoding="utf-8"), "Input must stay untouched when --output is given"

    result = runner.invoke(app, ["verify", str(output)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["working"] == 11


def test_resolve_with_invalid_config(doc_dir, tmp_path):
    config_file = tmp_path / "bad.json"
    config_file.write_text('{"no_such_setting": true}')
    result = runner.invoke(app, ["resolve", str(doc_dir / "rendered.html"), "--config", str(config_file)])
    assert result.exit_code != 0
