"""Tests for claycli.compilation.commands CLI module."""

import pytest
from click.testing import CliRunner

from claycli.compilation.commands import compile_group
from claycli.config.commands import set_config_value


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def test_bucket_cmd(runner):
    result = runner.invoke(compile_group, ["bucket", "article", "video"])

    assert result.exit_code == 0
    assert "article a-d" in result.output
    assert "video u-z" in result.output


def test_bucket_requires_name(runner):
    result = runner.invoke(compile_group, ["bucket"])
    assert result.exit_code != 0


def test_bundles_cmd(runner):
    result = runner.invoke(compile_group, ["bundles", "_templates", "js"])

    assert result.exit_code == 0
    assert "_templates-a-d.js" in result.output
    assert "_templates-u-z.js" in result.output


def test_path_cmd_minify_flag(runner, no_project_root):
    result = runner.invoke(compile_group, ["path", "components/article/model.js", "--minify"])

    assert result.exit_code == 0
    assert "_models-a-d.js" in result.output


def test_path_cmd_uses_config(runner, mock_project_root):
    set_config_value("compile.minify", True)
    result = runner.invoke(compile_group, ["path", "components/video/model.js", "--prefix", "_kiln"])

    assert result.exit_code == 0
    assert "_kiln-u-z.js" in result.output


def test_path_cmd_non_component_file(runner, no_project_root):
    result = runner.invoke(compile_group, ["path", "lib/zebra.js", "--minify"])

    assert result.exit_code == 0
    assert "_models-u-z.js" in result.output


def test_path_cmd_no_minify(runner, no_project_root):
    result = runner.invoke(compile_group, ["path", "components/article/model.js"])

    assert result.exit_code == 0
    assert "_models-" not in result.output


def test_changed_cmd(runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "article.js").write_text("x")
    (tmp_path / "out").mkdir()

    result = runner.invoke(compile_group, ["changed", "src/article.js", "--dest", "out"])

    assert result.exit_code == 0
    assert "src/article.js" in result.output


def test_changed_cmd_up_to_date(runner, tmp_path):
    source = tmp_path / "article.js"
    source.write_text("x")
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "article.js").write_text("compiled")

    result = runner.invoke(compile_group, ["changed", str(source), "--dest", str(dest)])

    assert result.exit_code == 0
    assert "up to date" in result.output


def test_browsers_cmd_default(runner, no_project_root):
    result = runner.invoke(compile_group, ["browsers"])

    assert result.exit_code == 0
    assert "> 3%" in result.output
