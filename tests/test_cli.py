"""Tests for the personas CLI."""

import json

import pytest
from click.testing import CliRunner

from agent_personas.cli import cli

from conftest import make_document


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def corpus(tmp_path, write_persona):
    write_persona("agents/lead.md", make_document(
        name="lead",
        description="Plans multi-step work",
        tools="Read, Task",
        body="## Output Format\n- plan\n## Delegation\n| When | Agent |\n|---|---|\n| review | reviewer |\n",
    ))
    write_persona("agents/reviewer.md", make_document(
        name="reviewer",
        description="Reviews code",
        body="## Output Format\n### Findings\n- item\n",
    ))
    return tmp_path / "agents"


def invoke(runner, corpus, *args):
    return runner.invoke(cli, ["--config", str(corpus / "none.yaml"), "--corpus", str(corpus), *args])


class TestListAndInfo:
    """Tests for list and info commands."""

    def test_list(self, runner, corpus):
        result = invoke(runner, corpus, "list")
        assert result.exit_code == 0
        assert "lead" in result.output
        assert "reviewer" in result.output

    def test_list_filters(self, runner, corpus):
        result = invoke(runner, corpus, "list", "--tool", "Task")
        assert "lead" in result.output
        assert "reviewer" not in result.output

        result = invoke(runner, corpus, "list", "--search", "reviews")
        assert "reviewer" in result.output
        assert "lead:" not in result.output

    def test_list_empty(self, runner, tmp_path):
        result = invoke(runner, tmp_path, "list")
        assert result.exit_code == 0
        assert "No personas found" in result.output

    def test_info(self, runner, corpus):
        result = invoke(runner, corpus, "info", "reviewer")
        assert result.exit_code == 0
        assert "Delegated from: lead" in result.output
        assert "Output template: yes" in result.output

    def test_info_unknown(self, runner, corpus):
        result = invoke(runner, corpus, "info", "ghost")
        assert result.exit_code == 1
        assert "Persona not found: ghost" in result.output


class TestLint:
    """Tests for the lint command."""

    def test_clean_corpus(self, runner, corpus):
        result = invoke(runner, corpus, "lint")
        assert result.exit_code == 0
        assert "2 personas checked: 0 errors" in result.output

    def test_errors_fail(self, runner, corpus):
        (corpus / "broken.md").write_text("no front-matter\n", encoding="utf-8")
        result = invoke(runner, corpus, "lint")
        assert result.exit_code == 1
        assert "PA001" in result.output

    def test_fail_on_warning(self, runner, corpus):
        (corpus / "loose.md").write_text(
            make_document(name="loose", tools=None, body="## Output Format\nx\n"), encoding="utf-8"
        )
        assert invoke(runner, corpus, "lint").exit_code == 0
        result = invoke(runner, corpus, "lint", "--fail-on", "warning")
        assert result.exit_code == 1
        assert "PA004" in result.output
        assert "[missing-tools]" in result.output

    def test_strict_env_reports_load_error(self, runner, corpus):
        (corpus / "broken.md").write_text("no front-matter\n", encoding="utf-8")
        result = runner.invoke(
            cli,
            ["--config", str(corpus / "none.yaml"), "--corpus", str(corpus), "lint"],
            env={"PERSONAS_STRICT": "1"},
        )
        assert result.exit_code == 1
        assert "broken.md" in result.output

    def test_rules_listing(self, runner, corpus):
        """Test rules shows every rule with its name and configured severity."""
        config = corpus / "personas.yaml"
        config.write_text(
            "lint:\n  disabled_rules: [PA011]\n  severity_overrides: {PA004: error}\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["--config", str(config), "rules"])
        assert result.exit_code == 0
        assert "Lint rules (11)" in result.output
        assert "PA004 ERROR missing-tools: Front-matter has no tools list" in result.output
        assert "PA011 OFF missing-output-template" in result.output
        assert "PA007 WARNING self-delegation" in result.output


class TestDelegationsAndTemplate:
    """Tests for delegations and template commands."""

    def test_all_delegations(self, runner, corpus):
        result = invoke(runner, corpus, "delegations")
        assert result.exit_code == 0
        assert "lead → reviewer: review" in result.output

    def test_persona_delegations(self, runner, corpus):
        result = invoke(runner, corpus, "delegations", "reviewer")
        assert result.exit_code == 0
        assert "← lead: review" in result.output

    def test_unknown_target_marked(self, runner, corpus):
        (corpus / "extra.md").write_text(
            make_document(name="extra", body="## Delegation\n- x → nobody\n"), encoding="utf-8"
        )
        result = invoke(runner, corpus, "delegations")
        assert "extra → nobody (unknown)" in result.output

    def test_template(self, runner, corpus):
        result = invoke(runner, corpus, "template", "reviewer")
        assert result.exit_code == 0
        assert result.output == "### Findings\n- item\n"

    def test_template_missing(self, runner, corpus):
        (corpus / "bare.md").write_text(make_document(name="bare"), encoding="utf-8")
        result = invoke(runner, corpus, "template", "bare")
        assert result.exit_code == 1
        assert "has no output template" in result.output


class TestExportAndSplit:
    """Tests for export and split commands."""

    def test_export_stdout(self, runner, corpus):
        result = invoke(runner, corpus, "export")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [p["id"] for p in data["personas"]] == ["lead", "reviewer"]

    def test_export_file(self, runner, corpus, tmp_path):
        target = tmp_path / "registry.yaml"
        result = invoke(runner, corpus, "export", "--format", "yaml", "--output", str(target))
        assert result.exit_code == 0
        assert "id: lead" in target.read_text(encoding="utf-8")

    def test_split(self, runner, corpus, tmp_path):
        out = tmp_path / "out"
        result = invoke(runner, corpus, "split", str(out))
        assert result.exit_code == 0
        assert sorted(p.name for p in out.iterdir()) == ["lead.md", "reviewer.md"]

        result = invoke(runner, corpus, "split", str(out))
        assert result.exit_code == 1
        assert "Refusing to overwrite" in result.output


class TestConfigErrors:
    """Tests for config problems surfacing on the CLI."""

    def test_bad_config(self, runner, tmp_path):
        config = tmp_path / "personas.yaml"
        config.write_text("lint:\n  fail_on: never\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "list"])
        assert result.exit_code == 1
        assert "fail_on" in result.output
