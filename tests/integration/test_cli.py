#!/usr/bin/env python3
"""
Integration tests for the folio CLI.

Runs each command end to end against a content directory written to
tmp_path, with logs and config kept out of the project tree.
"""
import json

import click
import pytest
from click.testing import CliRunner

from folio.cli import cli
from folio.core.cli_decorators import folio_cli_group

from conftest import ARTICLE_BODY, make_article, make_submission, write_markdown


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, tmp_path):
    """Invoke the CLI with an isolated log directory and no config file."""

    def run(*args):
        base = ["--log-dir", str(tmp_path / "logs"), "--config", str(tmp_path / "none.yaml")]
        return runner.invoke(cli, base + [str(arg) for arg in args])

    return run


class TestCLIBasics:
    """Help output and global options."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "validate" in result.output
        assert "content" in result.output

    @pytest.mark.parametrize("group", ["validate", "content", "resume"])
    def test_group_help(self, runner, group):
        result = runner.invoke(cli, [group, "--help"])
        assert result.exit_code == 0

    def test_logs_written(self, invoke, tmp_path, content_dir):
        invoke("validate", "content", "-c", content_dir)
        assert (tmp_path / "logs" / "operations" / "folio.log").exists()

    def test_invalid_config(self, runner, tmp_path, content_dir):
        """A broken config file stops the run before any command executes."""
        config = tmp_path / "folio.yaml"
        config.write_text("form: [broken\n", encoding="utf-8")
        result = runner.invoke(
            cli,
            ["--log-dir", str(tmp_path / "logs"), "--config", str(config),
             "validate", "content", "-c", str(content_dir)],
        )
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_config_overrides_thresholds(self, runner, tmp_path):
        """A lower spam threshold flags a message the defaults let through."""
        config = tmp_path / "folio.yaml"
        config.write_text("form:\n  spam_threshold: 2\n", encoding="utf-8")
        submission = tmp_path / "message.json"
        submission.write_text(
            json.dumps(make_submission(message="Visit the casino now, you are a winner", timestamp=None)),
            encoding="utf-8",
        )
        result = runner.invoke(
            cli,
            ["--log-dir", str(tmp_path / "logs"), "--config", str(config),
             "validate", "contact", str(submission)],
        )
        assert result.exit_code == 0
        assert "Spam score: 2 (flagged)" in result.output

    def test_config_limits_resume_spans(self, runner, tmp_path, content_dir):
        config = tmp_path / "folio.yaml"
        config.write_text("date_range:\n  max_span_years: 1\n", encoding="utf-8")
        result = runner.invoke(
            cli,
            ["--log-dir", str(tmp_path / "logs"), "--config", str(config),
             "validate", "content", "-c", str(content_dir)],
        )
        assert result.exit_code == 1
        assert "Date range exceeds maximum of 1 years" in result.output

    def test_config_sizes_log_registry(self, runner, tmp_path):
        @folio_cli_group("sample")
        def sample(ctx):
            """Sample group."""

        @sample.command()
        @click.pass_context
        def show(ctx):
            registry = ctx.obj["log_registry"]
            ctx.obj["logger"].log_warning("registry check")
            click.echo(f"{registry.max_logs} {len(registry)}")

        config = tmp_path / "folio.yaml"
        config.write_text("registry:\n  max_logs: 7\n", encoding="utf-8")
        result = runner.invoke(
            sample, ["--log-dir", str(tmp_path / "logs"), "--config", str(config), "show"]
        )
        assert result.exit_code == 0
        assert result.output.strip().endswith("7 1")


class TestValidateContent:
    """Tests for `folio validate content`."""

    def test_consistent_content(self, invoke, content_dir):
        result = invoke("validate", "content", "-c", content_dir)
        assert result.exit_code == 0
        assert "🔍 Validating content in" in result.output
        assert "✅ ALL CONTENT VALID" in result.output

    def test_strict_fails_on_warnings(self, invoke, content_dir):
        """The sample articles are short, which is only a warning."""
        result = invoke("validate", "content", "-c", content_dir, "--strict")
        assert result.exit_code == 1
        assert "Found 5 warning(s) in strict mode" in result.output

    def test_json(self, invoke, content_dir):
        result = invoke("validate", "content", "-c", content_dir, "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["valid"] is True
        assert payload["records"] == 19
        assert payload["errors"] == 0
        assert payload["warnings"] == 5
        assert {issue["stage"] for issue in payload["issues"]} == {"markdown"}

    def test_duplicate_slug_fails(self, invoke, content_dir):
        write_markdown(
            content_dir / "blog" / "zz-copy.md",
            make_article(slug="docker-tips", title="Copy"),
            ARTICLE_BODY,
        )
        result = invoke("validate", "content", "-c", content_dir)
        assert result.exit_code == 1
        assert "❌ CONTENT VALIDATION FAILED" in result.output
        assert "Found 1 content error(s)" in result.output

    def test_missing_directory(self, invoke, tmp_path):
        result = invoke("validate", "content", "-c", tmp_path / "nowhere")
        assert result.exit_code == 1
        assert "Content directory not found" in result.output


class TestValidateContact:
    """Tests for `folio validate contact`."""

    def test_valid_json_submission(self, invoke, tmp_path):
        path = tmp_path / "message.json"
        path.write_text(json.dumps(make_submission(timestamp=None)), encoding="utf-8")
        result = invoke("validate", "contact", path)
        assert result.exit_code == 0
        assert "📨 message.json" in result.output
        assert "✅ Submission valid" in result.output
        assert "Spam score: 0" in result.output

    def test_yaml_submission_json_output(self, invoke, tmp_path):
        path = tmp_path / "message.yaml"
        path.write_text(
            "name: Jane Visitor\nemail: jane@example.org\n"
            "message: I enjoyed your article on Python.\n",
            encoding="utf-8",
        )
        result = invoke("validate", "contact", path, "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["valid"] is True
        assert payload["spam"]["isSpam"] is False

    def test_honeypot_rejected(self, invoke, tmp_path):
        path = tmp_path / "bot.json"
        path.write_text(
            json.dumps(make_submission(honeypot="http://spam", timestamp=None)), encoding="utf-8"
        )
        result = invoke("validate", "contact", path)
        assert result.exit_code == 1
        assert "❌ Submission invalid" in result.output
        assert "Submission rejected with 1 error(s)" in result.output

    def test_invalid_email_rejected(self, invoke, tmp_path):
        path = tmp_path / "message.json"
        path.write_text(json.dumps(make_submission(email="nope", timestamp=None)), encoding="utf-8")
        result = invoke("validate", "contact", path)
        assert result.exit_code == 1
        assert "email: Invalid email format" in result.output

    def test_unparsable_file(self, invoke, tmp_path):
        path = tmp_path / "message.json"
        path.write_text("{not json", encoding="utf-8")
        result = invoke("validate", "contact", path)
        assert result.exit_code == 1
        assert "message.json:" in result.output

    def test_binary_file(self, invoke, tmp_path):
        """Files that are not UTF-8 fail with a message instead of a traceback."""
        path = tmp_path / "message.json"
        path.write_bytes(b"\xff\xfe\x00bad")
        result = invoke("validate", "contact", path)
        assert result.exit_code == 1
        assert "message.json: not valid UTF-8 text" in result.output


class TestContentAnalyze:
    """Tests for `folio content analyze`."""

    @pytest.fixture
    def article_path(self, tmp_path):
        path = tmp_path / "intro.md"
        write_markdown(path, make_article(), ARTICLE_BODY)
        return path

    def test_text_report(self, invoke, article_path):
        result = invoke("content", "analyze", article_path)
        assert result.exit_code == 0
        assert "ARTICLE ANALYSIS: intro.md" in result.output
        assert "Reading Time:" in result.output
        assert "Outline:" in result.output
        assert "- Getting started (#getting-started)" in result.output
        assert "Content is very short" in result.output

    def test_json(self, invoke, article_path):
        result = invoke("content", "analyze", article_path, "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert "content" not in payload
        assert payload["reading_time"]["minutes"] >= 1
        assert [entry["text"] for entry in payload["toc"]["entries"]] == [
            "Getting started",
            "Next steps",
        ]

    def test_plain_markdown(self, invoke, tmp_path):
        """Files without frontmatter are analyzed as bare bodies."""
        path = tmp_path / "notes.md"
        path.write_text(ARTICLE_BODY, encoding="utf-8")
        result = invoke("content", "analyze", path)
        assert result.exit_code == 0
        assert "ARTICLE ANALYSIS: notes.md" in result.output

    def test_binary_file(self, invoke, tmp_path):
        path = tmp_path / "cover.md"
        path.write_bytes(b"\xff\xfe\x00bad")
        result = invoke("content", "analyze", path)
        assert result.exit_code == 1
        assert "cover.md: not valid UTF-8 text" in result.output


class TestContentList:
    """Tests for `folio content list`."""

    def test_blog_newest_first(self, invoke, content_dir):
        """Drafts are hidden; the default order is newest first."""
        result = invoke("content", "list", "blog", "-c", content_dir)
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if ": " in line]
        assert [line.split("  ", 1)[1].split(":")[0] for line in lines] == [
            "docker-tips",
            "python-functions",
            "intro-to-python",
            "light-and-shadow",
        ]
        assert lines[0].startswith("April 1, 2024")
        assert "Page 1 · 4 of 4" in result.output
        assert "unfinished-thoughts" not in result.output

    def test_blog_tag_filter(self, invoke, content_dir):
        result = invoke("content", "list", "blog", "-c", content_dir, "-t", "python")
        assert result.exit_code == 0
        assert "python-functions: Python Functions" in result.output
        assert "intro-to-python: Intro to Python" in result.output
        assert "docker-tips" not in result.output

    def test_blog_sort_by_title(self, invoke, content_dir):
        result = invoke("content", "list", "blog", "-c", content_dir, "--sort", "title", "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert [item["title"] for item in payload["items"]] == [
            "Docker Tips",
            "Intro to Python",
            "Light and Shadow",
            "Python Functions",
        ]
        assert payload["sort"] == {"field": "title", "direction": "asc"}

    def test_portfolio(self, invoke, content_dir):
        result = invoke("content", "list", "portfolio", "-c", content_dir, "-p", "photographer")
        assert result.exit_code == 0
        assert "landscapes/coastal-fog: Coastal Fog" in result.output
        assert "landscapes/mountain-dawn: Mountain Dawn" in result.output
        assert "projects/folio-site" not in result.output

    def test_skills(self, invoke, content_dir):
        result = invoke("content", "list", "skills", "-c", content_dir)
        assert result.exit_code == 0
        assert "Python (expert)" in result.output
        assert "Page 1 · 4 of 4" in result.output

    def test_resume(self, invoke, content_dir):
        result = invoke("content", "list", "resume", "-c", content_dir)
        assert result.exit_code == 0
        assert "Present  Senior Engineer at Globex" in result.output

    def test_pagination(self, invoke, content_dir):
        result = invoke("content", "list", "blog", "-c", content_dir, "--limit", "3")
        assert result.exit_code == 0
        assert "Page 1 · 3 of 4 · more available" in result.output

        result = invoke("content", "list", "blog", "-c", content_dir, "--limit", "3", "--page", "2")
        assert "Page 2 · 1 of 4" in result.output
        assert "more available" not in result.output

    def test_json_envelope(self, invoke, content_dir):
        result = invoke("content", "list", "blog", "-c", content_dir, "-p", "developer", "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["total"] == 3
        assert payload["hasMore"] is False
        assert payload["filters"] == {"persona": "developer"}

    def test_unsupported_sort(self, invoke, content_dir):
        result = invoke("content", "list", "blog", "-c", content_dir, "--sort", "views")
        assert result.exit_code == 1
        assert "Unsupported sort field 'views'" in result.output

    def test_tags_not_supported_for_skills(self, invoke, content_dir):
        result = invoke("content", "list", "skills", "-c", content_dir, "-t", "python")
        assert result.exit_code == 1
        assert "Unknown filter 'tags'" in result.output


class TestResumeTimeline:
    """Tests for `folio resume timeline`."""

    def test_text(self, invoke, content_dir):
        result = invoke("resume", "timeline", "-c", content_dir)
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "▶ Senior Engineer at Globex"
        assert "• Software Engineer at Acme" in lines
        assert lines[-1].startswith("Total experience: ")

    def test_json(self, invoke, content_dir):
        result = invoke("resume", "timeline", "-c", content_dir, "--json")
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["timeline"][0]["slug"] == "globex-senior"
        assert payload["timeline"][0]["active"] is True
        assert {row["slug"] for row in payload["timeline"]} == {
            "globex-senior",
            "acme-engineer",
            "oss-maintainer",
        }
        assert payload["totalMonths"] > 0

    def test_persona_without_entries(self, invoke, content_dir):
        result = invoke("resume", "timeline", "-c", content_dir, "-p", "photographer")
        assert result.exit_code == 0
        assert "No resume entries found" in result.output
