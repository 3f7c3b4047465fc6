"""
Unit tests for the Markdown review formatter.
"""

import copy

import pytest

from pr_review_context.exceptions import PreconditionViolation
from pr_review_context.formatting.markdown import MarkdownFormatter, render_markdown, wiki_to_markdown
from pr_review_context.models.context import ReviewContext
from pr_review_context.models.diff import DiffLine, FileDiff, LineKind
from pr_review_context.models.issue import Attachment, Comment, Issue
from pr_review_context.models.pull_request import PullRequestDetails


def make_details(description="Adds throttling."):
    return PullRequestDetails(
        id=42,
        title="Add login throttling",
        description=description,
        source_ref="refs/heads/feature/throttle",
        target_ref="refs/heads/main",
        source_commit="src",
        target_commit="tgt",
        base_commit="base",
    )


def make_context(**overrides):
    values = dict(
        review_prompt="Please review.",
        output_directory="/tmp/reviews",
        pull_request_id=42,
        pull_request_details=make_details(),
        output_filename="PR-42-review.md",
    )
    values.update(overrides)
    return ReviewContext(**values)


def app_diff():
    return FileDiff(path="/src/app.py", lines=[
        DiffLine(LineKind.UNCHANGED, "import os\n"),
        DiffLine(LineKind.REMOVED, "limit = 5\n"),
        DiffLine(LineKind.ADDED, "limit = 10\r\n"),
        DiffLine(LineKind.UNCHANGED, "run()\n"),
    ])


class TestWikiToMarkdown:
    """Tests for Jira wiki fence conversion."""

    def test_code_and_noformat(self):
        text = "a\n{code}\nx = 1\n{code}\n{noformat}\nraw\n{noformat}"

        assert wiki_to_markdown(text) == "a\n```\nx = 1\n```\n```\nraw\n```"

    def test_code_with_language(self):
        assert wiki_to_markdown("{code:java}int x;{code}") == "```javaint x;```"

    def test_plain_text_untouched(self):
        assert wiki_to_markdown("no {fences} here") == "no {fences} here"


class TestMarkdownFormatter:
    """Unit tests for MarkdownFormatter."""

    def test_full_layout(self):
        issue = Issue(
            key="ABC-1",
            url="https://acme.atlassian.net/browse/ABC-1",
            summary="Throttle repeated logins",
            description="Limit attempts.\n{code}\nlimit = 10\n{code}",
            attachments=[
                Attachment("screenshot.PNG", "https://files/1", b""),
                Attachment("trace.log", "https://files/2", b""),
            ],
            comments=[Comment("Dana", "Looks right.")],
        )
        context = make_context(issues=[issue], diffs=[app_diff()])

        markdown = MarkdownFormatter().render(context)

        assert markdown == "\n".join([
            "# Add login throttling",
            "",
            "Adds throttling.",
            "",
            "## JIRA: [ABC-1](https://acme.atlassian.net/browse/ABC-1)",
            "",
            "**Throttle repeated logins**",
            "",
            "Limit attempts.\n```\nlimit = 10\n```",
            "",
            "### Attachments",
            "![screenshot.PNG](screenshot.PNG)",
            "[Attachment: trace.log](trace.log)",
            "",
            "### Comments",
            "- **Dana**: Looks right.",
            "",
            "## Diff",
            "",
            "```diff",
            "diff --git a/src/app.py b/src/app.py",
            "--- a/src/app.py",
            "+++ b/src/app.py",
            "-limit = 5",
            "+limit = 10",
            "",
            "```",
            "",
            "## Review Prompt",
            "",
            "Please review.",
        ]) + "\n"

    def test_issue_without_extras(self):
        issue = Issue(key="XYZ-7", url="https://jira/browse/XYZ-7", summary="N/A", description="")
        markdown = MarkdownFormatter().render(make_context(issues=[issue]))

        assert "## JIRA: [XYZ-7](https://jira/browse/XYZ-7)" in markdown
        assert "**N/A**" in markdown
        assert "### Attachments" not in markdown
        assert "### Comments" not in markdown

    def test_unchanged_lines_included_when_enabled(self):
        context = make_context(diffs=[app_diff()])

        markdown = MarkdownFormatter(include_unchanged_lines=True).render(context)

        assert " import os\n-limit = 5\n+limit = 10\n run()\n" in markdown

    def test_unchanged_lines_omitted_by_default(self):
        markdown = render_markdown(make_context(diffs=[app_diff()]))

        assert "import os" not in markdown
        assert "run()" not in markdown

    def test_no_diff_block_without_diffs(self):
        markdown = MarkdownFormatter().render(make_context())

        assert "## Diff" not in markdown
        assert "```diff" not in markdown
        assert markdown.endswith("## Review Prompt\n\nPlease review.\n")

    def test_blank_description_omitted(self):
        context = make_context(pull_request_details=make_details(description="   "))

        markdown = MarkdownFormatter().render(context)

        assert markdown.startswith("# Add login throttling\n\n## Review Prompt")

    def test_files_in_given_order(self):
        diffs = [
            FileDiff("/b.py", [DiffLine(LineKind.ADDED, "b\n")]),
            FileDiff("/a.py", [DiffLine(LineKind.ADDED, "a\n")]),
        ]

        markdown = MarkdownFormatter().render(make_context(diffs=diffs))

        assert markdown.index("a/b.py") < markdown.index("a/a.py")

    @pytest.mark.parametrize("field_name, value, message", [
        ("review_prompt", None, "review prompt"),
        ("review_prompt", "", "review prompt"),
        ("pull_request_details", None, "pull request details"),
        ("output_directory", None, "output directory"),
        ("output_filename", None, "output filename"),
    ])
    def test_missing_inputs_raise(self, field_name, value, message):
        context = make_context(**{field_name: value})

        with pytest.raises(PreconditionViolation, match=message):
            MarkdownFormatter().render(context)

    def test_render_does_not_mutate_context(self):
        context = make_context(diffs=[app_diff()])
        snapshot = copy.deepcopy(context)

        first = MarkdownFormatter().render(context)
        second = MarkdownFormatter().render(context)

        assert first == second
        assert context == snapshot
        assert context.generated_markdown is None
