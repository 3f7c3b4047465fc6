"""
Markdown Review Formatter

Renders a fully populated ReviewContext into the review Markdown document.
Rendering is a pure projection: the context is never modified.
"""

import logging
import re
from typing import List

from ..exceptions import PreconditionViolation
from ..models.context import ReviewContext
from ..models.diff import FileDiff, LineKind
from ..models.issue import Issue


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.bmp'}

# {code}, {code:java}, {noformat}
WIKI_FENCE_PATTERN = re.compile(r'\{code(?::([\w+#.-]+))?\}|\{noformat\}')


def wiki_to_markdown(text: str) -> str:
    """Replace Jira code/noformat fence markers with Markdown fences."""
    return WIKI_FENCE_PATTERN.sub(lambda m: f"```{m.group(1) or ''}", text)


class MarkdownFormatter:
    """
    Formats the review context as Markdown.

    Section order: title, description, one block per issue, the diff block,
    and finally the review prompt.
    """

    def __init__(self, include_unchanged_lines: bool = False):
        """
        Initialize Markdown formatter.

        Args:
            include_unchanged_lines: Emit unchanged lines in the diff block
        """
        self.include_unchanged_lines = include_unchanged_lines

    def render(self, context: ReviewContext) -> str:
        """
        Render the review document.

        Args:
            context: Review context with details, output location and prompt set

        Returns:
            Markdown text

        Raises:
            PreconditionViolation: If a required input is missing
        """
        self._check_required(context)
        details = context.pull_request_details

        lines: List[str] = [f"# {details.title}", ""]
        if details.description.strip():
            lines.extend([details.description, ""])

        for issue in context.issues:
            lines.extend(self._format_issue(issue))

        if context.diffs:
            lines.extend(["## Diff", "", "```diff"])
            for file_diff in context.diffs:
                lines.extend(self._format_file_diff(file_diff))
            lines.extend(["```", ""])

        lines.extend(["## Review Prompt", "", context.review_prompt])

        logger.debug(f"Rendered {len(context.issues)} issues and {len(context.diffs)} diffs")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _check_required(context: ReviewContext) -> None:
        missing = []
        if context.pull_request_details is None:
            missing.append("pull request details")
        if not context.output_directory:
            missing.append("output directory")
        if not context.output_filename:
            missing.append("output filename")
        if not context.review_prompt:
            missing.append("review prompt")
        if missing:
            raise PreconditionViolation(f"Cannot render review context, missing: {', '.join(missing)}")

    def _format_issue(self, issue: Issue) -> List[str]:
        lines = [f"## JIRA: [{issue.key}]({issue.url})", "", f"**{issue.summary}**", ""]

        if issue.description.strip():
            lines.extend([wiki_to_markdown(issue.description), ""])

        if issue.attachments:
            lines.append("### Attachments")
            for attachment in issue.attachments:
                # 첨부파일은 마크다운 파일과 같은 디렉토리에 저장됨
                if attachment.extension in IMAGE_EXTENSIONS:
                    lines.append(f"![{attachment.filename}]({attachment.filename})")
                else:
                    lines.append(f"[Attachment: {attachment.filename}]({attachment.filename})")
            lines.append("")

        if issue.comments:
            lines.append("### Comments")
            for comment in issue.comments:
                lines.append(f"- **{comment.author}**: {comment.body}")
            lines.append("")

        return lines

    def _format_file_diff(self, file_diff: FileDiff) -> List[str]:
        path = file_diff.path
        lines = [
            f"diff --git a{path} b{path}",
            f"--- a{path}",
            f"+++ b{path}",
        ]
        for line in file_diff.lines:
            if line.kind is LineKind.UNCHANGED and not self.include_unchanged_lines:
                continue
            text = line.text.rstrip('\r\n')
            lines.append(f"{line.prefix}{text}")
        lines.append("")
        return lines


def render_markdown(context: ReviewContext, include_unchanged_lines: bool = False) -> str:
    """Render a review context with a one-off formatter."""
    return MarkdownFormatter(include_unchanged_lines=include_unchanged_lines).render(context)
