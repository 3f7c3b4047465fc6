"""
Review Context Builder

Pipeline driver that assembles the review context document for a pull
request. Stages run strictly in order and each one is gated on the stage
before it:

    set_pull_request_id -> add_pull_request_details -> add_diffs
        -> add_issues -> format_output -> build
"""

import asyncio
import logging
from typing import Callable, Optional, TypeVar

from .cancellation import CancellationToken
from .config import AppConfig, ReviewConfig
from .diffing.assembler import DiffAssembler
from .exceptions import PreconditionViolation
from .formatting.markdown import MarkdownFormatter
from .issues.client import JiraClient
from .issues.enricher import IssueEnricher
from .issues.extractor import extract_issue_references
from .models.context import PipelineStage, ReviewContext
from .providers import IssueTrackerProvider, SourceControlProvider
from .sourcecontrol.client import AzureDevOpsClient
from .sourcecontrol.resolver import PullRequestResolver


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReviewContextBuilder:
    """
    Owns the ReviewContext for one run and drives every stage.

    A builder is single use: create one per pull request. Stages called out
    of order raise PreconditionViolation without touching the context.
    """

    def __init__(
        self,
        source_control: SourceControlProvider,
        issue_tracker: IssueTrackerProvider,
        review_config: ReviewConfig,
        formatter: Optional[MarkdownFormatter] = None,
        cancellation: Optional[CancellationToken] = None,
    ):
        """
        Initialize review context builder.

        Args:
            source_control: Source-control collaborator
            issue_tracker: Issue-tracker collaborator
            review_config: Output directory, prompt and diff options
            formatter: Optional Markdown formatter override
            cancellation: Optional token shared with the caller
        """
        self.review_config = review_config
        self.cancellation = cancellation or CancellationToken()

        self.resolver = PullRequestResolver(source_control)
        self.diff_assembler = DiffAssembler(source_control, max_workers=review_config.max_workers)
        self.issue_enricher = IssueEnricher(issue_tracker, max_workers=review_config.max_workers)
        self.formatter = formatter or MarkdownFormatter(
            include_unchanged_lines=review_config.include_unchanged_lines_in_diff
        )

        self._context = ReviewContext(
            review_prompt=review_config.review_prompt,
            output_directory=review_config.output_directory,
        )

    @classmethod
    def from_config(cls, config: AppConfig, cancellation: Optional[CancellationToken] = None) -> "ReviewContextBuilder":
        """Create a builder wired to the Azure DevOps and Jira clients."""
        return cls(
            source_control=AzureDevOpsClient(config.azure_devops),
            issue_tracker=JiraClient(config.jira),
            review_config=config.review,
            cancellation=cancellation,
        )

    @property
    def context(self) -> ReviewContext:
        """The working context (treat as read-only)."""
        return self._context

    @property
    def stage(self) -> PipelineStage:
        return self._context.stage

    def cancel(self) -> None:
        """Request cancellation of the running and all later stages."""
        self.cancellation.cancel()

    def set_pull_request_id(self, pr_id: int) -> "ReviewContextBuilder":
        """Set the pull request to assemble context for."""
        self._require_stage(PipelineStage.EMPTY, "setting the pull request id")
        if not isinstance(pr_id, int) or pr_id <= 0:
            raise PreconditionViolation(f"Pull Request ID must be a positive integer, got {pr_id!r}")

        self._context.pull_request_id = pr_id
        self._context.stage = PipelineStage.ID_SET
        return self

    async def add_pull_request_details(self) -> "ReviewContextBuilder":
        """Resolve pull request metadata and its change list."""
        self._require_stage(PipelineStage.ID_SET, "fetching details")
        pr_id = self._context.pull_request_id

        details = await self._run_blocking(self.resolver.resolve, pr_id, self.cancellation)

        self._context.pull_request_details = details
        self._context.output_filename = f"PR-{pr_id}-review.md"
        self._context.stage = PipelineStage.DETAILS_FETCHED
        logger.info(f"Fetched details for PR {pr_id}: {details.title!r}")
        return self

    async def add_diffs(self) -> "ReviewContextBuilder":
        """Build a diff for every changed file."""
        self._require_stage(PipelineStage.DETAILS_FETCHED, "adding diffs")

        result = await self._run_blocking(
            self.diff_assembler.assemble, self._context.pull_request_details, self.cancellation
        )

        self._context.diffs.extend(result.diffs)
        self._context.skipped_items.extend(result.skipped)
        self._context.stage = PipelineStage.DIFFS_ADDED
        return self

    async def add_issues(self) -> "ReviewContextBuilder":
        """Enrich the issues referenced in the pull request description."""
        self._require_stage(PipelineStage.DIFFS_ADDED, "adding issue details")
        if not self._context.output_directory:
            raise PreconditionViolation("Output directory must be configured before adding issue details")

        references = extract_issue_references(self._context.pull_request_details.description)
        logger.info(f"Found {len(references)} issue references in PR description")

        result = await self._run_blocking(
            self.issue_enricher.enrich_all,
            references,
            self._context.pull_request_folder,
            self.cancellation,
        )

        self._context.issues.extend(result.issues)
        self._context.skipped_items.extend(result.skipped)
        self._context.stage = PipelineStage.ISSUES_ADDED
        return self

    async def format_output(self) -> "ReviewContextBuilder":
        """Render the review document into the context."""
        self._require_stage(PipelineStage.ISSUES_ADDED, "formatting output")
        self.cancellation.raise_if_cancelled()

        markdown = self.formatter.render(self._context)

        self._context.generated_markdown = markdown
        self._context.stage = PipelineStage.RENDERED
        return self

    async def build(self, write_to_file: bool = True) -> ReviewContext:
        """
        Persist the rendered document and return the context.

        Persistence is skipped with a warning when the document, output
        directory or file name is missing; the in-memory document stays
        available either way.
        """
        self._require_stage(PipelineStage.RENDERED, "building")
        self.cancellation.raise_if_cancelled()

        if not write_to_file:
            return self._context

        output_path = self._context.output_path
        if output_path is None or not self._context.generated_markdown:
            logger.warning(
                "Could not write output file. Context properties missing "
                "(OutputDirectory, OutputFileName, GeneratedMarkdown)."
            )
            return self._context

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self._context.generated_markdown, encoding='utf-8')

        self._context.stage = PipelineStage.PERSISTED
        logger.info(f"Review markdown written to: {output_path}")
        return self._context

    async def run(self, pr_id: int, write_to_file: bool = True) -> ReviewContext:
        """Run every stage in order for one pull request."""
        self.set_pull_request_id(pr_id)
        await self.add_pull_request_details()
        await self.add_diffs()
        await self.add_issues()
        await self.format_output()
        return await self.build(write_to_file=write_to_file)

    def _require_stage(self, expected: PipelineStage, action: str) -> None:
        current = self._context.stage
        if current is not expected:
            raise PreconditionViolation(
                f"Cannot perform {action} in stage {current.name}; expected {expected.name}"
            )

    async def _run_blocking(self, func: Callable[..., T], *args) -> T:
        self.cancellation.raise_if_cancelled()
        try:
            return await asyncio.to_thread(func, *args)
        except asyncio.CancelledError:
            # worker threads stop at their next cancellation check
            self.cancellation.cancel()
            raise


async def generate_review_context(
    pr_id: int,
    config: AppConfig,
    write_to_file: bool = True,
    cancellation: Optional[CancellationToken] = None,
) -> ReviewContext:
    """
    Generate the review context for a pull request.

    Args:
        pr_id: Pull request id
        config: Validated application configuration
        write_to_file: Persist the document under the output directory
        cancellation: Optional cancellation token

    Returns:
        The populated ReviewContext
    """
    builder = ReviewContextBuilder.from_config(config, cancellation=cancellation)
    return await builder.run(pr_id, write_to_file=write_to_file)
