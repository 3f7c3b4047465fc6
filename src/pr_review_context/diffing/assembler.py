"""
Diff Assembler

Fetches before/after content for every changed file of a pull request and
builds one FileDiff per file with the line diff engine.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..cancellation import CancellationToken
from ..exceptions import NotFoundError, UpstreamError
from ..models.context import SkippedItem
from ..models.diff import FileDiff
from ..models.pull_request import ChangeKind, FileChange, PullRequestDetails
from ..providers import SourceControlProvider
from .line_diff import compute_line_diff


logger = logging.getLogger(__name__)


class FetchOutcome(Enum):
    """Result of fetching one side of a file."""
    FETCHED = "fetched"
    EMPTY = "empty"    # not applicable or not found at that commit
    FAILED = "failed"  # upstream fault, degraded to empty content


@dataclass(frozen=True)
class ContentResult:
    """Content of one side of a file change."""
    outcome: FetchOutcome
    text: str = ""
    reason: Optional[str] = None


@dataclass
class DiffAssemblyResult:
    """Diffs in FileChange order plus the items that degraded to empty content."""
    diffs: List[FileDiff] = field(default_factory=list)
    skipped: List[SkippedItem] = field(default_factory=list)


class DiffAssembler:
    """
    Builds per-file diffs for a resolved pull request.

    "Before" content is read at the merge-base commit and "after" content
    at the source commit. A failing file never aborts the batch.
    """

    def __init__(self, provider: SourceControlProvider, max_workers: int = 1):
        """
        Initialize diff assembler.

        Args:
            provider: Source-control collaborator
            max_workers: Number of files fetched concurrently (1 = sequential)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.provider = provider
        self.max_workers = max_workers

    def build_diffs(
        self,
        details: PullRequestDetails,
        cancellation: Optional[CancellationToken] = None
    ) -> List[FileDiff]:
        """Build diffs for every change, in change order."""
        return self.assemble(details, cancellation).diffs

    def assemble(
        self,
        details: PullRequestDetails,
        cancellation: Optional[CancellationToken] = None
    ) -> DiffAssemblyResult:
        """
        Build diffs and collect the files whose content could not be fetched.

        Args:
            details: Resolved pull request details
            cancellation: Optional cancellation token

        Returns:
            DiffAssemblyResult with one diff per FileChange
        """
        cancellation = cancellation or CancellationToken()
        result = DiffAssemblyResult()

        if not details.changes:
            logger.info(f"No file changes found to diff for PR {details.id}")
            return result

        logger.info(f"Building diffs for {len(details.changes)} files (workers={self.max_workers})")

        def build(change: FileChange) -> Tuple[FileDiff, List[SkippedItem]]:
            return self._build_file_diff(details, change, cancellation)

        if self.max_workers == 1 or len(details.changes) == 1:
            outcomes = [build(change) for change in details.changes]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields in input order regardless of completion order
                outcomes = list(executor.map(build, details.changes))

        for file_diff, skipped in outcomes:
            result.diffs.append(file_diff)
            result.skipped.extend(skipped)

        logger.info(f"Built {len(result.diffs)} diffs ({len(result.skipped)} degraded fetches)")
        return result

    def _build_file_diff(
        self,
        details: PullRequestDetails,
        change: FileChange,
        cancellation: CancellationToken
    ) -> Tuple[FileDiff, List[SkippedItem]]:
        if change.kind is ChangeKind.ADDED:
            before = ContentResult(FetchOutcome.EMPTY)
        else:
            before = self._fetch_content(change.path, details.base_commit, cancellation)

        if change.kind is ChangeKind.DELETED:
            after = ContentResult(FetchOutcome.EMPTY)
        else:
            after = self._fetch_content(change.path, details.source_commit, cancellation)

        skipped = [
            SkippedItem(kind='file', key=f"{change.path}@{commit}", reason=content.reason or '')
            for content, commit in ((before, details.base_commit), (after, details.source_commit))
            if content.outcome is FetchOutcome.FAILED
        ]

        return FileDiff(path=change.path, lines=compute_line_diff(before.text, after.text)), skipped

    def _fetch_content(self, path: str, commit_id: str, cancellation: CancellationToken) -> ContentResult:
        cancellation.raise_if_cancelled()

        try:
            raw = self.provider.get_file_content(path, commit_id)
        except NotFoundError:
            # 추가/삭제된 파일은 해당 커밋에 없을 수 있음
            logger.debug(f"'{path}' not found at commit {commit_id}")
            return ContentResult(FetchOutcome.EMPTY)
        except UpstreamError as e:
            logger.warning(f"Error fetching content for '{path}' at commit {commit_id}: {e}")
            return ContentResult(FetchOutcome.FAILED, reason=str(e))

        return ContentResult(FetchOutcome.FETCHED, text=decode_content(raw))


def decode_content(raw: bytes) -> str:
    """Decode file bytes as UTF-8, dropping a BOM and replacing invalid bytes."""
    if isinstance(raw, str):
        return raw
    return raw.decode('utf-8-sig', errors='replace')
