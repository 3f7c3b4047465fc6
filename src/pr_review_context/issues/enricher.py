"""
Issue Enricher

Fetches details for referenced issues: summary, description, comments and
attachments. Attachment bytes are persisted next to the review document so
Markdown links resolve.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..cancellation import CancellationToken
from ..exceptions import UpstreamError, UpstreamUnavailable
from ..models.context import SkippedItem
from ..models.issue import Attachment, Comment, Issue, IssueReference
from ..providers import IssueTrackerProvider
from .schemas import AttachmentEntry, CommentEntry, IssuePayload


logger = logging.getLogger(__name__)


@dataclass
class EnrichmentResult:
    """Enriched issues in reference order plus everything that was skipped."""
    issues: List[Issue] = field(default_factory=list)
    skipped: List[SkippedItem] = field(default_factory=list)


class IssueEnricher:
    """
    Resolves issue references into Issue objects.

    Failures are soft: an issue that cannot be fetched is logged and left
    out, and an attachment that cannot be downloaded is left out of its issue.
    """

    def __init__(self, provider: IssueTrackerProvider, max_workers: int = 1):
        """
        Initialize issue enricher.

        Args:
            provider: Issue-tracker collaborator
            max_workers: Number of issues fetched concurrently (1 = sequential)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.provider = provider
        self.max_workers = max_workers

    def enrich(
        self,
        reference: IssueReference,
        attachment_dir: Path,
        cancellation: Optional[CancellationToken] = None
    ) -> Issue:
        """
        Fetch one issue and persist its attachments.

        Args:
            reference: Issue reference to fetch
            attachment_dir: Directory attachments are written to
            cancellation: Optional cancellation token

        Returns:
            Enriched Issue

        Raises:
            NotFoundError: If the issue does not exist
            UpstreamUnavailable: If the issue could not be fetched or parsed
        """
        issue, _ = self._enrich(reference, Path(attachment_dir), cancellation or CancellationToken())
        return issue

    def enrich_all(
        self,
        references: Sequence[IssueReference],
        attachment_dir: Path,
        cancellation: Optional[CancellationToken] = None
    ) -> EnrichmentResult:
        """
        Enrich every reference, skipping the ones that fail.

        Args:
            references: References in first-seen order
            attachment_dir: Directory attachments are written to
            cancellation: Optional cancellation token

        Returns:
            EnrichmentResult with issues in reference order
        """
        cancellation = cancellation or CancellationToken()
        attachment_dir = Path(attachment_dir)
        result = EnrichmentResult()

        if not references:
            return result

        logger.info(f"Enriching {len(references)} issue references")

        def enrich_one(reference: IssueReference):
            try:
                return self._enrich(reference, attachment_dir, cancellation)
            except UpstreamError as e:
                logger.warning(f"Failed to get issue {reference.key}: {e}")
                return None, [SkippedItem(kind='issue', key=reference.key, reason=str(e))]

        if self.max_workers == 1 or len(references) == 1:
            outcomes = [enrich_one(reference) for reference in references]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(enrich_one, references))

        for issue, skipped in outcomes:
            if issue is not None:
                result.issues.append(issue)
            result.skipped.extend(skipped)

        logger.info(f"Enriched {len(result.issues)} of {len(references)} issues")
        return result

    def _enrich(
        self,
        reference: IssueReference,
        attachment_dir: Path,
        cancellation: CancellationToken
    ) -> Tuple[Issue, List[SkippedItem]]:
        cancellation.raise_if_cancelled()
        raw = self.provider.get_issue(reference.key)

        try:
            payload = IssuePayload.model_validate(raw)
        except ValidationError as e:
            raise UpstreamUnavailable(f"Unexpected payload for issue {reference.key}: {e}") from e

        fields = payload.fields
        attachments, skipped = self._process_attachments(
            reference, fields.attachment, attachment_dir, cancellation
        )

        issue = Issue(
            key=reference.key,
            url=self.provider.browse_url(reference.key),
            summary=fields.summary or "N/A",
            description=fields.description or "",
            attachments=attachments,
            comments=self._process_comments(reference, fields.comment.comments if fields.comment else []),
        )
        return issue, skipped

    def _process_attachments(
        self,
        reference: IssueReference,
        entries: List[Any],
        attachment_dir: Path,
        cancellation: CancellationToken
    ) -> Tuple[List[Attachment], List[SkippedItem]]:
        attachments = []
        skipped = []

        for raw_entry in entries:
            try:
                entry = AttachmentEntry.model_validate(raw_entry)
            except ValidationError:
                logger.debug(f"Skipping malformed attachment entry on {reference.key}")
                continue
            if not entry.is_complete:
                continue

            # 경로 조작 방지를 위해 파일명만 사용
            filename = Path(entry.filename).name
            if not filename:
                continue

            cancellation.raise_if_cancelled()
            try:
                content = self.provider.download_attachment(entry.content)
                attachment_dir.mkdir(parents=True, exist_ok=True)
                (attachment_dir / filename).write_bytes(content)
            except (UpstreamError, OSError) as e:
                logger.warning(f"Failed to download attachment {filename} for {reference.key}: {e}")
                skipped.append(SkippedItem(kind='attachment', key=f"{reference.key}/{filename}", reason=str(e)))
                continue

            attachments.append(Attachment(filename=filename, url=entry.content, content=content))

        return attachments, skipped

    def _process_comments(self, reference: IssueReference, entries: List[Any]) -> List[Comment]:
        comments = []
        for raw_entry in entries:
            try:
                entry = CommentEntry.model_validate(raw_entry)
            except ValidationError:
                logger.debug(f"Skipping malformed comment on {reference.key}")
                continue
            if entry.author_name and entry.body:
                comments.append(Comment(author=entry.author_name, body=entry.body))
        return comments
