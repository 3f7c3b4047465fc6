"""
Pull Request Resolver

Resolves a pull request id into canonical PullRequestDetails: metadata,
merge-base commit and the per-file change list.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..cancellation import CancellationToken
from ..exceptions import NotFoundError, UpstreamUnavailable
from ..models.pull_request import ChangeKind, FileChange, PullRequestDetails
from ..providers import SourceControlProvider
from .schemas import ChangeEntry, CommitDiffPayload, PullRequestPayload


logger = logging.getLogger(__name__)

REF_PREFIX = "refs/heads/"


def clean_ref_name(ref_name: str) -> str:
    """Strip the branch namespace prefix from a ref name."""
    if ref_name.startswith(REF_PREFIX):
        return ref_name[len(REF_PREFIX):]
    return ref_name


def normalize_change_kind(change_type: str) -> ChangeKind:
    """
    Map a vendor change type onto the closed ChangeKind set.

    Vendor values may combine flags ("edit, rename"); deletion and
    addition take precedence because they decide which side has content.
    """
    flags = {part.strip().lower() for part in change_type.split(',') if part.strip()}

    if 'delete' in flags or 'deleted' in flags:
        return ChangeKind.DELETED
    if 'add' in flags or 'added' in flags:
        return ChangeKind.ADDED
    if 'rename' in flags or 'renamed' in flags:
        return ChangeKind.RENAMED
    return ChangeKind.MODIFIED


class PullRequestResolver:
    """
    Fetches pull request metadata and the file change list.

    The merge-base commit returned by the base-diff request is the single
    authoritative base for every "before" content lookup.
    """

    def __init__(self, provider: SourceControlProvider):
        self.provider = provider

    def resolve(self, pr_id: int, cancellation: Optional[CancellationToken] = None) -> PullRequestDetails:
        """
        Resolve pull request details.

        Args:
            pr_id: Pull request id
            cancellation: Optional cancellation token

        Returns:
            PullRequestDetails with changes in vendor order

        Raises:
            NotFoundError: If the pull request or its diff could not be fetched
            UpstreamUnavailable: On transport failure or malformed responses
        """
        cancellation = cancellation or CancellationToken()
        logger.info(f"Resolving pull request {pr_id}")

        cancellation.raise_if_cancelled()
        pr = self._fetch_pull_request(pr_id)

        source_ref = clean_ref_name(pr.source_ref_name)
        target_ref = clean_ref_name(pr.target_ref_name)

        cancellation.raise_if_cancelled()
        diff = self._fetch_commit_diff(pr_id, target_ref, source_ref)
        changes = self._parse_changes(pr_id, diff.changes)

        details = PullRequestDetails(
            id=pr_id,
            title=pr.title,
            description=pr.description or '',
            source_ref=pr.source_ref_name,
            target_ref=pr.target_ref_name,
            source_commit=pr.last_merge_source_commit.commit_id,
            target_commit=pr.last_merge_target_commit.commit_id,
            base_commit=diff.base_commit,
            changes=changes,
        )

        logger.info(f"Resolved PR {pr_id}: {len(changes)} changed files, base {details.base_commit[:8]}")
        return details

    def _fetch_pull_request(self, pr_id: int) -> PullRequestPayload:
        try:
            raw = self.provider.get_pull_request(pr_id)
        except UpstreamUnavailable as e:
            # transport failures and unparseable 2xx bodies are not "not found"
            if e.status_code is None or e.status_code < 400:
                raise
            raise NotFoundError(f"Failed to get PR {pr_id}: {e.status_code}") from e

        try:
            return PullRequestPayload.model_validate(raw)
        except ValidationError as e:
            raise UpstreamUnavailable(f"Unexpected pull request payload for PR {pr_id}: {e}") from e

    def _fetch_commit_diff(self, pr_id: int, base_version: str, target_version: str) -> CommitDiffPayload:
        try:
            raw = self.provider.get_commit_diff(base_version, target_version)
        except UpstreamUnavailable as e:
            # transport failures and unparseable 2xx bodies are not "not found"
            if e.status_code is None or e.status_code < 400:
                raise
            raise NotFoundError(
                f"Failed to get diff for base commit/changes (PR {pr_id}): {e.status_code}"
            ) from e

        try:
            return CommitDiffPayload.model_validate(raw)
        except ValidationError as e:
            raise UpstreamUnavailable(f"Unexpected commit diff payload for PR {pr_id}: {e}") from e

    def _parse_changes(self, pr_id: int, entries: Optional[List[ChangeEntry]]) -> List[FileChange]:
        if entries is None:
            logger.warning(f"No 'changes' array found in diff response for PR {pr_id}")
            return []

        changes = []
        for entry in entries:
            # 폴더(tree) 항목은 제외
            if not entry.is_file:
                continue
            changes.append(FileChange(
                path=entry.item.path,
                kind=normalize_change_kind(entry.change_type),
            ))
        return changes
