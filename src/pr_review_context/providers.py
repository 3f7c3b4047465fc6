"""
Collaborator Interfaces

Boundary protocols for the external source-control and issue-tracker
services. Vendor JSON never crosses these interfaces into the core models;
the resolver and enricher translate it through the wire schemas.
"""

from typing import Any, Dict, Protocol


class SourceControlProvider(Protocol):
    """Source-control operations required by the pipeline."""

    def get_pull_request(self, pr_id: int) -> Dict[str, Any]:
        """Return raw pull request metadata."""
        ...

    def get_commit_diff(self, base_version: str, target_version: str) -> Dict[str, Any]:
        """Return the merge-base commit and change list between two refs."""
        ...

    def get_file_content(self, path: str, commit_id: str) -> bytes:
        """Return file bytes at a commit, raising NotFoundError if absent."""
        ...


class IssueTrackerProvider(Protocol):
    """Issue-tracker operations required by the pipeline."""

    def get_issue(self, key: str) -> Dict[str, Any]:
        """Return raw issue fields (summary, description, attachments, comments)."""
        ...

    def download_attachment(self, url: str) -> bytes:
        """Download attachment bytes from the attachment endpoint."""
        ...

    def browse_url(self, key: str) -> str:
        """Return the canonical browse URL for an issue key."""
        ...
