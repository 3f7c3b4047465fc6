"""
Azure DevOps API Client

Handles Azure DevOps authentication and communication for pull request
metadata, commit diffs and file content lookups.
"""

import logging
from typing import Any, Dict

from ..config import AzureDevOpsConfig
from ..transport import ApiClient, create_session


logger = logging.getLogger(__name__)


class AzureDevOpsClient(ApiClient):
    """
    Azure DevOps Git REST client.

    Provides methods for:
    - Pull request metadata retrieval
    - Commit diff between two refs (with merge-base)
    - File content at a specific commit
    """

    service_name = "Azure DevOps"

    def __init__(self, config: AzureDevOpsConfig):
        """
        Initialize Azure DevOps client.

        Args:
            config: Azure DevOps connection settings
        """
        if not config.personal_access_token:
            raise ValueError("Azure DevOps personal access token is required")

        self.config = config
        self.api_version = config.api_version
        base_url = (
            f"{config.api_base_url.rstrip('/')}/{config.organization}/{config.project}"
            f"/_apis/git/repositories/{config.repository_id}"
        )
        # PAT는 빈 사용자명과 함께 Basic 인증으로 전달
        session = create_session(auth=('', config.personal_access_token))
        super().__init__(base_url, session, timeout_seconds=config.timeout_seconds)

    def get_pull_request(self, pr_id: int) -> Dict[str, Any]:
        """
        Get pull request information.

        Args:
            pr_id: Pull request id

        Returns:
            Raw pull request data
        """
        logger.info(f"Fetching pull request {pr_id}")

        response = self._make_request(
            'GET', f'pullRequests/{pr_id}',
            params={'api-version': self.api_version}
        )
        return self._json(response)

    def get_commit_diff(self, base_version: str, target_version: str) -> Dict[str, Any]:
        """
        Get the diff between two branch versions, including the common commit.

        Args:
            base_version: Branch name used as the diff base
            target_version: Branch name used as the diff target

        Returns:
            Raw commit diff data with baseCommit and changes
        """
        logger.info(f"Fetching commit diff {base_version}...{target_version}")

        response = self._make_request(
            'GET', 'diffs/commits',
            params={
                'baseVersion': base_version,
                'targetVersion': target_version,
                'diffCommonCommit': 'true',
                'api-version': self.api_version,
            }
        )
        return self._json(response)

    def get_file_content(self, path: str, commit_id: str) -> bytes:
        """
        Get file content at a commit.

        Args:
            path: Repository path of the file
            commit_id: Commit to read the file at

        Returns:
            Raw file bytes

        Raises:
            NotFoundError: If the file does not exist at that commit
        """
        logger.debug(f"Fetching content of {path} at {commit_id}")

        response = self._make_request(
            'GET', 'items',
            params={
                'path': path,
                'versionType': 'commit',
                'version': commit_id,
                '$format': 'text',
                'api-version': f"{self.api_version}.1",
            },
            headers={'Accept': 'text/plain, application/octet-stream'},
        )
        return response.content
