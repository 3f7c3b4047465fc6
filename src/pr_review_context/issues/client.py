"""
Jira API Client

Handles Jira authentication and communication for issue details and
attachment downloads.
"""

import logging
from typing import Any, Dict

from ..config import JiraConfig
from ..transport import ApiClient, create_session


logger = logging.getLogger(__name__)

ISSUE_FIELDS = "summary,description,attachment,comment"


class JiraClient(ApiClient):
    """
    Jira REST API v2 client.

    Attachment content is served from a different endpoint than the REST
    API, so downloads go through a separate session that carries the same
    credential.
    """

    service_name = "Jira"

    def __init__(self, config: JiraConfig):
        """
        Initialize Jira client.

        Args:
            config: Jira connection settings
        """
        if not config.base_url:
            raise ValueError("Jira base URL is required")
        if not config.user or not config.token:
            raise ValueError("Jira user and token are required")

        self.config = config
        self.site_url = config.base_url.rstrip('/')
        auth = (config.user, config.token)

        session = create_session(auth=auth, headers={'Accept': 'application/json'})
        super().__init__(f"{self.site_url}/rest/api/2", session, timeout_seconds=config.timeout_seconds)

        self.attachment_session = create_session(auth=auth)

    def get_issue(self, key: str) -> Dict[str, Any]:
        """
        Get issue fields.

        Args:
            key: Issue key (e.g. ABC-123)

        Returns:
            Raw issue data
        """
        logger.info(f"Fetching Jira issue {key}")

        response = self._make_request('GET', f'issue/{key}', params={'fields': ISSUE_FIELDS})
        return self._json(response)

    def download_attachment(self, url: str) -> bytes:
        """
        Download attachment content.

        Args:
            url: Attachment content URL

        Returns:
            Attachment bytes
        """
        logger.debug(f"Downloading attachment {url}")

        response = self._send(self.attachment_session, 'GET', url, timeout=self.timeout_seconds)
        return response.content

    def browse_url(self, key: str) -> str:
        """Canonical browse URL of an issue."""
        return f"{self.site_url}/browse/{key}"
