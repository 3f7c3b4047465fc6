"""
HTTP Client Base

Shared requests session setup (authentication, retry strategy) and error
translation for the vendor API clients.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import NotFoundError, UpstreamUnavailable


logger = logging.getLogger(__name__)

USER_AGENT = "PR-Review-Context/1.0"


def create_session(auth: Optional[Tuple[str, str]] = None, headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """Create requests session with retry strategy and authentication."""
    session = requests.Session()

    retry_strategy = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    if auth is not None:
        session.auth = auth
    session.headers.update({'User-Agent': USER_AGENT})
    if headers:
        session.headers.update(headers)

    return session


class ApiClient:
    """
    Base class for the vendor REST clients.

    Owns a requests session and translates transport failures and
    non-success responses into NotFoundError / UpstreamUnavailable so
    the pipeline never handles requests exceptions directly.
    """

    service_name = "API"

    def __init__(self, base_url: str, session: requests.Session, timeout_seconds: int = 30):
        self.base_url = base_url.rstrip('/')
        self.session = session
        self.timeout_seconds = timeout_seconds

    def _make_request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to the service.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to base_url
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            NotFoundError: For 404 responses
            UpstreamUnavailable: For other non-success responses and transport errors
        """
        if not url.startswith(('http://', 'https://')):
            url = f"{self.base_url}/{url.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout_seconds)

        return self._send(self.session, method, url, **kwargs)

    def _send(self, session: requests.Session, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{self.service_name} request failed: {e}")
            raise UpstreamUnavailable(f"{self.service_name} request failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{self.service_name} resource not found: {url}")

        if not response.ok:
            error_data = self._error_payload(response)
            raise UpstreamUnavailable(
                f"{self.service_name} error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data,
            )

        return response

    @staticmethod
    def _error_payload(response: requests.Response) -> Dict:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {'message': response.text[:200]}
        return data if isinstance(data, dict) else {}

    def _json(self, response: requests.Response) -> Any:
        """
        Parse a successful response body as JSON.

        Raises:
            UpstreamUnavailable: If the body is not JSON (e.g. an SSO login page)
        """
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{self.service_name} returned a non-JSON body ({response.status_code}): {e}")
            raise UpstreamUnavailable(
                f"{self.service_name} returned an unexpected non-JSON response ({response.status_code})",
                status_code=response.status_code,
                response_data={'message': response.text[:200]},
            ) from e
