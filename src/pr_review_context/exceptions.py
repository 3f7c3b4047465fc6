"""
Context Assembly Exceptions

Typed errors raised by the context assembly pipeline and its collaborators.
"""

from typing import Dict, Optional


class ContextAssemblyError(Exception):
    """Base class for all pipeline errors."""


class PreconditionViolation(ContextAssemblyError):
    """A stage was invoked before its required state was reached."""


class UpstreamError(ContextAssemblyError):
    """An external service returned an error or could not be reached."""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class NotFoundError(UpstreamError):
    """The requested pull request, issue or file does not exist upstream."""
    def __init__(self, message: str, response_data: Optional[Dict] = None):
        super().__init__(message, status_code=404, response_data=response_data)


class UpstreamUnavailable(UpstreamError):
    """Transport failure or non-success response from an external service."""


class OperationCancelled(ContextAssemblyError):
    """Cooperative cancellation was observed."""
    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)
