"""
Source Control Integration

Azure DevOps client and the pull request resolver built on top of it.
"""

from .client import AzureDevOpsClient
from .resolver import PullRequestResolver, clean_ref_name, normalize_change_kind

__all__ = ['AzureDevOpsClient', 'PullRequestResolver', 'clean_ref_name', 'normalize_change_kind']
