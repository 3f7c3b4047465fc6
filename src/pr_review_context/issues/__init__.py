"""
Issue Tracker Integration

Issue reference extraction, the Jira client and the issue enricher.
"""

from .extractor import extract_issue_references
from .client import JiraClient
from .enricher import IssueEnricher, EnrichmentResult

__all__ = ['extract_issue_references', 'JiraClient', 'IssueEnricher', 'EnrichmentResult']
