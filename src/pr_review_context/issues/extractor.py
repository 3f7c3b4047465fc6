"""
Issue Reference Extractor

Finds issue-tracker browse URLs in free text (typically the pull request
description) and returns the referenced issue keys.
"""

import re
from typing import List

from ..models.issue import IssueReference


ISSUE_URL_PATTERN = re.compile(r'https?://[^\s/]+/browse/([A-Z]+-\d+)', re.IGNORECASE)


def extract_issue_references(text: str) -> List[IssueReference]:
    """
    Extract issue references from text.

    Args:
        text: Free text to scan

    Returns:
        References in first-seen order, deduplicated case-insensitively
    """
    if not text:
        return []

    references = []
    seen = set()
    for match in ISSUE_URL_PATTERN.finditer(text):
        reference = IssueReference(match.group(1))
        if reference.key in seen:
            continue
        seen.add(reference.key)
        references.append(reference)

    return references
