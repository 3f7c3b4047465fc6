#!/usr/bin/env python3
"""
Review Context Demo

Demonstrates how to drive the review context pipeline stage by stage and
inspect the intermediate results.

Usage:
    python examples/review_context_demo.py <pr_id>

Environment:
    AZDO_ORGANIZATION, AZDO_PROJECT, AZDO_REPOSITORY_ID, AZDO_PAT,
    JIRA_BASE_URL, JIRA_USER, JIRA_TOKEN, REVIEW_PROMPT
"""

import asyncio
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pr_review_context import ReviewContextBuilder
from pr_review_context.config import ConfigManager
from pr_review_context.exceptions import ContextAssemblyError


async def run_demo(pr_id: int) -> None:
    config = ConfigManager().config
    builder = ReviewContextBuilder.from_config(config)

    builder.set_pull_request_id(pr_id)

    await builder.add_pull_request_details()
    details = builder.context.pull_request_details
    print(f"\nPR {details.id}: {details.title}")
    print(f"   {details.source_ref} -> {details.target_ref}")
    print(f"   Merge base: {details.base_commit}")
    print(f"   Files changed: {len(details.changes)}")

    await builder.add_diffs()
    for file_diff in builder.context.diffs:
        print(f"   {file_diff.path}: +{file_diff.additions}/-{file_diff.deletions}")

    await builder.add_issues()
    for issue in builder.context.issues:
        print(f"\n{issue.key}: {issue.summary}")
        print(f"   Attachments: {len(issue.attachments)}  Comments: {len(issue.comments)}")

    await builder.format_output()
    context = await builder.build()

    if context.skipped_items:
        print(f"\nSkipped {len(context.skipped_items)} items:")
        for item in context.skipped_items:
            print(f"   [{item.kind}] {item.key}: {item.reason}")

    print(f"\nReview markdown written to: {context.output_path}")


def main():
    if len(sys.argv) != 2:
        print("Usage: python review_context_demo.py <pr_id>")
        sys.exit(1)

    try:
        pr_id = int(sys.argv[1])
    except ValueError:
        print("Error: PR id must be an integer")
        sys.exit(1)

    try:
        asyncio.run(run_demo(pr_id))
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except ContextAssemblyError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
