"""
PR Review Context

Assembles a single Markdown review context document for a pull request from
its metadata, a computed source diff and the linked issue-tracker details.
"""

__version__ = "1.0.0"

from .api import ReviewContextBuilder, generate_review_context

__all__ = ["ReviewContextBuilder", "generate_review_context"]
