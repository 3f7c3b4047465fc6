"""
Review Formatter

This module renders the assembled review context as Markdown.
"""

from .markdown import MarkdownFormatter, render_markdown, wiki_to_markdown

__all__ = ['MarkdownFormatter', 'render_markdown', 'wiki_to_markdown']
