"""
Data Models

PR 리뷰 컨텍스트 생성 시스템의 핵심 데이터 모델들
"""

from .pull_request import ChangeKind, FileChange, PullRequestDetails
from .diff import LineKind, DiffLine, FileDiff
from .issue import IssueReference, Issue, Attachment, Comment
from .context import PipelineStage, ReviewContext, SkippedItem

__all__ = [
    "ChangeKind",
    "FileChange",
    "PullRequestDetails",
    "LineKind",
    "DiffLine",
    "FileDiff",
    "IssueReference",
    "Issue",
    "Attachment",
    "Comment",
    "PipelineStage",
    "ReviewContext",
    "SkippedItem",
]
