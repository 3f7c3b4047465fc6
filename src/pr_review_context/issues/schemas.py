"""
Jira Wire Schemas

Pydantic models for the issue fields requested from the Jira REST API v2.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class AttachmentEntry(_Payload):
    filename: Optional[str] = None
    content: Optional[str] = None  # download URL
    size: Optional[int] = None
    mime_type: Optional[str] = Field(default=None, alias='mimeType')

    @property
    def is_complete(self) -> bool:
        return bool(self.filename) and bool(self.content)


class CommentAuthor(_Payload):
    display_name: Optional[str] = Field(default=None, alias='displayName')


class CommentEntry(_Payload):
    author: Optional[CommentAuthor] = None
    body: Optional[str] = None

    @property
    def author_name(self) -> str:
        return (self.author.display_name if self.author else None) or ''


class CommentPage(_Payload):
    # 개별 코멘트는 enricher에서 하나씩 검증
    comments: List[Any] = Field(default_factory=list)


class IssueFields(_Payload):
    summary: Optional[str] = None
    description: Optional[str] = None
    attachment: List[Any] = Field(default_factory=list)
    comment: Optional[CommentPage] = None

    @field_validator('attachment', mode='before')
    @classmethod
    def default_attachments(cls, v):
        return v if isinstance(v, list) else []

    @field_validator('comment', mode='before')
    @classmethod
    def default_comments(cls, v):
        return v if isinstance(v, dict) else None


class IssuePayload(_Payload):
    """GET /rest/api/2/issue/{key}"""
    key: Optional[str] = None
    fields: IssueFields
