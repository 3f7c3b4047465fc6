"""
Azure DevOps Wire Schemas

Pydantic models for the subset of the Azure DevOps Git REST payloads the
resolver consumes. Nothing here is exposed outside the sourcecontrol package.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class CommitRef(_Payload):
    commit_id: str = Field(alias='commitId')


class PullRequestPayload(_Payload):
    """GET .../pullRequests/{id}"""
    pull_request_id: Optional[int] = Field(default=None, alias='pullRequestId')
    title: str
    description: Optional[str] = None
    source_ref_name: str = Field(alias='sourceRefName')
    target_ref_name: str = Field(alias='targetRefName')
    last_merge_source_commit: CommitRef = Field(alias='lastMergeSourceCommit')
    last_merge_target_commit: CommitRef = Field(alias='lastMergeTargetCommit')

    @field_validator('description')
    @classmethod
    def default_description(cls, v):
        return v or ''


class ChangeItem(_Payload):
    path: Optional[str] = None
    git_object_type: Optional[str] = Field(default=None, alias='gitObjectType')


class ChangeEntry(_Payload):
    item: Optional[ChangeItem] = None
    change_type: Optional[str] = Field(default=None, alias='changeType')

    @property
    def is_file(self) -> bool:
        return (
            self.item is not None
            and bool(self.item.path)
            and self.item.git_object_type == 'blob'
            and bool(self.change_type)
        )


class CommitDiffPayload(_Payload):
    """GET .../diffs/commits?diffCommonCommit=true"""
    base_commit: str = Field(alias='baseCommit')
    target_commit: Optional[str] = Field(default=None, alias='targetCommit')
    changes: Optional[List[ChangeEntry]] = None

    @field_validator('base_commit')
    @classmethod
    def require_base_commit(cls, v):
        if not v:
            raise ValueError('baseCommit must not be empty')
        return v
