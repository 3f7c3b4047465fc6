"""
Pull Request Data Models

Pull Request 메타데이터 관련 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class ChangeKind(str, Enum):
    """파일 변경 종류"""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class FileChange:
    """PR에서 변경된 개별 파일"""
    path: str
    kind: ChangeKind

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("File path cannot be empty")
        if not isinstance(self.kind, ChangeKind):
            raise ValueError(f"Invalid change kind: {self.kind}")


@dataclass(frozen=True)
class PullRequestDetails:
    """Pull Request 전체 메타데이터"""
    id: int
    title: str
    description: str
    source_ref: str
    target_ref: str
    source_commit: str
    target_commit: str
    base_commit: str  # merge-base, used for every "before" lookup
    changes: Tuple[FileChange, ...] = ()

    def __post_init__(self):
        """데이터 검증"""
        if self.id <= 0:
            raise ValueError("Pull request id must be positive")
        if not self.base_commit:
            raise ValueError("Merge-base commit is required")
        # frozen 객체이므로 변경 목록도 튜플로 고정
        object.__setattr__(self, "changes", tuple(self.changes))

    @property
    def changed_paths(self) -> List[str]:
        """변경된 파일 경로 목록"""
        return [change.path for change in self.changes]
