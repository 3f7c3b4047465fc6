"""
Diff Data Models

파일 단위 라인 diff 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class LineKind(str, Enum):
    """diff 라인 분류"""
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffLine:
    """분류된 diff 라인 (줄바꿈 문자 포함)"""
    kind: LineKind
    text: str

    @property
    def prefix(self) -> str:
        """unified diff 접두 문자"""
        if self.kind is LineKind.ADDED:
            return "+"
        if self.kind is LineKind.REMOVED:
            return "-"
        return " "


@dataclass
class FileDiff:
    """파일 하나의 diff"""
    path: str
    lines: List[DiffLine] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("File path cannot be empty")

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.ADDED)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.REMOVED)

    @property
    def has_changes(self) -> bool:
        """추가/삭제 라인 존재 여부"""
        return any(line.kind is not LineKind.UNCHANGED for line in self.lines)

    def reconstruct_before(self) -> str:
        """removed + unchanged 라인으로 변경 전 내용 복원"""
        return "".join(line.text for line in self.lines if line.kind is not LineKind.ADDED)

    def reconstruct_after(self) -> str:
        """added + unchanged 라인으로 변경 후 내용 복원"""
        return "".join(line.text for line in self.lines if line.kind is not LineKind.REMOVED)
