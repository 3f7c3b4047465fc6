"""
Issue Data Models

이슈 트래커 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class IssueReference:
    """이슈 키 참조 (대소문자 구분 없음)"""
    key: str

    def __post_init__(self):
        """데이터 검증 및 정규화"""
        if not self.key or "-" not in self.key:
            raise ValueError(f"Invalid issue key: {self.key!r}")
        object.__setattr__(self, "key", self.key.upper())

    @property
    def project(self) -> str:
        return self.key.rsplit("-", 1)[0]

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Attachment:
    """이슈 첨부파일"""
    filename: str
    url: str
    content: bytes = field(repr=False)

    @property
    def extension(self) -> str:
        """소문자 확장자 (점 포함)"""
        _, dot, ext = self.filename.rpartition(".")
        return f".{ext.lower()}" if dot else ""


@dataclass(frozen=True)
class Comment:
    """이슈 코멘트"""
    author: str
    body: str


@dataclass
class Issue:
    """이슈 상세 정보"""
    key: str
    url: str
    summary: str
    description: str
    attachments: List[Attachment] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        if not self.key:
            raise ValueError("Issue key cannot be empty")
