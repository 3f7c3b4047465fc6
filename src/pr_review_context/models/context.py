"""
Review Context Models

파이프라인 실행 동안 누적되는 작업 컨텍스트
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

from .diff import FileDiff
from .issue import Issue
from .pull_request import PullRequestDetails


class PipelineStage(IntEnum):
    """파이프라인 단계 (순방향으로만 진행)"""
    EMPTY = 0
    ID_SET = 1
    DETAILS_FETCHED = 2
    DIFFS_ADDED = 3
    ISSUES_ADDED = 4
    RENDERED = 5
    PERSISTED = 6


@dataclass(frozen=True)
class SkippedItem:
    """soft-fail 처리되어 건너뛴 항목"""
    kind: str  # 'file' or 'issue' or 'attachment'
    key: str
    reason: str


@dataclass
class ReviewContext:
    """한 번의 실행 동안 드라이버가 단독으로 소유하는 작업 상태"""
    review_prompt: Optional[str] = None
    output_directory: Optional[str] = None
    pull_request_id: Optional[int] = None
    pull_request_details: Optional[PullRequestDetails] = None
    diffs: List[FileDiff] = field(default_factory=list)
    issues: List[Issue] = field(default_factory=list)
    output_filename: Optional[str] = None
    generated_markdown: Optional[str] = None
    skipped_items: List[SkippedItem] = field(default_factory=list)
    stage: PipelineStage = PipelineStage.EMPTY

    @property
    def pull_request_folder(self) -> Optional[Path]:
        """PR 산출물 디렉토리 (<output>/PR-<id>)"""
        if not self.output_directory or self.pull_request_id is None:
            return None
        return Path(self.output_directory) / f"PR-{self.pull_request_id}"

    @property
    def output_path(self) -> Optional[Path]:
        """최종 마크다운 파일 경로"""
        folder = self.pull_request_folder
        if folder is None or not self.output_filename:
            return None
        return folder / self.output_filename
