"""
Review Data Models

리뷰 코멘트 및 결과 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import uuid


@dataclass
class ReviewComment:
    """GitHub PR 인라인 코멘트 형식"""
    path: str
    position: int
    body: str
    commit_id: str
    side: str = 'RIGHT'  # 'RIGHT' for new code, 'LEFT' for old code

    def __post_init__(self):
        """데이터 검증"""
        valid_sides = {'RIGHT', 'LEFT'}
        if self.side not in valid_sides:
            raise ValueError(f"Invalid side: {self.side}")

        if self.position <= 0:
            raise ValueError("Position must be positive")

        if not self.body.strip():
            raise ValueError("Comment body cannot be empty")

        if not self.path.strip():
            raise ValueError("Path cannot be empty")

    def to_payload(self) -> Dict:
        """GitHub API 요청 본문으로 변환"""
        return {
            'body': self.body,
            'commit_id': self.commit_id,
            'path': self.path,
            'line': self.position,
            'side': self.side,
        }


@dataclass
class FileSuggestionReport:
    """파일 단위 제안 결과"""
    file_path: str
    suggestions_created: int

    def __post_init__(self):
        """데이터 검증"""
        if self.suggestions_created < 0:
            raise ValueError("suggestions_created must be non-negative")


@dataclass
class PullRequestReview:
    """PR 단위 제안 결과"""
    review_id: str
    repository: str
    pr_number: int
    status: str
    files: List[FileSuggestionReport] = field(default_factory=list)
    processing_time: float = 0.0
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """데이터 검증"""
        if self.pr_number <= 0:
            raise ValueError("PR number must be positive")

        if '/' not in self.repository:
            raise ValueError("Repository must be in format 'owner/repo'")

        if self.processing_time < 0:
            raise ValueError("Processing time must be non-negative")

        valid_statuses = {'completed', 'skipped', 'failed'}
        if self.status not in valid_statuses:
            raise ValueError(f"Invalid status: {self.status}")

    @property
    def total_suggestions(self) -> int:
        """생성된 전체 제안 수"""
        return sum(f.suggestions_created for f in self.files)

    @classmethod
    def create_new(
        cls,
        repository: str,
        pr_number: int,
        files: List[FileSuggestionReport],
        processing_time: float,
        status: str = 'completed',
        error: Optional[str] = None,
    ) -> "PullRequestReview":
        """새로운 PR 제안 결과 생성"""
        return cls(
            review_id=str(uuid.uuid4()),
            repository=repository,
            pr_number=pr_number,
            status=status,
            files=files,
            processing_time=processing_time,
            error=error,
        )

    def to_dict(self) -> Dict:
        """응답용 딕셔너리로 변환"""
        return {
            'review_id': self.review_id,
            'repository': self.repository,
            'pr_number': self.pr_number,
            'status': self.status,
            'total_suggestions': self.total_suggestions,
            'files': [
                {'file_path': f.file_path, 'suggestions_created': f.suggestions_created}
                for f in self.files
            ],
            'processing_time': self.processing_time,
            'error': self.error,
            'created_at': self.created_at.isoformat(),
        }
