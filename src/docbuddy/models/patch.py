"""
Patch Data Models

단일 파일 unified diff 패치 관련 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum


class LineKind(Enum):
    """패치 라인 종류"""
    HUNK_HEADER = "hunk-header"
    ADDED = "added"
    DELETED = "deleted"
    CONTEXT = "context"
    META = "meta"


@dataclass(frozen=True)
class PatchLine:
    """패치의 원본 라인 한 줄"""
    raw_text: str
    kind: LineKind

    @property
    def content(self) -> str:
        """sigil을 제외한 라인 내용"""
        if self.kind in (LineKind.ADDED, LineKind.DELETED):
            return self.raw_text[1:]
        if self.kind == LineKind.CONTEXT and self.raw_text.startswith(' '):
            return self.raw_text[1:]
        return self.raw_text


@dataclass(frozen=True)
class HunkMarker:
    """hunk 헤더에서 파싱한 정보"""
    new_start: int

    def __post_init__(self):
        """데이터 검증"""
        if self.new_start < 0:
            raise ValueError("new_start must be non-negative")


@dataclass(frozen=True)
class CandidateLine:
    """개선 제안 대상 라인"""
    patch_line_index: int
    text: str

    def __post_init__(self):
        """데이터 검증"""
        if self.patch_line_index < 0:
            raise ValueError("patch_line_index must be non-negative")
        if not self.text.strip():
            raise ValueError("Candidate text cannot be empty")
