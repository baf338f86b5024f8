"""
Suggestion Data Models

개선 제안 파이프라인 관련 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional
import logging
from pydantic import BaseModel, ValidationError, field_validator


logger = logging.getLogger(__name__)


class SuggestionEncoding(Enum):
    """최종 출력 인코딩"""
    REASONED = "reasoned"
    PLAIN = "plain"
    UNCHANGED = "unchanged"


@dataclass
class SuggestionResult:
    """후보 라인 하나에 대한 파이프라인 결과"""
    suggestion_text: str
    encoding: SuggestionEncoding
    reason_text: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.encoding == SuggestionEncoding.REASONED and self.reason_text is None:
            raise ValueError("Reasoned result requires reason_text")
        if self.encoding == SuggestionEncoding.PLAIN and self.reason_text is not None:
            raise ValueError("Plain result cannot carry reason_text")

    @property
    def should_comment(self) -> bool:
        """코멘트 생성 여부"""
        return self.encoding != SuggestionEncoding.UNCHANGED


@dataclass(frozen=True)
class GenerationResult:
    """텍스트 생성 호출 결과 (성공 텍스트 또는 실패 표시)"""
    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text or "")

    @classmethod
    def failure(cls, error: str) -> "GenerationResult":
        return cls(text="", error=error)


@dataclass(frozen=True)
class RulesLookup:
    """커스텀 규칙 조회 결과"""
    rules: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        """작성자 규칙이 존재하는지 확인"""
        return self.error is None and bool(self.rules and self.rules.strip())


# Pydantic models for rules source validation
class CustomRuleRecord(BaseModel):
    """커스텀 규칙 레코드"""
    email: str
    rules: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if not v.strip():
            raise ValueError('Email cannot be empty')
        return v.strip()


class CustomRulesResponse(BaseModel):
    """커스텀 규칙 소스 응답"""
    data: List[CustomRuleRecord] = []

    @field_validator('data', mode='before')
    @classmethod
    def drop_malformed_records(cls, v):
        """잘못된 레코드는 건너뛰고 나머지 작성자 규칙은 유지"""
        if not isinstance(v, list):
            return v

        records = []
        for index, item in enumerate(v):
            try:
                records.append(CustomRuleRecord.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed custom rules record {index}: {e.error_count()} errors")
        return records

    def rules_for(self, email: str) -> Optional[str]:
        """작성자 이메일에 해당하는 규칙 반환"""
        for record in self.data:
            if record.email == email:
                return record.rules
        return None
