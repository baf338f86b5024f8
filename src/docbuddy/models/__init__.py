"""
Data Models

DocBuddy 시스템의 핵심 데이터 모델들
"""

from .patch import LineKind, PatchLine, HunkMarker, CandidateLine
from .suggestion import (
    SuggestionEncoding,
    SuggestionResult,
    GenerationResult,
    RulesLookup,
    CustomRuleRecord,
    CustomRulesResponse,
)
from .review import ReviewComment, FileSuggestionReport, PullRequestReview

__all__ = [
    "LineKind",
    "PatchLine",
    "HunkMarker",
    "CandidateLine",
    "SuggestionEncoding",
    "SuggestionResult",
    "GenerationResult",
    "RulesLookup",
    "CustomRuleRecord",
    "CustomRulesResponse",
    "ReviewComment",
    "FileSuggestionReport",
    "PullRequestReview",
]
