"""
DocBuddy

GitHub Pull Request Markdown 문서 개선 제안 시스템의 백엔드 구현체
"""

__version__ = "1.0.0"

from .api import DocBuddyAPI

__all__ = ["DocBuddyAPI"]
