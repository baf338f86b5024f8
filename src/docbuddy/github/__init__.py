"""
GitHub Integration Layer

This module provides GitHub API integration for review comment creation,
file content retrieval, and single-file patch parsing.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import PatchParser
from .position import PositionCalculator

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'PatchParser', 'PositionCalculator']
