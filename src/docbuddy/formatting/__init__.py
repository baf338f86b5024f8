"""
Comment Formatter

This module renders suggestion results as GitHub PR comment bodies.
"""

from .github import SuggestionCommentFormatter

__all__ = ['SuggestionCommentFormatter']
