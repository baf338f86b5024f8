"""
Suggestion Review

This module runs the suggestion pipeline over file patches and posts
review comments.
"""

from .orchestrator import SuggestionOrchestrator

__all__ = ['SuggestionOrchestrator']
