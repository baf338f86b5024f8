"""
Custom Rules

This module provides author-scoped custom rule lookup.
"""

from .source import CustomRulesSource

__all__ = ['CustomRulesSource']
