"""
LLM Suggestion Engine

This module provides prompt building, text generation backends and the
suggestion pipeline for documentation lines.
"""

from .prompts import PromptBuilder, GenerationRequest
from .generator import TextGenerator, OpenAITextGenerator, create_text_generator
from .pipeline import SuggestionPipeline

__all__ = [
    'PromptBuilder',
    'GenerationRequest',
    'TextGenerator',
    'OpenAITextGenerator',
    'create_text_generator',
    'SuggestionPipeline',
]
