"""
GitHub Comment Formatter

Renders suggestion results as GitHub review comment bodies with a
fenced suggestion block the reviewer can accept in one click.
"""

import logging
import re
from typing import Optional

from ..models.suggestion import SuggestionEncoding, SuggestionResult


logger = logging.getLogger(__name__)


REASON_PREFIX = "**Reason for improvement:**"
SUGGESTION_FENCE = "```"
SUGGESTION_LANGUAGE = "suggestion"


class SuggestionCommentFormatter:
    """
    Formats suggestion results for GitHub PR comments.

    Reasoned results get a reason line above the suggestion block,
    plain results get the block alone, unchanged results get no body.
    """

    def __init__(self):
        """Initialize suggestion comment formatter."""
        self.max_comment_length = 65536  # GitHub's comment limit

    def format(self, result: SuggestionResult) -> Optional[str]:
        """
        Format a suggestion result as a comment body.

        Args:
            result: SuggestionResult from the pipeline

        Returns:
            Comment body, or None when no comment should be posted
        """
        if result.encoding == SuggestionEncoding.UNCHANGED:
            return None

        if result.encoding == SuggestionEncoding.REASONED:
            body = "\n".join([
                f"{REASON_PREFIX} {self._single_line(result.reason_text)}",
                self._suggestion_block(result.suggestion_text),
            ])
        else:
            body = self._suggestion_block(result.suggestion_text)

        # A truncated suggestion block would corrupt the replacement
        if len(body) > self.max_comment_length:
            logger.warning(f"Suggestion comment too long ({len(body)} chars), skipping")
            return None

        return body

    def _suggestion_block(self, suggestion: str) -> str:
        """Fence the suggestion with more backticks than any run inside it."""
        longest_run = max((len(run) for run in re.findall(r"`+", suggestion)), default=0)
        fence = SUGGESTION_FENCE if longest_run < len(SUGGESTION_FENCE) else "`" * (longest_run + 1)
        return "\n".join([f"{fence}{SUGGESTION_LANGUAGE}", suggestion, fence])

    def _single_line(self, text: Optional[str]) -> str:
        """Collapse a reason onto one line."""
        return " ".join((text or "").split())
