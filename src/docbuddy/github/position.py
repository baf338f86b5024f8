"""
Position Calculator

Computes the file line position a GitHub review comment should be
anchored to, by replaying hunk headers of a single-file patch.
"""

import re
import logging
from typing import List, Optional

from ..models.patch import HunkMarker


logger = logging.getLogger(__name__)


class PositionCalculator:
    """
    Replays hunk-header state to address a patch line.

    Positions count forward from the most recent hunk's declared new-file
    start line through its added and context lines, skipping deletions.
    """

    def __init__(self):
        """Initialize position calculator."""
        self.hunk_header_pattern = re.compile(r'^@@ -\d+(?:,\d+)? \+(\d+)(?:,\d+)? @@')

    def parse_hunk_header(self, line: str) -> Optional[HunkMarker]:
        """
        Parse a hunk header line.

        Args:
            line: Raw patch line

        Returns:
            HunkMarker or None if the line is not a well-formed header
        """
        match = self.hunk_header_pattern.match(line)
        if not match:
            return None
        return HunkMarker(new_start=int(match.group(1)))

    def position(self, lines: List[str], target_index: int) -> int:
        """
        Calculate the position of a patch line.

        Only lines before target_index are replayed, so the target line
        itself is never counted.

        Args:
            lines: All lines of the patch
            target_index: Index of the line to address

        Returns:
            Line position, never less than 1
        """
        try:
            hunk_start = 0
            offset = 0

            for line in lines[:target_index]:
                if line.startswith('@@ '):
                    marker = self.parse_hunk_header(line)
                    if marker:
                        hunk_start = marker.new_start
                        offset = 0
                elif not line.startswith('-'):
                    offset += 1

            return max(hunk_start + offset, 1)

        except Exception as e:
            logger.error(f"Error calculating file position: {e}")
            return 1
