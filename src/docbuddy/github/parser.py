"""
Patch Parser

Parses a single-file GitHub patch into the candidate lines worth
sending for documentation improvement.
"""

import re
import logging
from typing import List, Optional, Set

from ..models.patch import LineKind, PatchLine, CandidateLine
from .position import PositionCalculator


logger = logging.getLogger(__name__)


MARKDOWN_EXTENSIONS = ('md', 'mdx', 'markdown')


class PatchParser:
    """
    Parser for single-file unified diff patches.

    Classifies each patch line and selects added or replacement lines,
    resolving replace-vs-insert with a consumed set of deleted positions.
    """

    def __init__(self, position_calculator: Optional[PositionCalculator] = None):
        """
        Initialize patch parser.

        Args:
            position_calculator: Calculator shared with comment anchoring
        """
        self.position_calculator = position_calculator or PositionCalculator()

        # Markers left behind by previously accepted suggestions
        self.applied_suggestion_substrings = ('suggestion', 'Suggested', 'bot@')
        self.applied_suggestion_patterns = [
            re.compile(r'Co-authored-by:', re.IGNORECASE),
            re.compile(r'Apply suggestion from', re.IGNORECASE),
        ]

    def classify(self, line: str) -> LineKind:
        """
        Classify a raw patch line.

        Args:
            line: Raw patch line

        Returns:
            LineKind of the line
        """
        if line.startswith('@@ '):
            return LineKind.HUNK_HEADER
        if line.startswith('+++') or line.startswith('---') or line.startswith('\\'):
            return LineKind.META
        if line.startswith('+'):
            return LineKind.ADDED
        if line.startswith('-'):
            return LineKind.DELETED
        return LineKind.CONTEXT

    def parse_lines(self, patch: str) -> List[PatchLine]:
        """Split a patch into classified lines."""
        if not patch:
            return []
        return [PatchLine(raw_text=line, kind=self.classify(line)) for line in patch.split('\n')]

    def parse(self, patch: str) -> List[CandidateLine]:
        """
        Parse patch into ordered candidate lines.

        Args:
            patch: Raw patch text for one file

        Returns:
            List of CandidateLine objects in patch order
        """
        if not patch:
            return []

        lines = patch.split('\n')
        candidates = []
        deleted_positions: Set[int] = set()

        for index, patch_line in enumerate(self.parse_lines(patch)):
            if patch_line.kind == LineKind.DELETED:
                deleted_positions.add(self.position_calculator.position(lines, index))

            elif patch_line.kind == LineKind.ADDED:
                if not patch_line.content.strip():
                    continue

                position = self.position_calculator.position(lines, index)
                if position in deleted_positions:
                    # Replacement consumes the deleted position
                    deleted_positions.discard(position)

                candidates.append(CandidateLine(patch_line_index=index, text=patch_line.content))

        filtered = [c for c in candidates if not self.is_applied_suggestion(c.text)]
        if len(filtered) < len(candidates):
            logger.info(f"Skipped {len(candidates) - len(filtered)} lines with suggestion metadata")

        logger.debug(f"Parsed {len(filtered)} candidate lines from {len(lines)} patch lines")
        return filtered

    def is_applied_suggestion(self, text: str) -> bool:
        """
        Check if a line carries markers of an already-applied suggestion.

        Args:
            text: Candidate line text

        Returns:
            True if the line should not be suggested on again
        """
        if any(marker in text for marker in self.applied_suggestion_substrings):
            return True
        return any(pattern.search(text) for pattern in self.applied_suggestion_patterns)

    def get_file_extension(self, file_path: str) -> Optional[str]:
        """
        Get file extension from file path.

        Args:
            file_path: Path to file

        Returns:
            File extension or None
        """
        if '.' not in file_path:
            return None

        return file_path.split('.')[-1].lower()

    def is_markdown_file(self, file_path: str, extensions=MARKDOWN_EXTENSIONS) -> bool:
        """
        Check if file is a Markdown document based on extension.

        Args:
            file_path: Path to file
            extensions: Accepted extensions without the dot

        Returns:
            True if file is a Markdown document
        """
        extension = self.get_file_extension(file_path)
        return extension in extensions if extension else False
