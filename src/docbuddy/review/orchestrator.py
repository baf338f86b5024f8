"""
Suggestion Orchestrator

Runs the suggestion pipeline over every candidate line of one file's
patch and posts the resulting review comments, one line at a time.
"""

import asyncio
import logging
from typing import List, Optional

from ..formatting.github import SuggestionCommentFormatter
from ..github.client import GitHubClient
from ..github.parser import PatchParser
from ..github.position import PositionCalculator
from ..llm.pipeline import SuggestionPipeline
from ..models.patch import CandidateLine
from ..models.review import ReviewComment


logger = logging.getLogger(__name__)


class SuggestionOrchestrator:
    """
    Creates documentation suggestions for a single file patch.

    Lines are processed strictly in patch order. A failure on one line
    is logged and counted as a line without a comment; it never stops
    the batch.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        pipeline: SuggestionPipeline,
        parser: Optional[PatchParser] = None,
        formatter: Optional[SuggestionCommentFormatter] = None
    ):
        """
        Initialize suggestion orchestrator.

        Args:
            github_client: Comment sink and file content source
            pipeline: Suggestion pipeline
            parser: Patch parser
            formatter: Comment formatter
        """
        self.github_client = github_client
        self.pipeline = pipeline
        self.parser = parser or PatchParser()
        self.position_calculator: PositionCalculator = self.parser.position_calculator
        self.formatter = formatter or SuggestionCommentFormatter()

    async def create_documentation_suggestions(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        file_path: str,
        patch: str,
        author_email: Optional[str] = None
    ) -> int:
        """
        Create suggestion comments for the new lines of a file patch.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            commit_id: Head commit SHA the comments are anchored to
            file_path: Path of the patched file
            patch: Patch text for the file
            author_email: Author identity for custom rule lookup

        Returns:
            Number of comments created; 0 on any batch-level failure
        """
        try:
            lines = patch.split('\n')
            candidates = self.parser.parse(patch)

            if not candidates:
                logger.info("No documentation lines found to improve")
                return 0

            logger.info(f"Found {len(candidates)} lines to improve in file {file_path}")

            document = await self._get_document(owner, repo, commit_id, file_path)

            success_count = 0
            for candidate in candidates:
                try:
                    if await self._process_line(
                        owner, repo, pr_number, commit_id, file_path,
                        candidate, lines, document, author_email
                    ):
                        success_count += 1
                except Exception as e:
                    logger.error(f"Error processing line {candidate.patch_line_index} of {file_path}: {e}")

            logger.info(f"Created {success_count} individual line suggestions for {file_path}")
            return success_count

        except Exception as e:
            logger.error(f"Error analyzing patch and creating suggestions for {file_path}: {e}")
            return 0

    async def _get_document(self, owner: str, repo: str, commit_id: str, file_path: str) -> Optional[str]:
        """Fetch full file content for context; None when unavailable."""
        try:
            document = await asyncio.to_thread(
                self.github_client.get_file_content, owner, repo, commit_id, file_path
            )
        except Exception as e:
            logger.error(f"Error getting file content for context: {e}")
            return None

        if document:
            logger.info(f"Retrieved full content of {file_path} for context")
        else:
            logger.info(f"Could not retrieve full content of {file_path}, proceeding with limited context")
        return document

    async def _process_line(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        file_path: str,
        candidate: CandidateLine,
        lines: List[str],
        document: Optional[str],
        author_email: Optional[str]
    ) -> bool:
        """Run the pipeline for one line and post its comment. Returns True if posted."""
        result = await self.pipeline.run(candidate, document, author_email)
        if result is None or not result.should_comment:
            return False

        body = self.formatter.format(result)
        if body is None:
            return False

        position = self.position_calculator.position(lines, candidate.patch_line_index)
        comment = ReviewComment(path=file_path, position=position, body=body, commit_id=commit_id)

        await asyncio.to_thread(self.github_client.create_review_comment, owner, repo, pr_number, comment)

        logger.info(f"Created {result.encoding.value} suggestion for {file_path} at position {position}")
        return True
