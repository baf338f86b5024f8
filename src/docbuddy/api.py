"""
Main DocBuddy API

Main interface that runs documentation suggestions for every changed
Markdown file of a pull request.
"""

import asyncio
import logging
from typing import Dict, List, Optional
from datetime import datetime

from .config import AppConfig, get_config
from .github.client import GitHubClient
from .github.parser import PatchParser
from .llm.generator import TextGenerator, create_text_generator
from .llm.pipeline import SuggestionPipeline
from .llm.prompts import PromptBuilder
from .models.review import FileSuggestionReport, PullRequestReview
from .review.orchestrator import SuggestionOrchestrator
from .rules.source import CustomRulesSource


logger = logging.getLogger(__name__)


class DocBuddyAPI:
    """
    Main DocBuddy API interface.

    Orchestrates the pull request flow:
    1. List changed files and keep Markdown documents with a patch
    2. Resolve the author identity for custom rules
    3. Create line suggestions for each document, file by file
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        github_client: Optional[GitHubClient] = None,
        generator: Optional[TextGenerator] = None,
        rules_source: Optional[CustomRulesSource] = None
    ):
        """
        Initialize DocBuddy API.

        Args:
            config: Optional configuration object
            github_client: Optional preconfigured GitHub client
            generator: Optional text generation backend
            rules_source: Optional custom rules source
        """
        self.config = config or get_config()

        logger.info("Initializing DocBuddy API components...")

        self.github_client = github_client or GitHubClient(
            self.config.github.token,
            base_url=self.config.github.api_base_url,
            timeout=self.config.github.timeout_seconds
        )

        if rules_source is None and self.config.review.custom_rules_enabled:
            rules_source = CustomRulesSource(
                self.config.rules.url,
                timeout=self.config.rules.timeout_seconds
            )

        self.parser = PatchParser()
        self.pipeline = SuggestionPipeline(
            generator=generator or create_text_generator(self.config.generation),
            prompt_builder=PromptBuilder(
                model=self.config.generation.model,
                rules_formatter_model=self.config.generation.rules_formatter_model
            ),
            rules_source=rules_source
        )
        self.orchestrator = SuggestionOrchestrator(
            github_client=self.github_client,
            pipeline=self.pipeline,
            parser=self.parser
        )

        logger.info("DocBuddy API initialized successfully")

    async def review_pull_request(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        commit_id: str,
        author_email: Optional[str] = None
    ) -> PullRequestReview:
        """
        Create documentation suggestions for a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            commit_id: Head commit SHA
            author_email: Author identity; resolved from the head commit if omitted

        Returns:
            PullRequestReview summary; never raises
        """
        start_time = datetime.now()
        repository = f"{owner}/{repo}"

        logger.info(f"Starting documentation suggestions: {repository}#{pr_number}@{commit_id}")

        try:
            files_data = await asyncio.to_thread(
                self.github_client.get_pull_request_files, owner, repo, pr_number
            )
            documents = self._select_documents(files_data)

            if not documents:
                logger.info(f"No Markdown changes in {repository}#{pr_number}")
                return PullRequestReview.create_new(
                    repository=repository,
                    pr_number=pr_number,
                    files=[],
                    processing_time=self._elapsed(start_time),
                    status='skipped'
                )

            if author_email is None:
                author_email = await self._resolve_author_email(owner, repo, commit_id)

            reports = []
            for file_data in documents:
                created = await self.orchestrator.create_documentation_suggestions(
                    owner=owner,
                    repo=repo,
                    pr_number=pr_number,
                    commit_id=commit_id,
                    file_path=file_data['filename'],
                    patch=file_data['patch'],
                    author_email=author_email
                )
                reports.append(FileSuggestionReport(file_path=file_data['filename'], suggestions_created=created))

            review = PullRequestReview.create_new(
                repository=repository,
                pr_number=pr_number,
                files=reports,
                processing_time=self._elapsed(start_time)
            )

            logger.info(
                f"Documentation suggestions completed: {repository}#{pr_number} "
                f"({review.total_suggestions} suggestions, {review.processing_time:.2f}s)"
            )
            return review

        except Exception as e:
            logger.error(f"Documentation suggestions failed: {repository}#{pr_number} - {e}")
            return PullRequestReview.create_new(
                repository=repository,
                pr_number=pr_number,
                files=[],
                processing_time=self._elapsed(start_time),
                status='failed',
                error=str(e)
            )

    def _select_documents(self, files_data: List[Dict]) -> List[Dict]:
        """Keep changed Markdown files that carry a patch."""
        documents = []

        for file_data in files_data:
            if file_data.get('status') == 'removed':
                continue

            if not file_data.get('patch'):
                continue

            if not self.parser.is_markdown_file(file_data['filename'], self.config.review.markdown_extensions):
                continue

            documents.append(file_data)

        logger.info(f"Filtered to {len(documents)} Markdown files")
        return documents

    async def _resolve_author_email(self, owner: str, repo: str, commit_id: str) -> Optional[str]:
        """Resolve the head commit author email; None when unavailable."""
        try:
            return await asyncio.to_thread(
                self.github_client.get_commit_author_email, owner, repo, commit_id
            )
        except Exception as e:
            logger.warning(f"Could not resolve author email for {commit_id}: {e}")
            return None

    def _elapsed(self, start_time: datetime) -> float:
        return (datetime.now() - start_time).total_seconds()
