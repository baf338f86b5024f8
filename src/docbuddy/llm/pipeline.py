"""
Suggestion Pipeline

Drives the two-stage generation for one candidate line (base
improvement, optional custom rule overlay) and decides the output
encoding of the final text.
"""

import asyncio
import logging
from typing import Optional, Tuple

from ..models.patch import CandidateLine
from ..models.suggestion import GenerationResult, RulesLookup, SuggestionEncoding, SuggestionResult
from ..rules.source import CustomRulesSource
from .generator import TextGenerator
from .prompts import GenerationRequest, PromptBuilder, REASON_MARKER, SUGGESTION_MARKER


logger = logging.getLogger(__name__)


class SuggestionPipeline:
    """
    Generates an improvement suggestion for a candidate line.

    Each external call reports failure as a value; the pipeline falls
    back to the previous stage's text instead of raising.
    """

    def __init__(
        self,
        generator: TextGenerator,
        prompt_builder: Optional[PromptBuilder] = None,
        rules_source: Optional[CustomRulesSource] = None
    ):
        """
        Initialize suggestion pipeline.

        Args:
            generator: Text generation backend
            prompt_builder: Builder for stage requests
            rules_source: Custom rules source; None disables the overlay
        """
        self.generator = generator
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.rules_source = rules_source

    async def run(
        self,
        candidate: CandidateLine,
        document: Optional[str] = None,
        author_email: Optional[str] = None
    ) -> Optional[SuggestionResult]:
        """
        Run the pipeline for one candidate line.

        Args:
            candidate: Line to improve
            document: Full file content, if available
            author_email: Author identity for custom rule lookup

        Returns:
            SuggestionResult, or None when base generation produced no text
        """
        base = await self.generator.generate(
            self.prompt_builder.build_suggestion_request(candidate.text, document)
        )
        if not base.ok:
            logger.info(f"No base suggestion for patch line {candidate.patch_line_index}")
            return None

        final_text = await self._apply_custom_rules(base.text, author_email)
        return self.decide_encoding(final_text, candidate.text)

    async def _apply_custom_rules(self, base_text: str, author_email: Optional[str]) -> str:
        """Apply the author's custom rules, keeping base_text on any failure."""
        if self.rules_source is None:
            return base_text

        try:
            lookup: RulesLookup = await asyncio.to_thread(self.rules_source.lookup, author_email)
        except Exception as e:
            logger.error(f"Error getting custom rules: {e}")
            return base_text

        if not lookup.found:
            return base_text

        formatted = await self._generate_overlay(
            self.prompt_builder.build_rules_format_request(lookup.rules)
        )
        if not formatted.ok:
            logger.warning("Custom rules could not be formatted, keeping base suggestion")
            return base_text

        customized = await self._generate_overlay(
            self.prompt_builder.build_custom_rules_request(base_text, formatted.text)
        )
        if not customized.ok:
            logger.warning("Custom rules application failed, keeping base suggestion")
            return base_text

        return customized.text

    async def _generate_overlay(self, request: GenerationRequest) -> GenerationResult:
        """Generate for an overlay stage; backend exceptions become failures."""
        try:
            return await self.generator.generate(request)
        except Exception as e:
            logger.error(f"Custom rules generation failed ({request.model}): {e}")
            return GenerationResult.failure(str(e))

    def decide_encoding(self, final_text: str, original_text: str) -> SuggestionResult:
        """
        Choose the output encoding of the final text.

        Args:
            final_text: Text returned by the last successful stage
            original_text: Candidate line text

        Returns:
            SuggestionResult
        """
        if REASON_MARKER in final_text and SUGGESTION_MARKER in final_text:
            reason, suggestion = self.split_reasoned(final_text)
            if not suggestion:
                # An empty suggestion block would delete the line on accept
                return SuggestionResult(suggestion_text=original_text, encoding=SuggestionEncoding.UNCHANGED)
            return SuggestionResult(
                suggestion_text=suggestion,
                encoding=SuggestionEncoding.REASONED,
                reason_text=reason,
            )

        if final_text.strip() == original_text.strip():
            return SuggestionResult(suggestion_text=final_text, encoding=SuggestionEncoding.UNCHANGED)

        return SuggestionResult(suggestion_text=final_text, encoding=SuggestionEncoding.PLAIN)

    def split_reasoned(self, text: str) -> Tuple[str, str]:
        """
        Split reasoned text into reason and suggestion.

        A suggestion marker at the start of a line wins over one inside
        the reason.
        """
        line_marker = f"\n{SUGGESTION_MARKER}"
        if line_marker in text:
            reason_part, _, suggestion_part = text.partition(line_marker)
        else:
            reason_part, _, suggestion_part = text.partition(SUGGESTION_MARKER)

        if REASON_MARKER in reason_part:
            reason_part = reason_part.split(REASON_MARKER, 1)[1]

        return reason_part.strip(), suggestion_part.strip()
