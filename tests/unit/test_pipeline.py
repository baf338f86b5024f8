"""
Unit tests for SuggestionPipeline.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from docbuddy.llm.pipeline import SuggestionPipeline
from docbuddy.llm.prompts import DOCUMENTATION_PROMPT, PromptBuilder, RULES_FORMATTER_PROMPT
from docbuddy.models.patch import CandidateLine
from docbuddy.models.suggestion import GenerationResult, RulesLookup, SuggestionEncoding


CANDIDATE = CandidateLine(patch_line_index=3, text="New improved line")
BASE_TEXT = "reason: Clearer wording.\nsuggestion: A newly improved line."


def rules_source_returning(lookup):
    source = Mock()
    source.lookup.return_value = lookup
    return source


class TestBaseGeneration:
    """Tests for the base generation stage."""

    @pytest.mark.asyncio
    async def test_reasoned_result(self, make_generator):
        pipeline = SuggestionPipeline(make_generator([BASE_TEXT]))

        result = await pipeline.run(CANDIDATE)

        assert result.encoding == SuggestionEncoding.REASONED
        assert result.reason_text == "Clearer wording."
        assert result.suggestion_text == "A newly improved line."
        assert result.should_comment

    @pytest.mark.asyncio
    async def test_plain_result_without_markers(self, make_generator):
        pipeline = SuggestionPipeline(make_generator(["A completely rewritten line."]))

        result = await pipeline.run(CANDIDATE)

        assert result.encoding == SuggestionEncoding.PLAIN
        assert result.reason_text is None
        assert result.suggestion_text == "A completely rewritten line."

    @pytest.mark.asyncio
    async def test_unchanged_result(self, make_generator):
        pipeline = SuggestionPipeline(make_generator(["  New improved line \n"]))

        result = await pipeline.run(CANDIDATE)

        assert result.encoding == SuggestionEncoding.UNCHANGED
        assert not result.should_comment

    @pytest.mark.asyncio
    async def test_generation_failure_skips_line(self, make_generator):
        pipeline = SuggestionPipeline(make_generator([GenerationResult.failure("service down")]))

        assert await pipeline.run(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_empty_generation_skips_line(self, make_generator):
        pipeline = SuggestionPipeline(make_generator([""]))

        assert await pipeline.run(CANDIDATE) is None

    @pytest.mark.asyncio
    async def test_request_without_document(self, make_generator):
        generator = make_generator([BASE_TEXT])
        pipeline = SuggestionPipeline(generator, PromptBuilder(model="test-model"))

        await pipeline.run(CANDIDATE, document=None)

        request = generator.requests[0]
        assert request.model == "test-model"
        assert request.system == DOCUMENTATION_PROMPT
        assert request.prompt == "New improved line"

    @pytest.mark.asyncio
    async def test_request_with_document(self, make_generator):
        generator = make_generator([BASE_TEXT])
        pipeline = SuggestionPipeline(generator)
        document = "# Guide {not a field}\n\nNew improved line\n"

        await pipeline.run(CANDIDATE, document=document)

        request = generator.requests[0]
        assert request.system == ""
        assert request.prompt.startswith(DOCUMENTATION_PROMPT)
        assert document in request.prompt
        assert request.prompt.endswith("New improved line")


class TestCustomRuleOverlay:
    """Tests for the custom rule overlay stage."""

    @pytest.mark.asyncio
    async def test_no_rules_record_keeps_base(self, make_generator):
        generator = make_generator([BASE_TEXT])
        source = rules_source_returning(RulesLookup(rules=None))
        pipeline = SuggestionPipeline(generator, rules_source=source)

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        source.lookup.assert_called_once_with("author@example.com")
        assert len(generator.requests) == 1
        assert result.reason_text == "Clearer wording."
        assert "Custom rules" not in result.reason_text

    @pytest.mark.asyncio
    async def test_rules_applied(self, make_generator):
        customized = "reason: Clearer wording. Custom rules were applied\nsuggestion: A newly improved line! 🎉"
        generator = make_generator([BASE_TEXT, "Rules:\n- STYLE: Use emojis", customized])
        source = rules_source_returning(RulesLookup(rules="use emojis"))
        pipeline = SuggestionPipeline(
            generator,
            PromptBuilder(model="base-model", rules_formatter_model="formatter-model"),
            rules_source=source
        )

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert len(generator.requests) == 3
        format_request, apply_request = generator.requests[1], generator.requests[2]
        assert format_request.model == "formatter-model"
        assert format_request.system == RULES_FORMATTER_PROMPT
        assert format_request.prompt == "use emojis"
        assert apply_request.model == "base-model"
        assert apply_request.system == ""
        assert BASE_TEXT in apply_request.prompt
        assert "- STYLE: Use emojis" in apply_request.prompt

        assert result.encoding == SuggestionEncoding.REASONED
        assert result.reason_text == "Clearer wording. Custom rules were applied"
        assert result.suggestion_text == "A newly improved line! 🎉"

    @pytest.mark.asyncio
    async def test_rules_formatting_failure_keeps_base(self, make_generator):
        generator = make_generator([BASE_TEXT, GenerationResult.failure("timeout")])
        pipeline = SuggestionPipeline(generator, rules_source=rules_source_returning(RulesLookup(rules="be brief")))

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert len(generator.requests) == 2
        assert result.suggestion_text == "A newly improved line."

    @pytest.mark.asyncio
    async def test_rules_application_failure_keeps_base(self, make_generator):
        generator = make_generator([BASE_TEXT, "- BREVITY: Be brief", GenerationResult.failure("timeout")])
        pipeline = SuggestionPipeline(generator, rules_source=rules_source_returning(RulesLookup(rules="be brief")))

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert len(generator.requests) == 3
        assert result.reason_text == "Clearer wording."
        assert result.suggestion_text == "A newly improved line."

    @pytest.mark.asyncio
    async def test_rules_lookup_error_keeps_base(self, make_generator):
        generator = make_generator([BASE_TEXT])
        pipeline = SuggestionPipeline(generator, rules_source=rules_source_returning(RulesLookup(error="503")))

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert len(generator.requests) == 1
        assert result.suggestion_text == "A newly improved line."

    @pytest.mark.asyncio
    async def test_rules_lookup_exception_keeps_base(self, make_generator):
        generator = make_generator([BASE_TEXT])
        source = Mock()
        source.lookup.side_effect = RuntimeError("unexpected")
        pipeline = SuggestionPipeline(generator, rules_source=source)

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert result.suggestion_text == "A newly improved line."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overlay_responses", [
        [RuntimeError("connection reset")],
        [GenerationResult.success("- BREVITY: Be brief"), RuntimeError("connection reset")],
    ])
    async def test_overlay_generation_exception_keeps_base(self, overlay_responses):
        generator = Mock()
        generator.generate = AsyncMock(side_effect=[GenerationResult.success(BASE_TEXT)] + overlay_responses)
        pipeline = SuggestionPipeline(generator, rules_source=rules_source_returning(RulesLookup(rules="be brief")))

        result = await pipeline.run(CANDIDATE, author_email="author@example.com")

        assert generator.generate.await_count == 1 + len(overlay_responses)
        assert result.encoding == SuggestionEncoding.REASONED
        assert result.suggestion_text == "A newly improved line."


class TestEncodingDecision:
    """Tests for the output encoding decision."""

    def setup_method(self):
        self.pipeline = SuggestionPipeline(Mock())

    def test_marker_inside_reason(self):
        text = "reason: The old suggestion: was vague.\nsuggestion: Fixed text."

        result = self.pipeline.decide_encoding(text, "Old text.")

        assert result.reason_text == "The old suggestion: was vague."
        assert result.suggestion_text == "Fixed text."

    def test_markers_on_one_line(self):
        result = self.pipeline.decide_encoding("reason: Shorter. suggestion: Short text.", "Longer text here.")

        assert result.encoding == SuggestionEncoding.REASONED
        assert result.reason_text == "Shorter."
        assert result.suggestion_text == "Short text."

    def test_multiline_suggestion(self):
        text = "reason: Split sentence.\nsuggestion: First part.\nSecond part."

        result = self.pipeline.decide_encoding(text, "First part, second part.")

        assert result.suggestion_text == "First part.\nSecond part."

    def test_empty_suggestion_is_unchanged(self):
        result = self.pipeline.decide_encoding("reason: Nothing to add.\nsuggestion:   ", "Some line")

        assert result.encoding == SuggestionEncoding.UNCHANGED

    def test_only_reason_marker_is_plain(self):
        result = self.pipeline.decide_encoding("reason: just a reason", "Some line")

        assert result.encoding == SuggestionEncoding.PLAIN
        assert result.suggestion_text == "reason: just a reason"
