"""
Shared test fixtures.
"""

from typing import List, Union
from unittest.mock import Mock

import pytest

from docbuddy.llm.generator import TextGenerator
from docbuddy.llm.prompts import GenerationRequest
from docbuddy.models.suggestion import GenerationResult


SCENARIO_PATCH = "@@ -1,2 +1,3 @@\n context\n-old line\n+New improved line\n"


class FakeTextGenerator(TextGenerator):
    """Returns queued responses and records every request."""

    def __init__(self, responses: List[Union[str, GenerationResult]] = None):
        self.responses = list(responses or [])
        self.requests: List[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        if not self.responses:
            return GenerationResult.failure("no queued response")
        response = self.responses.pop(0)
        if isinstance(response, GenerationResult):
            return response
        return GenerationResult.success(response)


@pytest.fixture
def make_generator():
    """Factory for FakeTextGenerator instances."""
    return FakeTextGenerator


@pytest.fixture
def github_client():
    """GitHub client double with file content available."""
    client = Mock()
    client.get_file_content.return_value = "# Title\n\ncontext\nNew improved line\n"
    client.create_review_comment.return_value = {"id": 1}
    client.get_commit_author_email.return_value = "author@example.com"
    return client
