"""
Text Generator

Text generation backends behind one contract: a request goes in, a
GenerationResult comes out. Backends never raise on service failure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from ..config import GenerationConfig
from ..models.suggestion import GenerationResult
from .prompts import GenerationRequest


logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Base class for text generation backends."""

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate text for a request.

        Args:
            request: GenerationRequest with model, system and prompt

        Returns:
            GenerationResult; failures are reported, not raised
        """


class OpenAITextGenerator(TextGenerator):
    """
    Hosted generation through an OpenAI-compatible chat completion API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60,
        client: Optional[AsyncOpenAI] = None
    ):
        """
        Initialize hosted text generator.

        Args:
            api_key: API key (falls back to OPENAI_API_KEY)
            base_url: Optional base URL for compatible services
            timeout: Request timeout in seconds
            client: Preconfigured client, mainly for tests
        """
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def _build_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        messages = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.append({"role": "user", "content": request.prompt})
        return messages

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            completion = await self.client.chat.completions.create(
                model=request.model,
                messages=self._build_messages(request),
            )
        except OpenAIError as e:
            logger.error(f"Text generation failed ({request.model}): {e}")
            return GenerationResult.failure(str(e))

        if not completion.choices:
            return GenerationResult.failure("Empty completion")

        return GenerationResult.success(completion.choices[0].message.content or "")


def create_text_generator(config: GenerationConfig) -> TextGenerator:
    """
    Create the configured text generation backend.

    Args:
        config: GenerationConfig section

    Returns:
        TextGenerator instance
    """
    if config.provider == "local":
        # Local backend pulls in transformers and torch
        from .local import LocalTextGenerator

        return LocalTextGenerator(max_new_tokens=config.max_new_tokens)

    if config.provider == "openai":
        return OpenAITextGenerator(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    raise ValueError(f"Unknown LLM provider: {config.provider}")
