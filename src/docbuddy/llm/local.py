"""
Local Text Generator

Runs generation on a local Hugging Face causal language model.
Models are loaded on first use and kept per model name.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

try:
    from transformers import AutoTokenizer, AutoModelForCausalLM
    import torch
except ImportError as e:
    logger = logging.getLogger(__name__)
    logger.error(f"Required ML dependencies not installed: {e}")
    logger.error("Install with: pip install 'docbuddy[local]'")
    raise

from ..models.suggestion import GenerationResult
from .generator import TextGenerator
from .prompts import GenerationRequest


logger = logging.getLogger(__name__)


@dataclass
class LocalGenerationConfig:
    """Configuration for local generation."""
    max_new_tokens: int = 512
    temperature: float = 0.7
    top_p: float = 0.9
    do_sample: bool = True


class LocalTextGenerator(TextGenerator):
    """
    Text generator backed by a local transformers model.

    The request's model name is used as the Hugging Face model id.
    """

    def __init__(self, device: Optional[str] = None, max_new_tokens: int = 512):
        """
        Initialize local text generator.

        Args:
            device: Device to run models on ('cpu', 'cuda', etc.)
            max_new_tokens: Upper bound of generated tokens per request
        """
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.generation_config = LocalGenerationConfig(max_new_tokens=max_new_tokens)
        self._models: Dict[str, Tuple[object, object]] = {}

    def _load(self, model_name: str):
        if model_name not in self._models:
            logger.info(f"Loading LLM model: {model_name}")
            tokenizer = AutoTokenizer.from_pretrained(model_name)
            model = AutoModelForCausalLM.from_pretrained(model_name)

            # Set pad token if not available
            if tokenizer.pad_token is None:
                tokenizer.pad_token = tokenizer.eos_token

            model.to(self.device)
            self._models[model_name] = (tokenizer, model)
            logger.info(f"Model loaded successfully on {self.device}")

        return self._models[model_name]

    def _generate_sync(self, request: GenerationRequest) -> str:
        tokenizer, model = self._load(request.model)

        prompt = f"{request.system}\n\n{request.prompt}" if request.system else request.prompt
        inputs = tokenizer.encode(prompt, return_tensors="pt").to(self.device)

        with torch.no_grad():
            outputs = model.generate(
                inputs,
                max_new_tokens=self.generation_config.max_new_tokens,
                temperature=self.generation_config.temperature,
                top_p=self.generation_config.top_p,
                do_sample=self.generation_config.do_sample,
                pad_token_id=tokenizer.pad_token_id,
                eos_token_id=tokenizer.eos_token_id,
                num_return_sequences=1
            )

        # Decode only the generated continuation
        return tokenizer.decode(outputs[0][inputs.shape[1]:], skip_special_tokens=True).strip()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            text = await asyncio.to_thread(self._generate_sync, request)
        except Exception as e:
            logger.error(f"Local text generation failed ({request.model}): {e}")
            return GenerationResult.failure(str(e))

        return GenerationResult.success(text)

    def clear_cache(self):
        """Release loaded models and free GPU memory."""
        self._models.clear()
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
        logger.info("Cleared model cache")
