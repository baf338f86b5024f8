"""
Unit tests for configuration and generator selection.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from unittest.mock import AsyncMock, Mock
from openai import OpenAIError

from docbuddy.config import AppConfig, ConfigManager, GenerationConfig, GitHubConfig
from docbuddy.llm.generator import OpenAITextGenerator, create_text_generator
from docbuddy.llm.prompts import GenerationRequest


class TestAppConfig:
    """Unit tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.generation.provider == "openai"
        assert config.generation.model == "gpt-4o-mini"
        assert config.generation.rules_formatter_model == "gpt-4"
        assert config.review.markdown_extensions == ("md", "mdx", "markdown")
        assert config.github.token is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "gpt-4o")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")
        monkeypatch.setenv("CUSTOM_RULES_URL", "https://rules.example.com")
        monkeypatch.setenv("MARKDOWN_EXTENSIONS", ".md, .RST")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = AppConfig.from_env()

        assert config.generation.model == "gpt-4o"
        assert config.github.token == "ghp_secret"
        assert config.rules.url == "https://rules.example.com"
        assert config.review.markdown_extensions == ("md", "rst")
        config.validate()

    def test_from_yaml(self, tmp_path):
        config_file = tmp_path / "docbuddy.yaml"
        config_file.write_text(
            "generation:\n"
            "  provider: local\n"
            "  model: distilgpt2\n"
            "review:\n"
            "  markdown_extensions: [md, .txt]\n"
            "debug: true\n",
            encoding="utf-8"
        )

        config = AppConfig.from_yaml(str(config_file))

        assert config.generation.provider == "local"
        assert config.generation.model == "distilgpt2"
        assert config.review.markdown_extensions == ("md", "txt")
        assert config.debug is True

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(str(tmp_path / "missing.yaml"))

    def test_validate_requires_github_token(self, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        with pytest.raises(ValueError, match="GitHub token is required"):
            AppConfig.from_env().validate()

        AppConfig(github=GitHubConfig(token="ghp_secret")).validate()

    def test_validate_collects_errors(self):
        config = AppConfig(generation=GenerationConfig(provider="unknown", timeout_seconds=0))
        config.logging.level = "LOUD"

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "Invalid LLM provider" in message
        assert "LLM timeout" in message
        assert "Invalid log level" in message

    def test_to_dict_excludes_secrets(self):
        config = AppConfig()
        config.github.token = "ghp_secret"
        config.generation.api_key = "sk-secret"

        data = config.to_dict()

        assert "token" not in data['github']
        assert "api_key" not in data['generation']
        assert "ghp_secret" not in str(data)
        assert "sk-secret" not in str(data)


class TestConfigManager:
    """Unit tests for ConfigManager."""

    def test_rejects_invalid_config(self):
        config = AppConfig(generation=GenerationConfig(provider="unknown"))
        config.github.token = "ghp_secret"

        with pytest.raises(ValueError):
            ConfigManager(config)

    def test_file_logging(self, tmp_path):
        config = AppConfig()
        config.github.token = "ghp_secret"
        config.logging.file_path = str(tmp_path / "docbuddy.log")
        root_logger = logging.getLogger()
        before = list(root_logger.handlers)

        try:
            manager = ConfigManager(config)
            added = [h for h in root_logger.handlers if h not in before]

            assert manager.config is config
            assert any(isinstance(h, RotatingFileHandler) for h in added)
        finally:
            for handler in root_logger.handlers[:]:
                if handler not in before:
                    root_logger.removeHandler(handler)
                    handler.close()


class TestTextGeneratorSelection:
    """Unit tests for generator backends."""

    def test_create_openai_generator(self):
        generator = create_text_generator(GenerationConfig(api_key="sk-test"))

        assert isinstance(generator, OpenAITextGenerator)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_text_generator(GenerationConfig(provider="unknown"))

    @pytest.mark.asyncio
    async def test_openai_generator_success(self):
        completion = Mock()
        completion.choices = [Mock(message=Mock(content="reason: r\nsuggestion: s"))]
        client = Mock()
        client.chat.completions.create = AsyncMock(return_value=completion)
        generator = OpenAITextGenerator(client=client)

        result = await generator.generate(GenerationRequest(model="gpt-4o-mini", system="", prompt="Hello"))

        assert result.ok
        assert result.text == "reason: r\nsuggestion: s"
        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "Hello"}],
        )

    @pytest.mark.asyncio
    async def test_openai_generator_system_role(self):
        completion = Mock()
        completion.choices = [Mock(message=Mock(content="ok"))]
        client = Mock()
        client.chat.completions.create = AsyncMock(return_value=completion)
        generator = OpenAITextGenerator(client=client)

        await generator.generate(GenerationRequest(model="gpt-4", system="Format rules", prompt="be brief"))

        messages = client.chat.completions.create.call_args[1]['messages']
        assert messages == [
            {"role": "system", "content": "Format rules"},
            {"role": "user", "content": "be brief"},
        ]

    @pytest.mark.asyncio
    async def test_openai_generator_failure(self):
        client = Mock()
        client.chat.completions.create = AsyncMock(side_effect=OpenAIError("service unavailable"))
        generator = OpenAITextGenerator(client=client)

        result = await generator.generate(GenerationRequest(model="gpt-4o-mini", system="", prompt="Hello"))

        assert not result.ok
        assert "service unavailable" in result.error
