"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
from pathlib import Path
import logging


def _split_extensions(value: str) -> Tuple[str, ...]:
    return tuple(ext.strip().lstrip('.').lower() for ext in value.split(',') if ext.strip())


@dataclass
class GenerationConfig:
    """텍스트 생성 설정"""
    provider: str = "openai"  # 'openai' or 'local'
    model: str = "gpt-4o-mini"
    rules_formatter_model: str = "gpt-4"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout_seconds: int = 60
    max_new_tokens: int = 512


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class RulesSourceConfig:
    """커스텀 규칙 소스 설정"""
    url: Optional[str] = None
    timeout_seconds: int = 10


@dataclass
class ReviewConfig:
    """제안 생성 설정"""
    markdown_extensions: Tuple[str, ...] = ("md", "mdx", "markdown")
    custom_rules_enabled: bool = True


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    rules: RulesSourceConfig = field(default_factory=RulesSourceConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            generation=GenerationConfig(
                provider=os.getenv("LLM_PROVIDER", "openai"),
                model=os.getenv("LLM_MODEL", "gpt-4o-mini"),
                rules_formatter_model=os.getenv("RULES_FORMATTER_MODEL", "gpt-4"),
                api_key=os.getenv("OPENAI_API_KEY"),
                base_url=os.getenv("OPENAI_BASE_URL"),
                timeout_seconds=int(os.getenv("LLM_TIMEOUT", "60")),
                max_new_tokens=int(os.getenv("LLM_MAX_NEW_TOKENS", "512")),
            ),
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            rules=RulesSourceConfig(
                url=os.getenv("CUSTOM_RULES_URL"),
                timeout_seconds=int(os.getenv("CUSTOM_RULES_TIMEOUT", "10")),
            ),
            review=ReviewConfig(
                markdown_extensions=_split_extensions(os.getenv("MARKDOWN_EXTENSIONS", "md,mdx,markdown")),
                custom_rules_enabled=os.getenv("CUSTOM_RULES_ENABLED", "true").lower() == "true",
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        review_data = dict(config_data.get('review', {}))
        if 'markdown_extensions' in review_data:
            extensions = review_data['markdown_extensions']
            if isinstance(extensions, str):
                review_data['markdown_extensions'] = _split_extensions(extensions)
            else:
                review_data['markdown_extensions'] = tuple(str(ext).lstrip('.').lower() for ext in extensions)

        return cls(
            generation=GenerationConfig(**config_data.get('generation', {})),
            github=GitHubConfig(**config_data.get('github', {})),
            rules=RulesSourceConfig(**config_data.get('rules', {})),
            review=ReviewConfig(**review_data),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 생성 백엔드 확인
        valid_providers = {'openai', 'local'}
        if self.generation.provider not in valid_providers:
            errors.append(f"Invalid LLM provider: {self.generation.provider}")

        if not self.generation.model:
            errors.append("LLM model is required")

        if self.generation.timeout_seconds <= 0:
            errors.append("LLM timeout must be positive")

        # GitHub 토큰 확인
        if not self.github.token:
            errors.append("GitHub token is required")

        # 타임아웃 검증
        if self.github.timeout_seconds <= 0:
            errors.append("GitHub timeout must be positive")

        if self.rules.timeout_seconds <= 0:
            errors.append("Custom rules timeout must be positive")

        if not self.review.markdown_extensions:
            errors.append("At least one Markdown extension is required")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'generation': {
                'provider': self.generation.provider,
                'model': self.generation.model,
                'rules_formatter_model': self.generation.rules_formatter_model,
                'base_url': self.generation.base_url,
                'timeout_seconds': self.generation.timeout_seconds,
                'max_new_tokens': self.generation.max_new_tokens,
                # 보안상 API 키는 제외
            },
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'rules': {
                'url': self.rules.url,
                'timeout_seconds': self.rules.timeout_seconds,
            },
            'review': {
                'markdown_extensions': list(self.review.markdown_extensions),
                'custom_rules_enabled': self.review.custom_rules_enabled,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            # 루트 로거에 핸들러 추가
            root_logger = logging.getLogger()
            root_logger.addHandler(handler)


# 전역 설정 관리자 인스턴스 (최초 사용 시 생성)
_config_manager: Optional[ConfigManager] = None


def get_config() -> AppConfig:
    """현재 설정 반환"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
