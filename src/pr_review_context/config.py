"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass
from typing import Optional, Dict, Any
from pathlib import Path
import logging


@dataclass
class AzureDevOpsConfig:
    """Azure DevOps API 설정"""
    organization: Optional[str] = None
    project: Optional[str] = None
    repository_id: Optional[str] = None
    personal_access_token: Optional[str] = None
    api_base_url: str = "https://dev.azure.com"
    api_version: str = "7.2-preview"
    timeout_seconds: int = 30


@dataclass
class JiraConfig:
    """Jira API 설정"""
    base_url: Optional[str] = None  # e.g. https://your-domain.atlassian.net
    user: Optional[str] = None
    token: Optional[str] = None
    timeout_seconds: int = 30


@dataclass
class ReviewConfig:
    """리뷰 컨텍스트 생성 설정"""
    output_directory: str = "CodeReviews"
    review_prompt: Optional[str] = None
    include_unchanged_lines_in_diff: bool = False
    max_workers: int = 4


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
    azure_devops: AzureDevOpsConfig
    jira: JiraConfig
    review: ReviewConfig
    logging: LoggingConfig
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            azure_devops=AzureDevOpsConfig(
                organization=os.getenv("AZDO_ORGANIZATION"),
                project=os.getenv("AZDO_PROJECT"),
                repository_id=os.getenv("AZDO_REPOSITORY_ID"),
                personal_access_token=os.getenv("AZDO_PAT"),
                api_base_url=os.getenv("AZDO_API_URL", "https://dev.azure.com"),
                api_version=os.getenv("AZDO_API_VERSION", "7.2-preview"),
                timeout_seconds=int(os.getenv("AZDO_TIMEOUT", "30")),
            ),
            jira=JiraConfig(
                base_url=os.getenv("JIRA_BASE_URL"),
                user=os.getenv("JIRA_USER"),
                token=os.getenv("JIRA_TOKEN"),
                timeout_seconds=int(os.getenv("JIRA_TIMEOUT", "30")),
            ),
            review=ReviewConfig(
                output_directory=os.getenv("REVIEW_OUTPUT_DIR", "CodeReviews"),
                review_prompt=os.getenv("REVIEW_PROMPT"),
                include_unchanged_lines_in_diff=os.getenv("INCLUDE_UNCHANGED_LINES", "false").lower() == "true",
                max_workers=int(os.getenv("REVIEW_MAX_WORKERS", "4")),
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
        # 프롬프트는 별도 파일로 관리 가능 (상대 경로는 설정 파일 기준)
        prompt_file = review_data.pop('review_prompt_file', None)
        if prompt_file and not review_data.get('review_prompt'):
            prompt_path = Path(prompt_file)
            if not prompt_path.is_absolute():
                prompt_path = config_file.parent / prompt_path
            review_data['review_prompt'] = prompt_path.read_text(encoding='utf-8')

        return cls(
            azure_devops=AzureDevOpsConfig(**config_data.get('azure_devops', {})),
            jira=JiraConfig(**config_data.get('jira', {})),
            review=ReviewConfig(**review_data),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # Azure DevOps 필수 항목
        if not self.azure_devops.organization:
            errors.append("Azure DevOps organization is required")
        if not self.azure_devops.project:
            errors.append("Azure DevOps project is required")
        if not self.azure_devops.repository_id:
            errors.append("Azure DevOps repository id is required")
        if not self.azure_devops.personal_access_token:
            errors.append("Azure DevOps personal access token is required")

        # Jira 필수 항목
        if not self.jira.base_url:
            errors.append("Jira base URL is required")
        if not self.jira.user or not self.jira.token:
            errors.append("Jira user and token are required")

        # 리뷰 프롬프트는 필수
        if not self.review.review_prompt or not self.review.review_prompt.strip():
            errors.append("Review prompt is required")

        if self.review.max_workers < 1:
            errors.append("max_workers must be at least 1")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'azure_devops': {
                'organization': self.azure_devops.organization,
                'project': self.azure_devops.project,
                'repository_id': self.azure_devops.repository_id,
                'api_base_url': self.azure_devops.api_base_url,
                'api_version': self.azure_devops.api_version,
                'timeout_seconds': self.azure_devops.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'jira': {
                'base_url': self.jira.base_url,
                'user': self.jira.user,
                'timeout_seconds': self.jira.timeout_seconds,
            },
            'review': {
                'output_directory': self.review.output_directory,
                'review_prompt': self.review.review_prompt,
                'include_unchanged_lines_in_diff': self.review.include_unchanged_lines_in_diff,
                'max_workers': self.review.max_workers,
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
        level = "DEBUG" if self._config.debug else self._config.logging.level.upper()
        logging.basicConfig(
            level=getattr(logging, level),
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


_config_manager: Optional[ConfigManager] = None


def get_config() -> AppConfig:
    """현재 설정 반환 (최초 호출 시 환경 변수에서 로드)"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
