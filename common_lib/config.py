"""공통 설정 모듈(Common configuration module)."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """시스템 환경설정(System environment settings)."""

    model_config = SettingsConfigDict(
        env_prefix="RISKLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="risklens", description="서비스 이름(Service name)")
    environment: str = Field(default="development", description="실행 환경(Runtime environment)")
    log_level: str = Field(default="INFO", description="로그 레벨(Log level)")

    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API 주소(GitHub REST API base URL)",
    )
    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("RISKLENS_GITHUB_TOKEN", "GITHUB_TOKEN"),
        description="GitHub 토큰, 비공개 저장소 및 높은 rate limit 용(GitHub token for private repos)",
    )
    github_timeout_seconds: float = Field(
        default=15.0,
        description="GitHub 요청 타임아웃(GitHub request timeout in seconds)",
    )

    scanner_timeout_seconds: float = Field(
        default=120.0,
        description="감사 도구 실행 타임아웃(Audit tool timeout in seconds)",
    )
    lockfile_timeout_seconds: float = Field(
        default=120.0,
        description="lockfile 생성 타임아웃(Lockfile generation timeout in seconds)",
    )
    npm_command: str = Field(default="npm", description="npm 실행 파일(npm executable)")
    pip_audit_command: str = Field(default="pip-audit", description="pip-audit 실행 파일(pip-audit executable)")
    python_command: str = Field(
        default="python",
        description="pip_audit 모듈 실행용 파이썬(Python used for `-m pip_audit` fallback)",
    )

    history_max_scans: int = Field(
        default=20,
        description="대상별 보관 스캔 수(Scans kept per target)",
    )
    summary_max_lines: int = Field(
        default=10,
        description="심각도별 요약 최대 줄 수(Max summary lines per severity)",
    )

    @field_validator("history_max_scans", "summary_max_lines")
    @classmethod
    def ensure_positive(cls, v: int) -> int:
        """Reject non-positive limits."""
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("github_token", mode="before")
    @classmethod
    def strip_token(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """설정 인스턴스 반환(Return a cached settings instance)."""

    return Settings()


def load_environment() -> None:
    """기본 환경변수를 로드(Load base environment variables)."""

    os.environ.setdefault("TZ", "UTC")
