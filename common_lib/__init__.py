"""공통 라이브러리 패키지 초기화(Common library package init)."""
from . import config, errors, github_client, logger

__all__ = [
    "config",
    "errors",
    "github_client",
    "logger",
]
