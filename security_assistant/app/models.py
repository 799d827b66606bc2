"""데이터 모델 정의(Data model definitions)."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ScanTarget(BaseModel):
    """스캔 대상 입력 모델(Scan target input model)."""

    project_path: Optional[str] = Field(
        default=None,
        description=(
            "로컬 프로젝트 경로(Local path to the project root; Node: package.json, "
            "Python: requirements.txt or pyproject.toml). Ignored if github_repo is set."
        ),
    )
    github_repo: Optional[str] = Field(
        default=None,
        description='GitHub 저장소(GitHub repo to scan: "owner/repo" or full URL)',
    )
    ref: Optional[str] = Field(
        default=None,
        description="브랜치, 태그 또는 커밋(Branch, tag, or commit SHA; defaults to the default branch)",
    )
    subpath: Optional[str] = Field(
        default=None,
        description='저장소 하위 디렉터리(Subdirectory inside the repo, e.g. "frontend")',
    )

    @property
    def is_remote(self) -> bool:
        return bool(self.github_repo)
