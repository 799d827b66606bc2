"""Ecosystem detection over registered adapters."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

from common_lib.logger import get_logger
from src.core.normalizers.base import EcosystemAdapter
from src.core.normalizers.npm_audit import NpmAuditAdapter
from src.core.normalizers.pip_audit import PipAuditAdapter

logger = get_logger(__name__)


class AdapterRegistry:
    """생태계 어댑터 목록(Ordered adapter list). Earlier adapters win detection."""

    def __init__(self, adapters: Optional[Iterable[EcosystemAdapter]] = None) -> None:
        self._adapters: List[EcosystemAdapter] = []
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: EcosystemAdapter) -> None:
        if any(existing.ecosystem == adapter.ecosystem for existing in self._adapters):
            raise ValueError(f"Adapter for ecosystem '{adapter.ecosystem}' already registered")
        self._adapters.append(adapter)

    @property
    def adapters(self) -> List[EcosystemAdapter]:
        return list(self._adapters)

    @property
    def manifest_files(self) -> List[str]:
        return [name for adapter in self._adapters for name in adapter.manifest_files]

    def get(self, ecosystem: str) -> Optional[EcosystemAdapter]:
        for adapter in self._adapters:
            if adapter.ecosystem == ecosystem:
                return adapter
        return None

    def detect(self, project_root: Union[str, Path]) -> Optional[EcosystemAdapter]:
        """프로젝트 생태계 감지(Detect the project's ecosystem, None if unrecognized)."""

        for adapter in self._adapters:
            if adapter.detect(project_root):
                logger.debug("Detected %s project at %s", adapter.ecosystem, project_root)
                return adapter
        return None


def default_registry() -> AdapterRegistry:
    # node first: a directory with both manifests is scanned as a node project
    return AdapterRegistry([NpmAuditAdapter(), PipAuditAdapter()])
