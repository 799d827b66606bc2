"""Scanner output adapters, one per supported ecosystem."""

from src.core.normalizers.base import EcosystemAdapter
from src.core.normalizers.npm_audit import NpmAuditAdapter
from src.core.normalizers.pip_audit import PipAuditAdapter
from src.core.normalizers.registry import AdapterRegistry, default_registry

__all__ = [
    "EcosystemAdapter",
    "NpmAuditAdapter",
    "PipAuditAdapter",
    "AdapterRegistry",
    "default_registry",
]
