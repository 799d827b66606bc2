"""Base adapter for turning a scanner's raw output into an AuditSummary."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Tuple, Union

from common_lib.errors import ScannerExecutionError
from src.core.data.audit import AuditSummary


class EcosystemAdapter(ABC):
    """
    One supported dependency ecosystem.

    Subclasses declare the manifest files that identify a project of their
    ecosystem, the install command template used for upgrade suggestions, and
    how the ecosystem's audit tool output maps onto an AuditSummary.
    """

    ecosystem: str = ""
    manifest_files: Tuple[str, ...] = ()
    # Formatted with ``name`` and ``target``.
    install_template: str = ""
    remediation: str = ""

    def detect(self, project_root: Union[str, Path]) -> bool:
        """
        Check whether the directory holds a project of this ecosystem.

        Args:
            project_root: Directory to inspect

        Returns:
            True if any of the ecosystem's manifest files exists
        """
        root = Path(project_root)
        return any((root / name).is_file() for name in self.manifest_files)

    def install_action(self, name: str, target: str) -> str:
        return self.install_template.format(name=name, target=target)

    def _load_json(self, raw: str) -> Any:
        """
        Parse raw scanner output.

        Raises:
            ScannerExecutionError: If the output is empty or not valid JSON
        """
        if raw is None or not raw.strip():
            raise ScannerExecutionError(self.ecosystem, "the audit tool produced no output.", self.remediation)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ScannerExecutionError(
                self.ecosystem,
                f"could not parse audit output as JSON ({exc.msg} at line {exc.lineno}).",
                self.remediation,
            ) from exc

    @abstractmethod
    def normalize(self, raw: str) -> AuditSummary:
        """
        Normalize raw audit tool output.

        Implementations must keep the finding order of the raw report and must
        raise ScannerExecutionError instead of returning an empty summary when
        the output cannot be understood.

        Args:
            raw: Raw stdout of the ecosystem's audit tool

        Returns:
            Normalized AuditSummary
        """
        pass
