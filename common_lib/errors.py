"""공통 에러 클래스 정의(Common error classes)."""
from __future__ import annotations

from typing import Any, Dict, Optional


class AppException(Exception):
    """애플리케이션 기본 예외 클래스(Base application exception)."""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            status_code: HTTP-style status code used to classify the failure
            error_code: Machine-readable error code (e.g., "SCANNER_FAILED")
            message: Human-readable error message
            details: Additional error context (optional)
        """
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for tool responses."""
        response: Dict[str, Any] = {
            "error": {
                "code": self.error_code,
                "message": self.message,
            }
        }
        if self.details:
            response["error"]["details"] = self.details
        return response


class TargetValidationError(AppException):
    """유효하지 않은 스캔 대상(Invalid scan target - 400)."""

    def __init__(
        self,
        field: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize with validation context.

        Args:
            field: Target field that failed validation (e.g., "github_repo")
            reason: Why the value is invalid
            details: Additional context
        """
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(
            status_code=400,
            error_code="INVALID_TARGET",
            message=message,
            details=details or {"field": field, "reason": reason},
        )


class EcosystemUnsupportedError(AppException):
    """지원되는 프로젝트 매니페스트 없음(No supported manifest - 422)."""

    def __init__(
        self,
        target: str,
        location: str,
        hint: str = "",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = (
            f"No supported project found at {location} of {target}. "
            "Expected package.json (Node.js) or requirements.txt / pyproject.toml (Python)."
        )
        if hint:
            message += f" {hint}"
        super().__init__(
            status_code=422,
            error_code="ECOSYSTEM_UNSUPPORTED",
            message=message,
            details=details or {"target": target, "location": location},
        )


class ScannerExecutionError(AppException):
    """감사 도구 실행 실패(Audit tool could not run or produced bad output - 502)."""

    def __init__(
        self,
        ecosystem: str,
        reason: str,
        remediation: str = "",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize with scanner context.

        Args:
            ecosystem: Ecosystem whose scanner failed (e.g., "node", "python")
            reason: What went wrong
            remediation: What the user should install or run next
            details: Additional context
        """
        message = f"{ecosystem} audit failed: {reason}"
        if remediation:
            message += f" {remediation}"
        self.ecosystem = ecosystem
        self.reason = reason
        self.remediation = remediation
        super().__init__(
            status_code=502,
            error_code="SCANNER_FAILED",
            message=message,
            details=details or {"ecosystem": ecosystem, "reason": reason},
        )

    def with_context(self, **context: str) -> "ScannerExecutionError":
        """대상 정보 추가(Copy of this error naming where the scan ran).

        Keys already present in ``details`` are left unchanged.
        """
        added = {key: value for key, value in context.items() if key not in self.details}
        if not added:
            return self
        suffix = ", ".join(f"{key}: {value}" for key, value in added.items())
        return ScannerExecutionError(
            self.ecosystem,
            f"{self.reason} ({suffix})",
            self.remediation,
            details={**self.details, **added},
        )


class RemoteAccessError(AppException):
    """원격 저장소 접근 오류(Remote repository access failure)."""

    _STATUS_BY_KIND = {
        "not_found": 404,
        "access_denied": 403,
        "rate_limited": 429,
        "http_error": 502,
        "unavailable": 503,
    }

    def __init__(
        self,
        kind: str,
        repo: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize with remote access context.

        Args:
            kind: One of not_found, access_denied, rate_limited, http_error, unavailable
            repo: Repository identifier ("owner/repo")
            message: Human-readable message including the remediation
            details: Additional context
        """
        self.kind = kind
        self.repo = repo
        super().__init__(
            status_code=self._STATUS_BY_KIND.get(kind, 502),
            error_code=f"REMOTE_{kind.upper()}",
            message=message,
            details=details or {"kind": kind, "repo": repo},
        )
