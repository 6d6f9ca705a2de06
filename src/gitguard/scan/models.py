"""Data models for the gitguard.scan module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gitguard.auth.models import Preferences, Tier


class Severity(str, Enum):
    """Severity of a finding, most severe first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Return 0 for critical up to 4 for info."""
        return list(Severity).index(self)


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Remote scan features to request."""

    include_ai: bool = False
    include_dependencies: bool = False
    include_secrets: bool = False

    @classmethod
    def resolve(
        cls,
        tier: Tier | None,
        preferences: Preferences,
        *,
        ai: bool | None = None,
        dependencies: bool | None = None,
        secrets: bool | None = None,
    ) -> ScanOptions:
        """Combine explicit flags with tier-gated account defaults.

        An explicit flag wins; otherwise AI analysis defaults on for pro and
        premier accounts that enabled it, dependency and secret scanning for
        premier accounts that enabled them.

        Examples:
            >>> ScanOptions.resolve(Tier.PRO, Preferences(ai_scan=True, secret_scan=True))
            ScanOptions(include_ai=True, include_dependencies=False, include_secrets=False)
        """
        premium = tier in (Tier.PRO, Tier.PREMIER)
        premier = tier is Tier.PREMIER
        return cls(
            include_ai=ai if ai is not None else premium and preferences.ai_scan,
            include_dependencies=dependencies if dependencies is not None else premier and preferences.dependency_scan,
            include_secrets=secrets if secrets is not None else premier and preferences.secret_scan,
        )

    def to_dict(self) -> dict[str, bool]:
        """Serialize to the wire mapping."""
        return {
            "includeAI": self.include_ai,
            "includeDependencies": self.include_dependencies,
            "includeSecrets": self.include_secrets,
        }


@dataclass(frozen=True, slots=True)
class Finding:
    """One vulnerability reported by the scanning service."""

    id: str
    severity: Severity
    type: str
    file: str
    line: int
    description: str
    code: str | None = None
    remediation: str | None = None
    ai_remediation: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        """Build from one ``vulnerabilities`` entry."""
        try:
            severity = Severity(str(data.get("severity", "info")).lower())
        except ValueError:
            severity = Severity.INFO
        return cls(
            id=str(data.get("id", "")),
            severity=severity,
            type=str(data.get("type", "")),
            file=str(data.get("file", "")),
            line=int(data.get("line") or 0),
            description=str(data.get("description", "")),
            code=data.get("code"),
            remediation=data.get("remediation"),
            ai_remediation=data.get("aiRemediation"),
        )


@dataclass(slots=True)
class ScanResult:
    """Answer of ``POST /scan``."""

    scan_id: str
    status: str
    findings: list[Finding] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)
    files_scanned: int = 0
    duration_ms: int = 0
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScanResult:
        """Build from the scan answer; ``raw`` keeps the document for ``--json``."""
        findings = [Finding.from_dict(item) for item in data.get("vulnerabilities") or []]
        findings.sort(key=lambda f: (f.severity.rank, f.file, f.line))
        summary = {severity.value: int((data.get("summary") or {}).get(severity.value, 0)) for severity in Severity}
        return cls(
            scan_id=str(data.get("scanId", "")),
            status=str(data.get("status", "")),
            findings=findings,
            summary=summary,
            files_scanned=int(data.get("filesScanned", 0)),
            duration_ms=int(data.get("duration", 0)),
            raw=data,
        )

    @property
    def blocking(self) -> bool:
        """Return True when any critical or high finding was reported."""
        return self.summary.get("critical", 0) > 0 or self.summary.get("high", 0) > 0


__all__ = ["Finding", "ScanOptions", "ScanResult", "Severity"]
