"""Tests for scan options and results."""

from __future__ import annotations

import pytest

from gitguard.auth.models import Preferences, Tier
from gitguard.scan.models import Finding, ScanOptions, ScanResult, Severity

ALL_ON = Preferences(ai_scan=True, dependency_scan=True, secret_scan=True)


class TestScanOptions:
    """Tests for tier-gated option resolution."""

    @pytest.mark.parametrize(
        ("tier", "expected"),
        [
            (None, ScanOptions()),
            (Tier.FREE, ScanOptions()),
            (Tier.PRO, ScanOptions(include_ai=True)),
            (Tier.PREMIER, ScanOptions(include_ai=True, include_dependencies=True, include_secrets=True)),
        ],
    )
    def test_defaults_follow_tier(self, tier: Tier | None, expected: ScanOptions) -> None:
        """Account preferences only apply where the tier allows them."""
        assert ScanOptions.resolve(tier, ALL_ON) == expected

    def test_disabled_preference(self) -> None:
        """A disabled preference stays off."""
        assert ScanOptions.resolve(Tier.PREMIER, Preferences(ai_scan=True)) == ScanOptions(include_ai=True)

    def test_explicit_flags_win(self) -> None:
        """Flags override defaults both ways."""
        options = ScanOptions.resolve(Tier.PREMIER, ALL_ON, ai=False, secrets=True)
        assert options == ScanOptions(include_ai=False, include_dependencies=True, include_secrets=True)

        forced = ScanOptions.resolve(Tier.FREE, Preferences(), dependencies=True)
        assert forced.include_dependencies is True

    def test_to_dict(self) -> None:
        """Wire names are used."""
        assert ScanOptions(include_ai=True).to_dict() == {
            "includeAI": True,
            "includeDependencies": False,
            "includeSecrets": False,
        }


class TestScanResult:
    """Tests for ScanResult."""

    def test_from_dict(self) -> None:
        """Findings are sorted most severe first and the summary is complete."""
        data = {
            "scanId": "scan-1",
            "status": "completed",
            "vulnerabilities": [
                {"id": "1", "severity": "low", "type": "style", "file": "a.py", "line": 3, "description": "d"},
                {
                    "id": "2",
                    "severity": "CRITICAL",
                    "type": "sql-injection",
                    "file": "b.py",
                    "line": 10,
                    "description": "d",
                    "aiRemediation": "Use parameters",
                },
            ],
            "summary": {"critical": 1, "low": 1},
            "filesScanned": 2,
            "duration": 120,
        }

        result = ScanResult.from_dict(data)

        assert [f.id for f in result.findings] == ["2", "1"]
        assert result.findings[0].severity is Severity.CRITICAL
        assert result.findings[0].ai_remediation == "Use parameters"
        assert result.summary == {"critical": 1, "high": 0, "medium": 0, "low": 1, "info": 0}
        assert result.files_scanned == 2
        assert result.duration_ms == 120
        assert result.raw is data
        assert result.blocking is True

    def test_not_blocking_without_high(self) -> None:
        """Medium findings do not block."""
        assert ScanResult.from_dict({"summary": {"medium": 3}}).blocking is False

    def test_blocking_on_high(self) -> None:
        """High findings block."""
        assert ScanResult.from_dict({"summary": {"high": 1}}).blocking is True

    def test_unknown_severity_is_info(self) -> None:
        """Unrecognized severities degrade to info."""
        assert Finding.from_dict({"severity": "urgent"}).severity is Severity.INFO

    def test_severity_rank(self) -> None:
        """Rank orders critical first."""
        assert Severity.CRITICAL.rank < Severity.HIGH.rank < Severity.INFO.rank
