"""Composition reporting dataclasses.

Provides structured reports for validation and compile runs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidationReport:
    """Aggregated result of manifest reference checks.

    Errors block compilation; warnings never do.
    """

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [f"Validation: {len(self.errors)} error(s), {len(self.warnings)} warning(s)"]
        for e in self.errors:
            lines.append(f"  ERROR: {e}")
        for w in self.warnings:
            lines.append(f"  WARN: {w}")
        return "\n".join(lines)


@dataclass
class ArtifactResult:
    """Outcome of writing (or rendering, in dry-run) one compiled document."""

    target_path: str
    ok: bool
    error: Optional[str] = None
    kind: str = ""
    source_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_path": self.target_path,
            "ok": self.ok,
            "error": self.error,
            "kind": self.kind,
            "source_name": self.source_name,
        }


@dataclass
class CompileResult:
    """Report from compiling one profile."""

    profile: str
    validation: ValidationReport = field(default_factory=ValidationReport)
    artifacts: List[ArtifactResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok_count(self) -> int:
        return sum(1 for a in self.artifacts if a.ok)

    @property
    def failed_count(self) -> int:
        return sum(1 for a in self.artifacts if not a.ok)

    @property
    def success(self) -> bool:
        return self.validation.is_valid and self.failed_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile,
            "success": self.success,
            "dry_run": self.dry_run,
            "validation": self.validation.to_dict(),
            "artifacts": [a.to_dict() for a in self.artifacts],
            "written": self.ok_count,
            "failed": self.failed_count,
        }

    def summary(self) -> str:
        verb = "rendered" if self.dry_run else "written"
        line = f"{self.ok_count} artifact(s) {verb}"
        if self.failed_count:
            line += f", {self.failed_count} failed"
        return line


__all__ = ["ValidationReport", "ArtifactResult", "CompileResult"]
