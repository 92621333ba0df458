"""
Diagnostics collection for loaded form documents.

The loader only rejects input that does not have the document shape. Beyond
that, a loaded document may still break the editor's structural invariants
(gaps in sortOrder, identifiers used twice, ...). Those findings are
collected here instead of being fixed silently, since the export must
reproduce the input.

Three severity levels:
- CRITICAL: the document cannot be edited safely
- ERROR: an invariant the editor relies on is broken
- WARNING: something the editor will correct on the next structural edit

And three validation modes:
- STRICT: raises for any ERROR or CRITICAL issue
- NORMAL: raises for CRITICAL issues, collects the rest
- LENIENT: collects everything, never raises
"""
from enum import Enum
from typing import List, Optional, Sequence
import logging
from pathlib import Path
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from form_editor.exceptions.parsing import SchemaShapeError
from form_editor.utils.validation_messages import format_location

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Defines the severity levels for validation issues."""
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"


class ValidationLevel(Enum):
    """How strictly the loader reacts to validation issues."""
    STRICT = "STRICT"     # raise on ERROR and CRITICAL
    NORMAL = "NORMAL"     # raise on CRITICAL only
    LENIENT = "LENIENT"   # never raise


class ValidationResult(BaseModel):
    """A single validation issue."""
    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity
    message: str
    path: Optional[List] = None
    node_kind: Optional[str] = None
    field_name: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ValidationCollector:
    """Collects and manages validation results for one document."""

    def __init__(self, validation_level: ValidationLevel = ValidationLevel.NORMAL):
        """Initialize the validation collector.

        Args:
            validation_level: Determines how strictly to handle validation issues.
                            Defaults to NORMAL.
        """
        self.validation_level = validation_level
        self.results: List[ValidationResult] = []

    def add_result(self,
                   severity: ValidationSeverity,
                   message: str,
                   path: Optional[Sequence] = None,
                   node_kind: Optional[str] = None,
                   field_name: Optional[str] = None) -> None:
        """Add a validation result and handle it according to validation level.

        Raises:
            SchemaShapeError: If validation level and severity require an exception
        """
        result = ValidationResult(
            severity=severity,
            message=message,
            path=list(path) if path is not None else None,
            node_kind=node_kind,
            field_name=field_name,
        )
        self.results.append(result)

        self._log_result(result)
        self._handle_result(result)

    def clear(self) -> None:
        self.results = []

    def _log_result(self, result: ValidationResult) -> None:
        log_message = self._format_log_message(result)

        if result.severity == ValidationSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.error(log_message)

    def _handle_result(self, result: ValidationResult) -> None:
        if self.validation_level == ValidationLevel.STRICT:
            if result.severity in [ValidationSeverity.CRITICAL, ValidationSeverity.ERROR]:
                raise SchemaShapeError(self._format_error_message(result), location=self._location(result))
        elif self.validation_level == ValidationLevel.NORMAL:
            if result.severity == ValidationSeverity.CRITICAL:
                raise SchemaShapeError(self._format_error_message(result), location=self._location(result))

    def save_report(self, output_path: Path) -> None:
        """Save validation results to a text file.

        Args:
            output_path: Path where to save the validation report
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            self._write_report_header(f)
            self._write_results_by_severity(f)
            self._write_report_summary(f)

    def _write_report_header(self, file) -> None:
        file.write("Form Document Validation Report\n")
        file.write("=" * 50 + "\n")
        file.write(f"Validation Level: {self.validation_level.value}\n")
        file.write(f"Total Issues: {len(self.results)}\n")
        file.write("-" * 50 + "\n\n")

    def _write_results_by_severity(self, file) -> None:
        for severity in ValidationSeverity:
            results = self.get_results_by_severity(severity)
            if results:
                file.write(f"\n{severity.value} Issues ({len(results)}):\n")
                file.write("-" * 30 + "\n")

                for result in results:
                    file.write(f"- {result.message}\n")
                    if result.path is not None:
                        file.write(f"  Path: {format_location(result.path)}\n")
                    if result.node_kind:
                        file.write(f"  Node Kind: {result.node_kind}\n")
                    if result.field_name:
                        file.write(f"  Field: {result.field_name}\n")
                    file.write(f"  Time: {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n")
                    file.write("\n")

    def _write_report_summary(self, file) -> None:
        file.write("\nSummary:\n")
        file.write("-" * 30 + "\n")
        for severity in ValidationSeverity:
            count = len(self.get_results_by_severity(severity))
            file.write(f"{severity.value}: {count} issues\n")

        if self.has_critical_issues:
            file.write("\nWARNING: Critical issues were found!\n")

    @staticmethod
    def _format_log_message(result: ValidationResult) -> str:
        message = f"{result.severity.value}: {result.message}"
        if result.path is not None:
            message += f" at {format_location(result.path)}"
        if result.node_kind:
            message += f" (Kind: {result.node_kind})"
        return message

    @staticmethod
    def _location(result: ValidationResult) -> Optional[str]:
        return format_location(result.path) if result.path is not None else None

    @staticmethod
    def _format_error_message(result: ValidationResult) -> str:
        return f"{result.severity.value}: {result.message}"

    def get_results_by_severity(self, severity: ValidationSeverity) -> List[ValidationResult]:
        """Get all validation results of a specific severity."""
        return [r for r in self.results if r.severity == severity]

    @property
    def has_critical_issues(self) -> bool:
        return any(r.severity == ValidationSeverity.CRITICAL for r in self.results)

    @property
    def has_errors(self) -> bool:
        return any(
            r.severity in (ValidationSeverity.CRITICAL, ValidationSeverity.ERROR)
            for r in self.results
        )
