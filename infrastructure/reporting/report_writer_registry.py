# infrastructure/reporting/report_writer_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence

from domain.exceptions import ConfigurationError
from domain.results import RunStepResult, RunSummary
from infrastructure.reporting.json_report_writer import JsonReportWriter
from infrastructure.reporting.junit_report_writer import JUnitReportWriter


class ReportWriter(Protocol):
    def write(self, path: Path, summary: RunSummary, results: Sequence[RunStepResult]) -> None:
        ...


class ReportWriterRegistry:
    def __init__(self, writers: Optional[Dict[str, ReportWriter]] = None) -> None:
        self._writers: Dict[str, ReportWriter] = writers or {
            "json": JsonReportWriter(),
            "junit": JUnitReportWriter(),
        }

    def get_writer(self, fmt: str) -> ReportWriter:
        writer = self._writers.get(fmt)
        if writer is None:
            names = " or ".join(f'"{name}"' for name in self._writers)
            raise ConfigurationError(f"Format must be one of {names}")
        return writer

    def write(self, fmt: str, path: Path, summary: RunSummary, results: Sequence[RunStepResult]) -> None:
        writer = self.get_writer(fmt)
        if not path.parent.is_dir():
            raise ConfigurationError(f"Output directory {path.parent} does not exist")
        try:
            writer.write(path, summary, results)
        except OSError as e:
            raise ConfigurationError(f"Could not write results to {path}: {e.strerror or e}") from e
