# infrastructure/reporting/json_report_writer.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Sequence

from domain.results import RunStepResult, RunSummary


def build_report(summary: RunSummary, results: Sequence[RunStepResult]) -> Dict[str, Any]:
    return {
        "summary": summary.to_dict(),
        "results": [r.to_dict() for r in results],
    }


class JsonReportWriter:
    def write(self, path: Path, summary: RunSummary, results: Sequence[RunStepResult]) -> None:
        payload = build_report(summary, results)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False, default=str)
