# infrastructure/reporting/junit_report_writer.py
from __future__ import annotations

import socket
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence
from xml.etree import ElementTree as ET

from domain.results import RunStepResult, RunSummary


def _seconds(value: float) -> str:
    return f"{value:.3f}"


class JUnitReportWriter:
    """
    One ``<testsuite>`` per executed request, one ``<testcase>`` per assertion
    and per test. A request error replaces the cases with a single error case.
    """

    def __init__(
        self,
        hostname: Optional[str] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._hostname = hostname or socket.gethostname()
        self._clock = clock

    def build(self, results: Sequence[RunStepResult]) -> ET.Element:
        root = ET.Element("testsuites")
        timestamp = self._clock().strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]

        for result in results:
            total = len(result.assertion_results) + len(result.test_results)
            per_case = result.runtime / total if total else 0.0
            classname = result.request.url

            suite = ET.SubElement(
                root,
                "testsuite",
                name=result.suitename or result.location,
                errors="0",
                failures="0",
                skipped="0",
                tests=str(total),
                timestamp=timestamp,
                hostname=self._hostname,
                time=_seconds(result.runtime),
            )

            if result.error:
                suite.set("errors", "1")
                suite.set("tests", "1")
                case = ET.SubElement(
                    suite,
                    "testcase",
                    name="Test suite has no errors",
                    status="fail",
                    classname=classname,
                    time=_seconds(result.runtime),
                )
                ET.SubElement(case, "error", type="error", message=result.error)
                continue

            failures = 0
            for assertion in result.assertion_results:
                case = ET.SubElement(
                    suite,
                    "testcase",
                    name=f"{assertion.lhs_expr} {assertion.rhs_expr}",
                    status=assertion.status,
                    classname=classname,
                    time=_seconds(per_case),
                )
                if not assertion.passed:
                    failures += 1
                    ET.SubElement(case, "failure", type="failure", message=assertion.error or "")

            for test in result.test_results:
                case = ET.SubElement(
                    suite,
                    "testcase",
                    name=test.description,
                    status=test.status,
                    classname=classname,
                    time=_seconds(per_case),
                )
                if not test.passed:
                    failures += 1
                    ET.SubElement(case, "failure", type="failure", message=test.error or "")

            suite.set("failures", str(failures))

        return root

    def write(self, path: Path, summary: RunSummary, results: Sequence[RunStepResult]) -> None:
        root = self.build(results)
        ET.indent(root)
        ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
