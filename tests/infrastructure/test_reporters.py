# tests/infrastructure/test_reporters.py
from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest
from rich.console import Console

from application.services.run_summarizer import summarize
from domain.exceptions import ConfigurationError
from domain.results import FAIL, PASS, CheckResult, RequestSnapshot, ResponseSnapshot, RunStepResult
from infrastructure.reporting import ConsoleReporter, JUnitReportWriter, ReportWriterRegistry


@pytest.fixture
def results():
    return [
        RunStepResult(
            location="users/get.bru",
            suitename="users/get",
            request=RequestSnapshot(method="GET", url="http://api.test/users/1"),
            response=ResponseSnapshot(status=200, status_text="OK", data={"id": 1}, response_time=12),
            assertion_results=(
                CheckResult(status=PASS, lhs_expr="res.status", rhs_expr="eq 200", operator="eq", rhs_operand="200"),
                CheckResult(
                    status=FAIL,
                    lhs_expr="res.body.id",
                    rhs_expr="eq 2",
                    operator="eq",
                    rhs_operand="2",
                    error="expected 1 to equal 2",
                ),
            ),
            runtime=0.5,
        ),
        RunStepResult(
            location="down.bru",
            suitename="down",
            request=RequestSnapshot(method="GET", url="http://down.test/"),
            error="Connection refused",
            runtime=0.1,
        ),
    ]


def _reporter():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None, highlight=False, emoji=False)
    return ConsoleReporter(console), buffer


class TestConsoleReporter:
    def test_request_line_and_checks(self, results) -> None:
        reporter, buffer = _reporter()

        reporter.request_finished(results[0])

        lines = buffer.getvalue().splitlines()
        assert lines[0] == "users/get.bru (200 OK) - 12 ms"
        assert lines[1] == "   ✓ assert: res.status: eq 200"
        assert lines[2] == "   ✕ assert: res.body.id: eq 2"
        assert lines[3] == "      expected 1 to equal 2"

    def test_request_error_line(self, results) -> None:
        reporter, buffer = _reporter()

        reporter.request_finished(results[1])

        assert buffer.getvalue().splitlines()[0] == "down.bru (Connection refused) - 0 ms"

    def test_summary_lines(self, results) -> None:
        reporter, buffer = _reporter()

        reporter.summary(summarize(results))

        lines = [line for line in buffer.getvalue().splitlines() if line]
        assert lines == [
            "Requests:    1 passed, 1 failed, 2 total",
            "Tests:       0 passed, 0 total",
            "Assertions:  1 passed, 1 failed, 2 total",
            "Ran all requests - 12 ms",
        ]

    def test_error_line(self) -> None:
        reporter, buffer = _reporter()

        reporter.error("You can run only at the root of a collection")

        assert buffer.getvalue() == "ERROR: You can run only at the root of a collection\n"


class TestJsonReport:
    def test_written_payload(self, tmp_path: Path, results) -> None:
        out = tmp_path / "results.json"

        ReportWriterRegistry().write("json", out, summarize(results), results)

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["summary"]["failedAssertions"] == 1
        assert data["summary"]["failedRequests"] == 1
        first = data["results"][0]
        assert first["test"] == {"filename": "users/get.bru"}
        assert first["response"]["statusText"] == "OK"
        assert first["assertionResults"][1]["error"] == "expected 1 to equal 2"
        assert first["suitename"] == "users/get"
        assert data["results"][1]["error"] == "Connection refused"


class TestJUnitReport:
    @pytest.fixture
    def writer(self):
        return JUnitReportWriter(hostname="ci-host", clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    def test_suite_per_result(self, writer, results) -> None:
        root = writer.build(results)

        suites = root.findall("testsuite")
        assert [s.get("name") for s in suites] == ["users/get", "down"]
        first = suites[0]
        assert first.get("tests") == "2"
        assert first.get("failures") == "1"
        assert first.get("errors") == "0"
        assert first.get("hostname") == "ci-host"
        assert first.get("timestamp") == "2024-01-02T03:04:05.000"

    def test_assertion_cases(self, writer, results) -> None:
        cases = writer.build(results).find("testsuite").findall("testcase")

        assert [c.get("name") for c in cases] == ["res.status eq 200", "res.body.id eq 2"]
        assert cases[0].get("classname") == "http://api.test/users/1"
        assert cases[0].get("time") == "0.250"
        assert cases[0].find("failure") is None
        failure = cases[1].find("failure")
        assert failure.get("type") == "failure"
        assert failure.get("message") == "expected 1 to equal 2"

    def test_request_error_replaces_cases(self, writer, results) -> None:
        suite = writer.build(results).findall("testsuite")[1]

        assert suite.get("errors") == "1"
        assert suite.get("tests") == "1"
        cases = suite.findall("testcase")
        assert [c.get("name") for c in cases] == ["Test suite has no errors"]
        error = cases[0].find("error")
        assert error.get("type") == "error"
        assert error.get("message") == "Connection refused"

    def test_result_without_checks_has_zero_time_per_case(self, writer) -> None:
        suite = writer.build([RunStepResult(location="a.bru", suitename="a", runtime=1.0)]).find("testsuite")

        assert suite.get("tests") == "0"
        assert suite.findall("testcase") == []

    def test_writes_xml_file(self, tmp_path: Path, results) -> None:
        out = tmp_path / "results.xml"

        ReportWriterRegistry({"junit": JUnitReportWriter(hostname="h")}).write("junit", out, summarize(results), results)

        assert ET.parse(out).getroot().tag == "testsuites"


class TestReportWriterRegistry:
    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match='Format must be one of "json" or "junit"'):
            ReportWriterRegistry().get_writer("html")

    def test_missing_output_directory(self, tmp_path: Path, results) -> None:
        out = tmp_path / "missing" / "results.json"

        with pytest.raises(ConfigurationError, match="Output directory .* does not exist"):
            ReportWriterRegistry().write("json", out, summarize(results), results)

    def test_output_path_is_a_directory(self, tmp_path: Path, results) -> None:
        out = tmp_path / "out"
        out.mkdir()

        with pytest.raises(ConfigurationError, match="Could not write results to .*out"):
            ReportWriterRegistry().write("json", out, summarize(results), results)

    def test_write_failure_becomes_configuration_error(self, tmp_path: Path, results) -> None:
        class FailingWriter:
            def write(self, path, summary, results):
                raise PermissionError(13, "Permission denied")

        with pytest.raises(ConfigurationError, match="Could not write results to .*: Permission denied"):
            ReportWriterRegistry({"json": FailingWriter()}).write("json", tmp_path / "r.json", summarize(results), results)
