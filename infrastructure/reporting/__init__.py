from infrastructure.reporting.console_reporter import ConsoleReporter
from infrastructure.reporting.json_report_writer import JsonReportWriter
from infrastructure.reporting.junit_report_writer import JUnitReportWriter
from infrastructure.reporting.report_writer_registry import ReportWriterRegistry

__all__ = ["ConsoleReporter", "JsonReportWriter", "JUnitReportWriter", "ReportWriterRegistry"]
