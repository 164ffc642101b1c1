# application/services/run_summarizer.py
from __future__ import annotations

from typing import Iterable

from domain.results import RunStepResult, RunSummary


def summarize(results: Iterable[RunStepResult]) -> RunSummary:
    """
    Fold step results into run-wide counts.

    A request only counts as failed when it produced no tests and no
    assertions and carries a request error. Failing tests or assertions are
    reported at their own granularity and leave the request "passed".
    """
    total_requests = passed_requests = failed_requests = 0
    total_tests = passed_tests = failed_tests = 0
    total_assertions = passed_assertions = failed_assertions = 0
    total_time: float = 0

    for result in results:
        total_requests += 1
        total_tests += len(result.test_results)
        total_assertions += len(result.assertion_results)

        for test in result.test_results:
            if test.passed:
                passed_tests += 1
            else:
                failed_tests += 1
        for assertion in result.assertion_results:
            if assertion.passed:
                passed_assertions += 1
            else:
                failed_assertions += 1

        has_checks = bool(result.test_results or result.assertion_results)
        if not has_checks and result.error:
            failed_requests += 1
        else:
            passed_requests += 1

        total_time += result.response.response_time or 0

    return RunSummary(
        total_requests=total_requests,
        passed_requests=passed_requests,
        failed_requests=failed_requests,
        total_tests=total_tests,
        passed_tests=passed_tests,
        failed_tests=failed_tests,
        total_assertions=total_assertions,
        passed_assertions=passed_assertions,
        failed_assertions=failed_assertions,
        total_time=total_time,
    )
