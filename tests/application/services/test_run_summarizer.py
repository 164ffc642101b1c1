# tests/application/services/test_run_summarizer.py
from application.services.run_summarizer import summarize
from domain.results import FAIL, PASS, CheckResult, ResponseSnapshot, RunStepResult


def _test(status):
    return CheckResult(status=status, description=f"test {status}")


def _assertion(status):
    return CheckResult(status=status, lhs_expr="res.status", rhs_expr="eq 200")


def test_counts_tests_and_assertions_by_status():
    results = [
        RunStepResult(location="a.bru", test_results=(_test(PASS), _test(FAIL)), assertion_results=(_assertion(PASS),)),
        RunStepResult(location="b.bru", assertion_results=(_assertion(FAIL), _assertion(FAIL))),
    ]

    summary = summarize(results)

    assert (summary.total_tests, summary.passed_tests, summary.failed_tests) == (2, 1, 1)
    assert (summary.total_assertions, summary.passed_assertions, summary.failed_assertions) == (3, 1, 2)
    assert (summary.total_requests, summary.passed_requests, summary.failed_requests) == (2, 2, 0)


def test_request_error_without_checks_fails_the_request():
    summary = summarize([RunStepResult(location="a.bru", error="ECONNREFUSED")])

    assert summary.failed_requests == 1
    assert summary.passed_requests == 0
    assert summary.has_failures


def test_request_error_with_passing_checks_still_counts_as_passed():
    result = RunStepResult(location="a.bru", error="boom", test_results=(_test(PASS),))

    summary = summarize([result])

    assert summary.passed_requests == 1
    assert summary.failed_requests == 0
    assert not summary.has_failures


def test_failed_checks_without_error_leave_request_passed():
    summary = summarize([RunStepResult(location="a.bru", assertion_results=(_assertion(FAIL),))])

    assert summary.passed_requests == 1
    assert summary.failed_assertions == 1
    assert summary.has_failures


def test_totals_add_up_and_time_is_summed():
    results = [
        RunStepResult(location="a.bru", response=ResponseSnapshot(status=200, response_time=12)),
        RunStepResult(location="b.bru", error="x"),
        RunStepResult(location="c.bru", response=ResponseSnapshot(status=200, response_time=30)),
    ]

    summary = summarize(results)

    assert summary.total_requests == summary.passed_requests + summary.failed_requests == 3
    assert summary.total_time == 42


def test_empty_run():
    summary = summarize([])

    assert summary.total_requests == 0
    assert not summary.has_failures


def test_summarizing_twice_gives_equal_summaries():
    results = [RunStepResult(location="a.bru", assertion_results=(_assertion(PASS), _assertion(FAIL)))]

    assert summarize(results) == summarize(results)


def test_to_dict_uses_camel_case_keys():
    data = summarize([RunStepResult(location="a.bru")]).to_dict()

    assert data["totalRequests"] == 1
    assert data["passedRequests"] == 1
    assert set(data) == {
        "totalRequests", "passedRequests", "failedRequests",
        "totalAssertions", "passedAssertions", "failedAssertions",
        "totalTests", "passedTests", "failedTests",
    }
