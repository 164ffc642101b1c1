# domain/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

PASS = "pass"
FAIL = "fail"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one test or one assertion."""

    status: str
    description: str = ""
    lhs_expr: Optional[str] = None
    rhs_expr: Optional[str] = None
    operator: Optional[str] = None
    rhs_operand: Optional[str] = None
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == PASS

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status}
        if self.lhs_expr is not None:
            out.update(
                {
                    "lhsExpr": self.lhs_expr,
                    "rhsExpr": self.rhs_expr,
                    "rhsOperand": self.rhs_operand,
                    "operator": self.operator,
                }
            )
        else:
            out["description"] = self.description
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class RequestSnapshot:
    method: str = ""
    url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method, "url": self.url, "headers": dict(self.headers), "data": self.data}


@dataclass(frozen=True)
class ResponseSnapshot:
    status: Optional[int] = None
    status_text: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    data: Any = None
    response_time: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "data": self.data,
            "responseTime": self.response_time,
        }


@dataclass(frozen=True)
class RunStepResult:
    """
    Outcome of executing one request.

    ``next_request_name`` set means "jump to that request"; ``stop_run`` is the
    explicit terminate directive. Neither set means continue sequentially.
    """

    location: str
    request: RequestSnapshot = field(default_factory=RequestSnapshot)
    response: ResponseSnapshot = field(default_factory=ResponseSnapshot)
    test_results: Tuple[CheckResult, ...] = ()
    assertion_results: Tuple[CheckResult, ...] = ()
    error: Optional[str] = None
    next_request_name: Optional[str] = None
    stop_run: bool = False
    runtime: float = 0.0
    suitename: str = ""

    @property
    def has_failure(self) -> bool:
        if self.error:
            return True
        if any(not t.passed for t in self.test_results):
            return True
        return any(not a.passed for a in self.assertion_results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test": {"filename": self.location},
            "request": self.request.to_dict(),
            "response": self.response.to_dict(),
            "error": self.error,
            "assertionResults": [a.to_dict() for a in self.assertion_results],
            "testResults": [t.to_dict() for t in self.test_results],
            "nextRequestName": self.next_request_name,
            "runtime": self.runtime,
            "suitename": self.suitename,
        }


@dataclass(frozen=True)
class RunSummary:
    total_requests: int = 0
    passed_requests: int = 0
    failed_requests: int = 0
    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    total_assertions: int = 0
    passed_assertions: int = 0
    failed_assertions: int = 0
    total_time: float = 0

    @property
    def has_failures(self) -> bool:
        return self.failed_requests + self.failed_tests + self.failed_assertions > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "passedRequests": self.passed_requests,
            "failedRequests": self.failed_requests,
            "totalAssertions": self.total_assertions,
            "passedAssertions": self.passed_assertions,
            "failedAssertions": self.failed_assertions,
            "totalTests": self.total_tests,
            "passedTests": self.passed_tests,
            "failedTests": self.failed_tests,
        }
