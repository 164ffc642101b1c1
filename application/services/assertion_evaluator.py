# application/services/assertion_evaluator.py
from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from application.services.response_query import (
    UNDEFINED,
    ResponseQueryError,
    ResponseView,
    is_response_expr,
    query,
)
from application.services.template_renderer import RenderSources, TemplateRenderer
from domain.request import AssertionSpec
from domain.results import FAIL, PASS, CheckResult

UNARY_OPERATORS = {
    "isEmpty",
    "isNull",
    "isUndefined",
    "isDefined",
    "isTruthy",
    "isFalsy",
    "isJson",
    "isNumber",
    "isString",
    "isBoolean",
    "isArray",
}

BINARY_OPERATORS = {
    "eq",
    "neq",
    "gt",
    "gte",
    "lt",
    "lte",
    "in",
    "notIn",
    "contains",
    "notContains",
    "length",
    "matches",
    "notMatches",
    "startsWith",
    "endsWith",
    "between",
}


class AssertionFailed(Exception):
    """Raised by an operator when the assertion does not hold."""


def parse_operator(rhs: str) -> Tuple[str, str]:
    """
    Split ``"gte 200"`` into ``("gte", "200")``.

    A value without a known operator prefix is an implicit ``eq``.
    """
    rhs = rhs.strip()
    head, _, rest = rhs.partition(" ")
    if head in UNARY_OPERATORS:
        return head, ""
    if head in BINARY_OPERATORS:
        return head, rest.strip()
    return "eq", rhs


def parse_literal(text: str) -> Any:
    """Turn an assertion operand into a value the way a JS literal would read."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"', "`"):
        return text[1:-1]
    if text == "null":
        return None
    if text == "undefined":
        return UNDEFINED
    if text == "true":
        return True
    if text == "false":
        return False
    if re.fullmatch(r"-?\d+", text):
        return int(text)
    if re.fullmatch(r"-?(\d+\.\d*|\.\d+)([eE][-+]?\d+)?|-?\d+[eE][-+]?\d+", text):
        return float(text)
    if text[:1] in ("{", "["):
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def format_value(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def _truthy(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _expect(ok: bool, message: str) -> None:
    if not ok:
        raise AssertionFailed(message)


def _numbers(lhs: Any, rhs: Any, verb: str) -> Tuple[float, float]:
    if not _is_number(lhs) or not _is_number(rhs):
        raise AssertionFailed(f"expected {format_value(lhs)} to be {verb} {format_value(rhs)}")
    return lhs, rhs


def _comparison(verb: str, check: Callable[[Any, Any], bool]) -> Callable[[Any, Any], None]:
    def run(lhs: Any, rhs: Any) -> None:
        _numbers(lhs, rhs, verb)
        _expect(check(lhs, rhs), f"expected {format_value(lhs)} to be {verb} {format_value(rhs)}")

    return run


def _contains(haystack: Any, needle: Any) -> bool:
    if isinstance(haystack, str):
        return str(needle) in haystack
    if isinstance(haystack, list):
        return any(_strict_equal(item, needle) for item in haystack)
    if isinstance(haystack, dict):
        return needle in haystack
    return False


def _length(value: Any) -> int:
    if isinstance(value, (str, list, dict)):
        return len(value)
    raise AssertionFailed(f"expected {format_value(value)} to have a length")


def _split_list(text: str) -> List[str]:
    text = text.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    return [part.strip() for part in text.split(",") if part.strip()]


class AssertionEvaluator:
    """
    Evaluates the ``assert`` block of a request against its response.

    Each assertion yields its own pass/fail ``CheckResult``; a failing or
    unparsable assertion never affects the others.
    """

    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self._renderer = renderer or TemplateRenderer()
        self._operators: Dict[str, Callable[[Any, Any], None]] = {
            "eq": self._eq,
            "neq": self._neq,
            "gt": _comparison("above", lambda l, r: l > r),
            "gte": _comparison("at least", lambda l, r: l >= r),
            "lt": _comparison("below", lambda l, r: l < r),
            "lte": _comparison("at most", lambda l, r: l <= r),
            "in": lambda l, r: _expect(any(_strict_equal(l, x) for x in r), f"expected {format_value(l)} to be one of {format_value(r)}"),
            "notIn": lambda l, r: _expect(not any(_strict_equal(l, x) for x in r), f"expected {format_value(l)} to not be one of {format_value(r)}"),
            "contains": lambda l, r: _expect(_contains(l, r), f"expected {format_value(l)} to include {format_value(r)}"),
            "notContains": lambda l, r: _expect(not _contains(l, r), f"expected {format_value(l)} to not include {format_value(r)}"),
            "length": lambda l, r: _expect(_length(l) == r, f"expected {format_value(l)} to have a length of {format_value(r)}"),
            "matches": lambda l, r: _expect(re.search(str(r), str(l)) is not None, f"expected {format_value(l)} to match /{r}/"),
            "notMatches": lambda l, r: _expect(re.search(str(r), str(l)) is None, f"expected {format_value(l)} not to match /{r}/"),
            "startsWith": lambda l, r: _expect(isinstance(l, str) and l.startswith(str(r)), f"expected {format_value(l)} to start with {format_value(r)}"),
            "endsWith": lambda l, r: _expect(isinstance(l, str) and l.endswith(str(r)), f"expected {format_value(l)} to end with {format_value(r)}"),
            "between": self._between,
            "isEmpty": lambda l, _r: _expect(isinstance(l, (str, list, dict)) and len(l) == 0, f"expected {format_value(l)} to be empty"),
            "isNull": lambda l, _r: _expect(l is None, f"expected {format_value(l)} to be null"),
            "isUndefined": lambda l, _r: _expect(l is UNDEFINED, f"expected {format_value(l)} to be undefined"),
            "isDefined": lambda l, _r: _expect(l is not UNDEFINED, "expected undefined to be defined"),
            "isTruthy": lambda l, _r: _expect(_truthy(l), f"expected {format_value(l)} to be truthy"),
            "isFalsy": lambda l, _r: _expect(not _truthy(l), f"expected {format_value(l)} to be falsy"),
            "isJson": lambda l, _r: _expect(isinstance(l, (dict, list)), f"expected {format_value(l)} to be json"),
            "isNumber": lambda l, _r: _expect(_is_number(l), f"expected {format_value(l)} to be a number"),
            "isString": lambda l, _r: _expect(isinstance(l, str), f"expected {format_value(l)} to be a string"),
            "isBoolean": lambda l, _r: _expect(isinstance(l, bool), f"expected {format_value(l)} to be a boolean"),
            "isArray": lambda l, _r: _expect(isinstance(l, list), f"expected {format_value(l)} to be an array"),
        }

    def evaluate_all(self, assertions, res: ResponseView, src: RenderSources) -> List[CheckResult]:
        return [self.evaluate(a, res, src) for a in assertions if a.enabled]

    def evaluate(self, assertion: AssertionSpec, res: ResponseView, src: RenderSources) -> CheckResult:
        operator, operand = parse_operator(assertion.rhs)
        base = dict(
            lhs_expr=assertion.lhs,
            rhs_expr=assertion.rhs,
            operator=operator,
            rhs_operand=operand,
        )
        try:
            lhs = self.resolve_operand(assertion.lhs, res, src)
            rhs = self._rhs_value(operator, operand, res, src)
            self._operators[operator](lhs, rhs)
        except AssertionFailed as e:
            return CheckResult(status=FAIL, error=str(e), **base)
        except (ResponseQueryError, re.error, TypeError, ValueError) as e:
            return CheckResult(status=FAIL, error=f"{type(e).__name__}: {e}", **base)
        return CheckResult(status=PASS, **base)

    def resolve_operand(self, expr: str, res: ResponseView, src: RenderSources) -> Any:
        if is_response_expr(expr):
            return query(res, expr)
        rendered = self._renderer.render(expr, src)
        return parse_literal(rendered)

    def _rhs_value(self, operator: str, operand: str, res: ResponseView, src: RenderSources) -> Any:
        if operator in UNARY_OPERATORS:
            return None
        if operator in ("in", "notIn", "between"):
            return [self.resolve_operand(part, res, src) for part in _split_list(operand)]
        if operator in ("matches", "notMatches"):
            pattern = self._renderer.render(operand, src).strip()
            if len(pattern) >= 2 and pattern[0] == pattern[-1] and pattern[0] in ("'", '"'):
                pattern = pattern[1:-1]
            return pattern
        return self.resolve_operand(operand, res, src)

    def _eq(self, lhs: Any, rhs: Any) -> None:
        _expect(_strict_equal(lhs, rhs), f"expected {format_value(lhs)} to equal {format_value(rhs)}")

    def _neq(self, lhs: Any, rhs: Any) -> None:
        _expect(not _strict_equal(lhs, rhs), f"expected {format_value(lhs)} to not equal {format_value(rhs)}")

    def _between(self, lhs: Any, rhs: Any) -> None:
        if len(rhs) != 2:
            raise ValueError("between expects two values: 'between 1, 10'")
        lo, hi = rhs
        _numbers(lhs, lo, "within")
        _numbers(lhs, hi, "within")
        _expect(lo <= lhs <= hi, f"expected {format_value(lhs)} to be within {lo}..{hi}")
