# tests/application/services/test_assertion_evaluator.py
import pytest

from application.services.assertion_evaluator import AssertionEvaluator, parse_literal, parse_operator
from application.services.response_query import UNDEFINED, ResponseView
from application.services.template_renderer import RenderSources
from domain.request import AssertionSpec
from domain.results import FAIL, PASS


@pytest.fixture
def res():
    return ResponseView(
        status=200,
        status_text="OK",
        headers={"content-type": "application/json; charset=utf-8"},
        body={"id": 42, "name": "Ada", "tags": ["a", "b"], "active": True, "empty": [], "note": None},
        response_time=120,
    )


@pytest.fixture
def evaluator():
    return AssertionEvaluator()


def _check(evaluator, res, lhs, rhs, src=None):
    return evaluator.evaluate(AssertionSpec(lhs=lhs, rhs=rhs), res, src or RenderSources())


class TestParsing:
    def test_operator_prefix(self):
        assert parse_operator("gte 200") == ("gte", "200")
        assert parse_operator("isJson") == ("isJson", "")

    def test_implicit_eq(self):
        assert parse_operator("200") == ("eq", "200")
        assert parse_operator("'hello world'") == ("eq", "'hello world'")

    def test_literals(self):
        assert parse_literal("200") == 200
        assert parse_literal("1.5") == 1.5
        assert parse_literal("'text'") == "text"
        assert parse_literal('"text"') == "text"
        assert parse_literal("true") is True
        assert parse_literal("null") is None
        assert parse_literal("undefined") is UNDEFINED
        assert parse_literal('{"a": 1}') == {"a": 1}
        assert parse_literal("bare") == "bare"


class TestOperators:
    @pytest.mark.parametrize(
        "lhs, rhs",
        [
            ("res.status", "200"),
            ("res.status", "eq 200"),
            ("res.status", "neq 404"),
            ("res.status", "gt 199"),
            ("res.status", "gte 200"),
            ("res.status", "lt 300"),
            ("res.status", "lte 200"),
            ("res.status", "in 200, 201"),
            ("res.status", "notIn [400, 500]"),
            ("res.status", "between 200, 299"),
            ("res.body.name", "eq 'Ada'"),
            ("res.body.name", "contains 'd'"),
            ("res.body.tags", "contains 'a'"),
            ("res.body.tags", "notContains 'z'"),
            ("res.body.tags", "length 2"),
            ("res.body.name", "matches ^A"),
            ("res.body.name", "notMatches ^Z"),
            ("res.body.name", "startsWith 'A'"),
            ("res.body.name", "endsWith 'a'"),
            ("res.body.empty", "isEmpty"),
            ("res.body.note", "isNull"),
            ("res.body.missing", "isUndefined"),
            ("res.body.id", "isDefined"),
            ("res.body.active", "isTruthy"),
            ("res.body.empty.length", "isFalsy"),
            ("res.body", "isJson"),
            ("res.body.id", "isNumber"),
            ("res.body.name", "isString"),
            ("res.body.active", "isBoolean"),
            ("res.body.tags", "isArray"),
            ("res.headers.content-type", "contains 'json'"),
        ],
    )
    def test_passing_assertions(self, evaluator, res, lhs, rhs):
        result = _check(evaluator, res, lhs, rhs)

        assert result.status == PASS, result.error
        assert result.error is None

    def test_failing_eq_message(self, evaluator, res):
        result = _check(evaluator, res, "res.status", "eq 404")

        assert result.status == FAIL
        assert result.error == "expected 200 to equal 404"
        assert result.operator == "eq"
        assert result.rhs_operand == "404"

    def test_eq_is_strict_about_types(self, evaluator, res):
        result = _check(evaluator, res, "res.status", "eq '200'")

        assert result.status == FAIL
        assert result.error == "expected 200 to equal '200'"

    def test_comparison_on_non_number_fails(self, evaluator, res):
        result = _check(evaluator, res, "res.body.name", "gt 1")

        assert result.status == FAIL
        assert "to be above" in result.error

    def test_operand_from_variables(self, evaluator, res):
        src = RenderSources(env_vars={"expected": "42"})

        assert _check(evaluator, res, "res.body.id", "eq {{expected}}", src).status == PASS

    def test_bad_regex_fails_only_this_assertion(self, evaluator, res):
        results = evaluator.evaluate_all(
            [
                AssertionSpec(lhs="res.body.name", rhs="matches ("),
                AssertionSpec(lhs="res.status", rhs="eq 200"),
            ],
            res,
            RenderSources(),
        )

        assert [r.status for r in results] == [FAIL, PASS]
        assert results[0].error

    def test_unknown_response_field_fails_assertion(self, evaluator, res):
        result = _check(evaluator, res, "res.cookies.sid", "isDefined")

        assert result.status == FAIL
        assert result.error.startswith("ResponseQueryError")

    def test_disabled_assertions_are_skipped(self, evaluator, res):
        results = evaluator.evaluate_all(
            [AssertionSpec(lhs="res.status", rhs="eq 500", enabled=False)],
            res,
            RenderSources(),
        )

        assert results == []
