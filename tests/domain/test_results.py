# tests/domain/test_results.py
from domain.exceptions import DefinitionParseError, JumpLimitExceeded
from domain.request import EnvironmentDefinition, KeyValue, RequestRecord, find_value
from domain.results import FAIL, PASS, CheckResult, RunStepResult


class TestRunStepResult:
    def test_has_failure_on_error(self):
        assert RunStepResult(location="a.bru", error="boom").has_failure

    def test_has_failure_on_failed_test(self):
        result = RunStepResult(location="a.bru", test_results=(CheckResult(status=FAIL, description="t"),))

        assert result.has_failure

    def test_passing_result(self):
        result = RunStepResult(
            location="a.bru",
            assertion_results=(CheckResult(status=PASS, lhs_expr="res.status", rhs_expr="eq 200"),),
        )

        assert not result.has_failure

    def test_to_dict_layout(self):
        data = RunStepResult(location="f/a.bru", suitename="f/a", next_request_name="b").to_dict()

        assert data["test"] == {"filename": "f/a.bru"}
        assert data["nextRequestName"] == "b"
        assert data["response"]["status"] is None
        assert data["assertionResults"] == []


class TestCheckResult:
    def test_assertion_dict(self):
        check = CheckResult(status=FAIL, lhs_expr="res.status", rhs_expr="eq 200", operator="eq", rhs_operand="200", error="x")

        assert check.to_dict() == {
            "status": "fail",
            "lhsExpr": "res.status",
            "rhsExpr": "eq 200",
            "rhsOperand": "200",
            "operator": "eq",
            "error": "x",
        }

    def test_test_dict(self):
        assert CheckResult(status=PASS, description="works").to_dict() == {"status": "pass", "description": "works"}


class TestRequestRecord:
    def test_suitename_strips_extension(self):
        assert RequestRecord(name="a", location="users/get.bru").suitename == "users/get"

    def test_find_value_skips_disabled(self):
        pairs = (KeyValue("name", "old", enabled=False), KeyValue("name", "new"))

        assert find_value(pairs, "name") == "new"
        assert find_value(pairs, "missing") is None

    def test_environment_variables_override_secret_placeholders(self):
        env = EnvironmentDefinition(name="e", variables=(KeyValue("key", "v"),), secret_names=("key", "other"))

        assert env.enabled_variables() == {"key": "v", "other": ""}


def test_exception_messages():
    assert str(DefinitionParseError("bad", "a.bru", 3)) == "a.bru:3: bad"
    assert str(DefinitionParseError("bad")) == "bad"
    assert str(JumpLimitExceeded(10)) == "Too many jumps, possible infinite loop"
