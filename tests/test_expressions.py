"""Tests for truth parsing, scope expressions, expansion and the property table."""
from __future__ import annotations

import pytest

from changelogdsl.core.errors import ChangeLogParseError
from changelogdsl.core.expander import expand_expressions, has_unresolved_tokens
from changelogdsl.core.model import DatabaseChangeLog
from changelogdsl.core.parameters import ChangeLogParameters
from changelogdsl.core.scopes import ContextExpression, LabelExpression, Labels
from changelogdsl.core.truth import parse_truth


class TestParseTruth:
    def test_absent_uses_default(self) -> None:
        assert parse_truth(None, True) is True
        assert parse_truth(None, False) is False

    def test_native_booleans_pass_through(self) -> None:
        assert parse_truth(True, False) is True and parse_truth(False, True) is False

    @pytest.mark.parametrize("text", ["true", "TRUE", " True "])
    def test_true_strings(self, text: str) -> None:
        assert parse_truth(text, False) is True

    def test_false_string(self) -> None:
        assert parse_truth("FaLsE", True) is False

    def test_other_values_raise_naming_attribute(self) -> None:
        with pytest.raises(ChangeLogParseError, match="'runAlways'"):
            parse_truth("yes", False, "runAlways")
        with pytest.raises(ChangeLogParseError):
            parse_truth(1, False)


class TestContextExpression:
    def test_empty_matches_everything(self) -> None:
        assert ContextExpression(None).matches(["prod"])
        assert ContextExpression("  ").is_empty

    def test_no_runtime_contexts_matches(self) -> None:
        assert ContextExpression("test").matches([])

    def test_comma_is_or(self) -> None:
        expr = ContextExpression("test, qa")
        assert expr.matches(["qa"]) and not expr.matches(["prod"])
        assert expr.contexts == frozenset({"test", "qa"})

    def test_and_not_and_parentheses(self) -> None:
        expr = ContextExpression("(test or qa) and !slow")
        assert expr.matches(["qa"])
        assert not expr.matches(["qa", "slow"])

    def test_equality(self) -> None:
        assert ContextExpression("a") == ContextExpression("a")
        assert ContextExpression("a") != LabelExpression("a")


class TestLabels:
    def test_split_and_dedupe(self) -> None:
        labels = Labels("a, b,a")
        assert labels.labels == frozenset({"a", "b"}) and str(labels) == "a,b"

    def test_label_expression_against_labels(self) -> None:
        assert LabelExpression("a and !c").matches_labels(Labels("a,b"))
        assert not LabelExpression("c").matches_labels(Labels("a"))
        assert LabelExpression("c").matches_labels(None)


class TestExpandExpressions:
    def test_substitutes_known_tokens(self) -> None:
        params = ChangeLogParameters({"table": "monkey"})
        assert expand_expressions("DROP ${table}", params) == "DROP monkey"

    def test_unknown_tokens_stay_literal(self) -> None:
        params = ChangeLogParameters()
        assert expand_expressions("${nope}", params) == "${nope}"
        assert has_unresolved_tokens("${nope}")

    def test_nested_values_expand_repeatedly(self) -> None:
        params = ChangeLogParameters({"outer": "${inner}_x", "inner": "v"})
        assert expand_expressions("${outer}", params) == "v_x"

    def test_self_reference_stops_after_max_passes(self) -> None:
        params = ChangeLogParameters({"loop": "${loop}!"}, max_passes=3)
        assert expand_expressions("${loop}", params, max_passes=3) == "${loop}!!!"

    def test_non_strings_pass_through(self) -> None:
        assert expand_expressions(5, ChangeLogParameters()) == 5

    def test_booleans_render_lowercase(self) -> None:
        params = ChangeLogParameters({"flag": True})
        assert params.expand("on=${flag}") == "on=true"


class TestChangeLogParameters:
    def test_entries_are_append_only_newest_wins(self) -> None:
        params = ChangeLogParameters()
        params.set("x", "1")
        params.set("x", "2")
        assert params.get_value("x") == "2" and len(params.properties) == 2

    def test_local_property_only_visible_to_its_changelog(self) -> None:
        params = ChangeLogParameters()
        owner = DatabaseChangeLog("child.yaml", params)
        other = DatabaseChangeLog("root.yaml", params)
        params.set("x", "local", is_global=False, change_log=owner)
        assert params.resolve("x", owner) == ("local", True)
        assert params.resolve("x", other) == (None, False)

    def test_local_beats_global_for_owner(self) -> None:
        params = ChangeLogParameters()
        owner = DatabaseChangeLog("child.yaml", params)
        params.set("x", "local", is_global=False, change_log=owner)
        params.set("x", "global")
        assert params.get_value("x", owner) == "local"
        assert params.get_value("x") == "global"

    def test_context_scoped_property(self) -> None:
        params = ChangeLogParameters(contexts="prod")
        params.set("x", "test-only", contexts=ContextExpression("test"))
        params.set("y", "prod-only", contexts=ContextExpression("prod"))
        assert not params.has_value("x") and params.get_value("y") == "prod-only"

    def test_dbms_scoped_property(self) -> None:
        params = ChangeLogParameters(database="mysql")
        params.set("x", "pg", dbms="postgresql")
        params.set("y", "my", dbms="mysql, oracle")
        assert not params.has_value("x") and params.get_value("y") == "my"
