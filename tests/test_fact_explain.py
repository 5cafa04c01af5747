"""Tests for natural-language fact explanations."""

import pytest

from agent_facts.fact_explain import explain, explain_all
from agent_facts.fact_models import parse_fact_definition


class TestExplainEnglish:
    def test_exists(self):
        assert explain({"name": "a", "type": "exists", "field": "presupuesto"}) == 'field "presupuesto" is present'

    def test_not_exists(self):
        assert explain({"name": "a", "type": "not_exists", "field": "email"}) == 'field "email" is NOT present'

    def test_equals(self):
        d = {"name": "urgent", "type": "equals", "field": "urgencia", "value": "alta"}
        assert explain(d) == 'field "urgencia" equals "alta"'

    @pytest.mark.parametrize(
        ("value", "rendered"),
        [(0, "0"), (False, "false"), (None, "null"), (2.5, "2.5"), ("", "")],
    )
    def test_equals_scalar_rendering(self, value, rendered):
        d = {"name": "x", "type": "equals", "field": "f", "value": value}
        assert explain(d) == f'field "f" equals "{rendered}"'

    def test_any_exists(self):
        d = {"name": "a", "type": "any_exists", "fields": ["email", "telefono"]}
        assert explain(d) == "at least one of fields: email, telefono"

    def test_all_exists(self):
        d = {"name": "a", "type": "all_exists", "fields": ["nombre", "email"]}
        assert explain(d) == "all of fields: nombre, email"

    def test_composite_all(self):
        d = {
            "name": "ready",
            "type": "composite",
            "logic": "all",
            "conditions": [{"fact": "has_budget"}, {"fact": "urgent"}],
        }
        assert explain(d) == "ALL of these facts are true: has_budget, urgent"

    def test_composite_any(self):
        d = {"name": "x", "type": "composite", "logic": "any", "conditions": [{"fact": "a"}]}
        assert explain(d) == "ANY of these facts are true: a"

    def test_composite_defaults_to_all(self):
        d = {"name": "x", "type": "composite", "conditions": [{"fact": "a"}, {"fact": "b"}]}
        assert explain(d) == "ALL of these facts are true: a, b"

    def test_typed_model(self):
        model = parse_fact_definition(
            {"name": "ready", "type": "composite", "conditions": [{"fact": "has_budget"}]}
        )
        assert explain(model) == "ALL of these facts are true: has_budget"

    def test_deterministic(self):
        d = {"name": "x", "type": "any_exists", "fields": ["b", "a"]}
        assert explain(d) == explain(d)


class TestExplainSpanish:
    def test_exists(self):
        assert explain({"type": "exists", "field": "presupuesto"}, "es") == 'Existe el campo "presupuesto"'

    def test_composite(self):
        d = {"type": "composite", "logic": "any", "conditions": [{"fact": "a"}, {"fact": "b"}]}
        assert explain(d, "es") == "AL MENOS UNO de estos facts son verdaderos: a, b"

    def test_unknown(self):
        assert explain({"type": "other"}, "es") == "Definición desconocida"


class TestExplainDegraded:
    @pytest.mark.parametrize(
        "definition",
        [
            None,
            42,
            {},
            {"type": "exists"},
            {"type": "equals"},
            {"type": "any_exists", "fields": "email"},
            {"type": "all_exists", "fields": [1, None]},
            {"type": "composite", "conditions": None},
            {"type": "composite", "logic": "xor", "conditions": [None, {"fact": "a"}]},
        ],
    )
    def test_never_raises(self, definition):
        assert isinstance(explain(definition), str)

    def test_unknown_type(self):
        assert explain({"name": "x", "type": "greater_than"}) == "unknown fact definition"

    def test_missing_field_placeholder(self):
        assert explain({"type": "exists"}) == 'field "?" is present'

    def test_unsupported_locale(self):
        with pytest.raises(ValueError, match="Unsupported locale"):
            explain({"type": "exists", "field": "a"}, "fr")


def test_explain_all():
    defs = [
        {"name": "a", "type": "exists", "field": "x"},
        {"name": "b", "type": "not_exists", "field": "y"},
    ]
    assert explain_all(defs) == ['field "x" is present', 'field "y" is NOT present']
