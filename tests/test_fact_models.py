"""Tests for fact definition models and the empty-draft constructor."""

import pytest
from pydantic import ValidationError

from agent_facts.fact_models import (
    FACT_TYPES,
    AllExistsFact,
    CompositeFact,
    EqualsFact,
    ExistsFact,
    NotExistsFact,
    create_empty_fact_definition,
    dump_fact_definition,
    is_valid_fact_name,
    parse_fact_definition,
)


class TestFactName:
    @pytest.mark.parametrize("name", ["has_budget", "_private", "A1", "x"])
    def test_valid_names(self, name):
        assert is_valid_fact_name(name)

    @pytest.mark.parametrize("name", ["", "1st", "has-budget", "has budget", "ñandu", "ok\n", None, 5])
    def test_invalid_names(self, name):
        assert not is_valid_fact_name(name)


class TestParseFactDefinition:
    def test_exists(self):
        fact = parse_fact_definition({"name": "has_budget", "type": "exists", "field": "presupuesto"})
        assert isinstance(fact, ExistsFact)
        assert fact.field == "presupuesto"

    def test_not_exists(self):
        fact = parse_fact_definition({"name": "no_email", "type": "not_exists", "field": "email"})
        assert isinstance(fact, NotExistsFact)

    def test_equals_accepts_falsy_values(self):
        for value in ("", 0, False, None):
            fact = parse_fact_definition(
                {"name": "flag", "type": "equals", "field": "urgencia", "value": value}
            )
            assert isinstance(fact, EqualsFact)
            assert fact.value == value

    def test_equals_requires_value(self):
        with pytest.raises(ValidationError):
            parse_fact_definition({"name": "flag", "type": "equals", "field": "urgencia"})

    def test_all_exists(self):
        fact = parse_fact_definition(
            {"name": "contact", "type": "all_exists", "fields": ["nombre", "email"]}
        )
        assert isinstance(fact, AllExistsFact)
        assert fact.fields == ["nombre", "email"]

    def test_empty_fields_rejected(self):
        with pytest.raises(ValidationError, match="fields must not be empty"):
            parse_fact_definition({"name": "contact", "type": "any_exists", "fields": []})

    def test_composite_defaults_to_all(self):
        fact = parse_fact_definition(
            {"name": "ready", "type": "composite", "conditions": [{"fact": "a"}, {"fact": "b"}]}
        )
        assert isinstance(fact, CompositeFact)
        assert fact.logic == "all"
        assert fact.referenced_facts == ["a", "b"]

    def test_composite_rejects_unknown_logic(self):
        with pytest.raises(ValidationError):
            parse_fact_definition(
                {"name": "ready", "type": "composite", "logic": "xor", "conditions": [{"fact": "a"}]}
            )

    def test_composite_rejects_empty_conditions(self):
        with pytest.raises(ValidationError, match="conditions must not be empty"):
            parse_fact_definition({"name": "ready", "type": "composite", "conditions": []})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_fact_definition({"name": "x", "type": "greater_than", "field": "a"})

    def test_bad_name_rejected(self):
        with pytest.raises(ValidationError, match="must match"):
            parse_fact_definition({"name": "has-budget", "type": "exists", "field": "a"})

    def test_parse_many_and_dump(self):
        raw = [
            {"name": "has_budget", "type": "exists", "field": "presupuesto"},
            {"name": "ready", "type": "composite", "logic": "any", "conditions": [{"fact": "has_budget"}]},
        ]
        facts = [parse_fact_definition(item) for item in raw]
        assert [dump_fact_definition(f) for f in facts] == raw


class TestCreateEmptyFactDefinition:
    def test_default_is_exists(self):
        assert create_empty_fact_definition() == {"name": "", "type": "exists", "field": ""}

    def test_every_type_has_a_template(self):
        for fact_type in FACT_TYPES:
            draft = create_empty_fact_definition(fact_type)
            assert draft["name"] == ""
            assert draft["type"] == fact_type

    def test_equals_template(self):
        assert create_empty_fact_definition("equals") == {
            "name": "", "type": "equals", "field": "", "value": "",
        }

    def test_composite_template(self):
        assert create_empty_fact_definition("composite") == {
            "name": "", "type": "composite", "logic": "all", "conditions": [],
        }

    def test_unknown_type_is_bare(self):
        assert create_empty_fact_definition("weird") == {"name": "", "type": "weird"}

    def test_templates_are_independent(self):
        a = create_empty_fact_definition("any_exists")
        a["fields"].append("x")
        assert create_empty_fact_definition("any_exists")["fields"] == []
