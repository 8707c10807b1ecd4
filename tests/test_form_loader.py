"""
Tests for declarative form loading
"""
import sys
import types

import pytest

from form_validation import (
    CheckableBinding,
    ChoiceBinding,
    ManualScheduler,
    TextBinding,
    load_form,
)
from form_validation.assertions import LengthAssertion, UriAssertion
from form_validation.field import CheckableField, ChoiceField, InputField
from form_validation.form_loader import build_assertion, resolve_predicate


@pytest.fixture
def checks_module(monkeypatch):
    """An importable module holding a custom predicate."""
    module = types.ModuleType("signup_checks")

    def has_digit(view):
        return any(c.isdigit() for c in view.read_value())

    module.has_digit = has_digit
    module.not_callable = 42
    monkeypatch.setitem(sys.modules, "signup_checks", module)
    return module


@pytest.fixture
def bindings():
    return {
        "email": TextBinding(),
        "website": TextBinding(),
        "password": TextBinding(),
        "terms": CheckableBinding(),
        "country": ChoiceBinding(["NL", "BE"]),
    }


@pytest.fixture
def definition():
    return {
        "fields": [
            {
                "id": "email",
                "name": "Email",
                "assertions": [{"type": "not_empty"}, {"type": "email"}],
            },
            {
                "id": "website",
                "name": "Website",
                "assertions": [{"type": "url", "empty_or": True}],
            },
            {
                "id": "password",
                "name": "Password",
                "assertions": [
                    {"type": "length", "min": 8},
                    {
                        "type": "custom",
                        "function": "signup_checks:has_digit",
                        "description": "must contain a digit",
                    },
                ],
            },
            {
                "id": "terms",
                "name": "Terms",
                "kind": "checkable",
                "assertions": [{"type": "checked", "description": "please accept"}],
            },
            {
                "id": "country",
                "name": "Country",
                "kind": "choice",
                "assertions": [{"type": "selection"}],
            },
        ]
    }


class TestLoadForm:
    """Test load_form() with a parsed definition."""

    def test_fields_registered_in_order(self, definition, bindings, checks_module):
        """Test field ids, kinds and bindings."""
        form = load_form(definition, bindings, scheduler=ManualScheduler())
        assert [f.id for f in form.fields] == ["email", "website", "password", "terms", "country"]
        assert isinstance(form.fields[0], InputField)
        assert isinstance(form.fields[3], CheckableField)
        assert isinstance(form.fields[4], ChoiceField)
        assert form.get_field("terms").binding is bindings["terms"]

    def test_assertions_built(self, definition, bindings, checks_module):
        """Test assertion types, parameters and empty_or."""
        form = load_form(definition, bindings, scheduler=ManualScheduler())
        website = form.get_field("website").assertions[0]
        assert isinstance(website, UriAssertion)
        assert len(website.conditions) == 1
        length = form.get_field("password").assertions[0]
        assert isinstance(length, LengthAssertion)
        assert length.min == 8

    def test_validation(self, definition, bindings, checks_module):
        """Test a loaded form end to end."""
        form = load_form(definition, bindings, scheduler=ManualScheduler())
        bindings["email"].text = "ada@example.com"
        bindings["password"].text = "longpassword"
        result = form.validate()
        assert [(e.field_id, e.description) for e in result.errors] == [
            ("password", "must contain a digit"),
            ("terms", "please accept"),
            ("country", "must have a selection"),
        ]

    def test_missing_binding(self, definition, bindings, checks_module):
        """Test that every defined field needs a binding."""
        del bindings["terms"]
        with pytest.raises(ValueError, match="No binding supplied for field 'terms'"):
            load_form(definition, bindings)

    def test_schema_violation(self, bindings):
        """Test that malformed definitions are rejected."""
        with pytest.raises(ValueError, match="Invalid form definition"):
            load_form({"fields": [{"id": "email"}]}, bindings)

    def test_unknown_assertion_type(self, bindings):
        """Test that unknown type tags are rejected by the schema."""
        definition = {"fields": [{"id": "email", "name": "Email", "assertions": [{"type": "zip"}]}]}
        with pytest.raises(ValueError):
            load_form(definition, bindings)

    def test_bad_parameters(self, bindings):
        """Test that unexpected assertion parameters are reported."""
        definition = {
            "fields": [{"id": "email", "name": "Email", "assertions": [{"type": "email", "strict": True}]}]
        }
        with pytest.raises(ValueError, match="Invalid parameters for 'email'"):
            load_form(definition, bindings)


class TestRealTimeSettings:
    """Test real-time settings in definitions."""

    def test_form_level_and_field_override(self, bindings):
        """Test form-wide debounce with a per-field override."""
        definition = {
            "real_time": {"debounce_ms": 300, "disable_submit": True},
            "fields": [
                {"id": "email", "name": "Email", "assertions": [{"type": "not_empty"}]},
                {
                    "id": "website",
                    "name": "Website",
                    "real_time": {"debounce_ms": 0},
                    "assertions": [{"type": "url"}],
                },
            ],
        }
        form = load_form(definition, bindings, scheduler=ManualScheduler())
        assert form.disable_submit is True
        assert form.get_field("email").debounce_ms == 300
        assert form.get_field("website").debounce_ms == 0

        bindings["website"].set_text("nope")
        assert bindings["website"].error == "must be a valid URL"

    def test_disabled(self, bindings):
        """Test that enabled: false leaves real-time validation off."""
        definition = {
            "real_time": {"enabled": False},
            "fields": [{"id": "email", "name": "Email"}],
        }
        form = load_form(definition, bindings, scheduler=ManualScheduler())
        assert not form.get_field("email").real_time


class TestYamlDefinitions:
    """Test loading definitions from YAML documents."""

    def test_yaml_file(self, tmp_path, bindings):
        """Test a YAML path."""
        path = tmp_path / "signup.yaml"
        path.write_text(
            "fields:\n"
            "  - id: email\n"
            "    name: Email\n"
            "    assertions:\n"
            "      - type: email\n"
            "        description: \"is not an email\"\n"
        )
        form = load_form(str(path), bindings, scheduler=ManualScheduler())
        bindings["email"].text = "nope"
        assert [e.description for e in form.validate().errors] == ["is not an email"]


class TestHelpers:
    """Test build_assertion() and resolve_predicate()."""

    def test_build_number(self):
        """Test parameters are passed to the constructor."""
        assertion = build_assertion({"type": "number", "min": 1, "max": 3})
        assert assertion.is_valid("2")
        assert not assertion.is_valid("4")

    def test_build_unknown(self):
        """Test unknown type tags."""
        with pytest.raises(ValueError, match="Unknown assertion type"):
            build_assertion({"type": "zip"})

    def test_custom_needs_function(self):
        """Test custom entries without a predicate reference."""
        with pytest.raises(ValueError, match="function"):
            build_assertion({"type": "custom", "description": "x"})

    def test_resolve(self, checks_module):
        """Test resolving a predicate reference."""
        assert resolve_predicate("signup_checks:has_digit") is checks_module.has_digit

    def test_resolve_errors(self, checks_module):
        """Test malformed and unresolvable references."""
        with pytest.raises(ValueError):
            resolve_predicate("no_colon")
        with pytest.raises(ImportError):
            resolve_predicate("surely_not_a_module_xyz:check")
        with pytest.raises(AttributeError):
            resolve_predicate("signup_checks:missing")
        with pytest.raises(TypeError):
            resolve_predicate("signup_checks:not_callable")
