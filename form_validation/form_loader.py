"""
Form Loader - Declarative Form Definitions

Builds a Form from a YAML (or already parsed) definition so the rules of a
screen can live next to its layout instead of in code.

## Definition format

```yaml
real_time:
  debounce_ms: 300
  disable_submit: true

fields:
  - id: email
    name: Email
    kind: input            # field | input | checkable | choice (default: input)
    assertions:
      - type: not_empty
      - type: email
  - id: website
    name: Website
    assertions:
      - type: url
        empty_or: true     # empty input passes
  - id: password
    name: Password
    real_time:
      debounce_ms: 0       # overrides the form-level debounce for this field
    assertions:
      - type: length
        min: 8
      - type: custom
        function: "myapp.checks:has_digit"
        description: "must contain a digit"
```

## How it works

1. The definition is validated against schemas/form.schema.json
2. Each field is registered, in order, with the binding supplied for its id
3. Each assertion entry is resolved through ASSERTION_TYPES by its "type"
   tag; remaining keys become constructor parameters
4. "custom" entries import their predicate from "module.path:function"
5. Form-level real-time settings are applied, then per-field overrides

Bindings are never described in the definition: the host passes a mapping of
field id to ViewBinding, and a field without one is a setup error.
"""

import importlib
import logging
import os
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Union

from .assertions import ASSERTION_TYPES, Assertion
from .bindings import ViewBinding
from .config_loader import FormConfig, load_yaml_document, validate_document
from .debounce import Scheduler
from .field import CheckableField, ChoiceField, Field, InputField
from .form import Form

logger = logging.getLogger(__name__)

FIELD_KINDS = {
    "field": Field,
    "input": InputField,
    "checkable": CheckableField,
    "choice": ChoiceField,
}


def load_form(
    definition: Union[Dict[str, Any], str, "os.PathLike[str]"],
    bindings: Mapping[Hashable, ViewBinding],
    config: Optional[FormConfig] = None,
    scheduler: Optional[Scheduler] = None,
) -> Form:
    """
    Build a Form from a definition.

    Args:
        definition: Parsed definition dict, or path/URI of a YAML document
        bindings: Field id -> ViewBinding for every field in the definition
        config: Form configuration (bundled defaults if omitted)
        scheduler: Timer source for debounced real-time validation

    Returns:
        A Form with all fields and assertions registered

    Raises:
        ValueError: If the definition is invalid, a binding is missing or
            assertion parameters are rejected
        ImportError: If a custom predicate module cannot be imported
        AttributeError: If a custom predicate is not found in its module
    """
    source = "form definition"
    if not isinstance(definition, dict):
        source = os.fspath(definition)
        definition = load_yaml_document(source)

    validate_document(definition, "form.schema.json", source)

    form = Form(config=config, scheduler=scheduler)
    field_overrides = []

    for field_def in definition["fields"]:
        field_id = field_def["id"]
        if field_id not in bindings:
            raise ValueError(f"No binding supplied for field {field_id!r}")

        field_class = FIELD_KINDS[field_def.get("kind", "input")]
        field = form.register_field(field_id, field_def["name"], bindings[field_id], field_class=field_class)

        for assertion_def in field_def.get("assertions", []):
            assertion = build_assertion(assertion_def, form.config.messages)
            if assertion_def.get("empty_or", False):
                with field.is_empty_or():
                    field.add_assertion(assertion)
            else:
                field.add_assertion(assertion)

        if "real_time" in field_def:
            field_overrides.append((field, field_def["real_time"].get("debounce_ms", 0)))

    real_time = definition.get("real_time")
    if real_time is not None and real_time.get("enabled", True):
        form.use_real_time_validation(
            debounce_ms=real_time.get("debounce_ms"),
            disable_submit=real_time.get("disable_submit"),
        )

    for field, debounce_ms in field_overrides:
        field.start_real_time_validation(debounce_ms)

    logger.info(f"Loaded {len(form.fields)} fields from {source}")
    return form


def build_assertion(assertion_def: Dict[str, Any], messages: Optional[Mapping[str, str]] = None) -> Assertion:
    """
    Instantiate one assertion entry.

    Args:
        assertion_def: Dict with "type" plus constructor parameters
        messages: Description templates passed to the assertion

    Raises:
        ValueError: If the type is unknown or the parameters are rejected
    """
    params = dict(assertion_def)
    type_tag = params.pop("type")
    params.pop("empty_or", None)

    try:
        assertion_class = ASSERTION_TYPES[type_tag]
    except KeyError:
        raise ValueError(
            f"Unknown assertion type {type_tag!r}. Known types: {', '.join(sorted(ASSERTION_TYPES))}"
        ) from None

    if type_tag == "custom":
        if "function" not in params or "description" not in params:
            raise ValueError("Custom assertions need both 'function' and 'description'")
        params["predicate"] = resolve_predicate(params.pop("function"))

    try:
        return assertion_class(messages=messages, **params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for {type_tag!r} assertion: {e}") from e


def resolve_predicate(reference: str) -> Callable[[Any], bool]:
    """
    Import a predicate from a "module.path:function" reference.

    Raises:
        ValueError: If the reference is malformed
        ImportError: If the module cannot be imported
        AttributeError: If the module has no such attribute
        TypeError: If the attribute is not callable
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Predicate reference must look like 'module.path:function', got {reference!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ImportError(f"Failed to import predicate module {module_name!r}: {e}") from e

    if not hasattr(module, attr):
        raise AttributeError(f"Predicate '{attr}' not found in module {module_name!r}")

    predicate = getattr(module, attr)
    if not callable(predicate):
        raise TypeError(f"Predicate {reference!r} is not callable")
    return predicate
