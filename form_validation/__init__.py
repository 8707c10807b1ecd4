"""
form-validation-lib: Declarative field validation for UI forms

This library provides a toolkit-independent validation engine with:
- Composable assertions per field (not empty, length, regex, email, URL, ...)
- Conditions gating fields and single assertions
- Ordered, aggregated results per field and per form
- Real-time validation with per-field debounce
- Error display pushed back through a narrow view binding
- YAML configuration and declarative form definitions

Example:
    from form_validation import Form, TextBinding

    email = TextBinding()
    signup = Form()
    signup.input("email", "Email", email).is_email()

    result = signup.validate()
"""

from .api import form
from .bindings import (
    CheckableBinding,
    ChoiceBinding,
    Subscription,
    SubmitBinding,
    TextBinding,
    ViewBinding,
)
from .conditions import Condition
from .config_loader import FormConfig, load_config
from .debounce import AsyncioScheduler, Debouncer, ManualScheduler, Scheduler
from .field import CheckableField, ChoiceField, Field, InputField
from .form import Form
from .form_loader import load_form
from .results import FieldError, FieldValue, FormResult

__version__ = "0.1.0"
__all__ = [
    "AsyncioScheduler",
    "CheckableBinding",
    "CheckableField",
    "ChoiceBinding",
    "ChoiceField",
    "Condition",
    "Debouncer",
    "Field",
    "FieldError",
    "FieldValue",
    "Form",
    "FormConfig",
    "FormResult",
    "InputField",
    "ManualScheduler",
    "Scheduler",
    "SubmitBinding",
    "Subscription",
    "TextBinding",
    "ViewBinding",
    "form",
    "load_config",
    "load_form",
]
