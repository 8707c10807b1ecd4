"""
Abstract base class for assertions.

An assertion is one named validation rule over a field's current value. All
assertions share the same small surface:

- assertion_type  - type tag copied into every FieldError it produces
- is_valid(value) - pure check of a value
- description()   - human readable failure text
- conditions      - gates evaluated before is_valid(); any false gate skips it

Parameters are fixed at construction. Descriptions are templates looked up by
message key in the form's configuration and filled from the assertion's own
parameters, so "length_between" with min=2, max=8 renders as
"must be between 2 and 8 characters".
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from ..conditions import Condition

_NO_VALUE = object()


class Assertion(ABC):
    """
    Abstract base class for all assertions.

    Subclasses set assertion_type, implement is_valid() and message_key(), and
    return the values their template needs from parameters().
    """

    assertion_type: str = ""

    def __init__(
        self,
        description: Optional[str] = None,
        messages: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            description: Fixed description replacing the configured template
            messages: Message templates keyed by message key; the bundled
                defaults are used when omitted
        """
        self.conditions: List[Condition] = []
        self._description = description
        self._messages = messages

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """Return True when value satisfies this assertion."""

    @abstractmethod
    def message_key(self) -> str:
        """Return the configuration key of this assertion's description template."""

    def parameters(self) -> Dict[str, Any]:
        """Return the values substituted into the description template."""
        return {}

    def description(self, value: Any = _NO_VALUE) -> str:
        """
        Human readable failure text.

        Without a value the text describes the assertion as configured. Given
        the value that failed, it names the check that value failed.

        Raises:
            KeyError: If no template is configured for the message key
        """
        if self._description is not None:
            return self._description
        from ..config_loader import default_messages, message_template

        messages = self._messages if self._messages is not None else default_messages()
        key = self.message_key() if value is _NO_VALUE else self.failure_key(value)
        return message_template(messages, key).format(**self.parameters())

    def failure_key(self, value: Any) -> str:
        """Message key for the check value fails; message_key() unless overridden."""
        return self.message_key()

    def failure_description(self, binding) -> str:
        """Description of the failure for the binding's current value."""
        return self.description(binding.read_value())

    def evaluate(self, binding) -> bool:
        """Check the binding's current value."""
        return self.is_valid(binding.read_value())

    def conditions_met(self) -> bool:
        return all(condition.evaluate() for condition in self.conditions)

    def describe(self) -> Dict[str, Any]:
        """Metadata for Form.describe(); does not evaluate anything."""
        return {
            "assertion_type": self.assertion_type,
            "description": self.description(),
            "parameters": self.parameters(),
            "conditions": [c.name for c in self.conditions],
        }

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.parameters().items())
        return f"{type(self).__name__}({params})"


def as_text(value: Any) -> str:
    """Text form of a binding value; None reads as empty."""
    if value is None:
        return ""
    return str(value)


def check_bounds(min_value, max_value, exactly, what: str) -> None:
    """Reject contradictory bound combinations at construction time."""
    if exactly is not None and (min_value is not None or max_value is not None):
        raise ValueError(f"{what}: 'exactly' cannot be combined with 'min' or 'max'")
    if min_value is not None and max_value is not None and min_value > max_value:
        raise ValueError(f"{what}: min ({min_value}) cannot be greater than max ({max_value})")
