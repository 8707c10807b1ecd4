"""Immutable result records produced by a validation pass."""

from dataclasses import dataclass, field
from typing import Any, Hashable, List, Optional, Tuple


@dataclass(frozen=True)
class FieldError:
    """One failed assertion on one field."""

    field_id: Hashable
    field_name: str
    description: str
    assertion_type: str

    def __str__(self) -> str:
        return f"{self.field_name} {self.description}"


@dataclass(frozen=True)
class FieldValue:
    """A field's value as read during a validation pass."""

    field_id: Hashable
    field_name: str
    value: Any


@dataclass(frozen=True)
class FormResult:
    """
    The outcome of validating a whole form.

    errors keeps field registration order, then assertion order within each
    field. The result is falsy when validation failed, so callers can write:

        result = form.validate()
        if not result:
            for error in result.errors:
                print(error)
    """

    errors: Tuple[FieldError, ...] = ()
    values: Tuple[FieldValue, ...] = field(default=())

    @property
    def success(self) -> bool:
        return not self.errors

    def has_errors(self) -> bool:
        return bool(self.errors)

    def __bool__(self) -> bool:
        return self.success

    def errors_for(self, field_id: Hashable) -> List[FieldError]:
        """Errors reported for one field, in assertion order."""
        return [e for e in self.errors if e.field_id == field_id]

    def get(self, field_name: str) -> Optional[FieldValue]:
        """Look up a captured value by field name; None if no such field."""
        for value in self.values:
            if value.field_name == field_name:
                return value
        return None
