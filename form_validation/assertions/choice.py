"""Assertions for checkable and choice views."""

from typing import Any, Dict, Optional

from .base import Assertion, check_bounds


class CheckedAssertion(Assertion):
    assertion_type = "checked"

    def __init__(self, expected: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.expected = expected

    def is_valid(self, value: Any) -> bool:
        return bool(value) == self.expected

    def message_key(self) -> str:
        return "checked" if self.expected else "not_checked"

    def parameters(self) -> Dict[str, Any]:
        return {"expected": self.expected}


class SelectionAssertion(Assertion):
    """
    Checks the selected index of a choice view.

    -1 (or None) means nothing is selected and always fails. Without bounds
    any selection passes.
    """

    assertion_type = "selection"

    def __init__(
        self,
        min: Optional[int] = None,
        max: Optional[int] = None,
        exactly: Optional[int] = None,
        **kwargs,
    ):
        check_bounds(min, max, exactly, "Selection assertion")
        super().__init__(**kwargs)
        self.min = min
        self.max = max
        self.exactly = exactly

    def is_valid(self, value: Any) -> bool:
        if value is None or isinstance(value, bool):
            return False
        try:
            index = int(value)
        except (TypeError, ValueError):
            return False
        if index < 0:
            return False
        if self.exactly is not None:
            return index == self.exactly
        if self.min is not None and index < self.min:
            return False
        if self.max is not None and index > self.max:
            return False
        return True

    def message_key(self) -> str:
        if self.exactly is not None:
            return "selection_exactly"
        if self.min is not None and self.max is not None:
            return "selection_between"
        if self.min is not None:
            return "selection_at_least"
        if self.max is not None:
            return "selection_at_most"
        return "selection_required"

    def parameters(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "exactly": self.exactly}
