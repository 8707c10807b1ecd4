"""Caller-defined assertions."""

from typing import Any, Callable

from .base import Assertion


class CustomAssertion(Assertion):
    """
    Wraps a predicate over the bound view.

    Unlike the built-in assertions the predicate receives the binding itself,
    not its value, so it can inspect anything the host's binding exposes.
    The description is always supplied by the caller.
    """

    assertion_type = "custom"

    def __init__(self, description: str, predicate: Callable[[Any], bool], **kwargs):
        if not description:
            raise ValueError("Custom assertions need a description")
        if not callable(predicate):
            raise TypeError(f"Custom assertion predicate must be callable, got {type(predicate).__name__}")
        super().__init__(description=description, **kwargs)
        self._predicate = predicate

    def is_valid(self, view: Any) -> bool:
        return bool(self._predicate(view))

    def evaluate(self, binding) -> bool:
        return self.is_valid(binding)

    def message_key(self) -> str:
        return "custom"
