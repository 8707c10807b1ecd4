"""Gating predicates for fields and assertions."""

from typing import Callable


class Condition:
    """
    A named predicate over ambient state.

    A condition is evaluated every time its owner is checked; results are never
    cached because the state it reads (another checkbox, field visibility) may
    have changed since the last pass. Exceptions raised by the predicate are
    programmer errors and propagate to the caller.
    """

    def __init__(self, name: str, predicate: Callable[[], bool]):
        self.name = name
        self._predicate = predicate

    def evaluate(self) -> bool:
        return bool(self._predicate())

    def __repr__(self) -> str:
        return f"Condition({self.name!r})"


def value_not_empty(binding) -> Condition:
    """Condition that holds while the binding's value is non-empty (used by is_empty_or)."""

    def _check() -> bool:
        value = binding.read_value()
        if value is None:
            return False
        return len(str(value)) > 0

    return Condition("value is not empty", _check)
