"""
Fields - one bound view plus the assertions attached to it.

A field evaluates its assertions in the order they were added and collects
every failure; it never stops at the first one. Field-level conditions gate
the whole field, assertion-level conditions gate single assertions:

    field = form.input("website", "Website", binding)
    field.is_not_empty()
    with field.is_empty_or():
        field.is_url()

In real-time mode the field listens to its binding and re-validates after
each change, debounced by debounce_ms, pushing the outcome straight back to
the binding.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Union

from .assertions import (
    Assertion,
    CheckedAssertion,
    ContainsAssertion,
    CustomAssertion,
    EmailAssertion,
    LengthAssertion,
    NotEmptyAssertion,
    NumberAssertion,
    RegexAssertion,
    SelectionAssertion,
    UriAssertion,
    UrlAssertion,
)
from .bindings import Subscription, ViewBinding
from .conditions import Condition, value_not_empty
from .config_loader import FormConfig, default_config
from .debounce import Debouncer, Scheduler
from .results import FieldError

logger = logging.getLogger(__name__)

# on_errors hooks receive (binding, errors, force_show)
ErrorHandler = Callable[[ViewBinding, List[FieldError], bool], None]


class Field:
    """A validated view and its ordered assertions."""

    def __init__(
        self,
        field_id: Hashable,
        name: str,
        binding: ViewBinding,
        config: Optional[FormConfig] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Args:
            field_id: Key of the field, unique within its form
            name: Human readable name
            binding: The view this field validates
            config: Supplies description templates; bundled defaults if omitted
            scheduler: Timer source for debounced real-time validation

        Raises:
            ValueError: If binding is None
            TypeError: If binding is not a ViewBinding
        """
        if binding is None:
            raise ValueError(f"Field {field_id!r} ({name}) has no bound view")
        if not isinstance(binding, ViewBinding):
            raise TypeError(
                f"Field {field_id!r} needs a ViewBinding, got {type(binding).__name__}"
            )
        self.id = field_id
        self.name = name
        self.binding = binding
        self.config = config if config is not None else default_config()
        self.assertions: List[Assertion] = []
        self.conditions: List[Condition] = []
        self.debounce_ms: Optional[int] = None
        self.on_errors: Optional[ErrorHandler] = None

        self._block_conditions: List[Condition] = []
        self._debouncer = Debouncer(scheduler)
        self._subscription: Optional[Subscription] = None
        self._validation_listeners: List[Callable[["Field", List[FieldError]], None]] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, {self.name!r}, assertions={len(self.assertions)})"

    @property
    def value(self) -> Any:
        return self.binding.read_value()

    @property
    def real_time(self) -> bool:
        return self._subscription is not None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def add_assertion(self, assertion: Assertion) -> Assertion:
        """
        Append an assertion and return it.

        Conditions of any enclosing is_empty_or()/conditional() blocks are
        prepended to the assertion's own conditions, outermost first.
        """
        if self._block_conditions:
            assertion.conditions[:0] = self._block_conditions
        self.assertions.append(assertion)
        return assertion

    def add_condition(self, condition: Union[Condition, Callable[[], bool]]) -> Condition:
        """Gate the whole field: while any field condition is false the field reports no errors."""
        condition = _as_condition(condition)
        self.conditions.append(condition)
        return condition

    @contextmanager
    def conditional(self, condition: Union[Condition, Callable[[], bool]]) -> Iterator["Field"]:
        """Assertions added inside the block are only evaluated while condition holds."""
        self._block_conditions.append(_as_condition(condition))
        try:
            yield self
        finally:
            self._block_conditions.pop()

    def is_empty_or(self):
        """Assertions added inside the block pass on empty input."""
        return self.conditional(value_not_empty(self.binding))

    def assert_that(self, description: str, predicate: Callable[[Any], bool]) -> CustomAssertion:
        """Add a custom assertion; predicate receives the binding."""
        return self.add_assertion(
            CustomAssertion(description, predicate, messages=self.config.messages)
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> List[FieldError]:
        """
        Evaluate every assertion whose conditions hold.

        Returns:
            One FieldError per failed assertion, in assertion order. Empty when
            a field-level condition is false.
        """
        for condition in self.conditions:
            if not condition.evaluate():
                logger.debug(f"Field {self.id!r} skipped: {condition.name} is false")
                return []

        errors = []
        for assertion in self.assertions:
            if not assertion.conditions_met():
                continue
            if not assertion.evaluate(self.binding):
                errors.append(
                    FieldError(
                        field_id=self.id,
                        field_name=self.name,
                        description=assertion.failure_description(self.binding),
                        assertion_type=assertion.assertion_type,
                    )
                )

        if errors:
            logger.debug(f"Field {self.id!r} failed {len(errors)} of {len(self.assertions)} assertions")
        return errors

    def propagate_errors(self, force_show: bool, errors: List[FieldError]) -> None:
        """
        Push this field's first error to its view, or clear the view when there is none.

        Errors belonging to other fields are ignored. When an on_errors hook is
        set it replaces the default display and receives force_show, which is
        True for submit-time validation and False for real-time passes.
        """
        own = [e for e in errors if e.field_id == self.id]
        if self.on_errors is not None:
            self.on_errors(self.binding, own, force_show)
            return
        self.binding.show_error(own[0].description if own else None)

    # ------------------------------------------------------------------
    # Real-time validation
    # ------------------------------------------------------------------

    def start_real_time_validation(self, debounce_ms: int = 0) -> None:
        """
        Re-validate after every change of the bound view.

        Calling it again replaces the previous subscription and drops any
        pending validation.

        Args:
            debounce_ms: Quiet period before validating; 0 validates synchronously

        Raises:
            ValueError: If debounce_ms is negative
            RuntimeError: If debounce_ms > 0 and timers cannot be armed, either
                because no scheduler was supplied or the scheduler is not ready
        """
        if debounce_ms < 0:
            raise ValueError(f"Debounce cannot be negative: {debounce_ms}")
        self._debouncer.check_ready(debounce_ms)
        self.stop_real_time_validation()
        self.debounce_ms = debounce_ms
        self._subscription = self.binding.on_change(self._on_value_changed)
        logger.debug(f"Real-time validation on for field {self.id!r} (debounce {debounce_ms} ms)")

    def stop_real_time_validation(self) -> None:
        """Cancel the change subscription and any pending validation."""
        self._debouncer.cancel()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self.debounce_ms = None

    def add_validation_listener(self, listener: Callable[["Field", List[FieldError]], None]) -> None:
        """Call listener(field, errors) after each real-time validation pass."""
        self._validation_listeners.append(listener)

    def _on_value_changed(self) -> None:
        self._debouncer.schedule(self.debounce_ms, self._validate_real_time)

    def _validate_real_time(self) -> None:
        errors = self.validate()
        self.propagate_errors(False, errors)
        for listener in self._validation_listeners:
            listener(self, errors)

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": type(self).__name__,
            "conditions": [c.name for c in self.conditions],
            "real_time": self.real_time,
            "debounce_ms": self.debounce_ms,
            "assertions": [a.describe() for a in self.assertions],
        }


class InputField(Field):
    """Text input field."""

    def is_not_empty(self, description: Optional[str] = None) -> NotEmptyAssertion:
        return self.add_assertion(self._make(NotEmptyAssertion, description))

    def length(
        self,
        min: Optional[int] = None,
        max: Optional[int] = None,
        exactly: Optional[int] = None,
        description: Optional[str] = None,
    ) -> LengthAssertion:
        return self.add_assertion(
            self._make(LengthAssertion, description, min=min, max=max, exactly=exactly)
        )

    def matches(self, pattern: str, ignore_case: bool = False, description: Optional[str] = None) -> RegexAssertion:
        return self.add_assertion(
            self._make(RegexAssertion, description, pattern=pattern, ignore_case=ignore_case)
        )

    def contains(self, text: str, ignore_case: bool = False, description: Optional[str] = None) -> ContainsAssertion:
        return self.add_assertion(
            self._make(ContainsAssertion, description, text=text, ignore_case=ignore_case)
        )

    def is_email(self, description: Optional[str] = None) -> EmailAssertion:
        return self.add_assertion(self._make(EmailAssertion, description))

    def is_uri(self, schemes=None, description: Optional[str] = None) -> UriAssertion:
        return self.add_assertion(self._make(UriAssertion, description, schemes=schemes))

    def is_url(self, description: Optional[str] = None) -> UrlAssertion:
        return self.add_assertion(self._make(UrlAssertion, description))

    def is_number(self, description: Optional[str] = None, **bounds) -> NumberAssertion:
        """Integer input; bounds are min, max, greater_than, less_than or exactly."""
        return self.add_assertion(self._make(NumberAssertion, description, **bounds))

    def is_decimal(self, description: Optional[str] = None, **bounds) -> NumberAssertion:
        return self.add_assertion(self._make(NumberAssertion, description, decimal=True, **bounds))

    def _make(self, assertion_class, description, **params):
        return assertion_class(description=description, messages=self.config.messages, **params)


class CheckableField(Field):
    """Checkbox, switch or radio button field."""

    def is_checked(self, description: Optional[str] = None) -> CheckedAssertion:
        return self.add_assertion(
            CheckedAssertion(True, description=description, messages=self.config.messages)
        )

    def is_not_checked(self, description: Optional[str] = None) -> CheckedAssertion:
        return self.add_assertion(
            CheckedAssertion(False, description=description, messages=self.config.messages)
        )


class ChoiceField(Field):
    """Spinner or drop-down field; the value is the selected index."""

    def selection(
        self,
        min: Optional[int] = None,
        max: Optional[int] = None,
        exactly: Optional[int] = None,
        description: Optional[str] = None,
    ) -> SelectionAssertion:
        return self.add_assertion(
            SelectionAssertion(
                min=min,
                max=max,
                exactly=exactly,
                description=description,
                messages=self.config.messages,
            )
        )


def _as_condition(condition: Union[Condition, Callable[[], bool]]) -> Condition:
    if isinstance(condition, Condition):
        return condition
    if callable(condition):
        return Condition(getattr(condition, "__name__", "condition"), condition)
    raise TypeError(f"Expected a Condition or a callable, got {type(condition).__name__}")
