"""
Form - ordered fields, whole-form validation and error propagation.

Validating a form validates each field in registration order, concatenates the
errors (field order, then assertion order within a field) and then pushes each
field's errors to its view. Every field is updated on every pass, including
fields without errors, so errors left over from an earlier pass are cleared.
"""

import logging
from typing import Any, Callable, Dict, Hashable, List, Optional, Type

from .bindings import SubmitBinding, ViewBinding
from .config_loader import FormConfig, default_config
from .debounce import AsyncioScheduler, Scheduler
from .field import CheckableField, ChoiceField, Field, InputField
from .results import FieldError, FieldValue, FormResult

logger = logging.getLogger(__name__)


class Form:
    """A set of fields validated together."""

    def __init__(self, config: Optional[FormConfig] = None, scheduler: Optional[Scheduler] = None):
        """
        Args:
            config: Description templates and real-time defaults; bundled
                defaults if omitted
            scheduler: Timer source for debounced real-time validation;
                timers go to the running asyncio loop if omitted
        """
        self.config = config if config is not None else default_config()
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self.fields: List[Field] = []
        self.disable_submit = False
        self.real_time_debounce_ms: Optional[int] = None
        self._fields_by_id: Dict[Hashable, Field] = {}
        self._submit_binding: Optional[SubmitBinding] = None

    def __repr__(self) -> str:
        return f"Form(fields={[f.id for f in self.fields]!r})"

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_field(
        self,
        field_id: Hashable,
        name: str,
        binding: ViewBinding,
        field_class: Type[Field] = Field,
    ) -> Field:
        """
        Create, store and return a field. Registration order is validation order.

        When real-time validation is already on for the form, the new field
        starts it immediately.

        Raises:
            ValueError: If field_id is already registered or binding is None
        """
        if field_id in self._fields_by_id:
            raise ValueError(f"Field {field_id!r} is already registered")

        field = field_class(field_id, name, binding, config=self.config, scheduler=self.scheduler)
        field.add_validation_listener(self._on_field_validated)
        self.fields.append(field)
        self._fields_by_id[field_id] = field

        if self.real_time_debounce_ms is not None:
            field.start_real_time_validation(self.real_time_debounce_ms)
        return field

    def input(self, field_id: Hashable, name: str, binding: ViewBinding) -> InputField:
        return self.register_field(field_id, name, binding, field_class=InputField)

    def checkable(self, field_id: Hashable, name: str, binding: ViewBinding) -> CheckableField:
        return self.register_field(field_id, name, binding, field_class=CheckableField)

    def choice(self, field_id: Hashable, name: str, binding: ViewBinding) -> ChoiceField:
        return self.register_field(field_id, name, binding, field_class=ChoiceField)

    def get_field(self, field_id: Hashable) -> Field:
        try:
            return self._fields_by_id[field_id]
        except KeyError:
            raise KeyError(f"No field registered with id {field_id!r}") from None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, silent: bool = False) -> FormResult:
        """
        Validate every field in registration order.

        Args:
            silent: Compute the result without touching any view

        Returns:
            A new FormResult with ordered errors and the values read
        """
        errors: List[FieldError] = []
        values: List[FieldValue] = []
        per_field = []

        for field in self.fields:
            field_errors = field.validate()
            per_field.append((field, field_errors))
            errors.extend(field_errors)
            values.append(FieldValue(field_id=field.id, field_name=field.name, value=field.value))

        if not silent:
            for field, field_errors in per_field:
                field.propagate_errors(True, field_errors)

        result = FormResult(errors=tuple(errors), values=tuple(values))
        logger.debug(
            f"Form validated: {len(self.fields)} fields, {len(errors)} errors"
            + (" (silent)" if silent else "")
        )

        if self.disable_submit and self._submit_binding is not None:
            self._submit_binding.set_enabled(result.success)
        return result

    def submit_with(self, callback: Callable[[FormResult], Any]) -> FormResult:
        """
        Validate, then call callback(result) only if the form is valid.

        Failures never raise; inspect the returned result instead.
        """
        result = self.validate()
        if result.success:
            callback(result)
        else:
            logger.debug(f"Submit blocked by {len(result.errors)} validation errors")
        return result

    # ------------------------------------------------------------------
    # Real-time validation and submit wiring
    # ------------------------------------------------------------------

    def use_real_time_validation(
        self,
        debounce_ms: Optional[int] = None,
        disable_submit: Optional[bool] = None,
    ) -> "Form":
        """
        Validate every field (present and future) as its value changes.

        Args:
            debounce_ms: Quiet period per field; configured default if None
            disable_submit: Keep the bound submit view disabled while the form
                is invalid; configured default if None

        Raises:
            ValueError: If debounce_ms is negative
            RuntimeError: If debounce_ms > 0 and the scheduler cannot arm
                timers, e.g. an AsyncioScheduler outside a running loop
        """
        real_time = self.config.real_time
        if debounce_ms is None:
            debounce_ms = real_time["debounce_ms"]
        if disable_submit is None:
            disable_submit = real_time["disable_submit"]
        if debounce_ms < 0:
            raise ValueError(f"Debounce cannot be negative: {debounce_ms}")
        if debounce_ms > 0:
            self.scheduler.check_ready()

        self.real_time_debounce_ms = debounce_ms
        self.disable_submit = disable_submit
        for field in self.fields:
            field.start_real_time_validation(debounce_ms)

        logger.info(
            f"Real-time validation enabled for {len(self.fields)} fields "
            f"(debounce {debounce_ms} ms, disable_submit={disable_submit})"
        )
        self._refresh_submit_state()
        return self

    def bind_submit(self, binding: SubmitBinding, callback: Callable[[FormResult], Any]) -> None:
        """Run submit_with(callback) when binding is clicked."""
        self._submit_binding = binding
        binding.on_click(lambda: self.submit_with(callback))
        self._refresh_submit_state()

    def _refresh_submit_state(self) -> None:
        if self._submit_binding is None:
            return
        if self.disable_submit:
            self.validate(silent=True)
        else:
            self._submit_binding.set_enabled(True)

    def _on_field_validated(self, field: Field, errors: List[FieldError]) -> None:
        self._refresh_submit_state()

    # ------------------------------------------------------------------
    # Introspection and teardown
    # ------------------------------------------------------------------

    def describe(self) -> List[Dict[str, Any]]:
        """
        Describe fields and their assertions without evaluating anything.

        Returns:
            One dict per field in registration order with id, name, kind,
            conditions, real-time state and the assertion metadata
        """
        return [field.describe() for field in self.fields]

    def close(self) -> None:
        """
        Stop real-time validation on every field.

        Cancels pending debounced validations so none fires against a view that
        is being torn down. Safe to call more than once.
        """
        for field in self.fields:
            field.stop_real_time_validation()
        self.real_time_debounce_ms = None
