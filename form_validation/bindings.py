"""
View bindings - the narrow capability the engine needs from a UI element.

The validation engine never talks to a widget toolkit directly. Each field is
handed a ViewBinding at registration time and only ever calls three things on
it:

- read_value()       - current value in a form meaningful to assertions
- on_change(cb)      - subscribe to value changes (returns a Subscription)
- show_error(text)   - display an error, or clear it with None

Hosts adapt their widgets by subclassing ViewBinding. The headless bindings
below keep their state in memory, which is enough to drive a form from a
console application or from tests:

    email = TextBinding()
    form = Form()
    form.input("email", "Email", email).is_email()

    email.set_text("not-an-email")
    form.validate()
    email.error  # "must be a valid email address"
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ViewBinding.on_change(); cancel() detaches the listener."""

    def __init__(self, cancel_fn: Callable[[], None]):
        self._cancel_fn = cancel_fn
        self.active = True

    def cancel(self) -> None:
        """Detach the listener. Safe to call more than once."""
        if self.active:
            self.active = False
            self._cancel_fn()


class ViewBinding(ABC):
    """Abstract capability wrapping one UI element."""

    @abstractmethod
    def read_value(self) -> Any:
        """Return the element's current value."""

    @abstractmethod
    def show_error(self, text: Optional[str]) -> None:
        """Display error text; None clears any displayed error."""

    @abstractmethod
    def on_change(self, callback: Callable[[], None]) -> Subscription:
        """Call callback after every value change until the subscription is cancelled."""


class ListenerBinding(ViewBinding):
    """
    Base for in-memory bindings.

    Keeps the listener list and the last displayed error so subclasses only
    have to store their value and call _notify() when it changes.
    """

    def __init__(self):
        self._listeners: List[Callable[[], None]] = []
        self.error: Optional[str] = None

    def show_error(self, text: Optional[str]) -> None:
        self.error = text or None

    def on_change(self, callback: Callable[[], None]) -> Subscription:
        self._listeners.append(callback)

        def _remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return Subscription(_remove)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class TextBinding(ListenerBinding):
    """Text input; the value is the current text."""

    def __init__(self, text: str = ""):
        super().__init__()
        self.text = text

    def read_value(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        """Replace the text and notify listeners, as a keystroke would."""
        self.text = text
        self._notify()


class CheckableBinding(ListenerBinding):
    """Checkbox, switch or radio button; the value is a bool."""

    def __init__(self, checked: bool = False):
        super().__init__()
        self.checked = checked

    def read_value(self) -> bool:
        return self.checked

    def set_checked(self, checked: bool) -> None:
        self.checked = checked
        self._notify()


class ChoiceBinding(ListenerBinding):
    """
    Spinner, drop-down or radio group.

    The value is the selected index, -1 when nothing is selected. The
    selected option itself is available as selected_option.
    """

    def __init__(self, options: Sequence[Any] = (), selected_index: int = -1):
        super().__init__()
        self.options = list(options)
        if selected_index >= len(self.options):
            raise ValueError(
                f"Selected index {selected_index} is out of range for {len(self.options)} options"
            )
        self.selected_index = selected_index

    def read_value(self) -> int:
        return self.selected_index

    @property
    def selected_option(self) -> Any:
        if self.selected_index < 0:
            return None
        return self.options[self.selected_index]

    def select(self, index: int) -> None:
        if index >= len(self.options) or index < -1:
            raise ValueError(
                f"Cannot select index {index}, binding has {len(self.options)} options"
            )
        self.selected_index = index
        self._notify()


class SubmitBinding:
    """
    Submit button.

    Not a ViewBinding: it has no value to validate. The form attaches a click
    handler and, when submission is disabled on invalid state, toggles it.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._click_handler: Optional[Callable[[], None]] = None

    def on_click(self, handler: Callable[[], None]) -> None:
        self._click_handler = handler

    def set_enabled(self, enabled: bool) -> None:
        if enabled != self.enabled:
            logger.debug(f"Submit {'enabled' if enabled else 'disabled'}")
        self.enabled = enabled

    def click(self) -> None:
        """Simulate a click; ignored while disabled, like a real button."""
        if self.enabled and self._click_handler is not None:
            self._click_handler()
