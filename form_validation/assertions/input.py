"""Assertions over text input values."""

import math
import re
from typing import Any, Dict, Iterable, Optional
from urllib.parse import urlsplit

from .base import Assertion, as_text, check_bounds


class NotEmptyAssertion(Assertion):
    """Fails when the trimmed text is empty."""

    assertion_type = "not_empty"

    def is_valid(self, value: Any) -> bool:
        return len(as_text(value).strip()) > 0

    def message_key(self) -> str:
        return "not_empty"


class LengthAssertion(Assertion):
    """Fails when the text length falls outside the closed range [min, max]."""

    assertion_type = "length"

    def __init__(
        self,
        min: Optional[int] = None,
        max: Optional[int] = None,
        exactly: Optional[int] = None,
        **kwargs,
    ):
        if min is None and max is None and exactly is None:
            raise ValueError("Length assertion needs at least one of min, max or exactly")
        check_bounds(min, max, exactly, "Length assertion")
        for bound in (min, max, exactly):
            if bound is not None and bound < 0:
                raise ValueError(f"Length assertion: bounds cannot be negative, got {bound}")
        super().__init__(**kwargs)
        self.min = min
        self.max = max
        self.exactly = exactly

    def is_valid(self, value: Any) -> bool:
        length = len(as_text(value))
        if self.exactly is not None:
            return length == self.exactly
        if self.min is not None and length < self.min:
            return False
        if self.max is not None and length > self.max:
            return False
        return True

    def message_key(self) -> str:
        if self.exactly is not None:
            return "length_exactly"
        if self.min is not None and self.max is not None:
            return "length_between"
        if self.min is not None:
            return "length_at_least"
        return "length_at_most"

    def parameters(self) -> Dict[str, Any]:
        return {"min": self.min, "max": self.max, "exactly": self.exactly}


class RegexAssertion(Assertion):
    """Fails unless the pattern matches the whole text."""

    assertion_type = "regex"

    def __init__(self, pattern: str, ignore_case: bool = False, **kwargs):
        super().__init__(**kwargs)
        flags = re.IGNORECASE if ignore_case else 0
        try:
            self._regex = re.compile(pattern, flags)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern {pattern!r}: {e}") from e
        self.pattern = pattern
        self.ignore_case = ignore_case

    def is_valid(self, value: Any) -> bool:
        return self._regex.fullmatch(as_text(value)) is not None

    def message_key(self) -> str:
        return "regex"

    def parameters(self) -> Dict[str, Any]:
        return {"pattern": self.pattern, "ignore_case": self.ignore_case}


class ContainsAssertion(Assertion):
    """Fails when the text does not contain the configured substring."""

    assertion_type = "contains"

    def __init__(self, text: str, ignore_case: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.text = text
        self.ignore_case = ignore_case

    def is_valid(self, value: Any) -> bool:
        haystack = as_text(value)
        if self.ignore_case:
            return self.text.casefold() in haystack.casefold()
        return self.text in haystack

    def message_key(self) -> str:
        return "contains"

    def parameters(self) -> Dict[str, Any]:
        return {"text": self.text, "ignore_case": self.ignore_case}


# Same grammar Android ships as Patterns.EMAIL_ADDRESS
_EMAIL_RE = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)


class EmailAssertion(Assertion):
    assertion_type = "email"

    def is_valid(self, value: Any) -> bool:
        return _EMAIL_RE.fullmatch(as_text(value)) is not None

    def message_key(self) -> str:
        return "email"


class UriAssertion(Assertion):
    """
    Parses the text as a URI.

    A URI needs a scheme. When schemes is given the scheme must be one of them
    (compared case-insensitively) and require_host demands a non-empty host.
    """

    assertion_type = "uri"

    def __init__(
        self,
        schemes: Optional[Iterable[str]] = None,
        require_host: bool = False,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.schemes = tuple(s.lower() for s in schemes) if schemes else None
        self.require_host = require_host

    def is_valid(self, value: Any) -> bool:
        text = as_text(value)
        if not text or any(c.isspace() for c in text):
            return False
        try:
            parts = urlsplit(text)
            host = parts.hostname
        except ValueError:
            return False
        if not parts.scheme:
            return False
        if self.schemes is not None and parts.scheme.lower() not in self.schemes:
            return False
        if self.require_host and not host:
            return False
        return True

    def message_key(self) -> str:
        return "uri"

    def parameters(self) -> Dict[str, Any]:
        return {"schemes": self.schemes, "require_host": self.require_host}


class UrlAssertion(UriAssertion):
    """A URI restricted to http/https with a host."""

    def __init__(self, **kwargs):
        super().__init__(schemes=("http", "https"), require_host=True, **kwargs)

    def message_key(self) -> str:
        return "url"


class NumberAssertion(Assertion):
    """
    Parses the text as a number and checks optional bounds.

    Integers are expected unless decimal=True. Text that does not parse fails
    the assertion; it never raises. min/max are inclusive, greater_than and
    less_than exclusive.
    """

    assertion_type = "number"

    def __init__(
        self,
        decimal: bool = False,
        min: Optional[float] = None,
        max: Optional[float] = None,
        greater_than: Optional[float] = None,
        less_than: Optional[float] = None,
        exactly: Optional[float] = None,
        **kwargs,
    ):
        check_bounds(min, max, exactly, "Number assertion")
        if exactly is not None and (greater_than is not None or less_than is not None):
            raise ValueError(
                "Number assertion: 'exactly' cannot be combined with 'greater_than' or 'less_than'"
            )
        super().__init__(**kwargs)
        self.decimal = decimal
        self.min = min
        self.max = max
        self.greater_than = greater_than
        self.less_than = less_than
        self.exactly = exactly

    def _parse(self, text: str):
        text = text.strip()
        if "_" in text:
            raise ValueError(f"Digit separators are not accepted: {text!r}")
        if self.decimal:
            number = float(text)
            if not math.isfinite(number):
                raise ValueError(f"Not a finite number: {text!r}")
            return number
        return int(text)

    def _violation(self, value: Any) -> Optional[str]:
        """Message key of the first check value fails, or None when it passes."""
        try:
            number = self._parse(as_text(value))
        except (TypeError, ValueError):
            return "decimal" if self.decimal else "number"
        if self.exactly is not None and number != self.exactly:
            return "number_exactly"
        if self.min is not None and number < self.min:
            return "number_between" if self.max is not None else "number_at_least"
        if self.max is not None and number > self.max:
            return "number_between" if self.min is not None else "number_at_most"
        if self.greater_than is not None and number <= self.greater_than:
            return "number_greater_than"
        if self.less_than is not None and number >= self.less_than:
            return "number_less_than"
        return None

    def is_valid(self, value: Any) -> bool:
        return self._violation(value) is None

    def failure_key(self, value: Any) -> str:
        return self._violation(value) or self.message_key()

    def message_key(self) -> str:
        if self.exactly is not None:
            return "number_exactly"
        if self.min is not None and self.max is not None:
            return "number_between"
        if self.min is not None:
            return "number_at_least"
        if self.max is not None:
            return "number_at_most"
        if self.greater_than is not None:
            return "number_greater_than"
        if self.less_than is not None:
            return "number_less_than"
        return "decimal" if self.decimal else "number"

    def parameters(self) -> Dict[str, Any]:
        return {
            "decimal": self.decimal,
            "min": self.min,
            "max": self.max,
            "greater_than": self.greater_than,
            "less_than": self.less_than,
            "exactly": self.exactly,
        }
