"""
Assertion variants.

ASSERTION_TYPES maps every type tag to its class; declarative form
definitions resolve their "type" entries through it.
"""

from .base import Assertion
from .choice import CheckedAssertion, SelectionAssertion
from .custom import CustomAssertion
from .input import (
    ContainsAssertion,
    EmailAssertion,
    LengthAssertion,
    NotEmptyAssertion,
    NumberAssertion,
    RegexAssertion,
    UriAssertion,
    UrlAssertion,
)

ASSERTION_TYPES = {
    "not_empty": NotEmptyAssertion,
    "length": LengthAssertion,
    "regex": RegexAssertion,
    "contains": ContainsAssertion,
    "email": EmailAssertion,
    "uri": UriAssertion,
    "url": UrlAssertion,
    "number": NumberAssertion,
    "custom": CustomAssertion,
    "checked": CheckedAssertion,
    "selection": SelectionAssertion,
}

__all__ = [
    "ASSERTION_TYPES",
    "Assertion",
    "CheckedAssertion",
    "ContainsAssertion",
    "CustomAssertion",
    "EmailAssertion",
    "LengthAssertion",
    "NotEmptyAssertion",
    "NumberAssertion",
    "RegexAssertion",
    "SelectionAssertion",
    "UriAssertion",
    "UrlAssertion",
]
