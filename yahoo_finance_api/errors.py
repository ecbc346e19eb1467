"""Exceptions raised by the Yahoo Finance client."""

from typing import Any


class YahooFinanceError(Exception):
    """Base error for the Yahoo Finance client."""

    def __init__(self, message: str, response_text: str | None = None):
        super().__init__(message)
        self.response_text = response_text


class InvalidArgumentError(YahooFinanceError, ValueError):
    """Request parameters rejected before any network call."""

    def __init__(self, message: str, allowed_values: list[str] | None = None):
        super().__init__(message)
        self.allowed_values = allowed_values or []


class DecodeError(YahooFinanceError):
    """Response body does not have the expected shape."""


class CrumbNotFoundError(DecodeError):
    """The crumb token could not be located in the quote page.

    Usually means Yahoo changed the page markup.
    """


class InvalidValueError(ValueError):
    """A raw value cannot be coerced into the requested type."""

    def __init__(self, raw_value: Any, value_type: str):
        super().__init__(f"Value {raw_value!r} cannot be mapped to type '{value_type}'")
        self.raw_value = raw_value
        self.value_type = value_type
