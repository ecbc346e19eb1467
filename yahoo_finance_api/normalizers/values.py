"""Coercion of raw JSON/CSV values into typed Python values."""

import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from yahoo_finance_api.errors import InvalidValueError


class ValueType(str, Enum):
    BOOL = "bool"
    DATE = "date"
    FLOAT = "float"
    INT = "int"
    STRING = "string"


_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}

_COMPACT_DATE = re.compile(r"\d{8}")
_NUMBER = re.compile(r"[-+]?\d+(\.\d+)?")


class ValueMapper:
    """Maps untyped upstream values to bool, datetime, float, int or str.

    None and empty strings map to None for every type. Values that cannot
    be coerced raise InvalidValueError; callers decide whether that is fatal.
    """

    def map_value(self, raw_value: Any, value_type: ValueType | str) -> Any:
        value_type = ValueType(value_type)

        if raw_value is None or raw_value == "":
            return None

        if value_type is ValueType.BOOL:
            return self._map_bool(raw_value)
        if value_type is ValueType.DATE:
            return self._map_date(raw_value)
        if value_type is ValueType.FLOAT:
            return self._map_float(raw_value)
        if value_type is ValueType.INT:
            return self._map_int(raw_value)
        return str(raw_value)

    def _map_bool(self, raw_value: Any) -> bool:
        if isinstance(raw_value, bool):
            return raw_value
        if isinstance(raw_value, int) and raw_value in (0, 1):
            return bool(raw_value)
        if isinstance(raw_value, str):
            lowered = raw_value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        raise InvalidValueError(raw_value, ValueType.BOOL.value)

    def _map_float(self, raw_value: Any) -> float:
        if isinstance(raw_value, bool):
            raise InvalidValueError(raw_value, ValueType.FLOAT.value)
        try:
            return float(raw_value)
        except (TypeError, ValueError) as e:
            raise InvalidValueError(raw_value, ValueType.FLOAT.value) from e

    def _map_int(self, raw_value: Any) -> int:
        if isinstance(raw_value, bool):
            raise InvalidValueError(raw_value, ValueType.INT.value)
        if isinstance(raw_value, int):
            return raw_value
        try:
            number = float(raw_value)
        except (TypeError, ValueError) as e:
            raise InvalidValueError(raw_value, ValueType.INT.value) from e
        if not number.is_integer():
            raise InvalidValueError(raw_value, ValueType.INT.value)
        return int(number)

    def _map_date(self, raw_value: Any) -> datetime:
        """Map a Unix timestamp or a date string to an aware UTC datetime.

        Timestamps are instants; a bare 'YYYY-MM-DD' or 'YYYYMMDD' is
        midnight UTC. Numeric strings other than 'YYYYMMDD' are timestamps.
        """
        if isinstance(raw_value, bool):
            raise InvalidValueError(raw_value, ValueType.DATE.value)
        if isinstance(raw_value, datetime):
            if raw_value.tzinfo is None:
                return raw_value.replace(tzinfo=timezone.utc)
            return raw_value.astimezone(timezone.utc)
        if isinstance(raw_value, date):
            return datetime(raw_value.year, raw_value.month, raw_value.day, tzinfo=timezone.utc)

        try:
            if isinstance(raw_value, str):
                text = raw_value.strip()
                if _COMPACT_DATE.fullmatch(text):
                    return datetime.strptime(text, "%Y%m%d").replace(tzinfo=timezone.utc)
                if not _NUMBER.fullmatch(text):
                    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
                    if parsed.tzinfo is None:
                        return parsed.replace(tzinfo=timezone.utc)
                    return parsed.astimezone(timezone.utc)
            return datetime.fromtimestamp(float(raw_value), tz=timezone.utc)
        except (OverflowError, OSError, TypeError, ValueError) as e:
            raise InvalidValueError(raw_value, ValueType.DATE.value) from e
