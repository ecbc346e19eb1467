from datetime import datetime, timezone

import pytest

from yahoo_finance_api.errors import InvalidValueError
from yahoo_finance_api.normalizers.values import ValueMapper, ValueType


mapper = ValueMapper()


@pytest.mark.parametrize("value_type", list(ValueType))
def test_null_and_empty_map_to_none(value_type):
    assert mapper.map_value(None, value_type) is None
    assert mapper.map_value("", value_type) is None


def test_type_given_as_plain_string():
    assert mapper.map_value("42", "int") == 42
    assert mapper.map_value("", "int") is None


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        mapper.map_value("1", "decimal")


def test_int_rejects_non_numeric():
    with pytest.raises(InvalidValueError) as exc_info:
        mapper.map_value("abc", "int")
    assert exc_info.value.value_type == "int"
    assert exc_info.value.raw_value == "abc"


def test_int_coercion():
    assert mapper.map_value(82488700, ValueType.INT) == 82488700
    assert mapper.map_value("58414500", ValueType.INT) == 58414500
    assert mapper.map_value(1731042.0, ValueType.INT) == 1731042
    with pytest.raises(InvalidValueError):
        mapper.map_value("1.5", ValueType.INT)
    with pytest.raises(InvalidValueError):
        mapper.map_value(True, ValueType.INT)


def test_float_coercion():
    value = mapper.map_value("184.25", ValueType.FLOAT)
    assert isinstance(value, float)
    assert value == 184.25
    assert mapper.map_value(3, ValueType.FLOAT) == 3.0
    with pytest.raises(InvalidValueError):
        mapper.map_value("n/a", ValueType.FLOAT)


@pytest.mark.parametrize("raw, expected", [
    (True, True),
    (False, False),
    ("true", True),
    ("False", False),
    (1, True),
    (0, False),
    ("1", True),
    ("0", False),
])
def test_bool_coercion(raw, expected):
    assert mapper.map_value(raw, ValueType.BOOL) is expected


@pytest.mark.parametrize("raw", ["yes", 2, 0.5])
def test_bool_rejects_other_values(raw):
    with pytest.raises(InvalidValueError):
        mapper.map_value(raw, ValueType.BOOL)


def test_date_from_timestamp_is_utc_instant():
    value = mapper.map_value(1704229200, ValueType.DATE)
    assert value == datetime(2024, 1, 2, 21, 0, tzinfo=timezone.utc)
    assert mapper.map_value("1704229200", ValueType.DATE) == value


def test_date_from_day_string_is_utc_midnight():
    value = mapper.map_value("2024-01-02", ValueType.DATE)
    assert value == datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert value.tzinfo == timezone.utc


def test_date_from_compact_day_string_is_utc_midnight():
    value = mapper.map_value("20240101", ValueType.DATE)
    assert value == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_date_from_iso_string_converted_to_utc():
    value = mapper.map_value("2024-01-01T10:00:00+05:30", ValueType.DATE)
    assert value == datetime(2024, 1, 1, 4, 30, tzinfo=timezone.utc)


def test_date_rejects_garbage():
    with pytest.raises(InvalidValueError):
        mapper.map_value("last tuesday", ValueType.DATE)


def test_string_passthrough():
    assert mapper.map_value(15, ValueType.STRING) == "15"
    assert mapper.map_value("4:1", ValueType.STRING) == "4:1"
