"""Normalizers converting Yahoo Finance payloads to typed records."""

from .decoder import ResultDecoder
from .values import ValueMapper, ValueType

__all__ = ["ResultDecoder", "ValueMapper", "ValueType"]
