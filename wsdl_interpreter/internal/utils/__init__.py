"""Утилиты для генератора"""

from .naming import (
    normalize_identifier,
    normalize_type,
    field_identifier,
    type_identifier,
)

__all__ = [
    "normalize_identifier",
    "normalize_type",
    "field_identifier",
    "type_identifier",
]
