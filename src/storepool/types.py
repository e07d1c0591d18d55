"""
Column typing and value coercion for decoded result rows.

This module provides:
- Column: name and store-reported type tag of one result column
- TypeFamily / TYPE_FAMILIES: the classification table for MySQL type tags
- coerce: convert one raw cell into an int, float, str or None

Coercion never raises. A cell that does not parse against its family
becomes the family's zero value, so one bad value cannot fail a query.
"""
import enum
import logging
import re
from dataclasses import dataclass
from typing import Any

from pymysql.constants import FIELD_TYPE

logger = logging.getLogger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1

_SIGNED_RE = re.compile(r'[+-]?[0-9]+')
_UNSIGNED_RE = re.compile(r'[0-9]+')
_FLOAT_RE = re.compile(
    r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)',
    re.IGNORECASE)


class TypeFamily(enum.Enum):
    INTEGER = 'integer'
    UNSIGNED = 'unsigned'
    TEXT = 'text'
    FLOAT = 'float'
    UNKNOWN = 'unknown'


TYPE_FAMILIES: dict[str, TypeFamily] = {
    **dict.fromkeys(('TINYINT', 'SMALLINT', 'MEDIUMINT', 'INT', 'INTEGER',
                     'BIGINT', 'BOOL', 'BOOLEAN', 'BIT'), TypeFamily.INTEGER),
    **dict.fromkeys(('UNSIGNED BIGINT', 'BIGINT UNSIGNED'), TypeFamily.UNSIGNED),
    **dict.fromkeys(('CHAR', 'VARCHAR', 'BINARY', 'VARBINARY',
                     'TINYTEXT', 'TEXT', 'MEDIUMTEXT', 'LONGTEXT',
                     'TINYBLOB', 'BLOB', 'MEDIUMBLOB', 'LONGBLOB',
                     'JSON', 'ENUM', 'SET',
                     'YEAR', 'DATE', 'TIME', 'TIMESTAMP', 'DATETIME'), TypeFamily.TEXT),
    **dict.fromkeys(('FLOAT', 'DOUBLE', 'DECIMAL'), TypeFamily.FLOAT),
}

# Variant that reads every BIGINT column as unsigned.
UNSIGNED_BIGINT_FAMILIES: dict[str, TypeFamily] = {
    **TYPE_FAMILIES,
    'BIGINT': TypeFamily.UNSIGNED,
}

# pymysql reports numeric type codes; these are the names MySQL uses for them.
FIELD_TYPE_NAMES: dict[int, str] = {
    FIELD_TYPE.DECIMAL: 'DECIMAL',
    FIELD_TYPE.TINY: 'TINYINT',
    FIELD_TYPE.SHORT: 'SMALLINT',
    FIELD_TYPE.LONG: 'INT',
    FIELD_TYPE.FLOAT: 'FLOAT',
    FIELD_TYPE.DOUBLE: 'DOUBLE',
    FIELD_TYPE.NULL: 'NULL',
    FIELD_TYPE.TIMESTAMP: 'TIMESTAMP',
    FIELD_TYPE.LONGLONG: 'BIGINT',
    FIELD_TYPE.INT24: 'MEDIUMINT',
    FIELD_TYPE.DATE: 'DATE',
    FIELD_TYPE.TIME: 'TIME',
    FIELD_TYPE.DATETIME: 'DATETIME',
    FIELD_TYPE.YEAR: 'YEAR',
    FIELD_TYPE.NEWDATE: 'DATE',
    FIELD_TYPE.VARCHAR: 'VARCHAR',
    FIELD_TYPE.BIT: 'BIT',
    FIELD_TYPE.JSON: 'JSON',
    FIELD_TYPE.NEWDECIMAL: 'DECIMAL',
    FIELD_TYPE.ENUM: 'ENUM',
    FIELD_TYPE.SET: 'SET',
    FIELD_TYPE.TINY_BLOB: 'TINYBLOB',
    FIELD_TYPE.MEDIUM_BLOB: 'MEDIUMBLOB',
    FIELD_TYPE.LONG_BLOB: 'LONGBLOB',
    FIELD_TYPE.BLOB: 'BLOB',
    FIELD_TYPE.VAR_STRING: 'VARCHAR',
    FIELD_TYPE.STRING: 'CHAR',
    FIELD_TYPE.GEOMETRY: 'GEOMETRY',
}


@dataclass(frozen=True)
class Column:
    """Name and store-reported type tag of one result column.
    """
    name: str
    type_tag: str

    @classmethod
    def from_description(cls, entry: tuple) -> 'Column':
        """Build from one DB-API ``cursor.description`` entry.
        """
        name, type_code = entry[0], entry[1]
        if isinstance(type_code, str):
            return cls(name, type_code.upper())
        return cls(name, FIELD_TYPE_NAMES.get(type_code, f'UNKNOWN({type_code})'))

    @staticmethod
    def get_names(columns: list['Column']) -> list[str]:
        return [c.name for c in columns]

    @staticmethod
    def get_column_types_dict(columns: list['Column']) -> dict[str, str]:
        return {c.name: c.type_tag for c in columns}


def classify(type_tag: str, families: dict[str, TypeFamily] = TYPE_FAMILIES) -> TypeFamily:
    """Return the coercion family for a type tag; unmatched tags are UNKNOWN.
    """
    return families.get(type_tag.upper(), TypeFamily.UNKNOWN)


def _as_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw).decode('utf-8', errors='surrogateescape')
    return str(raw)


def parse_int(text: str) -> int:
    """Parse a signed base-10 integer, saturating at the int64 bounds.
    """
    if not _SIGNED_RE.fullmatch(text):
        logger.debug(f'Cannot parse {text!r} as integer, using 0')
        return 0
    return min(max(int(text), INT64_MIN), INT64_MAX)


def parse_uint(text: str) -> int:
    """Parse an unsigned base-10 integer, saturating at the uint64 bound.
    """
    if not _UNSIGNED_RE.fullmatch(text):
        logger.debug(f'Cannot parse {text!r} as unsigned integer, using 0')
        return 0
    return min(int(text), UINT64_MAX)


def parse_float(text: str) -> float:
    """Parse a base-10 float; overflow becomes +/-inf.
    """
    if not _FLOAT_RE.fullmatch(text):
        logger.debug(f'Cannot parse {text!r} as float, using 0.0')
        return 0.0
    return float(text)


_PARSERS = {
    TypeFamily.INTEGER: parse_int,
    TypeFamily.UNSIGNED: parse_uint,
    TypeFamily.TEXT: str,
    TypeFamily.FLOAT: parse_float,
}


ZERO_VALUES = {
    TypeFamily.INTEGER: 0,
    TypeFamily.UNSIGNED: 0,
    TypeFamily.TEXT: '',
    TypeFamily.FLOAT: 0.0,
}


def coerce(raw: Any, type_tag: str,
           families: dict[str, TypeFamily] = TYPE_FAMILIES,
           null_as_zero: bool = False) -> int | float | str | None:
    """Convert one undecoded cell to a Python value according to its type tag.

    SQL NULL gives None, or the family's zero value (0, 0.0, '') when
    ``null_as_zero`` is set. Unknown type tags always give None.
    """
    family = classify(type_tag, families)
    if raw is None:
        return ZERO_VALUES.get(family) if null_as_zero else None
    parser = _PARSERS.get(family)
    if parser is None:
        return None
    return parser(_as_text(raw))
