import datetime
import decimal
import re
import uuid
from collections.abc import Mapping
from typing import Any, Iterable, List

from bson.binary import Binary
from bson.code import Code
from bson.datetime_ms import DatetimeMS
from bson.dbref import DBRef
from bson.decimal128 import Decimal128
from bson.int64 import Int64
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp

from ..errors import UnsupportedValueError
from .normalized_value import NULL_MARKER, NormalizedValue, ValueKind


# --- Type labels (first observed value of a field) ---
JAVASCRIPT_CODE_WITH_SCOPE = "JavaScriptCodeWithScope"
JAVASCRIPT_CODE = "JavaScriptCode"
FLOATING_POINT = "Double"
UTC_DATETIME = "UtcDatetime"
DECIMAL_128 = "Decimal128"
TIMESTAMP = "Timestamp"
BINARY = "BinData"
REGEXP = "Regex"
DOCUMENT = "Document"
OBJECTID = "ObjectId"
BOOLEAN = "Boolean"
STRING = "String"
ARRAY = "Array"
I32 = "Int"
I64 = "Long"
NULL = "Null"

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class ValueNormalizer:
    """
    Maps decoded BSON values to type labels and NormalizedValues.

    The isinstance chains below are ordered: bool before int (bool is an
    int), Int64 before int, Code before str (Code is a str). Anything that
    falls through every branch raises UnsupportedValueError.
    """

    @classmethod
    def is_document(cls, value: Any) -> bool:
        # A DBRef is a {"$ref", "$id", "$db"} sub-document on the wire
        return isinstance(value, (Mapping, DBRef))

    @classmethod
    def is_array(cls, value: Any) -> bool:
        return isinstance(value, (list, tuple))

    @classmethod
    def as_document(cls, value: Any) -> Mapping:
        """Return the mapping view of a document value (unwraps DBRef)."""
        if isinstance(value, DBRef):
            return value.as_doc()
        return value

    @classmethod
    def check_document(cls, doc: Mapping) -> None:
        """
        Verify every value of a document, at any depth, is a BSON value.

        Run before a document is folded in, so an unsupported value is
        reported while nothing has been modified yet.

        Raises:
            UnsupportedValueError: On the first value that is not a BSON type
        """
        for value in cls.as_document(doc).values():
            if cls.is_document(value):
                cls.check_document(value)
            elif cls.is_array(value):
                cls.normalize_array(value)
            else:
                cls.normalize(value)

    @classmethod
    def type_label(cls, value: Any) -> str:
        """
        Return the BSON type label of a value.

        Args:
            value: A decoded BSON value (scalar, list or mapping)

        Returns:
            One of the label constants, e.g. "String", "Int", "Document"

        Raises:
            UnsupportedValueError: If value is not a BSON type
        """
        if value is None:
            return NULL
        if isinstance(value, bool):
            return BOOLEAN
        if isinstance(value, Int64):
            return I64
        if isinstance(value, int):
            return I32 if INT32_MIN <= value <= INT32_MAX else I64
        if isinstance(value, float):
            return FLOATING_POINT
        if isinstance(value, Code):
            return JAVASCRIPT_CODE if value.scope is None else JAVASCRIPT_CODE_WITH_SCOPE
        if isinstance(value, str):
            return STRING
        if isinstance(value, (Regex, re.Pattern)):
            return REGEXP
        if isinstance(value, ObjectId):
            return OBJECTID
        if isinstance(value, Timestamp):
            return TIMESTAMP
        if isinstance(value, (datetime.datetime, DatetimeMS)):
            return UTC_DATETIME
        if isinstance(value, (Decimal128, decimal.Decimal)):
            return DECIMAL_128
        if isinstance(value, (bytes, uuid.UUID)):
            return BINARY
        if cls.is_array(value):
            return ARRAY
        if cls.is_document(value):
            return DOCUMENT
        raise UnsupportedValueError(value)

    @classmethod
    def normalize(cls, value: Any) -> NormalizedValue:
        """
        Reduce one scalar BSON value to a NormalizedValue.

        Args:
            value: Any decoded BSON value except a list or mapping

        Returns:
            The NormalizedValue for it

        Raises:
            UnsupportedValueError: If value is a container or not a BSON type
        """
        if value is None:
            return NormalizedValue(ValueKind.NULL, NULL_MARKER)
        if isinstance(value, bool):
            return NormalizedValue(ValueKind.BOOLEAN, value)
        if isinstance(value, Int64):
            return NormalizedValue(ValueKind.INT64, int(value))
        if isinstance(value, int):
            if INT32_MIN <= value <= INT32_MAX:
                return NormalizedValue(ValueKind.INT32, value)
            return NormalizedValue(ValueKind.INT64, value)
        if isinstance(value, float):
            return NormalizedValue(ValueKind.DOUBLE, value)
        if isinstance(value, str):
            # Also covers Code; str() drops the subclass
            return NormalizedValue(ValueKind.STRING, str(value))
        if isinstance(value, (Regex, re.Pattern)):
            return NormalizedValue(ValueKind.STRING, cls._pattern_text(value.pattern))
        if isinstance(value, ObjectId):
            return NormalizedValue(ValueKind.STRING, str(value))
        if isinstance(value, Timestamp):
            # Same 64 bits the server stores: seconds high, increment low
            return NormalizedValue(ValueKind.INT64, (value.time << 32) | value.inc)
        if isinstance(value, datetime.datetime):
            return NormalizedValue(ValueKind.STRING, value.isoformat())
        if isinstance(value, DatetimeMS):
            # Milliseconds since epoch; may be outside datetime's range
            return NormalizedValue(ValueKind.STRING, str(int(value)))
        if isinstance(value, (Decimal128, decimal.Decimal)):
            return NormalizedValue(ValueKind.DECIMAL, str(value))
        if isinstance(value, Binary):
            return NormalizedValue(ValueKind.BINARY, bytes(value))
        if isinstance(value, bytes):
            return NormalizedValue(ValueKind.BINARY, value)
        if isinstance(value, uuid.UUID):
            return NormalizedValue(ValueKind.BINARY, value.bytes)
        raise UnsupportedValueError(value)

    @classmethod
    def normalize_array(cls, values: Iterable[Any]) -> List[NormalizedValue]:
        """
        Normalize the scalar elements of an array.

        Nested arrays and documents inside the array are skipped; they do
        not contribute to the value pool.
        """
        return [
            cls.normalize(element)
            for element in values
            if not (cls.is_array(element) or cls.is_document(element))
        ]

    @classmethod
    def normalize_all(cls, value: Any) -> List[NormalizedValue]:
        """
        Values a single field observation adds to the pool.

        Args:
            value: Any decoded BSON value

        Returns:
            The flattened elements of an array, nothing for a document,
            a single entry for a scalar.
        """
        if cls.is_document(value):
            return []
        if cls.is_array(value):
            return cls.normalize_array(value)
        return [cls.normalize(value)]

    @staticmethod
    def _pattern_text(pattern: Any) -> str:
        if isinstance(pattern, bytes):
            return pattern.decode("utf-8", errors="replace")
        return pattern


