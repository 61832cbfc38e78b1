# ==============================================
# NormalizedValue
# ==============================================
#
# PURPOSE:
#   The reduced, comparable form of one scalar BSON value. Field records
#   store these in their value pool so that uniqueness and duplicates can
#   be computed across heterogeneous source types (a regex and a string
#   are both just "string" here).
#
# ENUM: ValueKind
# ---------------
#   STRING, INT32, INT64, DOUBLE, BOOLEAN, BINARY, DECIMAL, NULL
#   The declaration order is the primary sort order.
#
# CLASS: NormalizedValue (frozen dataclass)
# -----------------------------------------
#   - kind: ValueKind
#   - value: str | int | float | bool | bytes
#
#   Ordering:
#   ---------
#   Total order: kind first, then value. Doubles put NaN after every
#   other double and treat all NaNs as equal, so sorting a mixed pool
#   never raises.
#
#   Methods:
#   --------
#   - sort_key() -> tuple
#   - to_json_value() -> Any      (JSON-native representation)
#
# ==============================================

import base64
import math
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Any, Tuple, Union


class ValueKind(Enum):
    """Closed set of value kinds kept in a field's value pool."""
    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    BINARY = "binary"
    DECIMAL = "decimal"
    NULL = "null"

    @property
    def rank(self) -> int:
        return _KIND_RANKS[self]


_KIND_RANKS = {kind: index for index, kind in enumerate(ValueKind)}

# Marker stored for BSON null, so the pool still counts the observation
NULL_MARKER = "Null"


@total_ordering
@dataclass(frozen=True, eq=False)
class NormalizedValue:
    """
    One scalar observation reduced to a comparable kind.

    Equality and hashing go through sort_key(), which keeps them
    consistent with the ordering (NaN == NaN inside a pool).
    """

    kind: ValueKind
    value: Union[str, int, float, bool, bytes]

    def sort_key(self) -> Tuple[int, Any]:
        if self.kind is ValueKind.DOUBLE:
            if math.isnan(self.value):
                return (self.kind.rank, (1, 0.0))
            return (self.kind.rank, (0, self.value))
        return (self.kind.rank, self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NormalizedValue):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: "NormalizedValue") -> bool:
        if not isinstance(other, NormalizedValue):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())

    def to_json_value(self) -> Any:
        """
        Convert to a value the json module can write.

        Returns:
            Binary as base64 text, the null marker and non-finite doubles
            (NaN, infinities) as None, everything else unchanged.
        """
        if self.kind is ValueKind.BINARY:
            return base64.b64encode(self.value).decode("ascii")
        if self.kind is ValueKind.NULL:
            return None
        if self.kind is ValueKind.DOUBLE and not math.isfinite(self.value):
            return None
        return self.value
