# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Exception types raised by the schema parser.
#
# CLASSES:
# --------
# - SchemaParserError(Exception)
#     Base class for recoverable parser errors.
#
# - TypeMismatch(SchemaParserError)
#     A field first seen as a Document later holds a non-Document value
#     (or the other way round). Carries path, expected_type, actual_type.
#
# - ConflictError(SchemaParserError)
#     Raised by SchemaParser in strict mode once a document produced
#     one or more TypeMismatch conflicts.
#
# - UnsupportedValueError(TypeError)
#     The decoder handed over a value outside the known BSON types.
#     This is a caller bug, it is never collected as a conflict.
#
# ==============================================

from typing import Any, List


class SchemaParserError(Exception):
    """Base class for recoverable schema parser errors."""


class TypeMismatch(SchemaParserError):
    """
    A field changed between the Document kind and any other kind.

    The record that raised it is left exactly as it was before the
    offending observation.
    """

    def __init__(self, path: str, expected_type: str, actual_type: str):
        self.path = path
        self.expected_type = expected_type
        self.actual_type = actual_type
        super().__init__(
            f"Type mismatch at '{path}': declared as {expected_type}, "
            f"got {actual_type}"
        )

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "expected_type": self.expected_type,
            "actual_type": self.actual_type,
        }


class ConflictError(SchemaParserError):
    """Strict mode: a document produced type conflicts."""

    def __init__(self, conflicts: List[TypeMismatch]):
        self.conflicts = list(conflicts)
        paths = ", ".join(conflict.path for conflict in self.conflicts)
        super().__init__(f"{len(self.conflicts)} type conflict(s): {paths}")


class UnsupportedValueError(TypeError):
    """A value that is not one of the supported BSON types."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Unsupported BSON value of type {type(value).__name__}: {value!r}"
        )
