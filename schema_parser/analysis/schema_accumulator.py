# ==============================================
# SchemaAccumulator
# ==============================================
#
# PURPOSE:
#   Observe documents at ONE nesting level and keep a FieldRecord per
#   field path. The root level is owned by SchemaParser; every
#   "Document" field owns one more accumulator for its sub-documents.
#
# WHY LEVEL-SCOPED COUNTERS:
#   Probability is relative to the immediate parent. If "address" shows
#   up in 40 of 100 documents and "address.zip" in 20 of those 40
#   addresses, zip's probability is 0.5, not 0.2.
#
# CLASS: SchemaAccumulator
# ------------------------
#   Attributes:
#   -----------
#   - prefix: str                      → Path of the owning field ("" at root)
#   - count: int                       → Documents observed at this level
#   - fields: dict[str, FieldRecord]   → In order of first appearance
#   - state: AccumulationState
#
#   Methods:
#   --------
#   - observe_document(doc, prefix=None) -> list[TypeMismatch]
#       Check every value, count the document, then create or update a
#       record per field.
#       A conflicting field is reported and skipped; the rest of the
#       document is still folded in.
#
#   - finalize() -> None
#       Finalize every record against this level's document count.
#
#   - get(path) / [path] / in / len / iteration
#   - to_dict() -> dict
#
# ==============================================

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from schema_parser.errors import TypeMismatch
from schema_parser.normalization import ValueNormalizer
from .field_record import AccumulationState, FieldRecord

logger = logging.getLogger(__name__)


class SchemaAccumulator:
    """
    Field records for one container level.
    """

    def __init__(self, prefix: str = ""):
        """
        Args:
            prefix: Dotted path of the field owning this level, empty at
                the top level
        """
        self.prefix = prefix
        self.count: int = 0  # Documents observed at this level
        self.fields: Dict[str, FieldRecord] = {}  # path → FieldRecord
        self.state = AccumulationState.ACCUMULATING

    def observe_document(
        self, doc: Mapping[str, Any], prefix: Optional[str] = None
    ) -> List[TypeMismatch]:
        """
        Fold one document into the schema.

        Existing records get the number of documents seen BEFORE this one
        as their parent count, so their probability reads "seen in N of
        the M documents so far". finalize() makes it authoritative.

        Args:
            doc: Decoded document (any mapping)
            prefix: Path prefix for the field names; defaults to this
                accumulator's own prefix

        Returns:
            Type conflicts found in this document, at any depth

        Raises:
            UnsupportedValueError: If any value is not a BSON type. The
                accumulator is left untouched.
        """
        if prefix is None:
            prefix = self.prefix

        doc = ValueNormalizer.as_document(doc)
        ValueNormalizer.check_document(doc)

        previous_count = self.count
        self.count += 1
        self.state = AccumulationState.ACCUMULATING

        conflicts: List[TypeMismatch] = []
        for key, value in doc.items():
            path = self._flatten_key(prefix, key)
            record = self.fields.get(path)

            if record is None:
                self.fields[path] = FieldRecord.create(path, value)
                continue

            try:
                conflicts.extend(record.add_observation(value, previous_count))
            except TypeMismatch as exc:
                logger.warning("%s", exc)
                conflicts.append(exc)

        return conflicts

    def finalize(self) -> None:
        """Finalize every record using this level's document count."""
        for record in self.fields.values():
            record.finalize(self.count)
        self.state = AccumulationState.FINALIZED

    @property
    def is_finalized(self) -> bool:
        return self.state is AccumulationState.FINALIZED

    @staticmethod
    def _flatten_key(prefix: str, key: str) -> str:
        """
        Examples:
            _flatten_key("", "name") → "name"
            _flatten_key("address", "city") → "address.city"
        """
        if not prefix:
            return key
        return f"{prefix}.{key}"

    # ======================================
    # Lookup
    # ======================================
    def get(self, path: str) -> Optional[FieldRecord]:
        return self.fields.get(path)

    def __getitem__(self, path: str) -> FieldRecord:
        return self.fields[path]

    def __contains__(self, path: object) -> bool:
        return path in self.fields

    def __iter__(self) -> Iterator[FieldRecord]:
        return iter(self.fields.values())

    def __len__(self) -> int:
        return len(self.fields)

    def to_dict(self) -> Dict[str, Any]:
        """
        Returns:
            {"count": documents at this level, "fields": [record dicts]}
        """
        return {
            "count": self.count,
            "fields": [record.to_dict() for record in self.fields.values()],
        }
