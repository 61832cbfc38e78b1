# ==============================================
# FieldRecord
# ==============================================
#
# PURPOSE:
#   Holds everything observed for ONE field path at one nesting level:
#   how often it appeared, the BSON type of its first value, the pool of
#   normalized values, and (for documents) the nested schema.
#
# WHY THIS CLASS EXISTS:
#   A field is seen once per document that contains it. Every sighting
#   after the first folds into the same record, so that at the end we
#   can say "address.city appears in 93% of addresses, 41 distinct
#   values, has duplicates".
#
# CLASS: FieldRecord (dataclass)
# ------------------------------
#   Attributes:
#   -----------
#   - path: str                    → Dotted field path ("address.city")
#   - declared_type: str           → Type label of the FIRST value seen
#   - count: int                   → Documents (at this level) holding the field
#   - probability: float           → count / parent count
#   - values: list[NormalizedValue] → Every scalar / array element seen
#   - has_duplicates: bool         → Set by finalize()
#   - unique_count: int | None     → Set by finalize()
#   - child_schema: SchemaAccumulator | None → Only for "Document" fields
#   - state: AccumulationState     → ACCUMULATING or FINALIZED
#
#   Methods:
#   --------
#   - create(path, first_value) -> FieldRecord   (classmethod)
#   - add_observation(value, parent_count) -> list[TypeMismatch]
#   - finalize(parent_count) -> None
#   - to_dict() -> dict
#
# TWO PHASES:
#   add_observation() only appends. Uniqueness and duplicates need the
#   whole pool, so they are computed once in finalize().
#
# ==============================================

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import groupby
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from schema_parser.errors import TypeMismatch
from schema_parser.normalization import NormalizedValue, ValueNormalizer
from schema_parser.normalization.value_normalizer import DOCUMENT

if TYPE_CHECKING:
    from .schema_accumulator import SchemaAccumulator

logger = logging.getLogger(__name__)


class AccumulationState(Enum):
    """Lifecycle of a record or accumulator."""
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


@dataclass
class FieldRecord:
    """
    Statistics for a single field path at one nesting level.

    Build it with FieldRecord.create() so the first value is folded in
    the same way every later one is.
    """

    # --- Identity ---
    path: str
    declared_type: str

    # --- Counters ---
    count: int = 1
    probability: float = 0.0

    # --- Value pool (never holds nested-document data) ---
    values: List[NormalizedValue] = field(default_factory=list)

    # --- Derived in finalize() ---
    has_duplicates: bool = False
    unique_count: Optional[int] = None

    # --- Nested documents ---
    child_schema: Optional["SchemaAccumulator"] = None

    state: AccumulationState = AccumulationState.ACCUMULATING

    @classmethod
    def create(cls, path: str, first_value: Any) -> "FieldRecord":
        """
        Create a record from the first value seen at this path.

        Args:
            path: Full dotted path of the field
            first_value: The decoded BSON value

        Returns:
            A record with count 1 and the value already folded in
        """
        from .schema_accumulator import SchemaAccumulator

        record = cls(path=path, declared_type=ValueNormalizer.type_label(first_value))

        if record.is_document:
            record.child_schema = SchemaAccumulator(prefix=path)
            record.child_schema.observe_document(first_value)
        else:
            record.values.extend(ValueNormalizer.normalize_all(first_value))

        logger.debug("New field '%s' (%s)", path, record.declared_type)
        return record

    @property
    def is_document(self) -> bool:
        return self.declared_type == DOCUMENT

    @property
    def is_finalized(self) -> bool:
        return self.state is AccumulationState.FINALIZED

    # ======================================
    # Accumulation
    # ======================================
    def add_observation(self, value: Any, parent_count: int) -> List[TypeMismatch]:
        """
        Fold one more sighting of this field into the record.

        Args:
            value: The decoded BSON value from the current document
            parent_count: Documents seen at this level before the current one

        Returns:
            Type conflicts reported by the nested level (documents only).
            An empty list for scalar and array fields.

        Raises:
            TypeMismatch: If the value switches between the Document kind
                and anything else. The record is not modified.
        """
        if ValueNormalizer.is_document(value) != self.is_document:
            raise TypeMismatch(self.path, self.declared_type, ValueNormalizer.type_label(value))

        # Normalize up front so a bad value cannot leave a half-applied update
        new_values = ValueNormalizer.normalize_all(value)

        self._set_probability(parent_count)

        conflicts: List[TypeMismatch] = []
        if self.child_schema is not None:
            conflicts = self.child_schema.observe_document(value)

        self.count += 1
        self.values.extend(new_values)
        self.state = AccumulationState.ACCUMULATING
        return conflicts

    # ======================================
    # Finalization
    # ======================================
    def finalize(self, parent_count: int) -> None:
        """
        Compute probability, unique count and the duplicate flag.

        Safe to call more than once; the same parent_count gives the same
        result. The nested schema is finalized against its own document
        count, not this record's.

        Args:
            parent_count: Documents observed at this record's level
        """
        self._set_probability(parent_count)
        self.unique_count = self._count_unique()
        self.has_duplicates = (len(self.values) - self.unique_count) != 0

        if self.child_schema is not None:
            self.child_schema.finalize()

        self.state = AccumulationState.FINALIZED

    def _count_unique(self) -> int:
        # Sort a copy; self.values keeps observation order
        return sum(1 for _ in groupby(sorted(self.values)))

    def _set_probability(self, parent_count: int) -> None:
        if parent_count <= 0:
            self.probability = 0.0
            return
        self.probability = self.count / parent_count

    # ======================================
    # Serialization
    # ======================================
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the record (and its nested schema) to JSON-ready data.

        "values" is left out when the pool is empty and "schema" when the
        field is not a document.
        """
        data: Dict[str, Any] = {
            "path": self.path,
            "count": self.count,
            "bson_type": self.declared_type,
            "probability": self.probability,
        }
        if self.values:
            data["values"] = [value.to_json_value() for value in self.values]
        data["has_duplicates"] = self.has_duplicates
        data["unique"] = self.unique_count
        if self.child_schema is not None:
            data["schema"] = self.child_schema.to_dict()
        return data
