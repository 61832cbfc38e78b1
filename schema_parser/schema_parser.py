# ==============================================
# SchemaParser: Driver
# ==============================================
#
# PURPOSE:
#   The class users interact with. Feeds documents into the top-level
#   SchemaAccumulator, finalizes the whole tree on flush(), and turns
#   the result into a dict / JSON.
#
# HOW IT FITS TOGETHER:
#
#   raw BSON bytes ──bson.decode──┐
#   Extended JSON ──json_util─────┤
#   dict / SON ───────────────────┴──► SchemaAccumulator (root)
#                                          │ per field
#                                          ▼
#                                     FieldRecord ──► ValueNormalizer
#                                          │ documents
#                                          ▼
#                                     SchemaAccumulator (nested) ...
#
# CLASS: SchemaParser
# -------------------
#
#   Constructor:
#   ------------
#   - __init__(config: AppConfig | None = None, strict: bool | None = None)
#
#   Public Methods:
#   ---------------
#   - write_document(doc) -> None
#   - write_bson(data: bytes) -> None
#   - write_json(text: str) -> None
#   - write_batch(docs) -> int
#   - flush() -> dict               (finalize + to_dict)
#   - to_dict() -> dict
#   - to_json(indent=None) -> str
#   - get_status() -> dict
#   - reset() -> None
#
#   Attributes:
#   -----------
#   - conflicts: list[TypeMismatch]  → Every conflict seen so far
#   - count / fields                 → Delegated to the root accumulator
#
# STRICT MODE:
#   The offending document is still counted and its other fields are
#   folded in, then ConflictError is raised with that document's
#   conflicts.
#
# ==============================================

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import bson
from bson import json_util

from schema_parser.analysis import FieldRecord, SchemaAccumulator
from schema_parser.config import AppConfig, get_config
from schema_parser.errors import ConflictError, TypeMismatch

logger = logging.getLogger(__name__)


class SchemaParser:
    """
    Infers a statistical schema from a stream of BSON documents.
    """

    def __init__(self, config: Optional[AppConfig] = None, strict: Optional[bool] = None):
        """
        Args:
            config: Application configuration. If None, loads from environment.
            strict: Overrides config.parser.strict when given.
        """
        self._config = config or get_config()
        self.strict = self._config.parser.strict if strict is None else strict
        self._schema = SchemaAccumulator()
        self.conflicts: List[TypeMismatch] = []

    # ======================================
    # Input
    # ======================================
    def write_document(self, doc: Mapping[str, Any]) -> None:
        """
        Observe one decoded document.

        Args:
            doc: dict, SON or RawBSONDocument

        Raises:
            TypeError: If doc is not a mapping
            ConflictError: In strict mode, if the document conflicts with
                what was observed before
            UnsupportedValueError: If any value is not a BSON type; nothing
                is recorded for the document
        """
        if not isinstance(doc, Mapping):
            raise TypeError(f"Document must be a mapping, got {type(doc).__name__}")

        conflicts = self._schema.observe_document(doc)
        if not conflicts:
            return

        self.conflicts.extend(conflicts)
        if self.strict:
            raise ConflictError(conflicts)

    def write_bson(self, data: bytes) -> None:
        """Decode one raw BSON document and observe it."""
        self.write_document(bson.decode(data))

    def write_json(self, text: str) -> None:
        """Decode one MongoDB Extended JSON document and observe it."""
        self.write_document(json_util.loads(text))

    def write_batch(self, docs: Iterable[Mapping[str, Any]]) -> int:
        """
        Observe several documents.

        Returns:
            Number of documents observed
        """
        written = 0
        for doc in docs:
            self.write_document(doc)
            written += 1
        return written

    # ======================================
    # Output
    # ======================================
    def flush(self) -> Dict[str, Any]:
        """
        Finalize every field record and return the schema.

        Returns:
            The schema as produced by to_dict()
        """
        self._schema.finalize()
        logger.info(
            "Schema finalized: %d documents, %d top-level fields, %d conflicts",
            self._schema.count, len(self._schema), len(self.conflicts)
        )
        return self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        return self._schema.to_dict()

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, allow_nan=False)

    # ======================================
    # State
    # ======================================
    @property
    def schema(self) -> SchemaAccumulator:
        return self._schema

    @property
    def count(self) -> int:
        return self._schema.count

    @property
    def fields(self) -> Dict[str, FieldRecord]:
        return self._schema.fields

    @property
    def is_finalized(self) -> bool:
        return self._schema.is_finalized

    def get_status(self) -> Dict[str, Any]:
        """
        Returns:
            Documents observed, top-level field count, conflict count and
            whether the schema is finalized
        """
        return {
            "documents": self._schema.count,
            "fields": len(self._schema),
            "conflicts": len(self.conflicts),
            "finalized": self._schema.is_finalized,
        }

    def reset(self) -> None:
        """Start over with an empty schema."""
        self._schema = SchemaAccumulator()
        self.conflicts = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Finalize on a clean exit only
        if exc_type is None:
            self.flush()
        return False
