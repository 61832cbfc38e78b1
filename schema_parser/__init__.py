# ==============================================
# BSON Schema Parser
# ==============================================
#
# Package Structure:
#
# schema_parser/
# ├── normalization/    # BSON value → type label / NormalizedValue
# ├── analysis/         # FieldRecord + SchemaAccumulator (the engine)
# ├── storage/          # MongoDB document source
# ├── persistence/      # Schema and run state on disk
# ├── schema_parser.py  # SchemaParser driver
# ├── errors.py         # Exception types
# ├── config.py         # Configuration management
# └── cli.py            # Command line entry point
#
# ==============================================

from schema_parser.errors import (
    ConflictError,
    SchemaParserError,
    TypeMismatch,
    UnsupportedValueError,
)
from schema_parser.schema_parser import SchemaParser

__version__ = "0.1.0"

__all__ = [
    "ConflictError",
    "SchemaParser",
    "SchemaParserError",
    "TypeMismatch",
    "UnsupportedValueError",
]
