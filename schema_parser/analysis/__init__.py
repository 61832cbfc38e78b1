# ==============================================
# SCHEMA ANALYSIS
# ==============================================
#
# This package holds the accumulation engine: it watches documents
# field by field and builds a per-path statistical record, recursing
# into nested documents.
#
# Two-step process:
#   Step 1 (Accumulate): observe documents → append to field records
#   Step 2 (Finalize):   compute probability, uniqueness, duplicates
#
# Modules:
# --------
# - field_record.py        → Statistics for one field path
# - schema_accumulator.py  → Field records for one nesting level
#
# ==============================================

from .field_record import AccumulationState, FieldRecord
from .schema_accumulator import SchemaAccumulator

__all__ = ["AccumulationState", "FieldRecord", "SchemaAccumulator"]
