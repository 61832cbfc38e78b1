# ==============================================
# VALUE NORMALIZATION
# ==============================================
#
# This package reduces decoded BSON values to a small closed set of
# comparable kinds BEFORE they enter a field's value pool, and labels
# each value with its BSON type name.
#
# Modules:
# --------
# - normalized_value.py  → ValueKind enum and the NormalizedValue object
# - value_normalizer.py  → Type labels and BSON value → NormalizedValue
#
# ==============================================

from .normalized_value import NULL_MARKER, NormalizedValue, ValueKind
from .value_normalizer import ValueNormalizer

__all__ = ["NULL_MARKER", "NormalizedValue", "ValueKind", "ValueNormalizer"]
