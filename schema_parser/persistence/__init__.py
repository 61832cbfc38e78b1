# ==============================================
# PERSISTENCE
# ==============================================
#
# Saves inferred schemas and run state to disk so a later run (or
# another tool) can pick them up.
#
# Modules:
# --------
# - metadata_store.py  → Save/load schema JSON and run state
#
# ==============================================

from .metadata_store import MetadataStore

__all__ = ["MetadataStore"]
