import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


# ==============================================
# MetadataStore
# ==============================================
#
# PURPOSE:
#   Persist inferred schemas and the state of the run that produced
#   them, so results survive the process and can be diffed later.
#
# WHAT IS PERSISTED:
#   1. Schemas         → One JSON file per name (usually the collection)
#   2. Run state       → Documents observed, conflicts, when
#
# CLASS: MetadataStore
# --------------------
#   Stateful: holds a reference to the storage directory.
#
#   Constructor:
#   ------------
#   - __init__(storage_dir: str = "metadata/")
#       Create storage directory if it doesn't exist.
#
class MetadataStore:
    """
    Handles persistence of schemas and run state to disk.

    Files created:
    - metadata/<name>.schema.json  → Inferred schema
    - metadata/state.json          → Last run state
    """

    SCHEMA_SUFFIX = ".schema.json"

    def __init__(self, storage_dir: str = "metadata/"):
        """
        Initialize the metadata store.

        Args:
            storage_dir: Directory to store metadata files
        """
        self.storage_dir = Path(storage_dir)

        # Create directory if it doesn't exist
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        self.state_file = self.storage_dir / "state.json"

    def schema_file(self, name: str) -> Path:
        return self.storage_dir / f"{name}{self.SCHEMA_SUFFIX}"

#   Methods:
#   --------
#   SAVING:
#   - save_schema(schema: dict, name: str = "schema") -> Path
#   - save_state(total_documents: int, conflicts: list[dict]) -> None
#
    def save_schema(self, schema: Dict[str, Any], name: str = "schema") -> Path:
        """
        Save a schema (as returned by SchemaParser.flush()) to disk.

        Args:
            schema: Schema dictionary
            name: File stem, e.g. the collection name

        Returns:
            Path of the written file
        """
        path = self.schema_file(name)
        with open(path, 'w') as f:
            json.dump(schema, f, indent=2, allow_nan=False)

        logger.info("Saved schema '%s' to %s", name, path)
        return path

    def save_state(self, total_documents: int, conflicts: List[Dict[str, Any]]) -> None:
        """
        Save run state to disk.

        Args:
            total_documents: Documents observed in the run
            conflicts: TypeMismatch.to_dict() entries
        """
        state = {
            "total_documents": total_documents,
            "conflicts": list(conflicts),
            "last_run": datetime.now(timezone.utc).isoformat(),
            "version": "1.0"
        }

        with open(self.state_file, 'w') as f:
            json.dump(state, f, indent=2)

        logger.info("Saved state (total_documents=%d) to %s", total_documents, self.state_file)

#   LOADING:
#   - load_schema(name) -> dict | None
#   - load_state() -> dict   (defaults if no file)
#
    def load_schema(self, name: str = "schema") -> Optional[Dict[str, Any]]:
        """
        Load a saved schema.

        Returns:
            The schema dictionary, or None if it was never saved
        """
        path = self.schema_file(name)
        if not path.exists():
            logger.info("No schema file found at %s", path)
            return None

        with open(path, 'r') as f:
            return json.load(f)

    def load_state(self) -> Dict[str, Any]:
        """
        Load run state from disk.

        Returns:
            Dictionary with state information
            Default values if file doesn't exist
        """
        if not self.state_file.exists():
            return {
                "total_documents": 0,
                "conflicts": [],
                "last_run": None,
                "version": "1.0"
            }

        with open(self.state_file, 'r') as f:
            return json.load(f)

#   UTILITY:
#   - exists() -> bool
#   - clear() -> None
#
    def exists(self) -> bool:
        """
        Returns:
            True if a state file or any schema file is present
        """
        return self.state_file.exists() or any(self._schema_files())

    def clear(self) -> None:
        """
        Delete all metadata files (for testing or reset).
        """
        for file in [self.state_file, *self._schema_files()]:
            if file.exists():
                file.unlink()
                logger.info("Deleted %s", file)

    def _schema_files(self) -> List[Path]:
        return sorted(self.storage_dir.glob(f"*{self.SCHEMA_SUFFIX}"))

# FILE STRUCTURE:
# ---------------
#   metadata/
#   ├── <collection>.schema.json → {count, fields: [...]}
#   └── state.json               → {total_documents, conflicts, last_run}
#
# =============================================
