"""Persistence of the last schema used, so it can be reused next run."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.logger import get_logger

logger = get_logger(__name__)

SCHEMA_KEY = "lastTableSchema"
STATE_FILENAME = "state.json"


class SchemaStore:
    """
    Keep the most recent schema text in a small JSON file.

    Attributes:
        state_dir: Directory holding the state file
    """

    def __init__(self, state_dir: Optional[Path] = None):
        """
        Initialize schema store.

        Args:
            state_dir: State directory (falls back to CSV2INSERT_STATE_DIR,
                then ~/.config/csv2insert)
        """
        env_dir = os.getenv("CSV2INSERT_STATE_DIR")
        if state_dir is not None:
            self.state_dir = Path(state_dir)
        elif env_dir:
            self.state_dir = Path(env_dir)
        else:
            self.state_dir = Path.home() / ".config" / "csv2insert"

    @property
    def path(self) -> Path:
        return self.state_dir / STATE_FILENAME

    def save(self, schema_text: str) -> None:
        """
        Save schema text, replacing what was stored before.

        Args:
            schema_text: Schema to remember
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)

        data = {
            SCHEMA_KEY: schema_text,
            "saved_at": datetime.now().isoformat(),
        }

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.debug(f"Saved schema to {self.path}")

    def load(self) -> Optional[str]:
        """
        Load the stored schema text.

        Returns:
            Schema text, or None if nothing usable is stored
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return None

        schema = data.get(SCHEMA_KEY) if isinstance(data, dict) else None
        if not isinstance(schema, str):
            logger.warning(f"No schema stored in {self.path}")
            return None

        logger.debug(f"Loaded schema from {self.path}")
        return schema

    def clear(self) -> bool:
        """
        Remove the stored schema.

        Returns:
            True if a state file was removed
        """
        if not self.path.exists():
            return False

        self.path.unlink()
        logger.info(f"Cleared stored schema at {self.path}")
        return True
