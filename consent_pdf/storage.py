"""
File-backed persistence for signed consent records.

Each record is stored as one JSON file named after its id.

License: MIT
"""

import json
import logging
import re
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONSENT_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


class ConsentStore:
    """Stores raw consent records as JSON documents."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, consent_id: str) -> Path:
        return self.directory / f"{consent_id}.json"

    def save(self, data: Dict[str, Any]) -> str:
        """
        Persist a record.

        Args:
            data: JSON-serializable record

        Returns:
            The new record id
        """
        consent_id = uuid.uuid4().hex
        with open(self._path(consent_id), "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info(f"Stored consent record {consent_id}")
        return consent_id

    def get(self, consent_id: str) -> Optional[Dict[str, Any]]:
        """Load a record, or None if the id is unknown or malformed."""
        if not CONSENT_ID_PATTERN.fullmatch(consent_id or ""):
            return None
        path = self._path(consent_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
