"""Plaintext JSON documents backing the session and connection stores."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonDocument:
    """One JSON object on disk. A missing or unreadable file reads as {}."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("%s is unreadable, starting from an empty document", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("%s does not hold a JSON object, ignoring it", self.path)
            return {}
        return data

    def write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
