from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from trivia_quiz.utils.logging import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """
    Browser-style string key/value store persisted as a single JSON object.

    Every read goes back to disk so values written by another process (or by
    hand) are picked up. A missing file is an empty store; a malformed one is
    logged and treated as empty rather than raising.
    """

    def __init__(self, path: Path):
        """Ensure the backing directory exists and record the JSON filepath."""
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("local_storage.malformed", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            logger.warning("local_storage.not_an_object", path=str(self.path))
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write(self, data: Dict[str, str]) -> None:
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"LocalStorage values must be strings, got {type(value).__name__}")
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> List[str]:
        return list(self._read())

    def clear(self) -> None:
        self._write({})
