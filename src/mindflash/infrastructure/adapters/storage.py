"""
Key-value store adapters.

Implements KeyValueStore for tests (in-memory) and for the CLI/server
(a single JSON object on disk).
"""

import json
import logging
from pathlib import Path

from mindflash.domain.errors import MalformedPayloadError
from mindflash.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Stores every key as a string entry of one JSON object file.

    The file is rewritten on each `set`/`delete` through a temp file +
    rename so a crash never leaves a half-written document behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"{self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object store file {self.path}")
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
