"""Local JSON state: seen bookmark ids and bookmark alerts"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from .models import Alert


logger = logging.getLogger(__name__)


class JSONListStore:
    """A JSON array on disk; unreadable or malformed files read as empty"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _ensure_directory(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> List[Any]:
        if not self.path.exists():
            logger.debug(f"No state file at {self.path}")
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring state file {self.path}: expected a JSON array, got {type(data).__name__}")
            return []

        return data

    def _write(self, items: List[Any]) -> None:
        self._ensure_directory()
        self.path.write_text(json.dumps(items, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug(f"Wrote {len(items)} item(s) to {self.path}")


class SeenStore(JSONListStore):
    """Ids of bookmarks processed by earlier runs"""

    def load(self) -> List[str]:
        """Seen ids in stored order, without duplicates"""
        ids = [str(item) for item in self._read() if isinstance(item, (str, int))]
        return list(dict.fromkeys(ids))

    def save(self, ids: Iterable[str]) -> None:
        self._write(list(ids))


class AlertStore(JSONListStore):
    """Append-only list of bookmark alerts, emptied only by clear()"""

    def load(self) -> List[Dict[str, Any]]:
        """Raw alert records, exactly as stored"""
        return self._read()

    def save(self, alerts: List[Dict[str, Any]]) -> None:
        self._write(alerts)

    def append(self, alerts: Iterable[Alert]) -> List[Dict[str, Any]]:
        """Append alerts after the existing records and persist"""
        records = self.load()
        records.extend(alert.model_dump() for alert in alerts)
        self.save(records)
        return records

    def clear(self) -> None:
        self.save([])
        logger.info(f"Cleared bookmark alerts in {self.path}")

    def load_alerts(self) -> List[Alert]:
        """Validated alerts for display; invalid records are skipped, not removed"""
        alerts = []
        for idx, record in enumerate(self.load()):
            try:
                alerts.append(Alert.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid alert at index {idx} in {self.path}: {e.error_count()} error(s)")
        return alerts
