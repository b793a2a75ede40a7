"""
Adapters for Adventure Gate ports.

The content calendar is a static JSON document loaded once at startup and
kept in an immutable in-memory mapping.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .domain import Adventure, AdventureConfigurationError

logger = logging.getLogger(__name__)


class RealClock:
    """System clock, always UTC."""

    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)


class FixedClock:
    """Clock frozen at a given instant (tests and support tooling)."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware instant")
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


class StaticAdventureRepository:
    """In-memory implementation of AdventureRepository. Read-only after construction."""

    def __init__(self, adventures: Iterable[Adventure] = ()):
        mapping: Dict[date, Adventure] = {}
        for adventure in adventures:
            if adventure.date in mapping:
                raise AdventureConfigurationError(
                    f"Duplicate adventure for {adventure.date.isoformat()}"
                )
            mapping[adventure.date] = adventure
        self._adventures: Mapping[date, Adventure] = MappingProxyType(mapping)

    def lookup(self, adventure_date: date) -> Optional[Adventure]:
        return self._adventures.get(adventure_date)

    def dates(self) -> List[date]:
        return sorted(self._adventures)

    def __len__(self) -> int:
        return len(self._adventures)


def parse_adventures(payload: Union[dict, list]) -> List[Adventure]:
    """
    Build Adventure objects from the decoded content document.

    Accepts either {"adventures": [...]} or a bare list. Each entry needs
    "date" (YYYY-MM-DD), "title" and "message".

    Raises:
        AdventureConfigurationError: On any malformed entry
    """
    entries = payload.get("adventures") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise AdventureConfigurationError("Content document must contain a list of adventures")

    adventures = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise AdventureConfigurationError(f"Adventure #{index} is not an object")
        for key in ("title", "message"):
            value = entry.get(key)
            if value is not None and not isinstance(value, str):
                raise AdventureConfigurationError(f"Adventure #{index} field '{key}' must be a string")
        try:
            adventure_date = date.fromisoformat(str(entry["date"]))
            adventures.append(
                Adventure(
                    date=adventure_date,
                    title=entry.get("title") or "",
                    message=entry.get("message") or "",
                )
            )
        except KeyError as e:
            raise AdventureConfigurationError(f"Adventure #{index} is missing field {e}") from e
        except ValueError as e:
            raise AdventureConfigurationError(f"Adventure #{index} is invalid: {e}") from e

    return adventures


def load_adventures(path: Union[str, Path]) -> StaticAdventureRepository:
    """
    Load the content calendar from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        StaticAdventureRepository with every adventure of the document

    Raises:
        AdventureConfigurationError: File missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
    except FileNotFoundError as e:
        raise AdventureConfigurationError(f"Content file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise AdventureConfigurationError(f"Content file {path} is not valid JSON: {e}") from e

    repository = StaticAdventureRepository(parse_adventures(payload))
    logger.info(f"Loaded {len(repository)} adventures from {path}")
    return repository
