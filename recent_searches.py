import json
import logging
import os
from typing import List, Sequence

logger = logging.getLogger(__name__)


def push_recent_search(
    searches: Sequence[str], name: str, max_len: int = 5
) -> List[str]:
    """Move ``name`` to the front of the list without duplicating it."""
    max_len = max(max_len, 0)
    name = name.strip()
    if not name:
        return list(searches)[:max_len]
    updated = [name] + [s for s in searches if s != name]
    return updated[:max_len]


class RecentSearchStore:
    def __init__(self, path: str, max_entries: int = 5):
        self.path = path
        self.max_entries = max_entries

    def load(self) -> List[str]:
        """Read the persisted list; a missing or unreadable file yields []."""
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read recent searches from {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring malformed recent searches file {self.path}")
            return []
        return [str(s) for s in data][: self.max_entries]

    def record(self, name: str) -> List[str]:
        """Record a successful lookup and rewrite the file."""
        searches = push_recent_search(self.load(), name, self.max_entries)

        directory = os.path.dirname(self.path)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)

        with open(self.path, "w") as f:
            json.dump(searches, f)
        logger.info(f"Recorded recent search: {name}")
        return searches
