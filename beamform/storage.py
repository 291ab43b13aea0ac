"""Text persistence port and a filesystem adapter.

The computational modules only produce and consume text payloads (see
`profile_io.to_csv`); where that text lives is decided by a StoragePort.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StoragePort(Protocol):
    def save_text(self, name: str, content: str) -> bool:
        """Persist `content` under `name`; True on success."""
        ...

    def load_text(self, name: str) -> Optional[str]:
        """Return the text stored under `name`, or None when absent or unreadable."""
        ...


class FileStorage:
    """StoragePort backed by the local filesystem; names are paths."""

    def __init__(self, root: str | Path | None = None, encoding: str = "utf-8"):
        self.root = Path(root) if root is not None else None
        self.encoding = encoding

    def _path(self, name: str) -> Path:
        p = Path(name)
        return self.root / p if self.root is not None and not p.is_absolute() else p

    def save_text(self, name: str, content: str) -> bool:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=self.encoding)
        return True

    def load_text(self, name: str) -> Optional[str]:
        path = self._path(name)
        try:
            return path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            logger.debug("No stored text at %s", path)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Cannot read stored text at %s: %s", path, e)
            return None
