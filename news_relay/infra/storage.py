"""File storage for the sent log."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


class JsonFileStore:
    """Read and atomically replace JSON documents on disk."""

    def read(self, path: Path) -> Any | None:
        """Return the decoded document, or ``None`` when the file is absent.

        Raises ``json.JSONDecodeError`` (a ``ValueError``) on malformed content.
        """

        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def write(self, path: Path, payload: Any, indent: int | None = None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if indent is None:
            text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(payload, ensure_ascii=False, indent=indent)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as stream:
                stream.write(text)
                stream.flush()
                os.fsync(stream.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["JsonFileStore"]
