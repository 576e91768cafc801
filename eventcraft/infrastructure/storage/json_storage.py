"""Snapshot file I/O returning Results instead of raising."""

import json
import os
from pathlib import Path
from typing import Any

from eventcraft.domain.shared.result import Err, Ok, Result


class JsonStorage:
    """Reads and writes the store snapshot as one JSON document.

    No domain logic lives here; ``Database`` decides what goes into the
    document.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("eventcraft.json"))
        if isinstance(result, Err):
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[dict[str, Any], str]:
        """Read and parse ``path``.

        Returns:
            Ok(dict) with the document, or Err(str) describing the failure.
        """
        try:
            return Ok(json.loads(path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return Err(f"File not found: {path}")
        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def save_json(self, path: Path, data: dict[str, Any], indent: int = 2) -> Result[None, str]:
        """Write ``data`` to ``path`` atomically.

        The document goes to a sibling ``.tmp`` file which then replaces
        ``path``, so readers never see a half-written snapshot.

        Returns:
            Ok(None), or Err(str) describing the failure.
        """
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            content = json.dumps(data, indent=indent)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, path)
            return Ok(None)
        except TypeError as e:
            return Err(f"Snapshot not JSON serializable: {e}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")
