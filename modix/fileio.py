import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigIOError, InvalidConfigError

logger = logging.getLogger(__name__)


def read_json(path: Path, empty: Optional[Any] = None) -> Any:
    """Read a JSON document; returns `empty` for a blank file when given."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigIOError(f"failed to read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InvalidConfigError(f"{path} is not valid UTF-8: {exc}") from exc

    if not raw.strip() and empty is not None:
        return empty
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"failed to parse JSON in {path}: {exc}") from exc


def atomic_write_json(path: Path, data: Any, mode: int = 0o600) -> None:
    """Write JSON through a temp file in the same directory, then rename over `path`."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise ConfigIOError(f"failed to create directory {path.parent}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
            json.dump(data, file_obj, ensure_ascii=False, indent=2)
            file_obj.write("\n")
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as exc:
        raise ConfigIOError(f"failed to write {path}: {exc}") from exc
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)
    logger.debug("wrote %s", path)
