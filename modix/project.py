"""Scaffolding for the per-project ``.modix/`` state directory."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import AlreadyExistsError, ConfigIOError, InvalidConfigError, NotFoundError
from .fileio import atomic_write_json, read_json

logger = logging.getLogger(__name__)

PROJECT_DIR = ".modix"
COLLECTIONS = ["shells", "brains", "agents", "runtimes", "projects"]
PROJECT_FILES = [f"{name}.json" for name in COLLECTIONS] + ["state.json", "version.json"]

# Keys each file must carry to be considered valid.
REQUIRED_KEYS: Dict[str, List[str]] = {
    **{f"{name}.json": ["version", name] for name in COLLECTIONS},
    "state.json": ["lastUpdated", "counts", "history"],
    "version.json": ["version", "configVersion", "createdAt"],
}


@dataclass(frozen=True)
class Tool:
    name: str
    binary: str
    description: str


DEPENDENCIES = [
    Tool("git", "git", "Version control system"),
    Tool("claude-code", "claude", "Claude Code CLI"),
    Tool("codex-cli", "codex", "OpenAI Codex CLI"),
    Tool("gemini-cli", "gemini", "Google Gemini CLI"),
]


def project_dir(root: Optional[Path] = None) -> Path:
    return Path(root or ".") / PROJECT_DIR


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _templates(now: str) -> Dict[str, Dict[str, Any]]:
    files: Dict[str, Dict[str, Any]] = {f"{name}.json": {"version": "v1", name: {}} for name in COLLECTIONS}
    files["state.json"] = {
        "lastUpdated": now,
        "counts": {name: 0 for name in COLLECTIONS},
        "history": [],
    }
    files["version.json"] = {"version": "1.0.0", "configVersion": "v1", "createdAt": now}
    return files


def init_project(root: Optional[Path] = None) -> List[str]:
    """Create ``.modix/`` with empty state files; returns the file names."""
    directory = project_dir(root)
    if directory.exists():
        raise AlreadyExistsError("modix project already initialized in current directory")

    try:
        directory.mkdir(parents=True)
    except OSError as exc:
        raise ConfigIOError(f"failed to create {PROJECT_DIR} directory: {exc}") from exc

    for filename, payload in _templates(_timestamp()).items():
        atomic_write_json(directory / filename, payload, mode=0o644)
    logger.debug("initialized project in %s", directory)
    return list(PROJECT_FILES)


def _require_project(root: Optional[Path]) -> Path:
    directory = project_dir(root)
    if not directory.is_dir():
        raise NotFoundError(f"modix project not initialized: {PROJECT_DIR} directory not found")
    return directory


def validate_file(path: Path) -> Dict[str, Any]:
    result = {"filename": path.name, "valid": False, "error": ""}
    if not path.exists():
        result["error"] = "File not found"
        return result

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        result["error"] = f"Failed to read file: {exc}"
        return result
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        result["error"] = f"Invalid JSON format: {exc}"
        return result

    required = REQUIRED_KEYS.get(path.name, [])
    if not isinstance(data, dict) or any(key not in data for key in required):
        result["error"] = f"Invalid {path.name} format"
        return result

    result["valid"] = True
    return result


def validate_project(root: Optional[Path] = None) -> List[Dict[str, Any]]:
    directory = _require_project(root)
    return [validate_file(directory / filename) for filename in PROJECT_FILES]


def inspect_project(root: Optional[Path] = None) -> Dict[str, Any]:
    """Read every state file, keyed by its stem (``shells``, ``state``, ...)."""
    directory = _require_project(root)
    contents = {}
    for filename in PROJECT_FILES:
        path = directory / filename
        if not path.exists():
            raise NotFoundError(f"failed to read {filename}: file not found")
        try:
            data = read_json(path)
        except InvalidConfigError as exc:
            raise InvalidConfigError(f"failed to read {filename}: {exc}") from exc
        _check_shape(filename, data)
        contents[path.stem] = data
    return contents


def _check_shape(filename: str, data: Any) -> None:
    if not isinstance(data, dict):
        raise InvalidConfigError(f"invalid {filename}: expected a JSON object")
    missing = [key for key in REQUIRED_KEYS.get(filename, []) if key not in data]
    if missing:
        raise InvalidConfigError(f"invalid {filename}: missing {', '.join(missing)}")

    expected = {name: dict for name in COLLECTIONS}
    expected.update({"counts": dict, "history": list})
    for key, value in data.items():
        if key in expected and not isinstance(value, expected[key]):
            raise InvalidConfigError(f"invalid {filename}: '{key}' must be a {expected[key].__name__}")


def check_tool(tool: Tool) -> Dict[str, Any]:
    result = {"name": tool.name, "description": tool.description, "installed": False, "version": "unknown"}
    commands = [[tool.binary, "--version"]]
    if tool.name == "git":
        commands.append([tool.binary, "version"])

    for command in commands:
        try:
            completed = subprocess.run(command, capture_output=True, text=True, timeout=10)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.debug("%s: %s", " ".join(command), exc)
            continue
        if completed.returncode == 0:
            result["installed"] = True
            output = (completed.stdout or completed.stderr).strip()
            if output:
                result["version"] = output.splitlines()[0]
            break
    return result


def check_dependencies(tools: Optional[List[Tool]] = None) -> List[Dict[str, Any]]:
    return [check_tool(tool) for tool in (tools or DEPENDENCIES)]
