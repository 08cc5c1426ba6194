"""Crash-safe JSON file reads and writes."""

from __future__ import annotations

import contextlib
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import CorruptData, IoFailure

M = TypeVar("M", bound=BaseModel)

DEFAULT_MODE = 0o644


def dump_json(data: Any) -> str:
    """Serialize to the pretty, stable layout used for every kuk file."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` so readers see the old or new file, never a mix.

    The content goes to a temp file in the same directory, is fsynced, then
    renamed over the target. A process killed at any point leaves at most a
    stray ``.<name>.*.tmp`` file behind.

    Raises:
        OSError: Any filesystem failure; the target is left untouched.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            mode = DEFAULT_MODE
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
    _fsync_dir(path.parent)


def _fsync_dir(directory: Path) -> None:
    """Persist the rename itself; not every platform allows opening a directory."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)


def read_json(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        FileNotFoundError: The file does not exist (left for the caller to map)
        IoFailure: Any other filesystem failure
        CorruptData: The file is not valid UTF-8 JSON
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as e:
        raise IoFailure(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise CorruptData(path, f"not UTF-8: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptData(path, f"invalid JSON: {e}") from e


def write_json(path: Path, data: Any) -> None:
    """Atomically write ``data`` as pretty JSON, mapping OS errors to IoFailure."""
    try:
        atomic_write_text(path, dump_json(data))
    except OSError as e:
        raise IoFailure(path, e.strerror or str(e)) from e


def parse_model(model: type[M], path: Path, data: Any) -> M:
    """Validate raw JSON against a model, reporting failures as CorruptData."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise CorruptData(path, str(e)) from e
