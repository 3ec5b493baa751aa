"""
Durable JSON store.

Generic read/write/list/remove primitives over UTF-8 JSON files. All public
functions are coroutines; the blocking file work runs in a worker thread via
``asyncio.to_thread`` so scans over many modules can be gathered concurrently.

Files are pretty-printed with 2-space indentation because users browse and
edit their library folders directly.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from noggin.core.errors import CorruptError, NotFoundError, StorageIOError

T = TypeVar("T")


# Keyed by id(): Annotated unions are not reliably hashable
_ADAPTERS: dict[int, TypeAdapter] = {}


def _adapter(schema: Any) -> TypeAdapter:
    adapter = _ADAPTERS.get(id(schema))
    if adapter is None:
        adapter = _ADAPTERS[id(schema)] = TypeAdapter(schema)
    return adapter


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    return value


def serialize(value: Any) -> str:
    """Stable JSON text for a model or plain data."""
    return json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False)


# =============================================================================
# Blocking helpers (run in a worker thread)
# =============================================================================


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotFoundError(f"File not found: {path}", path) from e
    except IsADirectoryError as e:
        raise StorageIOError(path, "is a directory") from e
    except UnicodeDecodeError as e:
        raise CorruptError(path, f"not UTF-8 ({e.reason})") from e
    except OSError as e:
        raise StorageIOError(path, e.strerror or str(e)) from e


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _glob(directory: Path, pattern: str) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(directory.glob(pattern))


def _rmtree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass


# =============================================================================
# Public API
# =============================================================================


async def ensure_dir(path: str | Path) -> Path:
    """Create a directory and its parents; no-op if it already exists."""
    directory = Path(path)
    try:
        await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        raise StorageIOError(directory, e.strerror or str(e)) from e
    return directory


async def read_typed(path: str | Path, schema: type[T] | Any) -> T:
    """
    Read a JSON file and validate it against ``schema``.

    Args:
        path: File to read
        schema: A pydantic model or any type a ``TypeAdapter`` accepts

    Raises:
        NotFoundError: the file does not exist
        CorruptError: the file is not JSON or fails validation
        StorageIOError: any other OS failure
    """
    file_path = Path(path)
    raw = await asyncio.to_thread(_read_text, file_path)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptError(file_path, f"invalid JSON ({e.msg} at line {e.lineno})") from e
    try:
        return _adapter(schema).validate_python(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise CorruptError(file_path, f"{location}: {first['msg']}") from e


async def write_typed(path: str | Path, value: Any) -> Path:
    """
    Serialize ``value`` and write it to ``path``.

    The parent directory is created if needed. Content goes to a temp file in
    the same directory first and is then renamed over the target, so a crash
    never leaves a truncated document behind.
    """
    file_path = Path(path)
    text = serialize(value)
    try:
        await asyncio.to_thread(_atomic_write, file_path, text)
    except OSError as e:
        raise StorageIOError(file_path, e.strerror or str(e)) from e
    logger.debug("Wrote {}", file_path)
    return file_path


async def list_matching(directory: str | Path, pattern: str) -> list[Path]:
    """
    Sorted paths under ``directory`` matching a single-level glob.

    Patterns like ``"*.json"`` or ``"*/.mod"`` are supported. A missing
    directory yields an empty list.
    """
    return await asyncio.to_thread(_glob, Path(directory), pattern)


async def remove_tree(path: str | Path) -> None:
    """Recursively delete a directory; missing paths are ignored."""
    target = Path(path)
    try:
        await asyncio.to_thread(_rmtree, target)
    except OSError as e:
        raise StorageIOError(target, e.strerror or str(e)) from e
    logger.debug("Removed tree {}", target)


async def remove_file(path: str | Path) -> None:
    """Delete one file. Errors propagate untranslated."""
    await asyncio.to_thread(Path(path).unlink)


async def copy_file(source: str | Path, target_dir: str | Path) -> Path:
    """Copy ``source`` into ``target_dir`` keeping its name. Errors propagate untranslated."""
    target = Path(target_dir) / Path(source).name
    await asyncio.to_thread(shutil.copyfile, source, target)
    return target


async def exists(path: str | Path) -> bool:
    return await asyncio.to_thread(Path(path).exists)
