from __future__ import annotations

from pathlib import Path
import os
import tempfile

from loguru import logger

from errors import WriteError


def atomic_write_text(file_path: Path, content: str, *, encoding: str = "utf-8") -> Path:
    """Write ``content`` so readers only ever see the old or the new file.

    The text goes to a temporary file in the destination directory, which is
    then renamed over ``file_path``. On failure the temporary file is removed
    and :class:`WriteError` is raised.
    """
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
    except OSError as exc:
        logger.error(f"Failed to prepare {path}: {exc}")
        raise WriteError(f"Cannot write {path}: {exc}", path=path) from exc

    temp_path = Path(temp_name)
    try:
        with os.fdopen(temp_fd, "w", encoding=encoding, newline="\n") as handle:
            handle.write(content)
        temp_path.replace(path)
    except OSError as exc:
        if temp_path.exists():
            temp_path.unlink()
        logger.error(f"Failed to write {path}: {exc}")
        raise WriteError(f"Cannot write {path}: {exc}", path=path) from exc
    logger.debug(f"Atomic write successful: {path}")
    return path
