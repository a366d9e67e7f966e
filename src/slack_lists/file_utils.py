"""Utilities for file operations."""

from pathlib import Path

import aiofiles
from loguru import logger


class FileError(Exception):
    """Base exception for file operations."""

    pass


class FileWriteError(FileError):
    """Raised when file operations fail."""

    pass


async def read_text(path: Path) -> str:
    """Read a UTF-8 text file without blocking the event loop."""
    async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
        return await f.read()


async def write_file_atomic(path: Path | str, content: str) -> None:
    """
    Write file with atomic operation using temporary file.

    Parent directories are created as needed.

    Args:
        path: Target file path (Path or string)
        content: Content to write

    Raises:
        FileWriteError: If write operation fails
    """
    path_obj = Path(path) if isinstance(path, str) else path
    temp_path = path_obj.with_suffix(path_obj.suffix + ".tmp")

    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
            await f.write(content)

        temp_path.replace(path_obj)
        logger.debug(f"Wrote file atomically: {path_obj} ({len(content)} chars)")
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file {path_obj}: {e}")
        raise FileWriteError(f"Failed to write file {path}: {e}") from e
