# certgen/utils/files.py

from __future__ import annotations

from pathlib import Path
from typing import Union
import contextlib
import os
import tempfile

from certgen.constants import DIR_MODE
from certgen.services.cert_errors import ArtifactIOError

StrPath = Union[str, Path]

def read_bytes(path: StrPath) -> bytes:
    """Read a file as bytes; raises ArtifactIOError naming the path on failure."""
    file_path = Path(path)

    try:
        return file_path.read_bytes()
    except FileNotFoundError as e:
        raise ArtifactIOError("File not found", str(file_path)) from e
    except PermissionError as e:
        raise ArtifactIOError("Permission denied", str(file_path)) from e
    except OSError as err:
        raise ArtifactIOError(f"I/O error while reading file ({err.strerror})", str(file_path)) from err

def write_bytes(
    path: StrPath,
    data: bytes,
    *,
    overwrite: bool = True,
    create_dirs: bool = False,
    atomic: bool = True,
    mode: int = 0o600,
) -> Path:
    """
    Write bytes to a file, with optional atomic replacement.

    Args:
        path: Destination file path.
        data: Bytes to write.
        overwrite: If False and path exists, abort.
        create_dirs: Create parent directories if needed.
        atomic: Write to a temp file and os.replace() for durability.
        mode: File permission mode to apply to the written file.

    Returns:
        The Path of the written file.

    Raises:
        ArtifactIOError: Any failure, with the offending path.
    """
    file_path = Path(path)
    parent = file_path.parent

    try:
        if file_path.exists() and not overwrite:
            raise ArtifactIOError("File already exists", str(file_path))

        if create_dirs:
            parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)

        if not atomic:
            file_path.write_bytes(data)
            os.chmod(file_path, mode)
            return file_path

        # Atomic write: temp file in same directory -> fsync -> chmod -> replace -> fsync dir
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(delete=False, dir=str(parent),
                                             prefix=f'.{file_path.name}.') as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())

            os.chmod(tmp_name, mode)
            os.replace(tmp_name, file_path)
        except OSError:
            if tmp_name is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
            raise

        # fsync the containing directory so the rename is durable
        if hasattr(os, "O_DIRECTORY"):
            dir_fd = os.open(str(parent), os.O_DIRECTORY)
            try:
                os.fsync(dir_fd)
            finally:
                os.close(dir_fd)

        return file_path

    except PermissionError as e:
        raise ArtifactIOError("Permission denied", str(file_path)) from e
    except IsADirectoryError as e:
        raise ArtifactIOError("Path is a directory", str(file_path)) from e
    except FileNotFoundError as e:
        # e.g., parent missing and create_dirs=False
        raise ArtifactIOError("Path not found", str(file_path)) from e
    except OSError as err:
        raise ArtifactIOError(f"I/O error while writing file ({err.strerror})", str(file_path)) from err

def ensure_writable_directory(path: StrPath) -> Path:
    """
    Make sure `path` is a directory we can write into, creating it if needed.

    Safe to call concurrently for the same directory: creation tolerates an
    existing directory and the write check uses a unique temporary name.
    """
    dir_path = Path(path)

    try:
        dir_path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except FileExistsError as e:
        raise ArtifactIOError("Path exists but is not a directory", str(dir_path)) from e
    except OSError as e:
        raise ArtifactIOError(f"Unable to create directory ({e.strerror})", str(dir_path)) from e

    if not dir_path.is_dir():
        raise ArtifactIOError("Path exists but is not a directory", str(dir_path))

    try:
        with tempfile.TemporaryFile(dir=str(dir_path)):
            pass
    except OSError as e:
        raise ArtifactIOError("Directory is not writable", str(dir_path)) from e

    return dir_path
