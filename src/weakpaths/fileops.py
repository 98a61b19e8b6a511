# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Filesystem accessors operating on string paths.

These functions back the I/O methods of :class:`~weakpaths.path.Path` and
can be used directly with any ``str`` or :class:`os.PathLike` path.

Error policy:

- ``exists`` absorbs only the "not found" condition and returns ``False``.
- ``is_dir``, ``is_file`` and ``is_symlink`` absorb every :class:`OSError`.
- Everything else raises :class:`~weakpaths.errors.PathNotFoundError` for a
  missing entry and lets any other :class:`OSError` propagate.

Writes are not atomic. Callers needing atomicity write to a temporary path
and rename it into place.
"""

from __future__ import annotations

import json
import os
import stat as stat_module
from collections.abc import Mapping, Sequence
from typing import Any, Final

from .errors import JsonParseError, JsonSerializationError, PathNotFoundError

StrPath = str | os.PathLike[str]

_DEFAULT_FILE_MODE: Final[int] = 0o666
_BINARY_FLAG: Final[int] = getattr(os, "O_BINARY", 0)


def _not_found(path: StrPath, err: OSError) -> PathNotFoundError:
    return PathNotFoundError(err.errno, err.strerror, os.fspath(path))


def stat(path: StrPath) -> os.stat_result:
    """Return ``os.stat`` of ``path``, following symlinks."""
    try:
        return os.stat(path)
    except FileNotFoundError as err:
        raise _not_found(path, err) from err


def lstat(path: StrPath) -> os.stat_result:
    """Return ``os.lstat`` of ``path`` without following a final symlink."""
    try:
        return os.lstat(path)
    except FileNotFoundError as err:
        raise _not_found(path, err) from err


def exists(path: StrPath) -> bool:
    """Return whether an entry exists at ``path``.

    A dangling symlink exists. A path running through a regular file (for
    example ``file.txt/child``) cannot exist and yields ``False``.
    """
    try:
        _ = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def is_dir(path: StrPath) -> bool:
    try:
        return stat_module.S_ISDIR(os.stat(path).st_mode)
    except OSError:
        return False


def is_file(path: StrPath) -> bool:
    try:
        return stat_module.S_ISREG(os.stat(path).st_mode)
    except OSError:
        return False


def is_symlink(path: StrPath) -> bool:
    try:
        return stat_module.S_ISLNK(os.lstat(path).st_mode)
    except OSError:
        return False


def ensure_dir(path: StrPath) -> None:
    """Create ``path`` and any missing parents; existing directories are kept.

    Raises:
        FileExistsError: If a non-directory entry occupies ``path``.
    """
    os.makedirs(path, exist_ok=True)


def ensure_file(path: StrPath) -> None:
    """Create an empty file at ``path`` unless a regular file is already there.

    Missing parent directories are created.

    Raises:
        IsADirectoryError: If a directory occupies ``path``.
        FileExistsError: If another kind of entry occupies ``path``.
    """
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        pass
    else:
        if stat_module.S_ISREG(mode):
            return
        if stat_module.S_ISDIR(mode):
            msg = f"Ensure path exists, expected a file, got a directory: {os.fspath(path)}"
            raise IsADirectoryError(msg)
        if not stat_module.S_ISLNK(mode) or not is_file(path):
            msg = f"Ensure path exists, expected a file: {os.fspath(path)}"
            raise FileExistsError(msg)
        return

    parent = os.path.dirname(os.fspath(path))
    if parent:
        ensure_dir(parent)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | _BINARY_FLAG, _DEFAULT_FILE_MODE)
    os.close(fd)


def read_bytes(path: StrPath) -> bytes:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except FileNotFoundError as err:
        raise _not_found(path, err) from err


def read_text(path: StrPath, *, encoding: str = "utf-8") -> str:
    return read_bytes(path).decode(encoding)


def write_bytes(
    path: StrPath,
    data: bytes,
    *,
    append: bool = False,
    create: bool = True,
    mode: int | None = None,
) -> None:
    """Write ``data`` to ``path``.

    Args:
        path: Target file.
        data: Content to write.
        append: Append instead of truncating.
        create: Create the file when missing. With ``create=False`` a
            missing file raises :class:`PathNotFoundError`.
        mode: Permission bits applied to the file after writing.
    """
    flags = os.O_WRONLY | _BINARY_FLAG | (os.O_APPEND if append else os.O_TRUNC)
    if create:
        flags |= os.O_CREAT
    try:
        fd = os.open(path, flags, _DEFAULT_FILE_MODE if mode is None else mode)
    except FileNotFoundError as err:
        raise _not_found(path, err) from err
    with os.fdopen(fd, "wb") as handle:
        _ = handle.write(data)
    if mode is not None:
        os.chmod(path, mode)


def write_text(
    path: StrPath,
    data: str,
    *,
    encoding: str = "utf-8",
    append: bool = False,
    create: bool = True,
    mode: int | None = None,
) -> None:
    write_bytes(
        path, data.encode(encoding), append=append, create=create, mode=mode
    )


def read_json(path: StrPath) -> Any:  # noqa: ANN401
    """Read ``path`` as UTF-8 text and parse it as JSON.

    Raises:
        PathNotFoundError: If ``path`` does not exist.
        JsonParseError: If the content is not UTF-8 or not valid JSON.
    """
    try:
        return json.loads(read_text(path))
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        msg = f"Invalid JSON in {os.fspath(path)}: {err}"
        raise JsonParseError(msg) from err


def dumps_json(
    value: object,
    *,
    keys: Sequence[str | int] | None = None,
    sort_keys: bool = False,
    indent: int | str | None = None,
) -> str:
    """Serialize ``value`` to a JSON string.

    ``keys`` restricts every mapping, at any depth, to the listed keys in the
    listed order. Path-like values serialize as their string form. NaN and
    infinities are rejected because JSON has no tokens for them.

    Raises:
        JsonSerializationError: If ``value`` holds a circular reference or a
            value JSON can't represent.
    """
    if keys is not None:
        value = _select_keys(value, tuple(str(key) for key in keys), ())
    try:
        return json.dumps(
            value,
            default=_json_default,
            sort_keys=sort_keys,
            indent=indent,
            allow_nan=False,
        )
    except (TypeError, ValueError) as err:
        raise JsonSerializationError(str(err)) from err


def write_json(
    path: StrPath,
    value: object,
    *,
    keys: Sequence[str | int] | None = None,
    sort_keys: bool = False,
    indent: int | str | None = None,
    append: bool = False,
    create: bool = True,
    mode: int | None = None,
) -> None:
    """Serialize ``value`` and write it to ``path``.

    Serialization finishes before the file is opened, so a value that can't
    be serialized leaves an existing file untouched.
    """
    text = dumps_json(value, keys=keys, sort_keys=sort_keys, indent=indent)
    write_text(path, text, append=append, create=create, mode=mode)


def _json_default(value: object) -> object:
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _select_keys(value: object, keys: tuple[str, ...], stack: tuple[int, ...]) -> object:
    if isinstance(value, Mapping | list | tuple):
        marker = id(value)
        if marker in stack:
            raise JsonSerializationError("Circular reference detected")
        stack = (*stack, marker)
    if isinstance(value, Mapping):
        by_name = {str(name): item for name, item in value.items()}
        return {
            name: _select_keys(by_name[name], keys, stack)
            for name in keys
            if name in by_name
        }
    if isinstance(value, list | tuple):
        return [_select_keys(item, keys, stack) for item in value]
    return value


__all__ = [
    "StrPath",
    "dumps_json",
    "ensure_dir",
    "ensure_file",
    "exists",
    "is_dir",
    "is_file",
    "is_symlink",
    "lstat",
    "read_bytes",
    "read_json",
    "read_text",
    "stat",
    "write_bytes",
    "write_json",
    "write_text",
]
