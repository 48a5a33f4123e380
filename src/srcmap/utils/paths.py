"""Path normalization for source paths recorded in debug info.

Compilers record source paths verbatim: relative to the compilation
directory, with Windows separators when cross-compiled (MinGW), and with
``..`` segments that may climb above the project root. The functions here
turn such strings into stable absolute keys without touching a filesystem.
"""

import logging
import posixpath
import re

from slugify import slugify

from srcmap.errors import (
    EmptyBaseDirError,
    InvalidBaseDirError,
    InvalidPathError,
    Result,
    capture,
)

logger = logging.getLogger(__name__)

_DIR_NAME_VALIDATOR = re.compile(r"[^A-Za-z0-9_]")
_SLASH_RUN = re.compile(r"/{2,}")
_PARENT_PREFIX = "/.."


def normalize_native_path(path: str) -> str:
    """Convert a native path to a rooted, forward slash path.

    Backslashes become forward slashes, runs of slashes collapse to one and
    the result always starts with ``/``. A trailing slash is kept. Dot
    segments are left alone.

    Args:
        path: Path in any separator format

    Returns:
        Rooted path with single forward slashes

    Examples:
        >>> normalize_native_path("C:\\\\src\\\\main.c")
        '/C:/src/main.c'
        >>> normalize_native_path("src//lib/")
        '/src/lib/'
    """
    _check_path(path)
    converted = _SLASH_RUN.sub("/", path.replace("\\", "/"))
    if not converted.startswith("/"):
        converted = "/" + converted
    return converted


def resolve_dot_segments(path: str) -> str:
    """Remove ``.`` and ``..`` segments from a rooted path.

    A ``..`` cancels the segment before it. At the root there is nothing to
    cancel and the ``..`` is dropped. The result ends in ``/`` when the
    input does or when its last segment is ``.`` or ``..``.
    """
    resolved = posixpath.normpath(path)
    last = path.rsplit("/", 1)[-1]
    if resolved != "/" and (path.endswith("/") or last in (".", "..")):
        resolved += "/"
    return resolved


def normalize_dwarf_path(path: str, base_dir: str) -> str:
    """Normalize a path encountered in DWARF debug info.

    Relative paths (starting with ``./``) are made absolute under
    ``/{base_dir}``. If resolving ``..`` segments takes the path above
    ``/{base_dir}``, the result is rooted at ``/{base_dir}_{n}`` where ``n``
    counts the levels climbed, so paths escaping by different depths never
    share a root. Backslashes are converted to forward slashes.

    Args:
        path: Path to normalize
        base_dir: Name of the artificial root directory

    Returns:
        Canonical absolute path

    Raises:
        EmptyBaseDirError: If base_dir is empty
        InvalidBaseDirError: If base_dir contains a non-alphanumeric,
            non-underscore character
        InvalidPathError: If path cannot be parsed

    Examples:
        >>> normalize_dwarf_path("./a/b.c", "base")
        '/base/a/b.c'
        >>> normalize_dwarf_path("./../../a.c", "base")
        '/base_1/a.c'
        >>> normalize_dwarf_path("/x/../../a/b.c", "base")
        '/a/b.c'
    """
    validate_base_dir(base_dir)
    _check_path(path)

    based = False
    if path.startswith("./"):
        path = "/" + base_dir + path[1:]
        based = True

    resolved = resolve_dot_segments(normalize_native_path(path))
    escape_depth, resolved = count_escapes(resolved)

    if escape_depth == 0:
        if not based:
            # already absolute, no synthetic root needed
            return resolved
        if resolved.startswith("/" + base_dir):
            return resolved

    if based:
        # the injected /base_dir segment was consumed by an interior ..
        escape_depth += 1
    suffix = "" if escape_depth == 0 else f"_{escape_depth}"
    rebased = f"/{base_dir}{suffix}{resolved}"
    logger.debug(f"Rebased {path!r} to {rebased!r} (escape depth {escape_depth})")
    return rebased


def try_normalize_dwarf_path(path: str, base_dir: str) -> Result[str]:
    """Like ``normalize_dwarf_path`` but returns a ``Result`` instead of raising."""
    return capture(normalize_dwarf_path, path, base_dir)


def count_escapes(path: str) -> tuple[int, str]:
    """Strip leading ``/..`` segments from ``path``.

    Returns:
        Tuple of (number of segments stripped, remaining path)
    """
    depth = 0
    while path == _PARENT_PREFIX or path.startswith(_PARENT_PREFIX + "/"):
        path = path[len(_PARENT_PREFIX):] or "/"
        depth += 1
    return depth, path


def validate_base_dir(base_dir: str) -> None:
    """Check that ``base_dir`` is a non-empty run of [A-Za-z0-9_]."""
    if not base_dir:
        raise EmptyBaseDirError("baseDir cannot be empty", base_dir)
    if not isinstance(base_dir, str) or _DIR_NAME_VALIDATOR.search(base_dir):
        raise InvalidBaseDirError(
            "baseDir must consist of alphanumeric characters or underscores", base_dir
        )


def base_dir_from_name(name: str) -> str:
    """Derive a valid base directory name from a program or session name.

    Examples:
        >>> base_dir_from_name("libfoo.so.1")
        'libfoo_so_1'
    """
    candidate = slugify(name or "", separator="_", lowercase=False)
    validate_base_dir(candidate)
    return candidate


def _check_path(path: str) -> None:
    if not isinstance(path, str):
        raise InvalidPathError(f"path not valid: expected str, got {type(path).__name__}", path)
    if "\x00" in path:
        raise InvalidPathError("path not valid: contains NUL character", path)
    try:
        path.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidPathError(f"path not valid: {e}", path) from e
