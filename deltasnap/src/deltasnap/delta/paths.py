"""Table-relative path helpers.

Paths recorded in the transaction log and the table root supplied by the
caller are joined with plain ``/`` separators. No percent-decoding is
performed and internal ``//`` runs are left alone; only the edges are
trimmed.
"""

from typing import Optional


def normalize_path(path: Optional[str]) -> str:
    """Canonicalize a table-relative path.

    Args:
        path: Path that may use ``\\`` separators or carry edge slashes

    Returns:
        Path with ``/`` separators and no leading or trailing ``/``;
        an empty string for None, empty or whitespace-only input
    """
    if path is None or not path.strip():
        return ""

    return path.replace("\\", "/").strip("/")


def combine_paths(base_path: Optional[str], relative_path: Optional[str]) -> str:
    """Join a base path and a relative path with a single ``/``.

    Args:
        base_path: Table root or other base path
        relative_path: Path relative to ``base_path``

    Returns:
        The joined path, or whichever side is non-empty after normalization
    """
    base = normalize_path(base_path)
    relative = normalize_path(relative_path)

    if not base:
        return relative
    if not relative:
        return base

    return f"{base}/{relative}"


def delta_log_path(table_path: str, log_dir_name: Optional[str] = None) -> str:
    """Path of a table's transaction log directory.

    Args:
        table_path: Table root path
        log_dir_name: Log directory name; defaults to the configured
            ``delta_log_dir_name`` setting

    Returns:
        ``<table_path>/_delta_log`` (or the configured directory name)
    """
    if log_dir_name is None:
        from deltasnap.settings import get_settings
        log_dir_name = get_settings().delta_log_dir_name

    return combine_paths(table_path, log_dir_name)
