"""Case-insensitive set of active data file paths."""

from typing import Dict, Iterator, List, Optional

from .paths import normalize_path


def _fold_char(char: str) -> str:
    upper = char.upper()
    # Expanding mappings ("ß" -> "SS", "ﬁ" -> "FI") keep the original character
    return upper if len(upper) == 1 else char


def _ordinal_ignore_case(path: str) -> str:
    """Key comparing paths ordinally after upper-casing each character.

    Folding is per character and never changes the length of the path, so
    ``Straße`` and ``STRASSE`` stay distinct.
    """
    return "".join(_fold_char(char) for char in path)


class ActiveFileMap:
    """Active data files of one table, keyed case-insensitively.

    One instance lives for the duration of a single resolution call. The
    checkpoint applier fills it first, then every replayed commit mutates it
    in ascending version order. Re-adding a path collapses into the existing
    entry and records the newest spelling.
    """

    def __init__(self) -> None:
        self._paths: Dict[str, str] = {}

    def add(self, path: Optional[str]) -> bool:
        """Mark ``path`` as active.

        Args:
            path: Relative path as recorded in the log

        Returns:
            True if the path was non-empty after normalization
        """
        relative_path = normalize_path(path)
        if not relative_path:
            return False

        self._paths[_ordinal_ignore_case(relative_path)] = relative_path
        return True

    def remove(self, path: Optional[str]) -> bool:
        """Retire ``path``; unknown paths are ignored.

        Returns:
            True if the path was non-empty after normalization
        """
        relative_path = normalize_path(path)
        if not relative_path:
            return False

        self._paths.pop(_ordinal_ignore_case(relative_path), None)
        return True

    def sorted_paths(self) -> List[str]:
        """Relative paths in ordinal case-insensitive order."""
        return sorted(self._paths.values(), key=_ordinal_ignore_case)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        return _ordinal_ignore_case(normalize_path(path)) in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths.values())

    def __repr__(self) -> str:
        return f"ActiveFileMap({self.sorted_paths()!r})"
