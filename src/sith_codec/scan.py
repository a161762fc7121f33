"""Input discovery for batch encode/decode."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .errors import OpenError


def _sort_key(root: Path):
    return lambda p: p.relative_to(root).parts


def walk_tree(root: Path) -> List[Path]:
    """Return every entry below ``root`` (directories included) in a stable order.

    Entries are ordered by their relative path components, so a directory is
    followed by its whole subtree before the next sibling (``dir/a.wav`` sorts
    before ``dir-old.wav``).
    """

    return sorted(root.rglob("*"), key=_sort_key(root))


def scan_files(root: Path) -> List[Path]:
    """Collect every non-directory entry under ``root``, recursively."""

    return [path for path in walk_tree(root) if not path.is_dir()]


def read_path_list(list_file: Path) -> List[Path]:
    """Read one path per line from a plain text file.

    Blank lines are ignored; surrounding whitespace is kept out of the path.
    """

    try:
        with list_file.open("r", encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise OpenError(list_file) from exc
    return [Path(line.strip()) for line in lines if line.strip()]
