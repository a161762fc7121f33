"""Human readable reports: per-file formats and header byte dumps."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO, Union

from .constants import FAIL_MSG, INDENT_LEVEL_1, INDENT_LEVEL_2
from .detect import detect_format, detect_path
from .errors import OpenError
from .headers import DEFAULT_REGISTRY, AudioFormat, HeaderRegistry
from .scan import walk_tree


def print_formats(
    input_dir: Optional[Union[str, Path]] = None,
    output: TextIO = sys.stdout,
    registry: Optional[HeaderRegistry] = None,
) -> None:
    """Print the detected format of every file below ``input_dir``.

    Directories are listed with their full path, files with their name and
    format (``failed!`` when a file cannot be opened). Defaults to the
    current directory.
    """

    directory = Path(input_dir) if input_dir else Path.cwd()
    if not directory.is_dir():
        raise OpenError(directory)

    output.write(f"{directory}\n")
    for entry in walk_tree(directory):
        if entry.is_dir():
            output.write(f"{INDENT_LEVEL_1}{entry}\n")
            continue
        try:
            label = detect_path(entry, registry).display_name
        except OpenError:
            label = FAIL_MSG
        output.write(f"{INDENT_LEVEL_2}{entry.name} {label}\n")


def print_header_source(
    input_path: Union[str, Path],
    output: TextIO = sys.stdout,
    registry: Optional[HeaderRegistry] = None,
) -> AudioFormat:
    """Dump the header bytes of ``input_path`` as ``0x..,`` lines.

    Useful for pasting a header from a real game file into a config
    ``headers`` override. Prints ``None`` if no known header is present.
    """

    registry = registry or DEFAULT_REGISTRY
    path = Path(input_path)
    try:
        handle = path.open("rb")
    except OSError as exc:
        raise OpenError(path) from exc

    with handle:
        fmt = detect_format(handle, registry)
        if fmt is AudioFormat.NONE:
            output.write(f"{fmt.display_name}\n")
            return fmt
        header = handle.read(registry.header_size(fmt))

    for byte in header:
        output.write(f"0x{byte:02x},\n")
    return fmt
