"""Header detection for KotOR audio streams."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional

from .errors import EndOfStreamError, OpenError
from .headers import DEFAULT_REGISTRY, AudioFormat, HeaderRegistry
from .logging_utils import get_logger

logger = get_logger(__name__)


def _read_prefix(stream: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        try:
            chunk = stream.read(remaining)
        except OSError as exc:
            # unreadable data counts as a short read
            logger.debug("Read failed while probing %s: %s", _stream_name(stream), exc)
            break
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _stream_name(stream: BinaryIO) -> str:
    name = getattr(stream, "name", None)
    return str(name) if name is not None else "<stream>"


def detect_format(
    stream: BinaryIO,
    registry: Optional[HeaderRegistry] = None,
    strict: bool = False,
) -> AudioFormat:
    """Return the format whose header the stream starts with.

    The prefix is always read from offset 0 and the caller's position is
    restored afterwards. SFX is tested before VO, so SFX wins if both headers
    would match.

    Parameters
    ----------
    stream: BinaryIO
        Seekable binary stream.
    registry: Optional[HeaderRegistry]
        Header table; defaults to the built-in headers.
    strict: bool
        Raise ``EndOfStreamError`` instead of returning ``AudioFormat.NONE``
        when no header matched and the stream holds fewer bytes than the
        longest header.

    Returns
    -------
    AudioFormat
        Detected format, ``AudioFormat.NONE`` when nothing matches.
    """

    registry = registry or DEFAULT_REGISTRY
    position = stream.tell()
    try:
        stream.seek(0)
        prefix = _read_prefix(stream, registry.max_size)
    finally:
        stream.seek(position)

    if prefix[: registry.sfx_size] == registry.sfx:
        return AudioFormat.SFX
    if prefix[: registry.vo_size] == registry.vo:
        return AudioFormat.VO
    if strict and len(prefix) < registry.max_size:
        raise EndOfStreamError(_stream_name(stream))
    return AudioFormat.NONE


def detect_path(path: Path, registry: Optional[HeaderRegistry] = None, strict: bool = False) -> AudioFormat:
    """Open ``path`` and detect its format."""

    try:
        handle = Path(path).open("rb")
    except OSError as exc:
        logger.debug("Cannot open %s for detection: %s", path, exc)
        raise OpenError(path) from exc

    with handle:
        return detect_format(handle, registry, strict=strict)
