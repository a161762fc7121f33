"""Known KotOR audio container headers and their lookup registry."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError


class AudioFormat(Enum):
    """Audio container variants recognized by the codec."""

    NONE = "none"
    SFX = "sfx"
    VO = "vo"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_token(cls, token: Optional[str]) -> "AudioFormat":
        """Map a user supplied format token to a format.

        Unknown or empty tokens map to ``AudioFormat.NONE``; callers decide
        whether that is acceptable (encode rejects it).
        """

        if not token:
            return cls.NONE
        return _TOKENS.get(token.strip().lower(), cls.NONE)


_DISPLAY_NAMES = {
    AudioFormat.NONE: "None",
    AudioFormat.SFX: "SFX",
    AudioFormat.VO: "VO",
}

# streammusic shares the streamwaves container
_TOKENS: Dict[str, AudioFormat] = {
    "sfx": AudioFormat.SFX,
    "s": AudioFormat.SFX,
    "-s": AudioFormat.SFX,
    "--sfx": AudioFormat.SFX,
    "vo": AudioFormat.VO,
    "v": AudioFormat.VO,
    "-v": AudioFormat.VO,
    "--vo": AudioFormat.VO,
    "music": AudioFormat.VO,
    "m": AudioFormat.VO,
    "-m": AudioFormat.VO,
    "--music": AudioFormat.VO,
}


# streamsounds: placeholder. Only the leading fake MPEG frame sync is known here;
# the remaining 466 bytes are zero padding, not the bytes real game files carry.
# Real streamsounds files are detected as NONE until ``headers.sfx`` is set in the
# config from the first 470 bytes of a real file.
SFX_HEADER = b"\xff\xf3\x60\xc4" + bytes(466)

# streamwaves: fixed RIFF/WAVE prefix (riff size 50, data size 0) ahead of an MP3 stream
VO_HEADER = (
    b"RIFF"
    + b"\x32\x00\x00\x00"
    + b"WAVE"
    + b"fmt "
    + b"\x1e\x00\x00\x00"
    + b"\x01\x00\x01\x00"
    + b"\x22\x56\x00\x00"
    + b"\x44\xac\x00\x00"
    + b"\x02\x00\x10\x00"
    + b"\x0c\x00"
    + bytes(12)
    + b"data"
    + b"\x00\x00\x00\x00"
)


@dataclass(frozen=True)
class HeaderRegistry:
    """Read-only table of header byte strings for SFX and VO."""

    sfx: bytes = SFX_HEADER
    vo: bytes = VO_HEADER

    def __post_init__(self) -> None:
        for name, value in (("sfx", self.sfx), ("vo", self.vo)):
            if not isinstance(value, bytes):
                raise TypeError(f"{name} header must be bytes, got {type(value).__name__}")
            if not value:
                raise ValueError(f"{name} header must not be empty")

    @property
    def sfx_size(self) -> int:
        return len(self.sfx)

    @property
    def vo_size(self) -> int:
        return len(self.vo)

    @property
    def max_size(self) -> int:
        return max(self.sfx_size, self.vo_size)

    def header_bytes(self, fmt: AudioFormat) -> Optional[bytes]:
        """Return the header for ``fmt``, or ``None`` for ``AudioFormat.NONE``."""

        if fmt is AudioFormat.SFX:
            return self.sfx
        if fmt is AudioFormat.VO:
            return self.vo
        return None

    def header_size(self, fmt: AudioFormat) -> int:
        """Return the header length for ``fmt``.

        ``AudioFormat.NONE`` yields the largest known header size, which is the
        number of bytes a probe has to read to test every format.
        """

        if fmt is AudioFormat.SFX:
            return self.sfx_size
        if fmt is AudioFormat.VO:
            return self.vo_size
        return self.max_size

    @classmethod
    def from_config(cls, headers: Optional[Mapping[str, Any]]) -> "HeaderRegistry":
        """Build a registry from the ``headers`` config section.

        Values are hex strings (whitespace ignored). Missing keys keep the
        built-in bytes.
        """

        if not headers:
            return cls()
        if not isinstance(headers, Mapping):
            raise ConfigError("headers must be a mapping of format name to hex string")

        overrides: Dict[str, bytes] = {}
        for key in ("sfx", "vo"):
            raw = headers.get(key)
            if raw is None:
                continue
            try:
                value = bytes.fromhex("".join(str(raw).split()))
            except ValueError as exc:
                raise ConfigError(f"headers.{key} is not valid hex: {exc}") from exc
            if not value:
                raise ConfigError(f"headers.{key} must not be empty")
            overrides[key] = value

        unknown = set(headers) - {"sfx", "vo"}
        if unknown:
            raise ConfigError(f"Unknown header formats in config: {', '.join(sorted(unknown))}")

        return cls(**overrides)


DEFAULT_REGISTRY = HeaderRegistry()
