"""Format detection: priority, short input and stream position."""
from __future__ import annotations

import io
from pathlib import Path

import pytest

from sith_codec.detect import detect_format, detect_path
from sith_codec.errors import EndOfStreamError, OpenError
from sith_codec.headers import SFX_HEADER, VO_HEADER, AudioFormat, HeaderRegistry
from tests.conftest import FIXTURE_SFX, FIXTURE_VO


class _BrokenStream(io.BytesIO):
    def read(self, size=-1):
        raise OSError("device error")


def test_detects_sfx(registry: HeaderRegistry) -> None:
    assert detect_format(io.BytesIO(FIXTURE_SFX + b"payload"), registry) is AudioFormat.SFX


def test_detects_vo(registry: HeaderRegistry) -> None:
    assert detect_format(io.BytesIO(FIXTURE_VO + b"\x00" * 40), registry) is AudioFormat.VO


def test_sfx_header_alone_is_enough(registry: HeaderRegistry) -> None:
    # shorter than the VO header, still a complete SFX header
    assert detect_format(io.BytesIO(FIXTURE_SFX), registry) is AudioFormat.SFX


@pytest.mark.parametrize(
    "data",
    [
        b"",
        FIXTURE_SFX[:3],
        FIXTURE_VO[:-1],
        b"ID3\x03\x00\x00\x00\x00\x00\x00\x00\x00\x00",
        b"\xff\xf3\x60\xc5rest",
    ],
)
def test_no_match_returns_none(registry: HeaderRegistry, data: bytes) -> None:
    assert detect_format(io.BytesIO(data), registry) is AudioFormat.NONE


def test_position_is_restored(registry: HeaderRegistry) -> None:
    stream = io.BytesIO(FIXTURE_VO + b"abcdefgh")
    stream.seek(15)
    assert detect_format(stream, registry) is AudioFormat.VO
    assert stream.tell() == 15
    assert stream.read() == b"defgh"


def test_probe_reads_from_start_regardless_of_position(registry: HeaderRegistry) -> None:
    stream = io.BytesIO(FIXTURE_SFX + b"123")
    stream.seek(0, io.SEEK_END)
    assert detect_format(stream, registry) is AudioFormat.SFX
    assert stream.tell() == len(FIXTURE_SFX) + 3


def test_sfx_wins_when_both_headers_match() -> None:
    overlapping = HeaderRegistry(sfx=b"AB", vo=b"ABCD")
    assert detect_format(io.BytesIO(b"ABCDxyz"), overlapping) is AudioFormat.SFX


def test_vo_checked_when_sfx_does_not_match() -> None:
    overlapping = HeaderRegistry(sfx=b"ABX", vo=b"ABCD")
    assert detect_format(io.BytesIO(b"ABCDxyz"), overlapping) is AudioFormat.VO


def test_unreadable_stream_falls_through_to_none(registry: HeaderRegistry) -> None:
    assert detect_format(_BrokenStream(b"data"), registry) is AudioFormat.NONE


def test_strict_mode_raises_on_truncated_header(registry: HeaderRegistry) -> None:
    with pytest.raises(EndOfStreamError) as excinfo:
        detect_format(io.BytesIO(FIXTURE_VO[:-2]), registry, strict=True)
    assert excinfo.value.code == "end_of_stream"
    assert "<stream>" in excinfo.value.message


def test_strict_mode_accepts_complete_sfx_shorter_than_vo(registry: HeaderRegistry) -> None:
    assert detect_format(io.BytesIO(FIXTURE_SFX), registry, strict=True) is AudioFormat.SFX


def test_strict_mode_accepts_vo_file_shorter_than_sfx_header() -> None:
    # built-in headers: the VO header is much shorter than the SFX one
    stream = io.BytesIO(VO_HEADER + b"\xff\xfb" * 20)
    assert len(stream.getvalue()) < len(SFX_HEADER)
    assert detect_format(stream, HeaderRegistry(), strict=True) is AudioFormat.VO


def test_strict_mode_full_length_without_match_is_none(registry: HeaderRegistry) -> None:
    assert detect_format(io.BytesIO(b"x" * 64), registry, strict=True) is AudioFormat.NONE


def test_detect_path(tmp_path: Path, registry: HeaderRegistry) -> None:
    path = tmp_path / "line.wav"
    path.write_bytes(FIXTURE_VO + b"mp3")
    assert detect_path(path, registry) is AudioFormat.VO


def test_detect_path_missing_file(tmp_path: Path, registry: HeaderRegistry) -> None:
    with pytest.raises(OpenError):
        detect_path(tmp_path / "missing.wav", registry)
