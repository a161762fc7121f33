"""Pytest fixtures and helpers for SithCodec tests."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from sith_codec.constants import COMMIT_DELETE_RENAME
from sith_codec.headers import HeaderRegistry
from sith_codec.tempfiles import TempPathGenerator
from sith_codec.transcode import Transcoder

# Small stand-in headers keep fixtures readable; real headers are much longer.
FIXTURE_SFX = b"\xff\xf3\x60\xc4"
FIXTURE_VO = b"RIFF\x32\x00\x00\x00WAVE"


@pytest.fixture(autouse=True)
def _reset_codec_logging():
    """Drop handlers bound to streams that CliRunner closes after each invoke."""
    yield
    logger = logging.getLogger("sith_codec")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


@pytest.fixture
def registry() -> HeaderRegistry:
    """Registry with a 4-byte SFX header and a 12-byte VO header."""
    return HeaderRegistry(sfx=FIXTURE_SFX, vo=FIXTURE_VO)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "codec-tmp"
    path.mkdir()
    return path


@pytest.fixture
def transcoder(registry: HeaderRegistry, temp_dir: Path) -> Transcoder:
    return Transcoder(registry=registry, temp_paths=TempPathGenerator(temp_dir=temp_dir, seed=1234))


@pytest.fixture
def two_step_transcoder(registry: HeaderRegistry, temp_dir: Path) -> Transcoder:
    """Transcoder using the delete-then-rename commit."""
    return Transcoder(
        registry=registry,
        temp_paths=TempPathGenerator(temp_dir=temp_dir, seed=99),
        commit_mode=COMMIT_DELETE_RENAME,
    )


def write_bytes(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def snapshot(root: Path) -> dict:
    """Map relative path -> bytes (or None for directories) for everything under root."""
    result = {}
    for entry in sorted(root.rglob("*")):
        key = entry.relative_to(root).as_posix()
        result[key] = None if entry.is_dir() else entry.read_bytes()
    return result
