"""Header stripping (decode) and prepending (encode) for KotOR audio files."""
from __future__ import annotations

import errno
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .constants import COMMIT_AUTO, COMMIT_DELETE_RENAME, COMMIT_MODES, COMMIT_REPLACE, MP3_EXTENSION, WAV_EXTENSION
from .detect import detect_format
from .errors import CodecError, DeleteError, InvalidFormatError, OpenError, WriteError
from .headers import DEFAULT_REGISTRY, AudioFormat, HeaderRegistry
from .logging_utils import get_logger
from .params import CodecParams
from .tempfiles import TempPathGenerator

logger = get_logger(__name__)

PathArg = Union[str, Path]


def encode_extension(fmt: AudioFormat) -> str:
    """Encoded files are always written as ``.wav``, whatever the container."""

    return WAV_EXTENSION


def decode_extension(fmt: AudioFormat) -> str:
    return MP3_EXTENSION if fmt is AudioFormat.VO else WAV_EXTENSION


def resolve_destination(input_path: PathArg, output_path: Optional[PathArg], extension: str) -> Path:
    """Work out where an operation on ``input_path`` should land.

    No output path means "next to the input" (overwriting it when the
    extension already matches). An existing directory receives the input's
    file name. Anything else is used verbatim. The extension is replaced in
    every case.
    """

    input_path = Path(input_path)
    if output_path is None or str(output_path) == "":
        destination = input_path
    else:
        output_path = Path(output_path)
        destination = output_path / input_path.name if output_path.is_dir() else output_path
    return destination.with_suffix(extension)


def _resolve_commit_mode(mode: str) -> str:
    if mode not in COMMIT_MODES:
        raise ValueError(f"Unknown commit mode: {mode!r}")
    if mode != COMMIT_AUTO:
        return mode
    # os.replace is an atomic rename(2) on POSIX
    return COMMIT_REPLACE if os.name == "posix" else COMMIT_DELETE_RENAME


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temp file %s: %s", path, exc)


class Transcoder:
    """Encode and decode single files through a temp file and a final commit."""

    def __init__(
        self,
        registry: Optional[HeaderRegistry] = None,
        temp_paths: Optional[TempPathGenerator] = None,
        commit_mode: str = COMMIT_AUTO,
        strict: bool = False,
    ) -> None:
        self.registry = registry or DEFAULT_REGISTRY
        self.temp_paths = temp_paths or TempPathGenerator()
        self.commit_mode = _resolve_commit_mode(commit_mode)
        self.strict = strict

    @classmethod
    def from_params(cls, params: CodecParams) -> "Transcoder":
        temp_paths = TempPathGenerator(
            temp_dir=params.temp_dir,
            seed=params.seed,
            length=params.temp_name_length,
        )
        return cls(
            registry=params.registry(),
            temp_paths=temp_paths,
            commit_mode=params.commit_mode,
            strict=params.strict_headers,
        )

    def detect(self, input_path: PathArg) -> AudioFormat:
        with self._open_input(Path(input_path)) as source:
            return detect_format(source, self.registry, strict=self.strict)

    def decode(self, input_path: PathArg, output_path: Optional[PathArg] = None) -> Optional[Path]:
        """Strip a known header from ``input_path``.

        Files without a recognized header are left alone: nothing is written
        and ``None`` is returned. Otherwise the committed destination is
        returned, with ``.mp3`` for VO and ``.wav`` for SFX.

        Raises
        ------
        OpenError, WriteError, DeleteError, EndOfStreamError
        """

        input_path = Path(input_path)
        with self._open_input(input_path) as source:
            fmt = detect_format(source, self.registry, strict=self.strict)
            if fmt is AudioFormat.NONE:
                logger.info("No known header in %s; skipping", input_path)
                return None
            source.seek(self.registry.header_size(fmt))
            temp_path = self._copy_to_temp(source, b"")

        destination = resolve_destination(input_path, output_path, decode_extension(fmt))
        self._commit(temp_path, destination)
        logger.info("Decoded %s (%s) -> %s", input_path, fmt.display_name, destination)
        return destination

    def encode(self, input_path: PathArg, fmt: AudioFormat, output_path: Optional[PathArg] = None) -> Path:
        """Prepend the ``fmt`` header to the whole of ``input_path``.

        Raises
        ------
        InvalidFormatError
            ``fmt`` is ``AudioFormat.NONE``; raised before any file is opened.
        OpenError, WriteError, DeleteError
        """

        header = self.registry.header_bytes(fmt)
        if header is None:
            raise InvalidFormatError()

        input_path = Path(input_path)
        with self._open_input(input_path) as source:
            temp_path = self._copy_to_temp(source, header)

        destination = resolve_destination(input_path, output_path, encode_extension(fmt))
        self._commit(temp_path, destination)
        logger.info("Encoded %s as %s -> %s", input_path, fmt.display_name, destination)
        return destination

    def _open_input(self, path: Path) -> BinaryIO:
        try:
            return path.open("rb")
        except OSError as exc:
            logger.debug("Open failed for %s: %s", path, exc)
            raise OpenError(path) from exc

    def _copy_to_temp(self, source: BinaryIO, prefix: bytes) -> Path:
        temp_path = self.temp_paths.next_path()
        created = False
        try:
            with temp_path.open("xb") as sink:
                created = True
                if prefix:
                    sink.write(prefix)
                shutil.copyfileobj(source, sink)
        except OSError as exc:
            logger.debug("Writing temp file %s failed: %s", temp_path, exc)
            if created:
                _discard(temp_path)
            raise WriteError(temp_path) from exc
        logger.debug("Wrote temp file %s", temp_path)
        return temp_path

    def _commit(self, temp_path: Path, destination: Path) -> None:
        try:
            if self.commit_mode == COMMIT_DELETE_RENAME and (destination.exists() or destination.is_symlink()):
                try:
                    destination.unlink()
                except OSError as exc:
                    logger.debug("Delete failed for %s: %s", destination, exc)
                    raise DeleteError(destination) from exc
            else:
                self._ensure_parent(destination)
            self._move(temp_path, destination)
        except CodecError:
            _discard(temp_path)
            raise

    def _ensure_parent(self, destination: Path) -> None:
        parent = destination.parent
        if str(parent) in ("", "."):
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("Creating %s failed: %s", parent, exc)
            raise WriteError(parent) from exc

    def _move(self, temp_path: Path, destination: Path) -> None:
        try:
            os.replace(temp_path, destination)
            return
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                logger.debug("Rename %s -> %s failed: %s", temp_path, destination, exc)
                raise WriteError(destination) from exc

        logger.warning(
            "Temp dir %s is on another volume than %s; falling back to a non-atomic copy",
            temp_path.parent,
            destination,
        )
        try:
            shutil.move(str(temp_path), str(destination))
        except OSError as exc:
            raise WriteError(destination) from exc
