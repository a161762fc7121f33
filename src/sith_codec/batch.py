"""Batch encode/decode over directories and path lists."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import CodecError, ErrorCode, ExitCode, InvalidFormatError, OpenError, determine_exit_code_from_errors
from .headers import AudioFormat
from .logging_utils import get_logger
from .scan import read_path_list, scan_files
from .transcode import Transcoder

logger = get_logger(__name__)

PathArg = Union[str, Path]

STATUS_SUCCESS = "success"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass
class FileOperation:
    """One unit of batch work: an input path and, once run, its outcome."""

    path: Path
    error: Optional[str] = None
    error_code: Optional[str] = None
    destination: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        if self.error is not None:
            return STATUS_FAILED
        if self.destination is None:
            return STATUS_SKIPPED
        return STATUS_SUCCESS

    def fail(self, code: str, message: str) -> None:
        self.error_code = code
        self.error = message


@dataclass
class BatchSummary:
    processed: int
    succeeded: int
    skipped: int
    failed: int
    exit_code: int


def load_operations(path: PathArg) -> List[FileOperation]:
    """Build operations from a directory (recursive walk) or a list file."""

    path = Path(path)
    if path.is_dir():
        return load_operations_from_folder(path)
    return load_operations_from_file(path)


def load_operations_from_folder(path: Path) -> List[FileOperation]:
    return [FileOperation(path=entry) for entry in scan_files(path)]


def load_operations_from_file(path: Path) -> List[FileOperation]:
    return [FileOperation(path=entry) for entry in read_path_list(path)]


def relative_path(path: Path, directory: Path) -> Path:
    """Return ``path`` relative to ``directory``.

    Falls back to the bare file name when ``path`` does not live under
    ``directory``.
    """

    try:
        relative = path.resolve().relative_to(directory.resolve())
    except (ValueError, OSError):
        return Path(path.name)
    if str(relative) in ("", "."):
        return Path(path.name)
    return relative


def _prepare_output_dir(output_path: Optional[PathArg]) -> Optional[Path]:
    if output_path is None or str(output_path) == "":
        return None
    output_dir = Path(output_path)
    if not output_dir.exists():
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OpenError(output_dir) from exc
    if not output_dir.is_dir():
        raise OpenError(output_dir)
    return output_dir


def _run_all(
    input_path: PathArg,
    output_path: Optional[PathArg],
    action: Callable[[Path, Optional[Path]], Optional[Path]],
) -> List[FileOperation]:
    input_path = Path(input_path)
    if not input_path.exists():
        raise OpenError(input_path)

    root = input_path if input_path.is_dir() else input_path.parent
    operations = load_operations(input_path)
    logger.info("Loaded %d entries from %s", len(operations), input_path)
    output_dir = _prepare_output_dir(output_path)

    for op in operations:
        target = output_dir / relative_path(op.path, root) if output_dir is not None else None
        try:
            op.destination = action(op.path, target)
        except CodecError as exc:
            logger.warning("%s: %s", op.path, exc.message)
            op.fail(exc.code, exc.message)
        except Exception as exc:  # any failure stays on its own entry
            logger.exception("Unhandled error while processing %s", op.path)
            op.fail(ErrorCode.INTERNAL_ERROR, f"Unhandled error: {exc}")

    return operations


def encode_all(
    transcoder: Transcoder,
    input_path: PathArg,
    fmt: AudioFormat,
    output_path: Optional[PathArg] = None,
) -> List[FileOperation]:
    """Encode every file under a directory, or every path listed in a file.

    Raises
    ------
    InvalidFormatError
        ``fmt`` is ``AudioFormat.NONE``; nothing is loaded or written.
    OpenError
        The input does not exist, the list file is unreadable, or the output
        is not a directory.
    """

    if fmt is AudioFormat.NONE:
        raise InvalidFormatError()
    return _run_all(input_path, output_path, lambda path, target: transcoder.encode(path, fmt, target))


def decode_all(
    transcoder: Transcoder,
    input_path: PathArg,
    output_path: Optional[PathArg] = None,
) -> List[FileOperation]:
    """Decode every file under a directory, or every path listed in a file.

    Entries without a known header end up with status ``skipped``.
    """

    return _run_all(input_path, output_path, transcoder.decode)


def summarize(operations: List[FileOperation]) -> BatchSummary:
    failed_codes = [op.error_code or ErrorCode.INTERNAL_ERROR for op in operations if not op.ok]
    skipped = sum(1 for op in operations if op.status == STATUS_SKIPPED)
    failed = len(failed_codes)
    exit_code = determine_exit_code_from_errors(failed_codes)
    if exit_code != ExitCode.SUCCESS:
        logger.info("%d of %d entries failed", failed, len(operations))
    return BatchSummary(
        processed=len(operations),
        succeeded=len(operations) - failed - skipped,
        skipped=skipped,
        failed=failed,
        exit_code=exit_code,
    )
