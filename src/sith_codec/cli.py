"""Command-line interface for SithCodec."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import sys
from typing import Dict, List, Optional

import typer

from .batch import FileOperation, decode_all, encode_all, summarize
from .config import load_config, load_default_config
from .constants import COMMIT_MODES, DEFAULT_MANIFEST_NAME, FAIL_MSG, INDENT_LEVEL_1, INDENT_LEVEL_2, SUCCESS_MSG
from .errors import INVALID_FORMAT_MESSAGE, CodecError, ConfigError, ExitCode, WriteError
from .headers import AudioFormat
from .listing import print_formats, print_header_source
from .logging_utils import get_logger, setup_logging
from .manifest import write_manifest
from .params import CodecParams, merge_params
from .transcode import Transcoder

app = typer.Typer(
    help="SithCodec: convert KotOR / KotOR II streamsounds (SFX) and streamwaves (VO) audio files",
    no_args_is_help=True,
)
logger = get_logger(__name__)


@dataclass
class CliState:
    params: CodecParams
    sources: Dict[str, str] = field(default_factory=dict)

    def transcoder(self) -> Transcoder:
        return Transcoder.from_params(self.params)


def _fail(exc: CodecError) -> None:
    typer.echo(exc.message, err=True)
    raise typer.Exit(code=exc.exit_code)


def _state(ctx: typer.Context) -> CliState:
    # set by main_callback, which runs before every command
    return ctx.obj


def _build_state(config: Optional[str], cli_overrides: Dict[str, object]) -> CliState:
    try:
        default_params = CodecParams.from_config(load_default_config())
        config_params = CodecParams.from_config(load_config(Path(config))) if config else None
        params, sources = merge_params(default_params, config_params, cli_overrides)
        params.registry()
    except ConfigError as exc:
        typer.echo(f"Failed to load config: {exc.message}", err=True)
        raise typer.Exit(code=ExitCode.INVALID_CONFIG)
    return CliState(params=params, sources=sources)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", help="Path to a YAML config file"),
    temp_dir: Optional[str] = typer.Option(None, "--temp-dir", help="Directory for in-progress output files"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for temp file names"),
    commit_mode: Optional[str] = typer.Option(
        None, "--commit-mode", help=f"How outputs replace existing files: {', '.join(COMMIT_MODES)}"
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Treat inputs shorter than a header as errors"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write a debug log to this file"),
) -> None:
    """Shared options; they go before the command name."""

    setup_logging(verbose=verbose, log_file=Path(log_file) if log_file else None)
    overrides: Dict[str, object] = {
        "temp_dir": Path(temp_dir) if temp_dir else None,
        "seed": seed,
        "commit_mode": commit_mode.lower() if commit_mode else None,
        "strict_headers": strict,
    }
    state = _build_state(config, overrides)
    for key, source in state.sources.items():
        logger.debug("param %s=%r (source: %s)", key, getattr(state.params, key), source)
    ctx.obj = state


def _print_operation(op: FileOperation) -> None:
    if op.ok:
        typer.echo(f"{INDENT_LEVEL_1}{op.path} {SUCCESS_MSG}")
    else:
        typer.echo(f"{INDENT_LEVEL_1}{op.path} {FAIL_MSG}")
        typer.echo(f"{INDENT_LEVEL_2}{op.error}")


def _finish_batch(
    operations: List[FileOperation],
    action: str,
    manifest: Optional[str],
    fmt: Optional[AudioFormat] = None,
) -> None:
    for op in operations:
        _print_operation(op)

    if manifest:
        manifest_path = Path(manifest)
        if manifest_path.is_dir():
            manifest_path = manifest_path / DEFAULT_MANIFEST_NAME
        try:
            write_manifest(operations, manifest_path, action, fmt)
        except OSError as exc:
            logger.debug("Manifest write failed: %s", exc)
            _fail(WriteError(manifest_path))

    summary = summarize(operations)
    typer.echo(
        f"{action}: {summary.processed} processed, {summary.succeeded} done, "
        f"{summary.skipped} skipped, {summary.failed} failed"
    )
    if summary.failed:
        typer.echo("Finished with errors.", err=True)
    raise typer.Exit(code=summary.exit_code)


@app.command()
def decode(
    ctx: typer.Context,
    input_path: str = typer.Argument(..., help="Audio file, or with --all a directory / list file"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output file or directory"),
    all_files: bool = typer.Option(False, "--all", "-a", help="Decode every file under a directory or in a list"),
    manifest: Optional[str] = typer.Option(None, "--manifest", help="Write a JSON-lines batch manifest here"),
) -> None:
    """Strip SFX/VO headers (SFX -> .wav, VO -> .mp3). Files without one are left untouched."""

    transcoder = _state(ctx).transcoder()

    if all_files:
        try:
            operations = decode_all(transcoder, input_path, out)
        except CodecError as exc:
            _fail(exc)
        _finish_batch(operations, "decode", manifest)
        return

    try:
        destination = transcoder.decode(input_path, out)
    except CodecError as exc:
        _fail(exc)
    if destination is None:
        typer.echo(f"{input_path}: no known header, left unchanged")
    else:
        typer.echo(f"{input_path} -> {destination}")


@app.command()
def encode(
    ctx: typer.Context,
    input_path: str = typer.Argument(..., help="Audio file, or with --all a directory / list file"),
    format_token: str = typer.Option(..., "--format", "-f", help="Target format: sfx, vo or music"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Output file or directory"),
    all_files: bool = typer.Option(False, "--all", "-a", help="Encode every file under a directory or in a list"),
    manifest: Optional[str] = typer.Option(None, "--manifest", help="Write a JSON-lines batch manifest here"),
) -> None:
    """Prepend an SFX or VO header; output is always .wav."""

    fmt = AudioFormat.from_token(format_token)
    if fmt is AudioFormat.NONE:
        typer.echo(INVALID_FORMAT_MESSAGE, err=True)
        raise typer.Exit(code=ExitCode.INVALID_FORMAT)

    transcoder = _state(ctx).transcoder()

    if all_files:
        try:
            operations = encode_all(transcoder, input_path, fmt, out)
        except CodecError as exc:
            _fail(exc)
        _finish_batch(operations, "encode", manifest, fmt)
        return

    try:
        destination = transcoder.encode(input_path, fmt, out)
    except CodecError as exc:
        _fail(exc)
    typer.echo(f"{input_path} -> {destination}")


@app.command("list")
def list_command(
    ctx: typer.Context,
    input_dir: Optional[str] = typer.Argument(None, help="Directory to scan (default: current directory)"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Write the listing to this file"),
) -> None:
    """List every file under a directory with its detected format."""

    registry = _state(ctx).params.registry()

    if out is None:
        try:
            print_formats(input_dir, sys.stdout, registry)
        except CodecError as exc:
            _fail(exc)
        return

    out_path = Path(out)
    try:
        handle = out_path.open("w", encoding="utf-8", newline="\n")
    except OSError:
        _fail(WriteError(out_path))
    with handle:
        try:
            print_formats(input_dir, handle, registry)
        except CodecError as exc:
            _fail(exc)


@app.command("header-source")
def header_source(
    ctx: typer.Context,
    input_path: str = typer.Argument(..., help="File whose header bytes should be printed"),
) -> None:
    """Print the header bytes of a file, one hex literal per line."""

    try:
        print_header_source(input_path, sys.stdout, _state(ctx).params.registry())
    except CodecError as exc:
        _fail(exc)


def main(argv: Optional[list[str]] = None) -> int:
    """Entrypoint for console script."""

    argv = argv if argv is not None else sys.argv[1:]
    app(prog_name="sith-codec", args=list(argv))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
