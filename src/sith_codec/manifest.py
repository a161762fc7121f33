"""JSON-lines manifest of batch results."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jsonschema import Draft202012Validator

from .batch import FileOperation
from .constants import MANIFEST_SCHEMA_PATH, MANIFEST_SCHEMA_VERSION
from .headers import AudioFormat

_VALIDATOR: Optional[Draft202012Validator] = None


def _validator() -> Draft202012Validator:
    global _VALIDATOR
    if _VALIDATOR is None:
        with MANIFEST_SCHEMA_PATH.open("r", encoding="utf-8") as f:
            _VALIDATOR = Draft202012Validator(json.load(f))
    return _VALIDATOR


def build_record(op: FileOperation, action: str, fmt: Optional[AudioFormat] = None) -> Dict[str, Any]:
    return {
        "schema_version": MANIFEST_SCHEMA_VERSION,
        "action": action,
        "format": fmt.display_name if fmt is not None else None,
        "status": op.status,
        "input": str(op.path),
        "output": str(op.destination) if op.destination is not None else None,
        "error_code": op.error_code,
        "error_message": op.error[:200] if op.error is not None else None,
    }


def validate_record(record: Dict[str, Any]) -> Tuple[bool, List[str]]:
    errors = [error.message for error in _validator().iter_errors(record)]
    return len(errors) == 0, errors


def write_manifest(
    operations: Iterable[FileOperation],
    path: Path,
    action: str,
    fmt: Optional[AudioFormat] = None,
) -> int:
    """Write one validated record per operation; return the number of lines.

    Raises
    ------
    ValueError
        If a record does not match the manifest schema.
    """

    records = []
    for op in operations:
        record = build_record(op, action, fmt)
        ok, errors = validate_record(record)
        if not ok:
            raise ValueError(f"Invalid manifest record for {op.path}: {'; '.join(errors)}")
        records.append(record)

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False, sort_keys=True) + "\n")
    return len(records)
