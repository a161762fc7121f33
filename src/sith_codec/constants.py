"""Constants and path conventions for SithCodec."""
from __future__ import annotations

from pathlib import Path

WAV_EXTENSION = ".wav"
MP3_EXTENSION = ".mp3"

DEFAULT_MANIFEST_NAME = "manifest.jsonl"
MANIFEST_SCHEMA_VERSION = "manifest.v1"

PACKAGE_DIR = Path(__file__).parent
SCHEMAS_DIR = PACKAGE_DIR / "schemas"
MANIFEST_SCHEMA_PATH = SCHEMAS_DIR / "manifest.schema.json"

# Commit strategies for moving a finished temp file onto its destination
COMMIT_AUTO = "auto"
COMMIT_REPLACE = "replace"
COMMIT_DELETE_RENAME = "delete_rename"
COMMIT_MODES = (COMMIT_AUTO, COMMIT_REPLACE, COMMIT_DELETE_RENAME)

# Report formatting shared by the CLI and listing helpers
INDENT_LEVEL_1 = "  "
INDENT_LEVEL_2 = "    "
SUCCESS_MSG = "done!"
FAIL_MSG = "failed!"
