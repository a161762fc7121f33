"""Parameter handling utilities for codec configuration merging."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .constants import COMMIT_AUTO, COMMIT_MODES
from .errors import ConfigError
from .headers import HeaderRegistry
from .tempfiles import DEFAULT_TEMP_NAME_LENGTH


@dataclass
class CodecParams:
    """Normalized codec parameters shared by the CLI and batch runs."""

    temp_dir: Optional[Path] = None
    temp_name_length: int = DEFAULT_TEMP_NAME_LENGTH
    seed: Optional[int] = None
    commit_mode: str = COMMIT_AUTO
    strict_headers: bool = False
    headers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temp_dir": str(self.temp_dir) if self.temp_dir is not None else None,
            "temp_name_length": int(self.temp_name_length),
            "seed": self.seed,
            "commit_mode": self.commit_mode,
            "strict_headers": bool(self.strict_headers),
            "headers": dict(self.headers),
        }

    def registry(self) -> HeaderRegistry:
        return HeaderRegistry.from_config(self.headers)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CodecParams":
        temp_dir = config.get("temp_dir")
        seed = config.get("seed")
        commit_mode = str(config.get("commit_mode") or COMMIT_AUTO).lower()
        if commit_mode not in COMMIT_MODES:
            raise ConfigError(f"commit_mode must be one of {', '.join(COMMIT_MODES)}, got {commit_mode!r}")
        headers = config.get("headers") or {}
        if not isinstance(headers, dict):
            raise ConfigError("headers must be a mapping of format name to hex string")
        try:
            length = int(config.get("temp_name_length", DEFAULT_TEMP_NAME_LENGTH))
            seed_value = int(seed) if seed is not None else None
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric config value: {exc}") from exc
        if length < 1:
            raise ConfigError("temp_name_length must be positive")
        strict_headers = config.get("strict_headers", False)
        if not isinstance(strict_headers, bool):
            raise ConfigError(f"strict_headers must be true or false, got {strict_headers!r}")
        return cls(
            temp_dir=Path(temp_dir) if temp_dir else None,
            temp_name_length=length,
            seed=seed_value,
            commit_mode=commit_mode,
            strict_headers=strict_headers,
            headers={str(k): str(v) for k, v in headers.items()},
        )


def merge_params(
    default_params: CodecParams,
    config_params: Optional[CodecParams],
    cli_overrides: Dict[str, Any],
) -> Tuple[CodecParams, Dict[str, str]]:
    """Merge params with precedence cli > config > default, tracking sources.

    ``None`` values in ``cli_overrides`` mean "not given on the command line".
    """

    merged = CodecParams()
    sources: Dict[str, str] = {}
    for field_name in merged.to_dict().keys():
        default_value = getattr(default_params, field_name)
        cli_value = cli_overrides.get(field_name)
        if cli_value is not None:
            value = cli_value
            source = "cli"
        elif config_params is not None and getattr(config_params, field_name) != default_value:
            value = getattr(config_params, field_name)
            source = "config"
        else:
            value = default_value
            source = "default"
        setattr(merged, field_name, value)
        sources[field_name] = source

    if merged.commit_mode not in COMMIT_MODES:
        raise ConfigError(f"commit_mode must be one of {', '.join(COMMIT_MODES)}, got {merged.commit_mode!r}")
    if merged.temp_dir is not None:
        merged.temp_dir = Path(merged.temp_dir)
    return merged, sources
