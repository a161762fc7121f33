"""Temporary output path generation."""
from __future__ import annotations

import random
import string
import tempfile
from pathlib import Path
from typing import Optional

TEMP_NAME_CHARS = string.ascii_letters + string.digits
DEFAULT_TEMP_NAME_LENGTH = 16


class TempPathGenerator:
    """Produce unused random file names inside a temp directory.

    The generator owns its own ``random.Random`` so that a fixed seed gives a
    reproducible sequence of names. Not suitable for anything security related.
    """

    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        seed: Optional[int] = None,
        length: int = DEFAULT_TEMP_NAME_LENGTH,
    ) -> None:
        if length < 1:
            raise ValueError("temp name length must be positive")
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        self.length = length
        self._rng = random.Random(seed)

    def random_name(self) -> str:
        return "".join(self._rng.choice(TEMP_NAME_CHARS) for _ in range(self.length))

    def next_path(self) -> Path:
        """Return a path in ``temp_dir`` that does not exist yet."""

        while True:
            candidate = self.temp_dir / self.random_name()
            if not candidate.exists():
                return candidate
