"""Runtime configuration for the storage backends."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

DEFAULT_MAX_DEPTH: Final[int] = 64
MAX_DEPTH_ENV: Final[str] = "DAPSERDE_MAX_DEPTH"


@dataclass(frozen=True, slots=True)
class SerdeConfig:
    """Settings shared by one encode or decode operation.

    max_depth bounds the nesting of arrays and structs a backend will visit;
    deeper nodes fail instead of recursing further.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SerdeConfig":
        """Build a config, honoring DAPSERDE_MAX_DEPTH when set."""
        env = os.environ if environ is None else environ
        raw = env.get(MAX_DEPTH_ENV, "").strip()
        if not raw:
            return cls()
        try:
            max_depth = int(raw)
        except ValueError:
            raise ValueError(f"{MAX_DEPTH_ENV} must be an integer, got {raw!r}") from None
        return cls(max_depth=max_depth)
