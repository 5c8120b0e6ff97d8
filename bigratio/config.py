"""Settings for the command line, read from TOML parameter files."""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .rational import DEFAULT_MAX_ITERATIONS, DEFAULT_PRECISION

DEFAULT_TERMS = 5000


@dataclass(frozen=True)
class Settings:
    precision: int = DEFAULT_PRECISION
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_denominator: Optional[int] = None
    terms: int = DEFAULT_TERMS

    def __post_init__(self) -> None:
        for name in ("precision", "max_iterations", "terms"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.precision < 0:
            raise ValueError("precision must be >= 0")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.terms < 0:
            raise ValueError("terms must be >= 0")
        if self.max_denominator is not None:
            if not isinstance(self.max_denominator, int) or isinstance(self.max_denominator, bool):
                raise ValueError(
                    f"max_denominator must be an integer, got {self.max_denominator!r}"
                )
            if self.max_denominator < 1:
                raise ValueError("max_denominator must be >= 1")

    def merged(self, **overrides: Any) -> "Settings":
        """Return a copy with every override that is not ``None`` applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def settings_from_mapping(params: Dict[str, Any]) -> Settings:
    known = {field.name for field in fields(Settings)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")
    return Settings(**params)


def load_settings(path: str | Path) -> Settings:
    """Read :class:`Settings` from the TOML parameter file at *path*."""
    parfile = Path(path).expanduser()
    if not parfile.exists():
        raise FileNotFoundError(f"Parfile not found: {parfile}")
    with parfile.open("rb") as f:
        params = tomllib.load(f)
    return settings_from_mapping(params)


__all__ = ["Settings", "DEFAULT_TERMS", "load_settings", "settings_from_mapping"]
