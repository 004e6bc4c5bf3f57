"""Loading of the optional ``ts.toml`` project configuration."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

MANIFEST_DIR_VAR = "CARGO_MANIFEST_DIR"


@dataclass(frozen=True)
class Config:
    """Project-wide export settings."""

    ambient_declarations: bool = False
    out_dir: str = "typescript"

    FILE_NAME: ClassVar[str] = "ts.toml"
    _instance: ClassVar[Config | None] = None

    @classmethod
    def get(cls) -> Config:
        """The configuration, loaded once and then shared."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def load(cls) -> Config:
        """Load the configuration from the manifest directory, or use defaults.

        Raises KeyError if the manifest directory variable is not set.
        """
        try:
            manifest_dir = os.environ[MANIFEST_DIR_VAR]
        except KeyError:
            raise KeyError(f"environment variable {MANIFEST_DIR_VAR} is not set") from None
        loaded = cls.try_load_from_dir(Path(manifest_dir))
        return loaded if loaded is not None else cls()

    @classmethod
    def try_load_from_dir(cls, directory: str | os.PathLike[str]) -> Config | None:
        """Read ``ts.toml`` from ``directory``; None if there is no such file."""
        path = Path(directory) / cls.FILE_NAME
        if not path.is_file():
            return None
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return cls(
            ambient_declarations=_field(data, "ambient_declarations", bool),
            out_dir=_field(data, "out_dir", str),
        )


def _field(data: dict, key: str, kind: type):
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"invalid type for `{key}`: expected {kind.__name__}")
    return value