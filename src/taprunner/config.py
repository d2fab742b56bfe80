"""Configuration management for TapRunner."""

import json
import os
import re
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

LEVEL_ENV = "HARNESS_TAP_LEVEL"
SEED_ENV = "TAP_TEST_RAND_ORDER"
LEAK_CHECK_ENV = "TAP_DEBUG_MEMORY"

DEFAULT_CAPACITY = 1024

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Optional[str]) -> int:
    """Parse the leading integer of a string, returning 0 when there is none."""
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def leak_check_requested(value: Optional[str]) -> bool:
    """Leak checking stays on unless the flag is explicitly "0" or empty."""
    return value is None or value not in ("0", "")


class RunnerConfig(BaseModel):
    """Main configuration for a test run."""

    harness_level: int = Field(default=0, description="Nesting level of the outer TAP harness")
    seed: Optional[int] = Field(
        default=None,
        description="Random order seed; None keeps registration order, <= 0 derives one from the clock",
    )
    leak_check: bool = Field(default=True, description="Arm the leak detector around the run")
    capacity: int = Field(default=DEFAULT_CAPACITY, description="Maximum number of registered tests")

    @field_validator("harness_level")
    @classmethod
    def validate_harness_level(cls, v: int) -> int:
        return max(v, 0)

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Capacity must be at least 1")
        return v

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["RunnerConfig"] = None,
    ) -> "RunnerConfig":
        """Build a configuration from the harness environment variables.

        Variables that are not set leave the corresponding value of ``base``
        (or the defaults) untouched.
        """
        if environ is None:
            environ = os.environ
        data = base.model_dump() if base is not None else {}

        if LEVEL_ENV in environ:
            data["harness_level"] = parse_int(environ[LEVEL_ENV])
        if SEED_ENV in environ:
            data["seed"] = parse_int(environ[SEED_ENV])
        if LEAK_CHECK_ENV in environ:
            data["leak_check"] = leak_check_requested(environ[LEAK_CHECK_ENV])

        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Path | str) -> "RunnerConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find(cls, start_dir: Path | str | None = None) -> Optional[Path]:
        """Find a configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        config_names = ["taprunner.json", ".taprunner.json"]

        current = start_dir.resolve()
        for directory in (current, *current.parents):
            for name in config_names:
                config_path = directory / name
                if config_path.exists():
                    return config_path
        return None

    def merged_with_env(self, environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        """Return a copy where environment variables override file values."""
        return RunnerConfig.from_env(environ, base=self)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config() -> RunnerConfig:
    """Return a default configuration."""
    return RunnerConfig()


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.to_file(output_path)
    return output_path
