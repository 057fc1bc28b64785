"""Runtime settings for pymemmap."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from pymemmap.ranking import DEFAULT_COUNTER

DEFAULT_PROC_ROOT = "/proc"
DEFAULT_TOP_N = 10

ENV_PROC_ROOT = "PYMEMMAP_PROC_ROOT"
ENV_COUNTER = "PYMEMMAP_COUNTER"
ENV_TOP = "PYMEMMAP_TOP"


@dataclass(slots=True, frozen=True)
class Settings:
    """Settings shared by the report and the TUI."""

    proc_root: str = DEFAULT_PROC_ROOT
    counter: str = DEFAULT_COUNTER
    top_n: int = DEFAULT_TOP_N
    detailed: bool = True  # smaps rather than maps

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from PYMEMMAP_* environment variables.

        Unset or empty variables keep their defaults.

        Raises:
            ValueError: PYMEMMAP_TOP is not a non-negative integer.
        """
        if environ is None:
            environ = os.environ

        top_text = environ.get(ENV_TOP) or str(DEFAULT_TOP_N)
        try:
            top_n = int(top_text)
        except ValueError:
            raise ValueError(f"{ENV_TOP} must be an integer, got {top_text!r}") from None
        if top_n < 0:
            raise ValueError(f"{ENV_TOP} must not be negative, got {top_n}")

        return cls(
            proc_root=environ.get(ENV_PROC_ROOT) or DEFAULT_PROC_ROOT,
            counter=environ.get(ENV_COUNTER) or DEFAULT_COUNTER,
            top_n=top_n,
        )
