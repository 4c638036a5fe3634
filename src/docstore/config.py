"""Configuration for docstore."""

from __future__ import annotations

import os
from dataclasses import dataclass

from docstore.errors import ConfigError

JOURNAL_MODES = frozenset({"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"})
SYNCHRONOUS_MODES = frozenset({"OFF", "NORMAL", "FULL", "EXTRA"})


@dataclass
class DocstoreConfig:
    """Connection and runtime settings for a document store."""

    journal_mode: str = "WAL"
    synchronous: str = "NORMAL"
    timeout_s: float = 5.0
    log_level: str = "WARNING"

    def validate(self) -> DocstoreConfig:
        # Pragma values are interpolated into SQL, so they must come from a fixed set.
        if self.journal_mode.upper() not in JOURNAL_MODES:
            raise ConfigError(
                f"Unknown journal_mode '{self.journal_mode}'. "
                f"Valid modes: {', '.join(sorted(JOURNAL_MODES))}"
            )
        if self.synchronous.upper() not in SYNCHRONOUS_MODES:
            raise ConfigError(
                f"Unknown synchronous mode '{self.synchronous}'. "
                f"Valid modes: {', '.join(sorted(SYNCHRONOUS_MODES))}"
            )
        if self.timeout_s < 0:
            raise ConfigError(f"timeout_s must be >= 0, got {self.timeout_s}")
        return self

    @classmethod
    def from_env(cls) -> DocstoreConfig:
        """Build a config from DOCSTORE_* environment variables."""
        defaults = cls()
        raw_timeout = os.getenv("DOCSTORE_TIMEOUT_S")
        try:
            timeout_s = float(raw_timeout) if raw_timeout is not None else defaults.timeout_s
        except ValueError:
            raise ConfigError(f"DOCSTORE_TIMEOUT_S must be a number, got '{raw_timeout}'")
        return cls(
            journal_mode=os.getenv("DOCSTORE_JOURNAL_MODE", defaults.journal_mode),
            synchronous=os.getenv("DOCSTORE_SYNCHRONOUS", defaults.synchronous),
            timeout_s=timeout_s,
            log_level=os.getenv("DOCSTORE_LOG_LEVEL", defaults.log_level),
        ).validate()
