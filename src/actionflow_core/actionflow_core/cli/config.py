# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Central ActionFlow configuration.

All values have sensible defaults and can be overridden via environment variables
using the ``ACTIONFLOW_`` prefix:

  ACTIONFLOW_LOG_LEVEL             Log level (default: WARNING)
  ACTIONFLOW_LOG_FILE              Also log to this file, rotated (optional)
  ACTIONFLOW_MAX_LOG_FILE_BYTES    Max bytes per log file (optional)
  ACTIONFLOW_LOG_BACKUP_COUNT      Log rotation backup count (optional)
  ACTIONFLOW_OUTPUT_FORMAT         Default ``validate`` output: text or table
                                    (default: text)
  ACTIONFLOW_WARNINGS_AS_ERRORS    Fail ``validate`` on warnings (default: false)
  ACTIONFLOW_WORKFLOW_EXTENSIONS   Comma-separated extensions picked up when a
                                    directory is validated (default: .yml,.yaml)
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"})
_VALID_OUTPUT_FORMATS = frozenset({"text", "table"})


class ActionFlowConfig(BaseSettings):
    """Central ActionFlow configuration.

    Instantiate with ``ActionFlowConfig()`` to read defaults and any
    ``ACTIONFLOW_*`` environment variable overrides automatically.
    """

    model_config = SettingsConfigDict(env_prefix="ACTIONFLOW_")

    # ── Logging configuration ──────────────────────────────────────────────
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    max_log_file_bytes: Optional[int] = None
    log_backup_count: Optional[int] = None

    # ── Validation defaults ────────────────────────────────────────────────
    output_format: str = "text"
    warnings_as_errors: bool = False
    workflow_extensions: str = ".yml,.yaml"

    # ── Validators ─────────────────────────────────────────────────────────

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level={v!r} is not a valid log level. "
                f"Valid values: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return v.upper()

    @field_validator("max_log_file_bytes", "log_backup_count")
    @classmethod
    def _non_negative(cls, v: Optional[int], info) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"{info.field_name}={v} must be >= 0")
        return v

    @field_validator("output_format")
    @classmethod
    def _valid_output_format(cls, v: str) -> str:
        if v.lower() not in _VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"output_format={v!r} is not supported. "
                f"Valid values: {', '.join(sorted(_VALID_OUTPUT_FORMATS))}"
            )
        return v.lower()

    @field_validator("workflow_extensions")
    @classmethod
    def _valid_extensions(cls, v: str) -> str:
        parts = [p.strip() for p in v.split(",") if p.strip()]
        if not parts:
            raise ValueError("workflow_extensions must list at least one extension")
        for part in parts:
            if not part.startswith("."):
                raise ValueError(f"workflow_extensions entry {part!r} must start with '.'")
        return ",".join(parts)

    @property
    def extensions(self) -> Tuple[str, ...]:
        return tuple(self.workflow_extensions.split(","))


# ── Module-level singleton ─────────────────────────────────────────────────────

_config: Optional[ActionFlowConfig] = None


def get_config() -> ActionFlowConfig:
    """Return the process-wide config singleton.

    Creates a fresh ``ActionFlowConfig`` on first call (reading env vars).
    Subsequent calls return the cached instance.
    """
    global _config
    if _config is None:
        _config = ActionFlowConfig()
    return _config


def load_and_validate_config() -> ActionFlowConfig:
    """Build, validate, cache and return the config.

    Raises ``pydantic.ValidationError`` with a clear message if any value is
    invalid. Call this once at CLI startup to surface config errors before any
    workflow file is read.
    """
    global _config
    cfg = ActionFlowConfig()
    _config = cfg
    return cfg
