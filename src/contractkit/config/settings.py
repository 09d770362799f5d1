"""Configuration settings using Pydantic Settings.

Provides typed composition configuration with environment variable support.

Usage:
    from contractkit.config import CompositionSettings

    # Load from environment variables (CONTRACTKIT_*)
    settings = CompositionSettings()

    # Or override with explicit values
    settings = CompositionSettings(strict=False, collision_policy="error")
"""

from __future__ import annotations

from typing import Literal

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for contractkit configuration. "
        "Install with: pip install contractkit"
    ) from e


class CompositionSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for contract composition.

    Attributes:
        strict: Raise CompositionError when a contract has error diagnostics.
            When False, errors are logged and the contract is still assembled
            from whatever bindings and exposures succeeded.
        collision_policy: How to report component member names that equal a
            host-native member name: "error", "warn" or "ignore".
        log_generated_source: Log generated wrapper source at DEBUG level.

    Environment Variables:
        CONTRACTKIT_STRICT
        CONTRACTKIT_COLLISION_POLICY
        CONTRACTKIT_LOG_GENERATED_SOURCE
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTRACTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strict: bool = True
    collision_policy: Literal["error", "warn", "ignore"] = "warn"
    log_generated_source: bool = False
