"""Configuration module using Pydantic Settings.

Provides typed configuration for composition with environment variable support.

Usage:
    from contractkit.config import CompositionSettings

    settings = CompositionSettings(strict=False)
"""

from contractkit.config.settings import CompositionSettings

__all__ = [
    "CompositionSettings",
]
