"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .pipeline import PipelineConfig, get_pipeline_config

__all__ = [
    "ConfigurationError",
    "PipelineConfig",
    "configure_logging",
    "get_pipeline_config",
]
