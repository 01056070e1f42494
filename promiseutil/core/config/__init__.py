"""Configuration models and YAML loading for promiseutil."""

from promiseutil.core.config.loader import load_config, substitute_env
from promiseutil.core.config.models import Config, LoggingConfig, QueueOptions, SeriesOptions

__all__ = [
    "Config",
    "LoggingConfig",
    "QueueOptions",
    "SeriesOptions",
    "load_config",
    "substitute_env",
]
