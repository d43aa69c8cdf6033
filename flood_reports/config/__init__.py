from .loader import ConfigError, OutputConfig, ReportConfig, load_config, resolve_config

__all__ = [
    "ConfigError",
    "OutputConfig",
    "ReportConfig",
    "load_config",
    "resolve_config",
]
