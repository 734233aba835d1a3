from .config import (
    CleanerConfig,
    ConfigError,
    config_from_args,
    config_from_env,
    load_config,
    merge_configs,
    resolve_config,
)
from .service import (
    DEFAULT_LOG_FILE,
    FileTimes,
    FolderCleanerService,
    FolderResult,
    RunSummary,
    append_run_summary,
    stat_times,
)

__all__ = [
    "FileTimes",
    "FolderResult",
    "RunSummary",
    "FolderCleanerService",
    "DEFAULT_LOG_FILE",
    "append_run_summary",
    "stat_times",
    "CleanerConfig",
    "ConfigError",
    "config_from_args",
    "config_from_env",
    "load_config",
    "merge_configs",
    "resolve_config",
]
