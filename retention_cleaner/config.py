from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

import yaml


class ConfigError(ValueError):
    """Raised when the run cannot be configured."""


@dataclass
class CleanerConfig:
    days: Optional[int] = None
    folders: List[str] = field(default_factory=list)

    def validate(self) -> None:
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days <= 0:
            raise ConfigError(
                "Retention days are required and must be a positive integer, "
                "along with a list of folders to clean."
            )
        self.folders = _clean_folders(self.folders)
        if not self.folders:
            raise ConfigError("No folders to clean; pass them as arguments, in the config file, or via FOLDERS.")


def load_config(path: Path) -> CleanerConfig:
    """
    Load ``days`` and ``folders`` from a YAML file.

    An empty document yields an empty config; anything that is not a mapping
    with the right value types is rejected.
    """
    try:
        with open(path, "rb") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc

    if data is None:
        return CleanerConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    days = data.get("days")
    if days is not None and (isinstance(days, bool) or not isinstance(days, int)):
        raise ConfigError("'days' must be an integer")

    folders = data.get("folders") or []
    if isinstance(folders, str) or not isinstance(folders, list):
        raise ConfigError("'folders' must be a list of paths")

    return CleanerConfig(days=days, folders=_clean_folders(folders))


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> CleanerConfig:
    environ = os.environ if environ is None else environ
    cfg = CleanerConfig()

    days_text = environ.get("DAYS", "").strip()
    if days_text:
        if not _is_integer(days_text):
            raise ConfigError("Environment variable DAYS must be a number")
        cfg.days = int(days_text)

    folders_text = environ.get("FOLDERS", "")
    if folders_text:
        cfg.folders = _clean_folders(folders_text.split(","))

    return cfg


def config_from_args(args: Sequence[str]) -> List[CleanerConfig]:
    """
    Interpret positional arguments as ``[days|config-file] [folder ...]``.

    Returns the layers they contribute, highest priority first: explicit
    arguments, then the config file when one was named.
    """
    if not args:
        return []

    first, rest = args[0], _clean_folders(args[1:])
    if _is_integer(first):
        return [CleanerConfig(days=int(first), folders=rest)]
    return [CleanerConfig(folders=rest), load_config(Path(first))]


def merge_configs(*layers: CleanerConfig) -> CleanerConfig:
    """Take each field from the first layer that sets it."""
    merged = CleanerConfig()
    for layer in layers:
        if merged.days is None:
            merged.days = layer.days
        if not merged.folders:
            merged.folders = list(layer.folders)
    return merged


def resolve_config(
    args: Sequence[str], environ: Optional[Mapping[str, str]] = None
) -> CleanerConfig:
    layers = config_from_args(args)
    layers.append(config_from_env(environ))
    cfg = merge_configs(*layers)
    cfg.validate()
    return cfg


def _clean_folders(folders: Iterable[object]) -> List[str]:
    return [str(folder).strip() for folder in folders if folder is not None and str(folder).strip()]


def _is_integer(text: str) -> bool:
    try:
        int(text)
    except ValueError:
        return False
    return True
