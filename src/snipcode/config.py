"""
Layered .grepattern.yaml configuration for snipcode.

A global file under the user config directory supplies defaults; a local
file at the project root overrides the output name and adds patterns.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core import CONFIG_FILENAME, DEFAULT_OUTPUT, ConfigFileError, StrPath, echo

# common defaults for media and VCS dirs
DEFAULT_IGNORES: List[str] = [
    ".git/**",
    "*.png", "*.jpg", "*.jpeg", "*.gif", "*.webp", "*.svg", "*.ico",
    "*.mp4", "*.mov", "*.avi", "*.mkv",
]

GLOBAL_IGNORES: List[str] = [
    "dist/**", ".cache/**", "examples/**", "helm-chart/*", ".yarn/*", "yarn.lock",
    ".cursor/**", "seeds.go", "*/dist/*", "*/node_modules/*", "tests/*.go",
    ".next/**", "static/**", ".DS_Store", "*.toml", "LICENSE", "docs/**",
    "*.sqlite", "*.lock", "*.ink", "*.lockb", "*.test.*", "*.css", "*.jpeg",
    "docs.go", "logs/**", "deploy.sh", "lefthook.*", ".gitignore", ".env",
    "*_test*", "*dock*", "*Dock*", "images/*", "*.g4", "*txt*", "output.txt",
    "README.md", "aaa.json", ".github/**", "package-lock.json", "migrations/**",
    "venv/**", "__pycache__/**", "go.mod", "go.sum", "Dockerfile",
]


@dataclass
class Config:
    default_name: str = DEFAULT_OUTPUT
    ignore_patterns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_name": self.default_name,
            "ignore_patterns": list(self.ignore_patterns),
        }


def user_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    if sys.platform == "win32" and os.environ.get("APPDATA"):
        return Path(os.environ["APPDATA"])
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path.home() / ".config"


def global_config_path() -> Path:
    return user_config_dir() / "snipcode" / CONFIG_FILENAME


def load_config(path: StrPath) -> Config:
    """Load and validate one .grepattern.yaml file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"could not read config '{path}': {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigFileError(f"invalid config '{path}': {e}") from e

    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigFileError(f"invalid config '{path}': expected a mapping at top level")

    name = raw.get("default_name") or ""
    if not isinstance(name, str):
        raise ConfigFileError(f"invalid config '{path}': default_name must be a string")

    patterns = raw.get("ignore_patterns") or []
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        raise ConfigFileError(
            f"invalid config '{path}': ignore_patterns must be a list of strings"
        )

    return Config(default_name=name, ignore_patterns=patterns)


def merge_configs(global_cfg: Optional[Config], local_cfg: Optional[Config]) -> Config:
    """
    Layer *local_cfg* over *global_cfg*.

    The local output name wins when it is set; ignore patterns are
    concatenated (global first) without deduplication.
    """
    merged = Config()
    for cfg in (global_cfg, local_cfg):
        if cfg is None:
            continue
        if cfg.default_name:
            merged.default_name = cfg.default_name
        merged.ignore_patterns.extend(cfg.ignore_patterns)
    return merged


def resolve_config(
    root: StrPath = ".",
    global_path: Optional[StrPath] = None,
    verbose: bool = False,
) -> Config:
    global_path = Path(global_path) if global_path is not None else global_config_path()
    local_path = Path(root) / CONFIG_FILENAME

    global_cfg = local_cfg = None
    if global_path.is_file():
        if verbose:
            echo(f"Loading global config from {global_path}")
        global_cfg = load_config(global_path)
    if local_path.is_file():
        if verbose:
            echo(f"Loading local config from {local_path}")
        local_cfg = load_config(local_path)
    if global_cfg is None and local_cfg is None and verbose:
        echo("No config found; using defaults")

    return merge_configs(global_cfg, local_cfg)


def _write_config(path: Path, cfg: Config) -> Path:
    data = yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=True)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data, encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"could not write config '{path}': {e}") from e
    return path


def init_local(root: StrPath = ".") -> Path:
    cfg = Config(ignore_patterns=list(DEFAULT_IGNORES))
    return _write_config(Path(root) / CONFIG_FILENAME, cfg)


def init_global(path: Optional[StrPath] = None) -> Path:
    """Write the exhaustive default config to the user config directory."""
    cfg = Config(ignore_patterns=GLOBAL_IGNORES + DEFAULT_IGNORES)
    return _write_config(Path(path) if path is not None else global_config_path(), cfg)
