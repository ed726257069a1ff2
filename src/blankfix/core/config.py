"""Configuration management for blankfix (blankfix.toml parsing + defaults)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

STATE_DIR_NAME = ".blankfix"
CONFIG_FILE_NAME = "blankfix.toml"

DEFAULT_CRITICAL_FILES = [
    "src/main.jsx",
    "src/main.js",
    "main.jsx",
    "main.js",
    "src/App.jsx",
    "src/App.js",
    "App.jsx",
    "App.js",
    "package.json",
    "vite.config.js",
    "vite.config.ts",
]


@dataclass
class ScanConfig:
    extensions: list[str] = field(
        default_factory=lambda: [".js", ".jsx", ".ts", ".tsx"]
    )
    parse_failure_threshold: float = 0.5
    simple_mode_file_limit: int = 100
    recent_window_hours: int = 24


@dataclass
class EngineConfig:
    max_retries: int = 100
    backoff_step_seconds: float = 2.0
    max_backoff_seconds: float = 30.0


@dataclass
class FixConfig:
    dry_run: bool = False


@dataclass
class BackupConfig:
    critical_files: list[str] = field(default_factory=lambda: list(DEFAULT_CRITICAL_FILES))


@dataclass
class BlankfixConfig:
    """Complete blankfix configuration."""

    exclude: list[str] = field(
        default_factory=lambda: [
            "node_modules/",
            ".git/",
            ".blankfix/",
            "dist/",
            "build/",
        ]
    )
    scan: ScanConfig = field(default_factory=ScanConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    fix: FixConfig = field(default_factory=FixConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)


def load_config(project_path: Path | None = None) -> BlankfixConfig:
    """Load configuration from blankfix.toml if present, otherwise return defaults."""
    config = BlankfixConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILE_NAME
    if not config_file.exists():
        return config

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    if "general" in data:
        gen = data["general"]
        if "exclude" in gen:
            config.exclude = gen["exclude"]

    if "scan" in data:
        s = data["scan"]
        for attr in (
            "extensions",
            "parse_failure_threshold",
            "simple_mode_file_limit",
            "recent_window_hours",
        ):
            if attr in s:
                setattr(config.scan, attr, s[attr])

    if "engine" in data:
        e = data["engine"]
        for attr in ("max_retries", "backoff_step_seconds", "max_backoff_seconds"):
            if attr in e:
                setattr(config.engine, attr, e[attr])

    if "fix" in data:
        if "dry_run" in data["fix"]:
            config.fix.dry_run = data["fix"]["dry_run"]

    if "backup" in data:
        if "critical_files" in data["backup"]:
            config.backup.critical_files = data["backup"]["critical_files"]

    return config


def get_state_dir(project_path: Path | None = None) -> Path:
    """Get or create the .blankfix directory."""
    if project_path is None:
        project_path = Path.cwd()
    state_dir = project_path / STATE_DIR_NAME
    state_dir.mkdir(exist_ok=True)
    return state_dir


def ensure_gitignore(project_path: Path | None = None) -> None:
    """Add .blankfix/ to .gitignore if not already present."""
    if project_path is None:
        project_path = Path.cwd()
    gitignore = project_path / ".gitignore"
    entry = f"{STATE_DIR_NAME}/"

    if gitignore.exists():
        content = gitignore.read_text()
        if entry in content:
            return
        if not content.endswith("\n"):
            content += "\n"
        content += f"{entry}\n"
        gitignore.write_text(content)
    else:
        gitignore.write_text(f"{entry}\n")
