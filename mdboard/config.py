# mdboard configuration
# Override via config.yaml, environment, or CLI args.

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("~/.config/mdboard/config.yaml")
CONFIG_ENV = "MDBOARD_CONFIG"
VAULT_ENV = "MDBOARD_VAULT_PATH"


@dataclass
class Config:
    """Runtime configuration for the board CLI."""

    # Board paths are relative to this directory
    vault_path: str = "."

    # Lane names used by claim / complete / fail / archive
    lane_ready: str = "Ready"
    lane_in_progress: str = "In Progress"
    lane_done: str = "Done"
    lane_failed: str = "Failed"

    # New items
    task_tag: str = "agent-task"
    id_length: int = 9
    id_prefix: Optional[str] = None

    # Archive files land in <vault>/<archive_dir>/
    archive_dir: str = "Archive"

    log_level: str = "INFO"

    def resolve_paths(self):
        """Apply environment overrides and expand ~."""
        env_vault = os.environ.get(VAULT_ENV)
        if env_vault:
            self.vault_path = env_vault
        self.vault_path = str(Path(self.vault_path).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path or os.environ.get(CONFIG_ENV) or CONFIG_PATH).expanduser()
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
                logger.warning(f"Ignoring unreadable config {cfg_path}: {e}")
                cfg = cls()
        else:
            cfg = cls()
        cfg.resolve_paths()
        return cfg
