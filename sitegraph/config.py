"""Centralised settings for SiteGraph.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SITEGRAPH_WORKSPACE", Path.home() / ".sitegraph")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "analyses.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    cli_config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SITEGRAPH_CLI_DIR", Path.home() / ".sitegraph_cli")
        )
    )

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------
    broken_status_threshold: int = field(
        default_factory=lambda: int(os.environ.get("BROKEN_STATUS_THRESHOLD", "400"))
    )
    node_size_base: float = field(
        default_factory=lambda: float(os.environ.get("NODE_SIZE_BASE", "2.0"))
    )
    node_size_scale: float = field(
        default_factory=lambda: float(os.environ.get("NODE_SIZE_SCALE", "2.0"))
    )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    top_hubs: int = field(
        default_factory=lambda: int(os.environ.get("TOP_HUBS", "10"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("SITEGRAPH_LOG_LEVEL", "WARNING")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from sitegraph.config import settings
settings = Settings()
