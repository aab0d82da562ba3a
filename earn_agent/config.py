"""Process configuration for the earn agent.

All settings come from environment variables and are read once into an
immutable ``Settings`` model. Tools and workflows receive the model
explicitly instead of reading ``os.environ`` themselves.
"""

import os
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

DEFAULT_BASE_URL = "https://superteam.fun"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_DEV_TYPE_KEYWORDS = ("dev", "development", "bounty", "project")


class Settings(BaseModel):
    """Runtime settings for the marketplace client, tools and workflows."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    model_api_key: str = ""
    model_name: str = DEFAULT_MODEL
    telegram_handle: str = ""
    workspaces_dir: Path = Path("workspaces")
    codegen_cli: str = "claude"
    dev_type_keywords: Tuple[str, ...] = DEFAULT_DEV_TYPE_KEYWORDS
    database_url: Optional[str] = None
    agent_name: str = "SentinelPrime"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        keywords = os.environ.get("DEV_TYPE_KEYWORDS")
        return cls(
            base_url=os.environ.get("SUPERTEAM_BASE_URL", DEFAULT_BASE_URL),
            api_key=os.environ.get("SUPERTEAM_API_KEY", ""),
            model_api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
            model_name=os.environ.get("SCOUT_MODEL", DEFAULT_MODEL),
            telegram_handle=os.environ.get("TELEGRAM_HANDLE", ""),
            workspaces_dir=Path(
                os.environ.get("EARN_WORKSPACES_DIR", Path.cwd() / "workspaces")
            ),
            codegen_cli=os.environ.get("CODEGEN_CLI", "claude"),
            dev_type_keywords=(
                parse_keywords(keywords) if keywords else DEFAULT_DEV_TYPE_KEYWORDS
            ),
            database_url=os.environ.get("DATABASE_URL") or None,
            agent_name=os.environ.get("AGENT_NAME", "SentinelPrime"),
        )

    def is_dev_type(self, bounty_type: Optional[str]) -> bool:
        """Case-insensitive substring match of a bounty type against the dev keywords."""
        if not bounty_type:
            return False
        lowered = bounty_type.lower()
        return any(keyword in lowered for keyword in self.dev_type_keywords)


def parse_keywords(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated keyword list, dropping blanks."""
    return tuple(k.strip().lower() for k in raw.split(",") if k.strip())
