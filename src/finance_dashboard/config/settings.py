import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional

from finance_dashboard.aggregation.models import TrendPolicy

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

DB_PATH_ENV = "FINANCE_DASHBOARD_DB"
SESSION_PATH_ENV = "FINANCE_DASHBOARD_SESSION"

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'settings.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_settings() -> "Settings":
        """Load application settings"""
        return Settings.from_dict(ConfigLoader.load_config('settings.json'))

    @staticmethod
    def load_default_categories() -> List[Dict[str, Any]]:
        """Load the categories seeded into a new database"""
        return ConfigLoader.load_config('categories.json')['categories']

@dataclass
class Settings:
    """Application settings, see config/defaults/settings.json"""
    db_path: Path = Path("data/finance.db")
    session_path: Path = Path("data/session.json")
    recent_limit: int = 20
    fallback_color: str = "#8b5cf6"
    trend_zero_income_policy: TrendPolicy = TrendPolicy.DIVISOR_FALLBACK
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Build settings from a parsed config file.

        The database and session paths can be overridden with
        FINANCE_DASHBOARD_DB and FINANCE_DASHBOARD_SESSION.

        Raises:
            ValueError: If a value is invalid
        """
        env = os.environ if env is None else env
        defaults = cls()

        recent_limit = int(data.get("recent_limit", defaults.recent_limit))
        if recent_limit < 1:
            raise ValueError(f"recent_limit must be at least 1, got {recent_limit}")

        return cls(
            db_path=Path(env.get(DB_PATH_ENV) or data.get("db_path", defaults.db_path)),
            session_path=Path(env.get(SESSION_PATH_ENV) or data.get("session_path", defaults.session_path)),
            recent_limit=recent_limit,
            fallback_color=data.get("fallback_color", defaults.fallback_color),
            trend_zero_income_policy=TrendPolicy(
                data.get("trend_zero_income_policy", defaults.trend_zero_income_policy.value)
            ),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
        )
