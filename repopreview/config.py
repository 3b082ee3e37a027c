"""Configuration management for the preview generator."""

import copy
import logging
import os
import yaml
from typing import List, Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)


class Config:
    """Manages application configuration from YAML file."""

    DEFAULT_CONFIG = {
        "github": {
            "owner": "DapaLMS1",
            "exclude_repo": "Catalog_of_Repos",
            "api_url": "https://api.github.com",
            "per_page": 100,
            "user_agent": "GitHub-Actions-Repo-Preview-Generator",
            "token_env": "ORG_PAT_TOKEN",
            "timeout": 30
        },
        "pages": {
            "domain": "github.io"
        },
        "capture": {
            "width": 1200,
            "height": 800,
            "settle_delay_ms": 3000,
            "navigation_timeout_ms": 60000,
            "max_inflight_requests": 2,
            "idle_window_ms": 500
        },
        "browser": {
            "headless": True,
            "args": [
                "--no-sandbox",
                "--disable-setuid-sandbox",
                "--disable-dev-shm-usage",
                "--disable-gpu"
            ]
        },
        "output": {
            "dir": "previews"
        }
    }

    def __init__(self, config_path: str = "config.yaml"):
        """Initialize configuration from file or use defaults.

        Args:
            config_path: Path to configuration YAML file
        """
        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or return defaults."""
        merged = copy.deepcopy(self.DEFAULT_CONFIG)
        if not self.config_path.exists():
            return merged

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (yaml.YAMLError, IOError) as e:
            logger.warning(f"Failed to load config file: {e}. Using defaults.")
            return merged

        if not isinstance(config, dict):
            return merged

        # Merge section by section so partial files keep the other defaults
        for section, values in config.items():
            if values is None:
                continue
            if isinstance(merged.get(section), dict):
                if not isinstance(values, dict):
                    logger.warning(f"Ignoring config section '{section}': expected a mapping.")
                    continue
                merged[section].update(values)
            else:
                merged[section] = values
        return merged

    def _get(self, section: str, key: str) -> Any:
        default = self.DEFAULT_CONFIG[section][key]
        return self._config.get(section, {}).get(key, default)

    def override(self, section: str, key: str, value: Any):
        """Replace a single setting, e.g. from a command-line flag."""
        self._config.setdefault(section, {})[key] = value

    @property
    def owner(self) -> str:
        """Get the account whose repositories are previewed."""
        return self._get("github", "owner")

    @property
    def exclude_repo(self) -> str:
        """Get the name of the catalog repository itself."""
        return self._get("github", "exclude_repo")

    @property
    def api_url(self) -> str:
        return self._get("github", "api_url").rstrip("/")

    @property
    def per_page(self) -> int:
        return int(self._get("github", "per_page"))

    @property
    def user_agent(self) -> str:
        return self._get("github", "user_agent")

    @property
    def token_env(self) -> str:
        """Get the name of the environment variable holding the API token."""
        return self._get("github", "token_env")

    @property
    def token(self) -> Optional[str]:
        """Get the API token from the environment, if set."""
        return os.getenv(self.token_env) or None

    @property
    def api_timeout(self) -> float:
        return float(self._get("github", "timeout"))

    @property
    def pages_domain(self) -> str:
        return self._get("pages", "domain")

    @property
    def viewport(self) -> Dict[str, int]:
        """Get viewport dimensions, also used as the screenshot clip."""
        return {
            'width': int(self._get("capture", "width")),
            'height': int(self._get("capture", "height"))
        }

    @property
    def settle_delay_ms(self) -> int:
        """Get the fixed delay between navigation and screenshot."""
        return int(self._get("capture", "settle_delay_ms"))

    @property
    def navigation_timeout_ms(self) -> int:
        return int(self._get("capture", "navigation_timeout_ms"))

    @property
    def max_inflight_requests(self) -> int:
        return int(self._get("capture", "max_inflight_requests"))

    @property
    def idle_window_ms(self) -> int:
        return int(self._get("capture", "idle_window_ms"))

    @property
    def headless(self) -> bool:
        return bool(self._get("browser", "headless"))

    @property
    def browser_args(self) -> List[str]:
        return list(self._get("browser", "args"))

    @property
    def output_dir(self) -> Path:
        """Get the directory screenshots are written to."""
        return Path(self._get("output", "dir"))

    def reload(self):
        """Reload configuration from file."""
        self._config = self._load_config()
