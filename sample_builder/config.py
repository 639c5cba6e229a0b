"""Configuration file loading and management."""

import os
import re
import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from sample_builder.models import BuildDefaults, CleanupSettings, Config, MSBuildSettings


DEFAULT_CONFIG_NAME = "sample_build.toml"

# Points at a config file outside the standard locations
CONFIG_ENV_VAR = "SAMPLE_BUILD_CONFIG"

# When set (to anything), build outputs are wiped after a successful build
WIPE_OUTPUTS_ENV_VAR = "WDS_WipeOutputs"


def find_config_file(base_dir: Optional[Path] = None) -> Optional[Path]:
    """Find the config file in standard locations.

    Searches:
        1. SAMPLE_BUILD_CONFIG environment variable
        2. base_dir (default: current working directory)
        3. Project directory

    Args:
        base_dir: Directory to search instead of the current directory

    Returns:
        Path to config file, or None if no file was found
    """
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    cwd_config = (base_dir or Path.cwd()) / DEFAULT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config

    project_config = Path(__file__).parent.parent / DEFAULT_CONFIG_NAME
    if project_config.exists():
        return project_config

    return None


class ConfigLoader:
    """Loads sample build settings from TOML and the environment."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config loader.

        Args:
            config_path: Path to config file. If None, searches standard locations.
        """
        self.config_path = config_path or find_config_file()
        self.config: Optional[Config] = None

    def load(self) -> Config:
        """Load and validate the configuration.

        Without a config file the built-in defaults are used.

        Returns:
            Loaded Config object

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            ValueError: If config file is invalid
        """
        raw_config: dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            try:
                with open(self.config_path, "rb") as f:
                    raw_config = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML syntax in config file: {e}")

        expanded_config = self._expand_env_vars(raw_config)

        try:
            self.config = self._parse_config(expanded_config)
        except Exception as e:
            raise ValueError(f"Invalid configuration structure: {e}")

        self._apply_environment()

        return self.config

    def _expand_env_vars(self, config: dict[str, Any]) -> dict[str, Any]:
        """Recursively expand ${VAR_NAME} references in config values.

        Unknown variables are left as written.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with expanded variables
        """

        def expand_value(value: Any) -> Any:
            if isinstance(value, str):
                pattern = r"\$\{([^}]+)\}"

                def replace_var(match: re.Match) -> str:
                    return os.getenv(match.group(1), match.group(0))

                return re.sub(pattern, replace_var, value)

            elif isinstance(value, dict):
                return {k: expand_value(v) for k, v in value.items()}

            elif isinstance(value, list):
                return [expand_value(item) for item in value]

            else:
                return value

        return expand_value(config)

    def _parse_config(self, raw_config: dict[str, Any]) -> Config:
        """Parse raw config dictionary into Config model.

        Args:
            raw_config: Raw configuration dictionary

        Returns:
            Parsed Config object
        """
        return Config(
            msbuild=MSBuildSettings(**raw_config.get("msbuild", {})),
            build=BuildDefaults(**raw_config.get("build", {})),
            cleanup=CleanupSettings(**raw_config.get("cleanup", {})),
        )

    def _apply_environment(self) -> None:
        """Apply environment toggles on top of the file settings."""
        if os.getenv(WIPE_OUTPUTS_ENV_VAR) is not None:
            self.config.cleanup.wipe_outputs = True
