"""Configuration loader for cactiinstaller."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from cactiinstaller.errors import InstallerError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "db_name",
        "db_user",
        "db_host",
        "web_root",
        "cacti_dir",
        "cacti_repo",
        "spine_repo",
        "web_user",
        "web_group",
        "log_file",
        "verbose",
        "php_settings",
        "schema",
        "recreate_database",
        "poller",
        "allow_insecure_http",
        "skip_repository_check",
        "command_timeout",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise InstallerError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise InstallerError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise InstallerError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise InstallerError(f"Unknown configuration keys: {unknown_list}")

        php_settings = parsed.get("php_settings")
        if php_settings is not None and not isinstance(php_settings, dict):
            raise InstallerError("`php_settings` must be a mapping of php.ini keys to values.")

        return parsed
