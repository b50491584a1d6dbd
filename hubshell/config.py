"""
Settings management for hubshell.

"Configuration is just organized preferences. Read them wisely." — schema.cx
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .rich_utils import print_warning
from .validation import ValidationError, validate_format_option


@dataclass
class ShellSettings:
    """
    Settings that shape how the shell talks to GitHub and prints results.

    None of these are session state: they are read once at startup.
    """

    github_host: str | None = None  # GitHub Enterprise hostname
    pager: str | None = None
    output_format: str = "json"  # "json" or "yaml"
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShellSettings":
        """Create settings from dictionary."""
        # Handle missing fields with defaults
        return cls(
            github_host=data.get("github_host"),
            pager=data.get("pager"),
            output_format=_coerce_format(data.get("output_format", "json")),
            timeout=_coerce_timeout(data.get("timeout", 30.0)),
        )


def _coerce_format(value: Any) -> str:
    try:
        return validate_format_option(str(value))
    except ValidationError as e:
        print_warning(f"{e}. Falling back to 'json'.")
        return "json"


def _coerce_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        print_warning(f"Invalid timeout '{value}'. Falling back to 30 seconds.")
        return 30.0
    return timeout if timeout > 0 else 30.0


class SettingsManager:
    """
    Loads shell settings from the settings file and the environment.

    The file is user-authored input only; the shell never writes it.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "hubshell"
    SETTINGS_FILE = "settings.yaml"

    ENV_OVERRIDES = {
        "GITHUB_HOST": "github_host",
        "HUBSHELL_PAGER": "pager",
        "HUBSHELL_FORMAT": "output_format",
        "HUBSHELL_TIMEOUT": "timeout",
    }

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the settings manager."""
        self.config_dir = config_dir or self.DEFAULT_CONFIG_DIR
        self.settings_path = self.config_dir / self.SETTINGS_FILE

    def _load_file(self) -> dict[str, Any]:
        """Load raw settings from the settings file."""
        if not self.settings_path.exists():
            return {}

        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print_warning(f"Could not read {self.settings_path}: {e}")
            return {}

        if not isinstance(data, dict):
            print_warning(f"Ignoring {self.settings_path}: expected a mapping")
            return {}
        return data

    def load(self, environ: dict[str, str] | None = None) -> ShellSettings:
        """
        Load settings, letting environment variables override the file.

        Args:
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            The effective ShellSettings
        """
        environ = os.environ if environ is None else environ
        data = self._load_file()

        for env_name, key in self.ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                data[key] = value

        return ShellSettings.from_dict(data)
