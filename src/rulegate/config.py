"""Engine settings loaded from YAML."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from rulegate.utils.helpers import merge_dicts


class EngineSettings(BaseModel):
    """Process-level settings for logging and reporting."""

    log_level: str = Field(default="warning", description="Minimum stdlib log level")
    log_renderer: str = Field(
        default="console",
        pattern="^(console|json)$",
        description="structlog renderer: console or json",
    )
    report_non_displayable: bool = Field(
        default=True,
        description="Forward violations of non-displayable rules to the reporting sink",
    )
    report_phases: bool = Field(
        default=False,
        description="Forward action phase transitions to the reporting sink",
    )


class SettingsLoader:
    """Loads engine settings from YAML files."""

    def load_file(self, path: Path | str, **overrides: Any) -> EngineSettings:
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML file
            **overrides: Values taking precedence over the file

        Returns:
            Loaded EngineSettings instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return self._parse(data, overrides)

    def load_from_string(self, content: str, **overrides: Any) -> EngineSettings:
        data = yaml.safe_load(content) or {}
        return self._parse(data, overrides)

    def _parse(self, data: dict[str, Any], overrides: dict[str, Any]) -> EngineSettings:
        # Settings may sit at the top level or under a "rulegate" key.
        section = data.get("rulegate", data)
        merged = merge_dicts(section, {k: v for k, v in overrides.items() if v is not None})
        return EngineSettings(**merged)


def load_settings(path: Path | str | None = None, **overrides: Any) -> EngineSettings:
    """Load settings from a file, or build defaults when no path is given."""
    if path is None:
        return EngineSettings(**{k: v for k, v in overrides.items() if v is not None})
    return SettingsLoader().load_file(path, **overrides)


_global_settings: EngineSettings | None = None


def get_global_settings() -> EngineSettings:
    """Get the process-wide settings, creating defaults on first use."""
    global _global_settings
    if _global_settings is None:
        _global_settings = EngineSettings()
    return _global_settings


def set_global_settings(settings: EngineSettings) -> None:
    global _global_settings
    _global_settings = settings
