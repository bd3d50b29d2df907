import os
from typing import Optional

import yaml

from timesync.exceptions import ConfigFileError


class ConfigFileStore:
    """Filesystem/YAML IO for the optional settings file.

    Responsibility: locate, read, and parse the YAML file on disk.
    It does NOT apply defaults or environment overrides.
    """

    def __init__(self, *, config_path: Optional[str]):
        self.config_path = config_path

    def load_yaml_dict(self) -> dict:
        """Return the parsed YAML mapping, or an empty dict when no file was requested."""
        if not self.config_path:
            return {}
        if not os.path.isfile(self.config_path):
            raise ConfigFileError(self.config_path)
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(self.config_path, f"could not be read: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(self.config_path, "must contain a mapping of settings")
        return data
