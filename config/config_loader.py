import os

import yaml

from modules.dungeon.gen.params import GenerationParameters


class ConfigLoader:
    def __init__(self, config_file="settings.yaml"):
        self.path = config_file
        self.config = {}
        if os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f) or {}
        if not isinstance(self.config, dict):
            raise ValueError(f"Configuration file '{config_file}' must contain a mapping at the top level.")

    def get(self, *keys, default=None):
        """
        Return a nested configuration value.
        When a key along the path is missing:
          - raise KeyError if no default is given
          - return the default otherwise
        """
        ref = self.config
        for key in keys:
            if isinstance(ref, dict) and key in ref:
                ref = ref[key]
            else:
                if default is not None:
                    return default
                raise KeyError(f"Configuration key {' -> '.join(keys)} not found and no default provided.")
        return ref


def load_generation_parameters(config_file, section="dungeon", **overrides):
    """Build :class:`GenerationParameters` from one section of a YAML file.

    Keyword ``overrides`` whose value is not ``None`` replace file values.
    """
    loader = ConfigLoader(config_file)
    values = dict(loader.get(section, default={}) or {})
    values.update({key: value for key, value in overrides.items() if value is not None})
    return GenerationParameters.from_mapping(values)
