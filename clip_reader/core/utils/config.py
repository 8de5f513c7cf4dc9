from dataclasses import dataclass, field
from omegaconf   import OmegaConf
from pathlib     import Path
from typing      import Any

@dataclass(frozen = True)
class ConfigState:
    """
    Immutable view over a merged YAML configuration.
    The nested tuple form makes two states with the same settings compare and hash equal.
    """
    config_dict  : dict = field(compare = False, hash = False)
    config_tuple : tuple

    @classmethod
    def from_config(cls, config: Any) -> 'ConfigState':
        """
        Convert an OmegaConf config into a stable structure.

        Args:
            config : The OmegaConf config object

        Returns:
            ConfigState: Immutable state instance
        """
        return cls.from_dict(config_dict = OmegaConf.to_container(config, resolve = True))

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'ConfigState':

        def convert_to_hashable_tuple(value: Any) -> Any:
            if isinstance(value, dict):
                return tuple(sorted((k, convert_to_hashable_tuple(v)) for k, v in value.items()))
            elif isinstance(value, list):
                return tuple(convert_to_hashable_tuple(x) for x in value)
            return value

        return cls(config_dict = config_dict, config_tuple = convert_to_hashable_tuple(config_dict))

    @classmethod
    def load(cls, config_file: Path, config_override: dict | None = None) -> 'ConfigState':
        """
        Loads a YAML file and merges optional overrides on top of it.

        Args:
            config_file     : YAML configuration path
            config_override : Nested dictionary of values replacing those of the file

        Returns:
            ConfigState: The merged configuration
        """
        base_config   = OmegaConf.load(config_file)
        merged_config = OmegaConf.merge(base_config, OmegaConf.create(config_override)) if config_override else base_config
        return cls.from_config(config = merged_config)

    def section(self, name: str) -> dict:
        return self.config_dict.get(name) or {}

    def step_enabled(self, step_name: str) -> bool:
        return bool(self.section('steps').get(step_name, {}).get('enabled', False))

    def parameter(self, step_name: str, param_name: str, default: Any = None) -> Any:
        """
        Value of a step parameter, or the default when the step does not declare it.
        """
        parameters = self.section('steps').get(step_name, {}).get('parameters') or {}
        if param_name not in parameters:
            return default
        return parameters[param_name]['value']

    def __hash__(self):
        return hash(self.config_tuple)
