"""This module provides utilities for managing configurations.

Attributes:
    DEFAULT_CONFIG: The configuration values used when they are not set in the configuration file.
"""

# Import standard modules
from copy import deepcopy
from pathlib import Path
from string import Template
from typing import Any, Dict, Iterable, Optional

# Import third-party modules
from dotmap import DotMap
from yaml import YAMLError

# Import internal modules
from .lang import yaml_to_dotmap, P4RunnerError, P4RunnerException, PathName
from .sysutil import P4_EXE

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'p4': {'executable': P4_EXE,
           'verbose': False,
           'workspace_root': ''},
    'bump': {'workspace': '',
             'depot': '',
             'version_file': 'version.json',
             'sync': False},
}


class ConfigurationError(P4RunnerException):
    """Configuration Exceptions.

    Attributes:
        BAD_FORMAT: The configuration file format is invalid.
        CONFIG_NOT_FOUND: The specified configuration file was not found.
        MISSING_VALUE: A required configuration value was not set.
    """
    BAD_FORMAT = P4RunnerError(1, Template('Bad format for configuration file: $file'))
    CONFIG_NOT_FOUND = P4RunnerError(2, Template('Unable to find the configuration file: $file'))
    MISSING_VALUE = P4RunnerError(3, Template('Required configuration value not set: $section.$value'))


class P4Config:
    """This class holds the configuration read from a YAML file merged over the defaults."""

    def __init__(self, config_file: Optional[PathName] = None, /, **overrides: Dict[str, Any]):
        """
        Args:
            config_file (optional, default=None): The YAML file to read, if None only the defaults are used.
            **overrides (optional): Sections of values which replace the values from the file.
                Values of None are ignored.

        Attributes:
            _config: The merged configuration.
            _config_file: The value of the config_file argument.

        Raises:
            ConfigurationError.BAD_FORMAT: If the configuration file is not valid YAML or a known section is not a mapping.
            ConfigurationError.CONFIG_NOT_FOUND: If the configuration file is not found.
        """
        self._config_file = Path(config_file) if config_file else None
        values = deepcopy(DEFAULT_CONFIG)
        if self._config_file:
            if not self._config_file.exists():
                raise ConfigurationError(ConfigurationError.CONFIG_NOT_FOUND, file=self._config_file)
            try:
                from_file = yaml_to_dotmap(self._config_file).toDict()
            except YAMLError as err:
                raise ConfigurationError(ConfigurationError.BAD_FORMAT, file=self._config_file) from err
            for (section, section_values) in from_file.items():
                if (section in DEFAULT_CONFIG) and (section_values is not None) and not isinstance(section_values, dict):
                    raise ConfigurationError(ConfigurationError.BAD_FORMAT, file=self._config_file)
            _merge(values, from_file)
        _merge(values, overrides)
        self._config = DotMap(values, _dynamic=False)

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith('_'):
            raise AttributeError(attr)
        return getattr(self._config, attr)

    config_file = property(lambda s: s._config_file, doc='A read-only property which returns the configuration file name.')

    def require(self, section: str, values: Iterable[str], /) -> None:
        """Make sure configuration values are set.

        Args:
            section: The configuration section.
            values: The names of the values in the section.

        Returns:
            Nothing.

        Raises:
            ConfigurationError.MISSING_VALUE: If any value is empty.
        """
        for value in values:
            if not self._config[section][value]:
                raise ConfigurationError(ConfigurationError.MISSING_VALUE, section=section, value=value)


def _merge(target: Dict[str, Any], source: Dict[str, Any], /) -> None:
    """Recursively merge the source dictionary into the target. Values of None leave the target unchanged."""
    for (key, value) in source.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value
