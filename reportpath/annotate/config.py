#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Settings of report annotation, merged from the action inputs, from
a YAML configuration file and from the defaults.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..exceptions import ConfigurationError

__all__ = ['DEFAULT_CONFIG_PATH', 'DEFAULT_CONFIG', 'Config', 'get_input',
           'get_multiline_input', 'read_inputs', 'load_yaml_config', 'load_config']

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = '.github/report-annotate.yml'

DEFAULT_CONFIG: Dict[str, Any] = {
    'reports': ['junit|junit/*.xml'],
    'ignore': ['node_modules/**', 'dist/**'],
    'max_annotations': 50,
    'custom_matchers': {},
}

# Setting names accepted in YAML files
YAML_KEYS = {
    'reports': 'reports',
    'ignore': 'ignore',
    'max_annotations': 'max_annotations',
    'maxAnnotations': 'max_annotations',
    'max-annotations': 'max_annotations',
    'custom_matchers': 'custom_matchers',
    'customMatchers': 'custom_matchers',
    'custom-matchers': 'custom_matchers',
}


@dataclass
class Config:
    """The settings of a report annotation run."""
    reports: List[str] = field(default_factory=list)
    ignore: List[str] = field(default_factory=list)
    max_annotations: int = 50
    custom_matchers: Dict[str, Any] = field(default_factory=dict)


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Returns an action input as passed by the runner, stripped of spaces."""
    if environ is None:
        environ = os.environ
    return environ.get('INPUT_%s' % name.replace(' ', '_').upper(), '').strip()


def get_multiline_input(name: str, environ: Optional[Mapping[str, str]] = None) -> List[str]:
    return [x.strip() for x in get_input(name, environ).splitlines() if x.strip()]


def parse_max_annotations(value: Any) -> int:
    try:
        max_annotations = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            "Invalid max-annotations value %r, an integer is required" % value
        ) from None
    if max_annotations < 0:
        raise ConfigurationError("Invalid max-annotations value %r" % value)
    return max_annotations


def parse_custom_matchers(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as err:
        raise ConfigurationError("Invalid custom-matchers JSON: %s" % err) from None


def read_inputs(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Reads the settings from the action inputs, empty inputs are `None`."""
    max_annotations = get_input('max-annotations', environ)
    custom_matchers = get_input('custom-matchers', environ)
    return {
        'reports': get_multiline_input('reports', environ),
        'ignore': get_multiline_input('ignore', environ),
        'max_annotations': parse_max_annotations(max_annotations) if max_annotations else None,
        'custom_matchers': parse_custom_matchers(custom_matchers) if custom_matchers else None,
    }


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Loads the settings from a YAML file. Returns an empty dictionary if
    the file doesn't exist.
    """
    if not os.path.isfile(config_path):
        logger.info("No config file found at %s.", config_path)
        return {}

    logger.info("Using config file at %s", config_path)
    with open(config_path, encoding='utf-8') as fp:
        try:
            data = yaml.safe_load(fp)
        except yaml.YAMLError as err:
            raise ConfigurationError("Invalid YAML in %s: %s" % (config_path, err)) from None

    if data is None:
        return {}
    elif not isinstance(data, dict):
        raise ConfigurationError("The config file %s must contain a mapping" % config_path)

    settings = {}
    for key, value in data.items():
        try:
            settings[YAML_KEYS[key]] = value
        except KeyError:
            logger.warning("Unknown setting %r in %s", key, config_path)
    return settings


def as_list(value: Any, name: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    elif isinstance(value, (list, tuple)) and all(isinstance(x, str) for x in value):
        return list(value)
    raise ConfigurationError("Setting %r must be a list of strings" % name)


def load_config(overrides: Optional[Mapping[str, Any]] = None,
                environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Loads the settings. For each setting the first non-empty value among
    the command line options, the action inputs, the YAML configuration
    file and the defaults is taken.

    :param overrides: settings from the command line, including an optional \
    *config_path*.
    :param environ: the environment with the action inputs, defaults to `os.environ`.
    """
    overrides = overrides or {}
    inputs = read_inputs(environ)
    logger.debug("Parsed inputs: %s", json.dumps(inputs, indent=2))

    config_path = overrides.get('config_path') or get_input('configPath', environ) \
        or DEFAULT_CONFIG_PATH
    yaml_config = load_yaml_config(config_path)
    logger.debug("Parsed yaml config: %s", json.dumps(yaml_config, indent=2, default=str))

    settings = {
        key: overrides.get(key) or inputs[key] or yaml_config.get(key) or default
        for key, default in DEFAULT_CONFIG.items()
    }
    if not isinstance(settings['custom_matchers'], dict):
        raise ConfigurationError("Setting 'custom_matchers' must be a mapping")

    config = Config(
        reports=as_list(settings['reports'], 'reports'),
        ignore=as_list(settings['ignore'], 'ignore'),
        max_annotations=parse_max_annotations(settings['max_annotations']),
        custom_matchers=dict(settings['custom_matchers']),
    )
    logger.debug("Final config: %r", config)
    return config
