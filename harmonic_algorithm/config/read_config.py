from pathlib import Path
from typing import Type, TypeVar

import yaml

from harmonic_algorithm.pitch_utils.types import SettingsBase

S = TypeVar("S", bound=SettingsBase)


def load_config_from_yaml_basic(
    settings_class: Type[S], yaml_path: str | Path | None
) -> S:
    """
    Returns default settings if `yaml_path` is None. Keys in the yaml file that
    aren't fields of `settings_class` raise a TypeError.
    """
    if yaml_path is None:
        return settings_class()
    with open(yaml_path, "r") as yaml_file:
        config_dict = yaml.safe_load(yaml_file)

    if config_dict is None:
        return settings_class()
    if not isinstance(config_dict, dict):
        raise ValueError(f"expected a mapping at the top level of {yaml_path}")

    return settings_class(**config_dict)
