from .loaders import load_settings, load_yaml_config, settings_from_dict
from .models import ColumnPatterns, EngineSettings, TableNames

__all__ = [
    "ColumnPatterns",
    "EngineSettings",
    "TableNames",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
]
