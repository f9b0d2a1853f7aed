"""
Core settings provider
"""

import os
import json
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .schemas import config


CONFIG_PATHS: List[str] = ["config.json", os.path.join("..", "config.json")]
"""
list of search paths for the config file, can be overwritten by the env variable ``CONFIG_PATH``
"""

if os.environ.get("CONFIG_PATH"):
    CONFIG_PATHS = [os.environ.get("CONFIG_PATH")]


class JsonFileSettingsSource(PydanticBaseSettingsSource):
    """
    Settings source reading the first existing file of the ``CONFIG_PATHS``
    """

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self().get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return read_settings_from_file()


class Settings(BaseSettings, config.CoreConfig):
    """
    Core settings

    Do not change the settings at runtime, since this might lead to unspecified
    behavior. Always restart the server after changing the config file. The
    values are merged from (in descending priority) keyword arguments, the
    environment (nested keys separated by ``__``, e.g. ``SERVER__PORT``),
    the ``.env`` file, the JSON config file and the defaults of the schemas.
    """

    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")

    @classmethod
    def settings_customise_sources(
            cls,
            settings_cls: Type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, dotenv_settings, JsonFileSettingsSource(settings_cls), file_secret_settings


def store_configuration(conf: Optional[config.CoreConfig] = None, path: Optional[str] = None) -> config.CoreConfig:
    p = path or os.path.abspath(CONFIG_PATHS[0])
    conf = conf or get_default_core_config()
    with open(p, "w") as f:
        json.dump(conf.model_dump(), f, indent=4)
    return conf


def read_settings_from_file() -> Dict[str, Any]:
    for path in CONFIG_PATHS:
        if os.path.exists(path):
            with open(path, "r", encoding="UTF-8") as file:
                return json.load(file)
    return {}


def get_default_core_config() -> config.CoreConfig:
    return config.CoreConfig(
        server=config.ServerConfig(),
        storage=config.StorageConfig(),
        logging=config.LoggingConfig()
    )


def get_default_config() -> Dict[str, Any]:
    return get_default_core_config().model_dump()
