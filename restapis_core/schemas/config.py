"""
Special schemas for the configuration file and its properties
"""

from typing import Dict, List, Union

import pydantic


class ServerConfig(pydantic.BaseModel):
    host: str = "127.0.0.1"
    port: pydantic.conint(gt=0, lt=65536) = 8000
    cors_origins: List[str] = []
    debug: bool = False


class StorageConfig(pydantic.BaseModel):
    mock_people: pydantic.NonNegativeInt = 0
    mock_books: pydantic.NonNegativeInt = 0


class LoggingConfig(pydantic.BaseModel):
    version: pydantic.conint(ge=1, le=1) = 1
    disable_existing_loggers: bool = False
    incremental: bool = False
    formatters: Dict[str, Dict[str, str]] = {
        "default": {
            "style": "{",
            "format": "{asctime}: restapis {process}: [{levelname}] {name}: {message}",
            "datefmt": "%d.%m.%Y %H:%M:%S"
        }
    }
    loggers: Dict[str, dict] = {}
    handlers: Dict[str, Dict[str, Union[str, list]]] = {
        "default": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "default"
        }
    }
    root: dict = {
        "level": "INFO",
        "handlers": ["default"]
    }

    def enable_debug(self):
        self.root["level"] = "DEBUG"
        for handler in self.handlers.values():
            handler["level"] = "DEBUG"


class CoreConfig(pydantic.BaseModel):
    server: ServerConfig = pydantic.Field(default_factory=ServerConfig)
    storage: StorageConfig = pydantic.Field(default_factory=StorageConfig)
    logging: LoggingConfig = pydantic.Field(default_factory=LoggingConfig)

    @pydantic.field_validator("server")
    @classmethod
    def enforce_unique_origins(cls, value: ServerConfig) -> ServerConfig:
        if len(set(value.cors_origins)) != len(value.cors_origins):
            raise ValueError("Field 'cors_origins' must be unique")
        return value
